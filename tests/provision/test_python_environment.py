from provision.python_environment import (
    create_virtualenv,
    install_dependencies,
    install_gpu_monitoring_tools,
    virtualenv_exists,
)


def test_create_virtualenv(shell, app_settings, mock_logger):
    assert virtualenv_exists(app_settings) is False

    create_virtualenv(app_settings, mock_logger)

    assert shell.ran("uv", "venv") == [["uv", "venv", str(app_settings.paths.venv_path)]]
    assert virtualenv_exists(app_settings) is True


def test_install_dependencies_targets_workspace_interpreter(shell, app_settings, mock_logger):
    install_dependencies(app_settings, mock_logger)

    assert shell.ran("uv", "pip", "install") == [
        [
            "uv",
            "pip",
            "install",
            "--python",
            str(app_settings.paths.venv_python),
            "-e",
            ".[local,ui,test]",
        ]
    ]


def test_install_dependencies_runs_in_workspace(mocker, app_settings, mock_logger):
    mock_run = mocker.patch("provision.python_environment.run_command")

    install_dependencies(app_settings, mock_logger)

    assert mock_run.call_args.kwargs["cwd"] == app_settings.paths.workspace_root


def test_install_gpu_monitoring_tools(shell, app_settings, mock_logger):
    install_gpu_monitoring_tools(app_settings, mock_logger)

    assert shell.ran("uv", "pip", "install")[0][-2:] == ["nvidia-ml-py", "gpustat"]


def test_no_gpu_monitoring_packages_configured(shell, settings_factory, mock_logger):
    settings = settings_factory(python_env={"gpu_monitoring_packages": []})

    install_gpu_monitoring_tools(settings, mock_logger)

    assert shell.calls == []
