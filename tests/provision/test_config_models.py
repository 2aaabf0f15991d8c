from pathlib import Path

from provision.config_models import AppSettings, PathSettings


def test_gpu_profile_derived_values():
    settings = AppSettings(profile="gpu")

    assert settings.is_gpu
    assert settings.device == "cuda:0"
    assert settings.pgpt_profiles == "local,dev,gpu"
    assert settings.node_enabled is False


def test_dev_profile_derived_values():
    settings = AppSettings(profile="dev")

    assert not settings.is_gpu
    assert settings.device == "cpu"
    assert settings.pgpt_profiles == "local,dev"
    assert settings.node_enabled is True


def test_explicit_values_win_over_derived_ones():
    settings = AppSettings(
        profile="dev",
        node={"enabled": False},
        services={"device": "mps", "pgpt_profiles": "local", "database_url": "postgresql://db/app"},
    )

    assert settings.node_enabled is False
    assert settings.device == "mps"
    assert settings.pgpt_profiles == "local"
    assert settings.database_url == "postgresql://db/app"


def test_paths_follow_configured_directories():
    settings = AppSettings(
        paths=PathSettings(workspace_root=Path("/w"), db_dir=Path("/db"), data_dir=Path("/data"))
    )

    assert settings.paths.marker_path == Path("/w/pyproject.toml")
    assert settings.paths.venv_python == Path("/w/.venv/bin/python")
    assert settings.paths.env_file_path == Path("/w/.env")
    assert settings.paths.chroma_dir == Path("/db/chroma")
    assert settings.database_url == "sqlite:////db/privategpt.db"
    assert settings.app_log_file == "/data/logs/privategpt.log"


def test_owned_directories_order_and_extras():
    paths = PathSettings(extra_dirs=[Path("/workspace-cache")])

    assert paths.owned_directories() == [
        Path("/workspace"),
        Path("/workspace-data"),
        Path("/workspace-models"),
        Path("/workspace-db"),
        Path("/workspace-db/chroma"),
        Path("/workspace-cache"),
    ]


def test_helper_scripts_filtered_by_profile():
    gpu_names = [h.name for h in AppSettings(profile="gpu").helper_scripts_for_profile()]
    dev_names = [h.name for h in AppSettings(profile="dev").helper_scripts_for_profile()]

    assert "gpu-info" in gpu_names
    assert "gpu-info" not in dev_names
    assert {"start-api", "start-ui", "ingest-docs", "setup-models"} <= set(dev_names)


def test_editable_target():
    settings = AppSettings()
    assert settings.python_env.editable_target == ".[local,ui,test]"

    settings = AppSettings(python_env={"extras": []})
    assert settings.python_env.editable_target == "."
