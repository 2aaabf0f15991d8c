import subprocess
from pathlib import Path

import pytest

from provision.repository_setup import clone_repository, repository_already_cloned


def test_marker_file_means_already_cloned(app_settings):
    assert repository_already_cloned(app_settings) is False

    app_settings.paths.workspace_root.mkdir(parents=True)
    app_settings.paths.marker_path.write_text("")

    assert repository_already_cloned(app_settings) is True


def test_clone_copies_into_existing_workspace(shell, app_settings, mock_logger):
    workspace = app_settings.paths.workspace_root
    (workspace / ".devcontainer").mkdir(parents=True)
    (workspace / ".devcontainer" / "devcontainer.json").write_text("{}")

    clone_repository(app_settings, mock_logger)

    assert shell.ran("git", "clone") == [
        [
            "git",
            "clone",
            "https://github.com/imartinez/privateGPT.git",
            str(app_settings.paths.clone_temp_dir),
        ]
    ]
    assert (workspace / "pyproject.toml").is_file()
    assert (workspace / "private_gpt" / "__init__.py").is_file()
    assert (workspace / ".devcontainer" / "devcontainer.json").read_text() == "{}"
    assert not app_settings.paths.clone_temp_dir.exists()


def test_clone_passes_ref_and_depth(shell, settings_factory, mock_logger):
    settings = settings_factory(repository={"ref": "v0.6.2", "depth": 1})

    clone_repository(settings, mock_logger)

    assert shell.ran("git", "clone")[0][:6] == ["git", "clone", "--depth", "1", "--branch", "v0.6.2"]


def test_clone_removes_leftover_temp_dir(shell, app_settings, mock_logger):
    stale = app_settings.paths.clone_temp_dir / "stale.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("from an interrupted run")

    clone_repository(app_settings, mock_logger)

    assert not (app_settings.paths.workspace_root / "stale.txt").exists()


def test_failed_clone_cleans_up_and_raises(shell, app_settings, mock_logger):
    shell.fail(["git", "clone"], subprocess.CalledProcessError(128, ["git", "clone"]))

    with pytest.raises(subprocess.CalledProcessError):
        clone_repository(app_settings, mock_logger)

    assert not app_settings.paths.clone_temp_dir.exists()
    assert not app_settings.paths.marker_path.exists()


def test_unwritable_workspace_files_use_elevated_copy(shell, mocker, app_settings, mock_logger):
    app_settings.paths.workspace_root.mkdir(parents=True)
    mocker.patch("shutil.copyfile", side_effect=PermissionError(13, "Permission denied"))

    clone_repository(app_settings, mock_logger)

    assert shell.ran("cp", "-a") == [
        [
            "cp",
            "-a",
            f"{app_settings.paths.clone_temp_dir}/.",
            str(app_settings.paths.workspace_root),
        ]
    ]


def test_uncreatable_workspace_root_is_created_elevated(shell, mocker, app_settings, mock_logger):
    workspace = app_settings.paths.workspace_root
    real_mkdir = Path.mkdir

    def _mkdir(self, *args, **kwargs):
        if self == workspace:
            raise PermissionError(13, "Permission denied", str(self))
        return real_mkdir(self, *args, **kwargs)

    mocker.patch.object(Path, "mkdir", _mkdir)

    clone_repository(app_settings, mock_logger)

    assert shell.ran("mkdir", "-p") == [["mkdir", "-p", str(workspace)]]
    assert (workspace / "pyproject.toml").is_file()
