# tests/conftest.py
import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Sequence, Set, Tuple
from unittest.mock import MagicMock

import pytest

from provision.config_models import AppSettings, OwnerSettings, PathSettings

RUN_COMMAND_TARGETS = [
    "provision.repository_setup.run_command",
    "provision.python_environment.run_command",
    "provision.gpu_setup.run_command",
    "provision.node_tooling.run_command",
    "provision.summary.run_command",
]
ELEVATED_COMMAND_TARGETS = [
    "common.file_utils.run_elevated_command",
    "provision.repository_setup.run_elevated_command",
]
COMMAND_EXISTS_TARGETS = [
    "provision.gpu_setup.command_exists",
    "provision.node_tooling.command_exists",
]


class FakeShell:
    """
    Records every external command instead of running it.

    `git clone` and `<installer> venv` leave behind what the real tools
    would, so filesystem preconditions behave as in a real run.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.failures: Dict[Tuple[str, ...], BaseException] = {}
        self.available_commands: Set[str] = set()

    def fail(self, prefix: Sequence[str], exc: BaseException) -> None:
        self.failures[tuple(prefix)] = exc

    def ran(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]

    def command_exists(self, name: str) -> bool:
        return name in self.available_commands

    def __call__(self, command, app_settings=None, *args, **kwargs):
        argv = [str(part) for part in command]
        self.calls.append(argv)
        for prefix, exc in self.failures.items():
            if tuple(argv[: len(prefix)]) == prefix:
                raise exc

        if argv[:2] == ["git", "clone"]:
            checkout = Path(argv[-1])
            (checkout / "private_gpt").mkdir(parents=True, exist_ok=True)
            (checkout / "pyproject.toml").write_text("[tool.poetry]\nname = 'private-gpt'\n")
            (checkout / "private_gpt" / "__init__.py").write_text("")
        elif argv[1:2] == ["venv"]:
            venv_bin = Path(argv[2]) / "bin"
            venv_bin.mkdir(parents=True, exist_ok=True)
            (venv_bin / "python").write_text("")
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")


@pytest.fixture
def settings_factory(tmp_path):
    """Build AppSettings whose every path lives under tmp_path."""

    def _make(**overrides) -> AppSettings:
        values = {
            "profile": "gpu",
            "interactive": False,
            "prompt_timeout_seconds": None,
            "paths": PathSettings(
                workspace_root=tmp_path / "workspace",
                data_dir=tmp_path / "workspace-data",
                models_dir=tmp_path / "workspace-models",
                db_dir=tmp_path / "workspace-db",
                bin_dir=tmp_path / "bin",
                clone_temp_dir=tmp_path / "clone-temp",
            ),
            "owner": OwnerSettings(user="tester", group="testers"),
        }
        values.update(overrides)
        return AppSettings(**values)

    return _make


@pytest.fixture
def app_settings(settings_factory):
    return settings_factory()


@pytest.fixture
def dev_settings(settings_factory):
    return settings_factory(profile="dev")


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def shell(mocker):
    fake = FakeShell()
    for target in RUN_COMMAND_TARGETS + ELEVATED_COMMAND_TARGETS:
        mocker.patch(target, side_effect=fake)
    for target in COMMAND_EXISTS_TARGETS:
        mocker.patch(target, side_effect=fake.command_exists)
    return fake


@pytest.fixture
def downloads(mocker):
    """Patch the model downloader with one that writes a small file."""

    def _fake_download(url, download_to_path, timeout=120, current_logger=None):
        Path(download_to_path).parent.mkdir(parents=True, exist_ok=True)
        Path(download_to_path).write_bytes(b"GGUF")
        return True

    return mocker.patch(
        "provision.model_download.download_file", side_effect=_fake_download
    )
