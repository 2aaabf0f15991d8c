# provision/repository_setup.py
# -*- coding: utf-8 -*-
"""
Clones the application repository into the workspace root.

The clone goes to a temporary directory first and is copied over the
workspace root afterwards, so a workspace that already holds files (for
example the devcontainer configuration) can still receive the checkout.
"""

import logging
import shutil
from typing import List, Optional

from common.command_utils import (
    log_bootstrap,
    run_command,
    run_elevated_command,
)
from common.file_utils import ensure_directory
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def repository_already_cloned(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """True when the workspace root holds the repository's marker file."""
    return app_settings.paths.marker_path.is_file()


def _git_clone_command(app_settings: AppSettings) -> List[str]:
    repo = app_settings.repository
    command = ["git", "clone"]
    if repo.depth:
        command.extend(["--depth", str(repo.depth)])
    if repo.ref:
        command.extend(["--branch", repo.ref])
    command.extend([repo.url, str(app_settings.paths.clone_temp_dir)])
    return command


def clone_repository(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    paths = app_settings.paths
    temp_dir = paths.clone_temp_dir

    if temp_dir.exists():
        log_bootstrap(
            f"Removing leftover clone directory {temp_dir}",
            "debug",
            logger_to_use,
            app_settings,
        )
        shutil.rmtree(temp_dir)

    log_bootstrap(
        f"{symbols.get('package', '📦')} Cloning {app_settings.repository.url} ...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        run_command(
            _git_clone_command(app_settings),
            app_settings,
            current_logger=logger_to_use,
        )
        ensure_directory(paths.workspace_root, app_settings, logger_to_use)
        try:
            shutil.copytree(temp_dir, paths.workspace_root, dirs_exist_ok=True)
        except (PermissionError, shutil.Error):
            log_bootstrap(
                f"Workspace root {paths.workspace_root} is not writable. Copying with elevated privileges.",
                "info",
                logger_to_use,
                app_settings,
            )
            run_elevated_command(
                ["cp", "-a", f"{temp_dir}/.", str(paths.workspace_root)],
                app_settings,
                current_logger=logger_to_use,
            )
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    log_bootstrap(
        f"{symbols.get('success', '✅')} Repository available in {paths.workspace_root}",
        "success",
        logger_to_use,
        app_settings,
    )
