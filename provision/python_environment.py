# provision/python_environment.py
# -*- coding: utf-8 -*-
"""
Creates the workspace virtual environment and installs the application
into it with the configured installer (uv by default).
"""

import logging
from typing import List, Optional

from common.command_utils import log_bootstrap, run_command
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def virtualenv_exists(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return app_settings.paths.venv_path.is_dir()


def create_virtualenv(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    paths = app_settings.paths
    log_bootstrap(
        f"{symbols.get('gear', '⚙️')} Creating Python virtual environment in {paths.venv_path}...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        [app_settings.python_env.installer_command, "venv", paths.venv_path],
        app_settings,
        current_logger=logger_to_use,
        cwd=paths.workspace_root,
    )


def _pip_install_command(app_settings: AppSettings, *targets: str) -> List[str]:
    return [
        app_settings.python_env.installer_command,
        "pip",
        "install",
        "--python",
        str(app_settings.paths.venv_python),
        *targets,
    ]


def install_dependencies(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Install the cloned application in editable mode with its extras.

    Runs on every invocation; the installer itself makes a repeat install a
    no-op.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    target = app_settings.python_env.editable_target
    log_bootstrap(
        f"{symbols.get('package', '📦')} Installing Python dependencies ({target})...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        _pip_install_command(app_settings, "-e", target),
        app_settings,
        current_logger=logger_to_use,
        cwd=app_settings.paths.workspace_root,
    )


def install_gpu_monitoring_tools(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    packages = app_settings.python_env.gpu_monitoring_packages
    if not packages:
        log_bootstrap(
            "No GPU monitoring packages configured.",
            "info",
            logger_to_use,
            app_settings,
        )
        return
    log_bootstrap(
        f"{app_settings.symbols.get('gpu', '📊')} Installing GPU monitoring tools: {', '.join(packages)}",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        _pip_install_command(app_settings, *packages),
        app_settings,
        current_logger=logger_to_use,
        cwd=app_settings.paths.workspace_root,
    )
