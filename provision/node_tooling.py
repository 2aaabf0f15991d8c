# provision/node_tooling.py
# -*- coding: utf-8 -*-
"""
Installs global Node tooling for the dev profile.
"""

import logging
from typing import Optional

from common.command_utils import command_exists, log_bootstrap, run_command
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def executable_for_package(package: str) -> str:
    """'pnpm' -> 'pnpm', 'yarn@1.22' -> 'yarn', '@scope/tool@2' -> 'tool'."""
    name = package.rsplit("/", 1)[-1].lstrip("@")
    return name.split("@", 1)[0]


def node_tools_present(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return all(
        command_exists(executable_for_package(p))
        for p in app_settings.node.packages
    )


def install_node_tooling(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    missing = [
        p
        for p in app_settings.node.packages
        if not command_exists(executable_for_package(p))
    ]
    if not missing:
        log_bootstrap(
            "All Node tools already available.",
            "info",
            logger_to_use,
            app_settings,
        )
        return
    log_bootstrap(
        f"{symbols.get('package', '📦')} Installing Node tooling: {', '.join(missing)}",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        [app_settings.node.npm_command, "install", "-g", *missing],
        app_settings,
        current_logger=logger_to_use,
    )
