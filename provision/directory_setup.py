# provision/directory_setup.py
# -*- coding: utf-8 -*-
"""
Creates the workspace data directories and hands them to the workspace owner.
"""

import logging
from typing import Optional

from common.command_utils import log_bootstrap
from common.file_utils import chown_recursive, ensure_directory
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def ensure_workspace_directories(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Create every owned directory that is missing, then chown the whole set
    to the configured owner. Directories that already exist are left as they
    are apart from their ownership.
    """
    logger_to_use = current_logger if current_logger else module_logger
    directories = app_settings.paths.owned_directories()

    created = [
        d
        for d in directories
        if ensure_directory(d, app_settings, current_logger=logger_to_use)
    ]
    log_bootstrap(
        f"{len(created)} director{'y' if len(created) == 1 else 'ies'} created, "
        f"{len(directories) - len(created)} already present.",
        "info",
        logger_to_use,
        app_settings,
    )
    chown_recursive(
        directories,
        app_settings.owner.spec,
        app_settings,
        current_logger=logger_to_use,
    )


def fix_permissions(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    # Steps before this one may have written files as root.
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    chown_recursive(
        app_settings.paths.owned_directories(),
        app_settings.owner.spec,
        app_settings,
        current_logger=logger_to_use,
    )
    log_bootstrap(
        f"{symbols.get('success', '✅')} Ownership set to {app_settings.owner.spec}",
        "success",
        logger_to_use,
        app_settings,
    )
