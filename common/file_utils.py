# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system helpers: directory creation, ownership, and file writes that
fall back to elevated commands when the target is not writable.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from provision.config_models import SYMBOLS_DEFAULT, AppSettings

from .command_utils import log_bootstrap, run_elevated_command

module_logger = logging.getLogger(__name__)


def ensure_directory(
    dir_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Ensure `dir_path` exists, creating it with elevated privileges when the
    current user may not create it.

    Returns:
        True if the directory had to be created, False if it already existed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )

    if dir_path.is_dir():
        log_bootstrap(
            f"Directory already present: {dir_path}",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False

    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        log_bootstrap(
            f"Directory not creatable as current user: {dir_path}. Creating it with elevated privileges.",
            "info",
            logger_to_use,
            app_settings,
        )
        run_elevated_command(
            ["mkdir", "-p", str(dir_path)],
            app_settings,
            current_logger=logger_to_use,
        )
    log_bootstrap(
        f"{symbols.get('success', '✅')} Created directory: {dir_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return True


def chown_recursive(
    paths: Iterable[Path],
    owner_spec: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Run `chown -R owner_spec` over every path in one elevated call.

    Paths that do not exist are left out; an empty selection is a no-op.
    """
    logger_to_use = current_logger if current_logger else module_logger
    existing = [str(p) for p in paths if p.exists()]
    if not existing:
        log_bootstrap(
            "No existing paths to change ownership of.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return
    log_bootstrap(
        f"Ensuring ownership ({owner_spec}) for {', '.join(existing)}",
        "debug",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        ["chown", "-R", owner_spec, *existing],
        app_settings,
        current_logger=logger_to_use,
    )


def write_text_file(
    file_path: Path,
    content: str,
    app_settings: Optional[AppSettings],
    mode: Optional[int] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Write `content` to `file_path`, replacing any existing file.

    The write is a full overwrite, never a merge. When the current user
    cannot write the target, the content goes to a temporary file that is
    copied into place with elevated privileges.

    Parameters:
        file_path (Path): Destination file.
        content (str): Complete new file content.
        app_settings (Optional[AppSettings]): Settings of the current run.
        mode (Optional[int]): Permission bits applied after the write,
            e.g. 0o755 for scripts.
        current_logger (Optional[logging.Logger]): Logger to use.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        if mode is not None:
            file_path.chmod(mode)
        return
    except PermissionError:
        log_bootstrap(
            f"No write permission for {file_path}. Writing with elevated privileges.",
            "info",
            logger_to_use,
            app_settings,
        )

    temp_file_path = ""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            prefix="bootstrap_",
            suffix=".tmp",
            encoding="utf-8",
        ) as temp_f:
            temp_f.write(content)
            temp_file_path = temp_f.name
        run_elevated_command(
            ["mkdir", "-p", str(file_path.parent)],
            app_settings,
            current_logger=logger_to_use,
        )
        run_elevated_command(
            ["cp", temp_file_path, str(file_path)],
            app_settings,
            current_logger=logger_to_use,
        )
        if mode is not None:
            run_elevated_command(
                ["chmod", format(mode, "o"), str(file_path)],
                app_settings,
                current_logger=logger_to_use,
            )
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            os.unlink(temp_file_path)
