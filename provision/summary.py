# provision/summary.py
# -*- coding: utf-8 -*-
import logging
from typing import Optional

from common.command_utils import log_bootstrap, run_command
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)

GPU_INFO_COMMAND = "gpu-info"


def print_summary(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Log the available helper commands; on the gpu profile also run gpu-info."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    helpers = app_settings.helper_scripts_for_profile()
    width = max((len(h.name) for h in helpers), default=0) + 2

    lines = [f"{symbols.get('sparkles', '✨')} {app_settings.profile.upper()} setup complete!", ""]
    lines.append("Commands:")
    lines.extend(f"  {h.name.ljust(width)} - {h.description}" for h in helpers)
    log_bootstrap("\n".join(lines), "success", logger_to_use, app_settings)

    if not app_settings.is_gpu:
        return
    gpu_info_path = app_settings.paths.bin_dir / GPU_INFO_COMMAND
    if not gpu_info_path.is_file():
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} {gpu_info_path} not installed; skipping GPU report.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return
    log_bootstrap(
        f"{symbols.get('gpu', '📊')} GPU Device:", "info", logger_to_use, app_settings
    )
    run_command(
        [gpu_info_path],
        app_settings,
        check=False,
        current_logger=logger_to_use,
    )
