# provision/gpu_setup.py
# -*- coding: utf-8 -*-
"""
GPU checks for the gpu profile: driver visibility and a PyTorch CUDA report
from the workspace interpreter.
"""

import logging
from typing import Optional

from common.command_utils import command_exists, log_bootstrap, run_command
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)

TORCH_CUDA_REPORT_SNIPPET = """\
import torch
print(f'PyTorch Version: {torch.__version__}')
print(f'CUDA Available: {torch.cuda.is_available()}')
if torch.cuda.is_available():
    print(f'CUDA Device Count: {torch.cuda.device_count()}')
    print(f'Current CUDA Device: {torch.cuda.current_device()}')
    print(f'CUDA Device Name: {torch.cuda.get_device_name(0)}')
    print(f'CUDA Memory Allocated: {torch.cuda.memory_allocated(0) / 1e9:.2f} GB')
    print(f'CUDA Memory Cached: {torch.cuda.memory_reserved(0) / 1e9:.2f} GB')
"""


def check_gpu(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Show the driver's view of the GPUs.

    A missing nvidia-smi is only a warning: the container may simply run
    without a GPU attached.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    if not command_exists("nvidia-smi"):
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} nvidia-smi not found. GPU may not be available.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return
    run_command(
        ["nvidia-smi"],
        app_settings,
        capture_output=True,
        current_logger=logger_to_use,
    )


def verify_torch_cuda(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    log_bootstrap(
        f"{app_settings.symbols.get('gpu', '📊')} Testing PyTorch CUDA support...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        [app_settings.paths.venv_python, "-c", TORCH_CUDA_REPORT_SNIPPET],
        app_settings,
        capture_output=True,
        current_logger=logger_to_use,
        cwd=app_settings.paths.workspace_root,
    )
