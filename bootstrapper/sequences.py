# bootstrapper/sequences.py
# -*- coding: utf-8 -*-
"""
Declarative catalog of the bootstrap steps, in execution order.

Each entry names the step's tag, its description, its action, an optional
precondition that reports "already done", and the profiles it belongs to.
"""

import functools
import logging
from typing import Any, Dict, List, Optional

from common.command_utils import log_bootstrap
from provision.cli_handler import ConfirmationProvider
from provision.config_models import AppSettings
from provision.directory_setup import ensure_workspace_directories, fix_permissions
from provision.env_file_setup import write_env_file
from provision.gpu_setup import check_gpu, verify_torch_cuda
from provision.helper_scripts import install_helper_scripts
from provision.model_download import download_sample_models, sample_models_present
from provision.node_tooling import install_node_tooling, node_tools_present
from provision.python_environment import (
    create_virtualenv,
    install_dependencies,
    install_gpu_monitoring_tools,
    virtualenv_exists,
)
from provision.repository_setup import clone_repository, repository_already_cloned
from provision.step_executor import FailurePolicy, ProvisioningStep
from provision.summary import print_summary

module_logger = logging.getLogger(__name__)

GPU_CHECK_TAG = "GPU_CHECK"
CLONE_REPOSITORY_TAG = "CLONE_REPOSITORY"
ENSURE_DIRECTORIES_TAG = "ENSURE_DIRECTORIES"
CREATE_VENV_TAG = "CREATE_VENV"
INSTALL_DEPENDENCIES_TAG = "INSTALL_DEPENDENCIES"
INSTALL_GPU_MONITORING_TAG = "INSTALL_GPU_MONITORING"
VERIFY_TORCH_CUDA_TAG = "VERIFY_TORCH_CUDA"
INSTALL_NODE_TOOLING_TAG = "INSTALL_NODE_TOOLING"
WRITE_ENV_FILE_TAG = "WRITE_ENV_FILE"
DOWNLOAD_SAMPLE_MODELS_TAG = "DOWNLOAD_SAMPLE_MODELS"
INSTALL_HELPER_SCRIPTS_TAG = "INSTALL_HELPER_SCRIPTS"
FIX_PERMISSIONS_TAG = "FIX_PERMISSIONS"
PRINT_SUMMARY_TAG = "PRINT_SUMMARY"

ALL_PROFILES = ("gpu", "dev")
GPU_ONLY = ("gpu",)

BOOTSTRAP_SEQUENCE_ORDER: List[Dict[str, Any]] = [
    {
        "tag": GPU_CHECK_TAG,
        "description": "Check GPU availability",
        "action": check_gpu,
        "profiles": GPU_ONLY,
    },
    {
        "tag": CLONE_REPOSITORY_TAG,
        "description": "Clone application repository",
        "action": clone_repository,
        "precondition": repository_already_cloned,
    },
    {
        "tag": ENSURE_DIRECTORIES_TAG,
        "description": "Create workspace directories",
        "action": ensure_workspace_directories,
    },
    {
        "tag": CREATE_VENV_TAG,
        "description": "Create Python virtual environment",
        "action": create_virtualenv,
        "precondition": virtualenv_exists,
    },
    {
        "tag": INSTALL_DEPENDENCIES_TAG,
        "description": "Install Python dependencies",
        "action": install_dependencies,
    },
    {
        "tag": INSTALL_GPU_MONITORING_TAG,
        "description": "Install GPU monitoring tools",
        "action": install_gpu_monitoring_tools,
        "profiles": GPU_ONLY,
    },
    {
        "tag": VERIFY_TORCH_CUDA_TAG,
        "description": "Verify PyTorch CUDA support",
        "action": verify_torch_cuda,
        "profiles": GPU_ONLY,
    },
    {
        "tag": INSTALL_NODE_TOOLING_TAG,
        "description": "Install Node tooling",
        "action": install_node_tooling,
        "precondition": node_tools_present,
        "enabled": lambda app_settings: app_settings.node_enabled,
    },
    {
        "tag": WRITE_ENV_FILE_TAG,
        "description": "Write environment configuration",
        "action": write_env_file,
    },
    {
        "tag": DOWNLOAD_SAMPLE_MODELS_TAG,
        "description": "Download sample models",
        "action": download_sample_models,
        "precondition": sample_models_present,
    },
    {
        "tag": INSTALL_HELPER_SCRIPTS_TAG,
        "description": "Install helper scripts",
        "action": install_helper_scripts,
    },
    {
        "tag": FIX_PERMISSIONS_TAG,
        "description": "Fix workspace ownership",
        "action": fix_permissions,
    },
    {
        "tag": PRINT_SUMMARY_TAG,
        "description": "Print setup summary",
        "action": print_summary,
    },
]

catalog_lookup: Dict[str, Dict[str, Any]] = {
    entry["tag"]: entry for entry in BOOTSTRAP_SEQUENCE_ORDER
}


def _entry_applies(entry: Dict[str, Any], app_settings: AppSettings) -> bool:
    if app_settings.profile not in entry.get("profiles", ALL_PROFILES):
        return False
    enabled = entry.get("enabled")
    return enabled(app_settings) if enabled else True


def unknown_step_tags(app_settings: AppSettings) -> List[str]:
    """Tags named in skip_steps or abort_on_failure that match no catalog entry."""
    named = list(app_settings.skip_steps) + list(app_settings.abort_on_failure)
    return [tag for tag in dict.fromkeys(named) if tag not in catalog_lookup]


def build_step_sequence(
    app_settings: AppSettings,
    confirm: Optional[ConfirmationProvider] = None,
    current_logger: Optional[logging.Logger] = None,
) -> List[ProvisioningStep]:
    """
    Turn the catalog into the ordered steps for this run.

    Entries outside the active profile, disabled entries, and tags listed in
    `skip_steps` are left out. Tags listed in `abort_on_failure` get the
    ABORT failure policy.

    Args:
        app_settings: Settings of the current run.
        confirm: Confirmation provider handed to the sample model download.
            None lets the step pick one from the settings.
        current_logger: Logger to use.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    for tag in unknown_step_tags(app_settings):
        log_bootstrap(
            f"{symbols.get('warning', '!')} Unknown step tag '{tag}' in configuration. Ignoring.",
            "warning",
            logger_to_use,
            app_settings,
        )

    steps: List[ProvisioningStep] = []
    for entry in BOOTSTRAP_SEQUENCE_ORDER:
        tag = entry["tag"]
        if not _entry_applies(entry, app_settings):
            continue
        if tag in app_settings.skip_steps:
            log_bootstrap(
                f"Step {tag} skipped by configuration.",
                "info",
                logger_to_use,
                app_settings,
            )
            continue

        action = entry["action"]
        if tag == DOWNLOAD_SAMPLE_MODELS_TAG and confirm is not None:
            action = functools.partial(action, confirm=confirm)
        steps.append(
            ProvisioningStep(
                tag=tag,
                description=entry["description"],
                action=action,
                precondition=entry.get("precondition"),
                on_failure=(
                    FailurePolicy.ABORT
                    if tag in app_settings.abort_on_failure
                    else FailurePolicy.WARN_AND_CONTINUE
                ),
            )
        )
    return steps
