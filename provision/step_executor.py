# provision/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual provisioning steps.

A step is skipped when its precondition reports that the work is already
done. Otherwise its action runs once. Failures are turned into a
StepOutcome instead of propagating, so the caller decides, through the
step's failure policy, whether the sequence continues.
"""

import enum
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from common.command_utils import log_bootstrap
from provision.config_models import AppSettings
from provision.exceptions import (
    ExternalCommandFailure,
    PermissionFailure,
    PreconditionCheckFailure,
)

module_logger = logging.getLogger(__name__)

StepAction = Callable[[AppSettings, Optional[logging.Logger]], Any]
StepPrecondition = Callable[[AppSettings, Optional[logging.Logger]], bool]


class FailurePolicy(str, enum.Enum):
    WARN_AND_CONTINUE = "warn-and-continue"
    ABORT = "abort"


class StepStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ProvisioningStep:
    """One idempotent, independently-failable unit of workspace setup."""

    tag: str
    description: str
    action: StepAction
    precondition: Optional[StepPrecondition] = None
    on_failure: FailurePolicy = FailurePolicy.WARN_AND_CONTINUE


@dataclass(frozen=True)
class StepOutcome:
    tag: str
    description: str
    status: StepStatus
    policy: FailurePolicy = FailurePolicy.WARN_AND_CONTINUE
    error: Optional[ExternalCommandFailure] = None

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED

    @property
    def is_fatal(self) -> bool:
        return self.failed and self.policy is FailurePolicy.ABORT


def _classify_failure(step: ProvisioningStep, exc: Exception) -> ExternalCommandFailure:
    if isinstance(exc, PermissionError):
        return PermissionFailure(step.tag, f"Permission denied: {exc}", exc)
    if isinstance(exc, subprocess.CalledProcessError):
        return ExternalCommandFailure(
            step.tag, f"Command exited with status {exc.returncode}", exc
        )
    if isinstance(exc, FileNotFoundError) and exc.filename:
        return ExternalCommandFailure(step.tag, f"Not found: {exc.filename}", exc)
    if isinstance(exc, requests.exceptions.RequestException):
        return ExternalCommandFailure(step.tag, f"Download failed: {exc}", exc)
    return ExternalCommandFailure(step.tag, str(exc) or type(exc).__name__, exc)


def precondition_satisfied(
    step: ProvisioningStep,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> bool:
    """
    Evaluate the step's precondition.

    A step without a precondition always runs. A precondition that raises is
    reported as a PreconditionCheckFailure and means the step is needed.
    """
    if step.precondition is None:
        return False
    try:
        return bool(step.precondition(app_settings, logger_to_use))
    except Exception as e:
        failure = PreconditionCheckFailure(step.tag, e)
        log_bootstrap(
            f"{app_settings.symbols.get('warning', '⚠️')} {failure}. Running the step.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False


def execute_step(
    step: ProvisioningStep,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> StepOutcome:
    """
    Execute a single provisioning step.

    Args:
        step: The step to run.
        app_settings: The application settings object.
        current_logger_instance: The logger instance to use.

    Returns:
        A StepOutcome. The step's action counts as failed when it raises or
        returns False; any other return value, including None, is success.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols

    if precondition_satisfied(step, app_settings, logger_to_use):
        log_bootstrap(
            f"{symbols.get('skip', '⏭️')} Step '{step.description}' ({step.tag}) is already done. Skipping.",
            "info",
            logger_to_use,
            app_settings,
        )
        return StepOutcome(step.tag, step.description, StepStatus.SKIPPED, step.on_failure)

    log_bootstrap(
        f"--- {symbols.get('step', '➡️')} Executing: {step.description} ({step.tag}) ---",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        step_result = step.action(app_settings, logger_to_use)
    except Exception as e:
        failure = _classify_failure(step, e)
        log_bootstrap(
            f"{symbols.get('error', '❌')} FAILED: {step.description} ({step.tag}): {failure}",
            "error",
            logger_to_use,
            app_settings,
        )
        log_bootstrap(
            f"   Error details: {e!r}",
            "debug",
            logger_to_use,
            app_settings,
            exc_info=True,
        )
        return StepOutcome(
            step.tag, step.description, StepStatus.FAILED, step.on_failure, failure
        )

    if step_result is False:
        failure = ExternalCommandFailure(step.tag, "Step reported failure")
        log_bootstrap(
            f"{symbols.get('error', '❌')} Step function returned False: {step.description} ({step.tag})",
            "error",
            logger_to_use,
            app_settings,
        )
        return StepOutcome(
            step.tag, step.description, StepStatus.FAILED, step.on_failure, failure
        )

    log_bootstrap(
        f"--- {symbols.get('success', '✅')} Successfully completed: {step.description} ({step.tag}) ---",
        "success",
        logger_to_use,
        app_settings,
    )
    return StepOutcome(step.tag, step.description, StepStatus.SUCCEEDED, step.on_failure)
