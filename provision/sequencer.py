# provision/sequencer.py
# -*- coding: utf-8 -*-
"""
Runs an ordered list of provisioning steps once, top to bottom.

A failed step only stops the run when its failure policy is ABORT; every
other failure is logged and the next step runs.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from common.command_utils import log_bootstrap
from provision.config_models import AppSettings
from provision.exceptions import SequenceAborted
from provision.step_executor import (
    ProvisioningStep,
    StepOutcome,
    StepStatus,
    execute_step,
)

module_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ABORTED = 1


@dataclass
class SequenceResult:
    outcomes: List[StepOutcome] = field(default_factory=list)
    aborted: Optional[SequenceAborted] = None

    @property
    def exit_code(self) -> int:
        return EXIT_ABORTED if self.aborted else EXIT_OK

    def _tags_with(self, status: StepStatus) -> List[str]:
        return [o.tag for o in self.outcomes if o.status is status]

    @property
    def succeeded(self) -> List[str]:
        return self._tags_with(StepStatus.SUCCEEDED)

    @property
    def skipped(self) -> List[str]:
        return self._tags_with(StepStatus.SKIPPED)

    @property
    def failed(self) -> List[str]:
        return self._tags_with(StepStatus.FAILED)


def run_sequence(
    steps: Sequence[ProvisioningStep],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> SequenceResult:
    """
    Execute `steps` in order.

    Args:
        steps: The ordered steps to run.
        app_settings: Settings passed to every step.
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        SequenceResult with one outcome per executed step. When an
        abort-marked step fails the result carries the SequenceAborted
        error and the steps after it have no outcome.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    result = SequenceResult()

    for index, step in enumerate(steps, start=1):
        log_bootstrap(
            f"[{index}/{len(steps)}] {step.tag}",
            "debug",
            logger_to_use,
            app_settings,
        )
        outcome = execute_step(step, app_settings, logger_to_use)
        result.outcomes.append(outcome)
        if not outcome.failed:
            continue

        if outcome.is_fatal:
            result.aborted = SequenceAborted(step.tag, outcome.error)
            log_bootstrap(
                f"{symbols.get('critical', '🔥')} {result.aborted}. Remaining steps were not run.",
                "critical",
                logger_to_use,
                app_settings,
            )
            break

        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} Step {step.tag} failed; continuing with the next step.",
            "warning",
            logger_to_use,
            app_settings,
        )

    _log_result(result, app_settings, logger_to_use)
    return result


def _log_result(
    result: SequenceResult,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    symbols = app_settings.symbols
    log_bootstrap(
        f"Steps succeeded: {len(result.succeeded)}, skipped: {len(result.skipped)}, failed: {len(result.failed)}",
        "info",
        logger_to_use,
        app_settings,
    )
    if result.failed:
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} Failed steps: {', '.join(result.failed)}",
            "warning",
            logger_to_use,
            app_settings,
        )
