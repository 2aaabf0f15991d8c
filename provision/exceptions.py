# provision/exceptions.py
# -*- coding: utf-8 -*-
"""
Exceptions raised while evaluating and running provisioning steps.
"""

from typing import Optional


class BootstrapError(Exception):
    """Base class for bootstrap errors."""


class PreconditionCheckFailure(BootstrapError):
    """
    A step's precondition could not be evaluated.

    Never fatal: the step is treated as needed and runs.
    """

    def __init__(self, step_tag: str, cause: BaseException):
        self.step_tag = step_tag
        self.cause = cause
        super().__init__(f"Precondition check for {step_tag} failed: {cause}")


class ExternalCommandFailure(BootstrapError):
    """A step's action raised or reported failure."""

    def __init__(self, step_tag: str, message: str, cause: Optional[BaseException] = None):
        self.step_tag = step_tag
        self.cause = cause
        super().__init__(message)


class PermissionFailure(ExternalCommandFailure):
    """A step's action was refused by the operating system's permission model."""


class SequenceAborted(BootstrapError):
    """An abort-on-failure step failed; the remaining steps were not run."""

    def __init__(self, step_tag: str, failure: ExternalCommandFailure):
        self.step_tag = step_tag
        self.failure = failure
        super().__init__(f"Sequence aborted at {step_tag}: {failure}")
