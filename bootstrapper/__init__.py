"""
Workspace bootstrapper.

This package provides the declarative step catalog and the command line
entry point that provision a development workspace for PrivateGPT.
"""

from bootstrapper.sequences import BOOTSTRAP_SEQUENCE_ORDER, build_step_sequence
