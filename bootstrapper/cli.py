# -*- coding: utf-8 -*-
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from bootstrapper.sequences import build_step_sequence
from common.core_utils import setup_logging
from provision.cli_handler import (
    confirmation_provider_for,
    format_configuration,
    view_configuration,
)
from provision.config_loader import CONFIG_FILE_DEFAULT, load_app_settings
from provision.config_models import AppSettings
from provision.sequencer import run_sequence
from provision.step_executor import FailurePolicy

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

profile_option = click.option(
    "--profile",
    type=click.Choice(["gpu", "dev"]),
    default=None,
    help="Step variant set to run. Defaults to the configured profile (gpu).",
)


def _load_settings(ctx: click.Context, overrides: Dict[str, Any]) -> AppSettings:
    """Merge command options over the group options and load the settings."""
    group_opts = ctx.find_root().obj or {}
    cli_overrides: Dict[str, Any] = {
        "log_level": group_opts.get("log_level"),
        "log_file": group_opts.get("log_file"),
        "profile": group_opts.get("profile"),
        "paths": {"workspace_root": group_opts.get("workspace_root")},
    }
    cli_overrides.update({k: v for k, v in overrides.items() if v is not None})

    app_settings = load_app_settings(
        cli_overrides=cli_overrides,
        config_file_path=group_opts.get("config_file"),
        current_logger=logger,
    )
    setup_logging(
        log_level=app_settings.log_level,
        log_file=app_settings.log_file,
        log_prefix=app_settings.log_prefix,
    )
    return app_settings


@click.group(invoke_without_command=True)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_FILE_DEFAULT,
    show_default=True,
    help="YAML configuration file. A missing file is ignored.",
)
@click.option(
    "--workspace-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory the application is cloned into.",
)
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also append log records to this file.",
)
@profile_option
@click.pass_context
def cli(ctx, config_file, workspace_root, log_level, log_file, profile):
    """
    Bootstrap a PrivateGPT development workspace.

    Without a command, runs the full bootstrap sequence.
    """
    ctx.obj = {
        "config_file": config_file,
        "workspace_root": workspace_root,
        "log_level": log_level,
        "log_file": log_file,
        "profile": profile,
    }
    if ctx.invoked_subcommand is None:
        ctx.invoke(run_command)


@cli.command(name="run")
@profile_option
@click.option(
    "--skip",
    "skip_steps",
    multiple=True,
    help="Step tag to leave out. May be given more than once.",
)
@click.option(
    "--abort-on-failure",
    "abort_on_failure",
    multiple=True,
    help="Step tag whose failure stops the run. May be given more than once.",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Answer 'yes' to every prompt.")
@click.option(
    "--non-interactive",
    is_flag=True,
    help="Never prompt; every question is answered 'no'.",
)
@click.pass_context
def run_command(
    ctx,
    profile: Optional[str] = None,
    skip_steps: Tuple[str, ...] = (),
    abort_on_failure: Tuple[str, ...] = (),
    assume_yes: bool = False,
    non_interactive: bool = False,
):
    """Run the bootstrap sequence."""
    app_settings = _load_settings(
        ctx,
        {
            "profile": profile,
            "skip_steps": list(skip_steps) or None,
            "abort_on_failure": list(abort_on_failure) or None,
            "assume_yes": True if assume_yes else None,
            "interactive": False if non_interactive else None,
        },
    )
    symbols = app_settings.symbols
    view_configuration(app_settings, logger, level="debug")
    logger.info(
        f"{symbols.get('rocket', '🚀')} Setting up PrivateGPT workspace ({app_settings.profile} profile)..."
    )

    steps = build_step_sequence(
        app_settings,
        confirm=confirmation_provider_for(app_settings),
        current_logger=logger,
    )
    try:
        result = run_sequence(steps, app_settings, logger)
    except KeyboardInterrupt:
        logger.warning(f"{symbols.get('warning', '⚠️')} Interrupted by user.")
        ctx.exit(EXIT_INTERRUPTED)

    if result.aborted:
        logger.error(f"{symbols.get('error', '❌')} Bootstrap aborted: {result.aborted}")
    else:
        logger.info(f"{symbols.get('success', '✅')} Bootstrap finished.")
    ctx.exit(result.exit_code)


@cli.command(name="list-steps")
@profile_option
@click.pass_context
def list_steps_command(ctx, profile):
    """Print the ordered steps for the profile."""
    app_settings = _load_settings(ctx, {"profile": profile})
    steps = build_step_sequence(app_settings, current_logger=logger)
    click.echo(f"Bootstrap steps ({app_settings.profile} profile):")
    for index, step in enumerate(steps, start=1):
        markers = []
        if step.precondition is not None:
            markers.append("skipped when done")
        if step.on_failure is FailurePolicy.ABORT:
            markers.append("aborts on failure")
        suffix = f"  [{', '.join(markers)}]" if markers else ""
        click.echo(f"  {index:2d}. {step.tag:<24} {step.description}{suffix}")


@cli.command(name="view-config")
@click.pass_context
def view_config_command(ctx):
    """Print the effective configuration."""
    app_settings = _load_settings(ctx, {})
    click.echo(format_configuration(app_settings))
