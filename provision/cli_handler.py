# provision/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the workspace bootstrap.
"""

import logging
import select
import sys
from typing import Callable, Optional

from common.command_utils import log_bootstrap
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)

ConfirmationProvider = Callable[[str, AppSettings, Optional[logging.Logger]], bool]

AFFIRMATIVE_ANSWERS = ("y", "yes")
SECRET_MASK = "[SET]"


def _stdin_is_selectable() -> bool:
    try:
        sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True


def _read_answer(prompt_text: str, timeout: Optional[int]) -> Optional[str]:
    """
    Read one line from stdin.

    Returns None when no answer arrived within `timeout` seconds. The
    timeout applies to any stdin backed by a file descriptor, terminal or
    pipe. Without a timeout, or without a descriptor, `input()` is used.
    """
    if timeout and _stdin_is_selectable():
        print(prompt_text, end="", flush=True)
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
        if not ready:
            print()
            return None
        line = sys.stdin.readline()
        if not line:
            raise EOFError
        return line
    return input(prompt_text)


def cli_prompt_for_confirmation(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Ask a yes/no question on the terminal.

    Only "y" or "yes" (any case) confirm. Empty input, any other text, end of
    input and an expired prompt timeout all count as "no".

    Parameters:
    prompt_message : str
        The question to display.
    app_settings : AppSettings
        Settings of the current run, providing symbols and the prompt timeout.
    current_logger_instance : Optional[logging.Logger]
        Logger to use. Defaults to the module logger.

    Returns:
    bool
        True only for an affirmative answer.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols
    prompt_text = f"   {symbols.get('info', 'ℹ️')} {prompt_message} (y/N): "
    try:
        answer = _read_answer(prompt_text, app_settings.prompt_timeout_seconds)
    except EOFError:
        log_bootstrap(
            f"{symbols.get('warning', '!')} No user input (EOF), defaulting to 'N' for prompt: '{prompt_message}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False

    if answer is None:
        log_bootstrap(
            f"{symbols.get('warning', '!')} No answer within {app_settings.prompt_timeout_seconds}s, defaulting to 'N' for prompt: '{prompt_message}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


def assume_yes(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    log_bootstrap(
        f"Assuming 'yes' for prompt: '{prompt_message}'",
        "info",
        current_logger_instance,
        app_settings,
    )
    return True


def assume_no(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    log_bootstrap(
        f"Non-interactive run, answering 'no' to prompt: '{prompt_message}'",
        "info",
        current_logger_instance,
        app_settings,
    )
    return False


def confirmation_provider_for(app_settings: AppSettings) -> ConfirmationProvider:
    """Pick the provider matching the run's interactivity settings."""
    if app_settings.assume_yes:
        return assume_yes
    if not app_settings.interactive:
        return assume_no
    return cli_prompt_for_confirmation


def _mask(value: Optional[str]) -> str:
    return SECRET_MASK if value else "[NOT SET]"


def format_configuration(app_config: AppSettings) -> str:
    """
    Render the effective configuration of the run as text.

    Secrets (object store keys, API tokens) are shown only as set or not set.
    """
    symbols = app_config.symbols
    paths = app_config.paths

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Profile:                       {app_config.profile}\n"
    config_text += f"  Interactive:                   {app_config.interactive}\n"
    config_text += f"  Assume Yes:                    {app_config.assume_yes}\n"
    config_text += f"  Skipped Steps:                 {', '.join(app_config.skip_steps) or '-'}\n"
    config_text += f"  Abort On Failure:              {', '.join(app_config.abort_on_failure) or '-'}\n"
    config_text += f"  Log Prefix:                    {app_config.log_prefix}\n\n"

    config_text += "  Paths (paths.*):\n"
    config_text += f"    Workspace Root:              {paths.workspace_root}\n"
    config_text += f"    Data Directory:              {paths.data_dir}\n"
    config_text += f"    Models Directory:            {paths.models_dir}\n"
    config_text += f"    DB Directory:                {paths.db_dir}\n"
    config_text += f"    Chroma Directory:            {paths.chroma_dir}\n"
    config_text += f"    Helper Script Directory:     {paths.bin_dir}\n"
    config_text += f"    Environment File:            {paths.env_file_path}\n"
    config_text += f"  Owner:                         {app_config.owner.spec}\n\n"

    config_text += "  Repository (repository.*):\n"
    config_text += f"    URL:                         {app_config.repository.url}\n"
    config_text += f"    Ref:                         {app_config.repository.ref or '[DEFAULT BRANCH]'}\n\n"

    config_text += "  Services (services.*):\n"
    config_text += f"    Device:                      {app_config.device}\n"
    config_text += f"    PGPT Profiles:               {app_config.pgpt_profiles}\n"
    config_text += f"    Database URL:                {app_config.database_url}\n"
    config_text += f"    Redis URL:                   {app_config.services.redis_url}\n"
    config_text += f"    S3 Endpoint:                 {app_config.services.s3_endpoint_url or '[NOT SET]'}\n"
    config_text += f"    S3 Access Key:               {_mask(app_config.services.s3_access_key_id)}\n"
    config_text += f"    S3 Secret Key:               {_mask(app_config.services.s3_secret_access_key)}\n"
    config_text += f"    OpenAI API Key:              {_mask(app_config.services.openai_api_key)}\n"
    config_text += f"    HF Token:                    {_mask(app_config.services.hf_token)}\n\n"

    config_text += f"  API:                           {app_config.server.host}:{app_config.server.api_port}\n"
    config_text += f"  UI Port:                       {app_config.server.ui_port}\n"
    config_text += f"  Node Tooling:                  {app_config.node_enabled}\n"
    config_text += f"  Helper Scripts:                {', '.join(h.name for h in app_config.helper_scripts_for_profile())}\n\n"
    config_text += "Configuration is loaded with precedence: CLI > YAML File > Environment Variables > Model Defaults."
    return config_text


def view_configuration(
    app_config: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    level: str = "info",
) -> str:
    """Log the effective configuration and return the rendered text."""
    logger_to_use = current_logger if current_logger else module_logger
    config_text = format_configuration(app_config)
    log_bootstrap(
        "Displaying current configuration:", level, logger_to_use, app_config
    )
    log_bootstrap(f"\n{config_text}\n", level, logger_to_use, app_config)
    return config_text
