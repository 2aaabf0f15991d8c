# provision/model_download.py
# -*- coding: utf-8 -*-
"""
Optional download of sample model files into the models directory.

Downloading is opt-in: the run asks through a confirmation provider and any
answer other than an explicit yes leaves the models directory untouched.
"""

import logging
from typing import List, Optional

from common.command_utils import log_bootstrap
from common.download_utils import download_file
from provision.cli_handler import ConfirmationProvider, confirmation_provider_for
from provision.config_models import AppSettings, ModelArtifact

module_logger = logging.getLogger(__name__)


def missing_sample_models(app_settings: AppSettings) -> List[ModelArtifact]:
    models_dir = app_settings.paths.models_dir
    return [
        m
        for m in app_settings.models.sample_models
        if not (models_dir / m.filename).is_file()
    ]


def sample_models_present(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return not missing_sample_models(app_settings)


def download_sample_models(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    confirm: Optional[ConfirmationProvider] = None,
) -> bool:
    """
    Download the configured sample models that are not present yet.

    Args:
        app_settings: Settings of the current run.
        current_logger: Logger to use.
        confirm: Confirmation provider. Defaults to the one matching the
            run's interactivity settings.

    Returns:
        False if any download failed, True otherwise, including when the
        download was declined.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    models_dir = app_settings.paths.models_dir
    missing = missing_sample_models(app_settings)

    if app_settings.models.prompt_for_sample:
        confirm = confirm if confirm else confirmation_provider_for(app_settings)
        names = ", ".join(m.name for m in missing)
        if not confirm(
            f"Download sample models ({names}) into {models_dir}?",
            app_settings,
            logger_to_use,
        ):
            log_bootstrap(
                f"{symbols.get('skip', '⏭️')} Sample model download declined. Use 'setup-models' later to fetch models.",
                "info",
                logger_to_use,
                app_settings,
            )
            return True

    all_downloaded = True
    for model in missing:
        log_bootstrap(
            f"{symbols.get('package', '📦')} Downloading {model.name}...",
            "info",
            logger_to_use,
            app_settings,
        )
        if not download_file(
            model.url,
            models_dir / model.filename,
            timeout=app_settings.models.download_timeout_seconds,
            current_logger=logger_to_use,
        ):
            log_bootstrap(
                f"{symbols.get('error', '❌')} Download of {model.name} failed.",
                "error",
                logger_to_use,
                app_settings,
            )
            all_downloaded = False
    return all_downloaded
