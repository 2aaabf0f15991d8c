# provision/env_file_setup.py
# -*- coding: utf-8 -*-
"""
Writes the application's environment file.

The file is regenerated from settings on every run and replaces whatever was
there before; local edits do not survive a bootstrap.
"""

import logging
from typing import List, Optional, Tuple

from common.command_utils import log_bootstrap
from common.file_utils import write_text_file
from provision.config_models import AppSettings

module_logger = logging.getLogger(__name__)

EnvSection = Tuple[str, List[Tuple[str, str]]]


def env_sections(app_settings: AppSettings) -> List[EnvSection]:
    """Ordered (section title, [(key, value), ...]) pairs for the .env file."""
    paths = app_settings.paths
    services = app_settings.services
    server = app_settings.server
    models = app_settings.models

    sections: List[EnvSection] = [
        (
            "GPU Configuration" if app_settings.is_gpu else "Profile Configuration",
            [
                ("PGPT_PROFILES", app_settings.pgpt_profiles),
                ("PGPT_DEVICE", app_settings.device),
            ],
        ),
        (
            "Paths",
            [
                ("PGPT_DATA_DIR", str(paths.data_dir)),
                ("PGPT_MODELS_DIR", str(paths.models_dir)),
                ("PGPT_DB_DIR", str(paths.db_dir)),
            ],
        ),
    ]
    if app_settings.is_gpu:
        sections.append(
            (
                "GPU Settings",
                [
                    ("TORCH_CUDA_ARCH_LIST", services.torch_cuda_arch_list),
                    ("TF_FORCE_GPU_ALLOW_GROWTH", "true"),
                ],
            )
        )
    sections.extend(
        [
            (
                "Database",
                [
                    ("CHROMA_PERSIST_DIRECTORY", str(paths.chroma_dir)),
                    ("DATABASE_URL", app_settings.database_url),
                    ("REDIS_URL", services.redis_url),
                ],
            ),
            (
                "Object Storage",
                [
                    ("S3_ENDPOINT_URL", services.s3_endpoint_url),
                    ("S3_ACCESS_KEY_ID", services.s3_access_key_id),
                    ("S3_SECRET_ACCESS_KEY", services.s3_secret_access_key),
                ],
            ),
            (
                "Models",
                [
                    ("PGPT_LLM_MODEL_PATH", str(paths.models_dir / models.llm_filename)),
                    (
                        "PGPT_EMBEDDING_MODEL_PATH",
                        str(paths.models_dir / models.embedding_dir_name),
                    ),
                ],
            ),
            (
                "Server",
                [
                    ("API_HOST", server.host),
                    ("API_PORT", str(server.api_port)),
                    ("UI_PORT", str(server.ui_port)),
                ],
            ),
            (
                "Logging",
                [
                    ("LOG_LEVEL", services.app_log_level),
                    ("LOG_FILE", app_settings.app_log_file),
                ],
            ),
            (
                "Secrets (fill in as needed)",
                [
                    ("OPENAI_API_KEY", services.openai_api_key),
                    ("HF_TOKEN", services.hf_token),
                ],
            ),
        ]
    )
    return sections


def render_env_file(app_settings: AppSettings) -> str:
    blocks = []
    for title, entries in env_sections(app_settings):
        lines = [f"# {title}"]
        lines.extend(f"{key}={value}" for key, value in entries)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def write_env_file(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    env_file_path = app_settings.paths.env_file_path
    if env_file_path.exists():
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} Overwriting existing {env_file_path}",
            "warning",
            logger_to_use,
            app_settings,
        )
    write_text_file(
        env_file_path,
        render_env_file(app_settings),
        app_settings,
        current_logger=logger_to_use,
    )
    log_bootstrap(
        f"{symbols.get('success', '✅')} Environment configuration written to {env_file_path}",
        "success",
        logger_to_use,
        app_settings,
    )
