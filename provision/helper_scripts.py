# provision/helper_scripts.py
# -*- coding: utf-8 -*-
"""
Installs the helper commands (start-api, start-ui, ...) into the shared bin
directory. Every wrapper delegates to one entry point of the cloned
application with fixed arguments.
"""

import logging
from typing import List, Optional

from common.command_utils import log_bootstrap
from common.file_utils import write_text_file
from provision.config_models import AppSettings, HelperScript

module_logger = logging.getLogger(__name__)

HELPER_SCRIPT_MODE = 0o755
WRAPPER_HEADER = "#!/bin/bash\n# Installed by workspace-bootstrap\nset -e\n"


def render_helper_script(helper: HelperScript, app_settings: AppSettings) -> str:
    paths = app_settings.paths
    server = app_settings.server
    body = helper.command.format(
        workspace=paths.workspace_root,
        venv_python=paths.venv_python,
        data_dir=paths.data_dir,
        models_dir=paths.models_dir,
        host=server.host,
        api_port=server.api_port,
        ui_port=server.ui_port,
    )
    return f"{WRAPPER_HEADER}{body}\n"


def install_helper_scripts(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> List[str]:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    bin_dir = app_settings.paths.bin_dir
    installed: List[str] = []

    for helper in app_settings.helper_scripts_for_profile():
        script_path = bin_dir / helper.name
        write_text_file(
            script_path,
            render_helper_script(helper, app_settings),
            app_settings,
            mode=HELPER_SCRIPT_MODE,
            current_logger=logger_to_use,
        )
        log_bootstrap(
            f"Installed {script_path} ({helper.description})",
            "debug",
            logger_to_use,
            app_settings,
        )
        installed.append(helper.name)

    log_bootstrap(
        f"{symbols.get('success', '✅')} Helper scripts installed in {bin_dir}: {', '.join(installed)}",
        "success",
        logger_to_use,
        app_settings,
    )
    return installed
