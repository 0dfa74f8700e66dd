# installer/python_env_installer.py
# -*- coding: utf-8 -*-
"""
Creates the isolated Python environment for the application's runtime
dependencies.
"""
import logging
from typing import Optional

from installer import config as static_config
from installer.config_models import InstallSettings
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def create_production_venv(
        install_settings: InstallSettings,
        current_logger: Optional[logging.Logger] = None
) -> None:
    # The helper skips work when the venv for these requirements already exists.
    run_helper(
        install_settings,
        static_config.CREATE_VENV_SCRIPT,
        args=[str(install_settings.zulip_path)],
        description="Production virtualenv creation",
        hint="pip failures are usually network problems or too little memory; check the output above.",
        current_logger=current_logger,
    )
