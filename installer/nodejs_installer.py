# installer/nodejs_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of Node.js and its package manager for the
frontend tooling.
"""
import logging
from typing import Optional

from common.command_utils import get_symbols, log_installer, run_command
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def install_frontend_tooling(
        install_settings: InstallSettings,
        current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    run_helper(
        install_settings,
        static_config.INSTALL_NODE_SCRIPT,
        description="Node.js installation",
        current_logger=logger_to_use,
    )

    try:
        node_ver_res = run_command(["node", "--version"], install_settings, capture_output=True, check=False,
                                   current_logger=logger_to_use)
        node_ver = node_ver_res.stdout.strip() if node_ver_res.returncode == 0 else "N/A"
    except FileNotFoundError:
        node_ver = "N/A"
    log_installer(f"{symbols.get('success', '✅')} Node.js ready. Version: {node_ver}",
                  "success", logger_to_use, install_settings)
