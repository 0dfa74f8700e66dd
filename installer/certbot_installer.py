# installer/certbot_installer.py
# -*- coding: utf-8 -*-
"""
This module handles acquiring a TLS certificate with certbot before nginx
is installed.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_installer
from installer import config as static_config
from installer.config_models import InstallOptions, InstallSettings
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def acquire_certificate(
    options: InstallOptions,
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Obtain a certificate for the external host using certbot's standalone method.

    Standalone mode binds port 80 itself, which works because nginx is not
    installed yet. There is no fallback to another challenge method: a
    failure here stops the install.

    Args:
        options (InstallOptions): Must carry the host and administrator email.
        install_settings (InstallSettings): The installer settings object.
        current_logger (Optional[logging.Logger]): A logger instance for logging messages.
    """
    logger_to_use = current_logger or module_logger
    symbols = get_symbols(install_settings)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Requesting a certificate for {options.external_host} with certbot...",
        "info",
        logger_to_use,
        install_settings,
    )
    run_helper(
        install_settings,
        static_config.SETUP_CERTBOT_SCRIPT,
        args=[
            "--no-zulip-conf",
            "--method=standalone",
            options.external_host,
            "--email",
            options.administrator_email,
        ],
        description="Certificate acquisition (certbot)",
        hint=(
            f"Make sure {options.external_host} resolves to this server and that port 80 "
            "is reachable from the internet, or install certificates manually and run "
            "without --certbot."
        ),
        current_logger=logger_to_use,
    )
    log_installer(
        f"{symbols.get('success', '✅')} Certificate for {options.external_host} installed.",
        "success",
        logger_to_use,
        install_settings,
    )
