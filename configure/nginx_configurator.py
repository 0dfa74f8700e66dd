# configure/nginx_configurator.py
# -*- coding: utf-8 -*-
"""
Handles validation and restart of the nginx reverse proxy.
"""

import logging
import subprocess
from typing import Optional

from common.command_utils import get_symbols, log_installer, run_elevated_command
from common.system_utils import restart_service
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import DependencyHealthError

module_logger = logging.getLogger(__name__)


def validate_nginx_configuration(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Tests the nginx configuration generated by the manifests.

    Raises:
        DependencyHealthError: when `nginx -t` fails, almost always because
            of a problem with the SSL certificates.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    log_installer(
        f"{symbols.get('step', '➡️')} Testing nginx configuration (nginx -t)...",
        "info",
        logger_to_use,
        install_settings,
    )
    try:
        run_elevated_command(
            ["nginx", "-t"],
            install_settings,
            current_logger=logger_to_use,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise DependencyHealthError(
            "Verifying the Zulip nginx configuration failed!",
            hint=(
                "This is almost always a problem with your SSL certificates. "
                f"Check {install_settings.paths.ssl_key} and {install_settings.paths.ssl_cert}; "
                f"see {static_config.INSTALL_DOCS_URL}."
            ),
        ) from e
    log_installer(
        f"{symbols.get('success', '✅')} Nginx configuration test successful.",
        "success",
        logger_to_use,
        install_settings,
    )


def configure_nginx(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Validate the configuration, then restart nginx to pick it up."""
    logger_to_use = current_logger if current_logger else module_logger
    validate_nginx_configuration(install_settings, current_logger=logger_to_use)
    restart_service("nginx", install_settings, current_logger=logger_to_use)
