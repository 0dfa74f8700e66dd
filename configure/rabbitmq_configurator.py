# configure/rabbitmq_configurator.py
# -*- coding: utf-8 -*-
"""
Handles the health check and configuration of the RabbitMQ broker.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_installer
from common.system_utils import command_succeeds
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import DependencyHealthError
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def check_rabbitmq_running(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Raises:
        DependencyHealthError: if `rabbitmqctl status` fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    if not command_succeeds(["rabbitmqctl", "status"], install_settings, current_logger=logger_to_use):
        raise DependencyHealthError(
            "RabbitMQ seems to not have started properly after the installation process.",
            hint=(
                "Often, this can be caused by misconfigured /etc/hosts in virtualized environments: "
                "make sure this host's hostname resolves to a local address. "
                f"See {static_config.RABBITMQ_HOSTS_ISSUE_URL}"
            ),
        )
    log_installer(
        f"{symbols.get('success', '✅')} RabbitMQ is running.",
        "success",
        logger_to_use,
        install_settings,
    )


def configure_rabbitmq(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Verify the broker responds, then create the application's user and vhost."""
    logger_to_use = current_logger if current_logger else module_logger
    check_rabbitmq_running(install_settings, current_logger=logger_to_use)
    run_helper(
        install_settings,
        static_config.CONFIGURE_RABBITMQ_SCRIPT,
        description="RabbitMQ configuration",
        current_logger=logger_to_use,
    )
