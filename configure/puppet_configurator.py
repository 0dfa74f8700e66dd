# configure/puppet_configurator.py
# -*- coding: utf-8 -*-
"""
Writes /etc/zulip/zulip.conf and applies the selected puppet manifests.

This is the step that decides which optional subsystems end up on the
host.
"""

import configparser
import io
import logging
from typing import Optional

from common.command_utils import get_symbols, log_installer
from common.debian.apt_manager import AptManager
from common.file_utils import write_text_file
from installer import config as static_config
from installer.config_models import InstallOptions, InstallSettings
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def render_zulip_conf(
    install_settings: InstallSettings,
    options: InstallOptions,
    rabbitmq_installed: bool,
) -> str:
    """
    Render zulip.conf.

    The [rabbitmq] stanza pins the node name when the broker package is
    already installed (a re-run, or a host where its default node name
    was never usable) or under CI. A fresh install leaves it out so the
    manifests pick the name.
    """
    conf = configparser.ConfigParser()
    conf["machine"] = {
        "puppet_classes": install_settings.puppet_classes,
        "deploy_type": install_settings.deployment_type,
    }
    if install_settings.ci or rabbitmq_installed:
        conf["rabbitmq"] = {"nodename": static_config.RABBITMQ_NODENAME}
    if options.use_certbot:
        conf["certbot"] = {"auto_renew": "yes"}

    buffer = io.StringIO()
    conf.write(buffer)
    return buffer.getvalue()


def write_zulip_conf(
    install_settings: InstallSettings,
    options: InstallOptions,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    logger_to_use = current_logger if current_logger else module_logger
    apt = AptManager(install_settings, logger=logger_to_use)
    rabbitmq_installed = apt.is_installed(static_config.RABBITMQ_PACKAGE)
    content = render_zulip_conf(install_settings, options, rabbitmq_installed)
    write_text_file(
        install_settings.paths.zulip_conf,
        content,
        install_settings,
        current_logger=logger_to_use,
    )
    return content


def apply_manifests(
    install_settings: InstallSettings,
    options: InstallOptions,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Write zulip.conf, then run puppet for every selected class."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)

    write_zulip_conf(install_settings, options, current_logger=logger_to_use)
    log_installer(
        f"{symbols.get('gear', '⚙️')} Applying puppet classes: {', '.join(install_settings.puppet_class_list)}",
        "info",
        logger_to_use,
        install_settings,
    )
    run_helper(
        install_settings,
        static_config.PUPPET_APPLY_SCRIPT,
        args=["-f"],
        description="Puppet manifest application",
        hint="The puppet error above names the failing resource; fix it and re-run the installer.",
        current_logger=logger_to_use,
    )
