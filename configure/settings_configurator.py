# configure/settings_configurator.py
# -*- coding: utf-8 -*-
"""
Renders the production settings file for the application server.

The template shipped with the release is copied to /etc/zulip/settings.py
and the host and administrator tokens are substituted in place. The
secrets generator runs first; it also rotates the camo key.
"""

import logging
import re
import shutil
from pathlib import Path
from typing import Optional

from common.command_utils import get_symbols, log_installer
from common.file_utils import atomic_symlink, write_text_file
from installer import config as static_config
from installer.config_models import InstallOptions, InstallSettings
from installer.errors import MissingArtifactError
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def substitute_setting(content: str, name: str, value: str) -> str:
    """
    Replace every top-level ``NAME = ...`` line with ``NAME = 'value'``.

    Equivalent to ``sed -i "s/^NAME =.*/NAME = 'value'/"``.
    """
    pattern = re.compile(rf"^{re.escape(name)} =.*$", re.MULTILINE)
    replacement = f"{name} = {value!r}" if "'" in value else f"{name} = '{value}'"
    return pattern.sub(lambda _match: replacement, content)


def render_settings(template: str, options: InstallOptions) -> str:
    """Substitute the host and administrator tokens that were provided."""
    content = template
    if options.external_host:
        content = substitute_setting(content, "EXTERNAL_HOST", options.external_host)
    if options.administrator_email:
        content = substitute_setting(content, "ZULIP_ADMINISTRATOR", options.administrator_email)
    return content


def generate_secrets(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    run_helper(
        install_settings,
        static_config.GENERATE_SECRETS_SCRIPT,
        args=["--production"],
        description="Secret generation",
        current_logger=current_logger,
    )


def render_settings_file(
    install_settings: InstallSettings,
    options: InstallOptions,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Copy the settings template into place and substitute the tokens.

    Returns:
        Path of the rendered settings file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    template_path = install_settings.helper(static_config.SETTINGS_TEMPLATE)
    settings_path = Path(install_settings.paths.settings_file)

    if not template_path.is_file():
        raise MissingArtifactError(
            f"Settings template {template_path} is missing.",
            hint="The release tree looks incomplete; unpack the release again.",
        )

    rendered = render_settings(template_path.read_text(encoding="utf-8"), options)
    write_text_file(settings_path, rendered, install_settings, current_logger=logger_to_use)
    shutil.copymode(str(template_path), str(settings_path))
    return settings_path


def configure_app_server_settings(
    install_settings: InstallSettings,
    options: InstallOptions,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """Generate secrets, render the settings file and link it into the release tree."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)

    generate_secrets(install_settings, current_logger=logger_to_use)
    settings_path = render_settings_file(install_settings, options, current_logger=logger_to_use)
    atomic_symlink(
        settings_path,
        install_settings.helper(static_config.SETTINGS_LINK),
        install_settings,
        current_logger=logger_to_use,
    )
    log_installer(
        f"{symbols.get('success', '✅')} Production settings rendered to {settings_path}.",
        "success",
        logger_to_use,
        install_settings,
    )
    return settings_path
