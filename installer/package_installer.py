# installer/package_installer.py
# -*- coding: utf-8 -*-
"""
Package-source setup, init-system shim and system package installation.
"""

import logging
import subprocess
from typing import List, Optional

from common.command_utils import get_symbols, log_installer
from common.debian.apt_manager import AptManager
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import ExternalToolError
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def setup_package_sources(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Configure the apt repositories the release needs.

    The helper finishes with an `apt-get update`, so package installation
    may start as soon as it returns.
    """
    run_helper(
        install_settings,
        static_config.SETUP_APT_REPO_SCRIPT,
        description="Package repository setup",
        hint="Check network access to the package mirrors and the apt configuration in /etc/apt.",
        current_logger=current_logger,
    )


def apply_init_system_shim(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Smooth over init-system differences on supported OS releases."""
    run_helper(
        install_settings,
        static_config.CHECK_UPSTART_SCRIPT,
        description="Init system compatibility check",
        current_logger=current_logger,
    )


def base_package_list(install_settings: InstallSettings) -> List[str]:
    """Fixed base packages followed by the caller supplied extras, without duplicates."""
    packages: List[str] = []
    for package in static_config.BASE_PACKAGES + install_settings.additional_package_list:
        if package not in packages:
            packages.append(package)
    return packages


def install_system_packages(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Upgrade the whole system, then install the base and additional packages."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    packages = base_package_list(install_settings)

    apt = AptManager(install_settings, logger=logger_to_use)
    try:
        apt.dist_upgrade()
        log_installer(
            f"{symbols.get('package', '📦')} Installing packages: {' '.join(packages)}",
            "info",
            logger_to_use,
            install_settings,
        )
        apt.install(packages)
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(
            f"apt-get failed with status {e.returncode} while installing system packages.",
            hint="Fix the apt error shown above (often a held or broken package), then re-run.",
            returncode=e.returncode,
        ) from e


def upgrade_system_packages(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Second upgrade pass; the manifests may have added package sources."""
    logger_to_use = current_logger if current_logger else module_logger
    apt = AptManager(install_settings, logger=logger_to_use)
    try:
        apt.upgrade()
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(
            f"apt-get upgrade failed with status {e.returncode}.",
            returncode=e.returncode,
        ) from e
