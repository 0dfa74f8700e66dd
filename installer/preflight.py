# installer/preflight.py
# -*- coding: utf-8 -*-
"""
Pre-flight validation run before the installer touches the host.

Checks run cheapest first and none of them executes an external command
until the memory and privilege checks have passed. Option coherence is
enforced when InstallOptions is built, before this stage runs.
"""

import logging
import subprocess
from typing import Callable, List, Optional

from pydantic import ValidationError

from common.command_utils import command_exists, get_symbols, log_installer
from common.debian.apt_manager import AptManager
from common.system_utils import is_running_as_root, read_total_memory_kb
from installer import config as static_config
from installer.config_models import InstallOptions, InstallSettings
from installer.errors import (
    ConfigurationError,
    DependencyError,
    ResourceError,
)

module_logger = logging.getLogger(__name__)


def validate_options(
    use_certbot: bool,
    external_host: Optional[str],
    administrator_email: Optional[str],
) -> InstallOptions:
    """
    Build InstallOptions, converting validation failures into ConfigurationError.
    """
    try:
        return InstallOptions(
            use_certbot=use_certbot,
            external_host=external_host,
            administrator_email=administrator_email,
        )
    except ValidationError as e:
        details = "; ".join(err["msg"].replace("Value error, ", "") for err in e.errors())
        raise ConfigurationError(
            f"Invalid options: {details}",
            hint="Usage: install [--hostname=zulip.example.com] [--email=admin@example.com] [--certbot]",
        ) from e


def check_memory(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    read_memory: Callable[..., int] = read_total_memory_kb,
) -> int:
    """
    Fail with ResourceError when the host has less than ~1.9GB of RAM.

    Otherwise users find out about insufficient RAM through odd failures
    such as a segfault in the middle of `pip install`.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    try:
        mem_kb = read_memory(install_settings.paths.meminfo)
    except (OSError, ValueError) as e:
        raise ResourceError(
            f"Could not determine available memory from {install_settings.paths.meminfo}: {e}"
        ) from e

    if mem_kb < static_config.MIN_MEMORY_KB:
        raise ResourceError(
            f"Insufficient RAM ({mem_kb} kB). Zulip requires at least 2GB of RAM.",
            hint="Resize the host to at least 2GB of memory and run the installer again.",
        )
    log_installer(
        f"{symbols.get('success', '✅')} Memory check passed ({mem_kb} kB).",
        "success",
        logger_to_use,
        install_settings,
    )
    return mem_kb


def check_root() -> None:
    if not is_running_as_root():
        raise ConfigurationError(
            "The installation script must be run as root.",
            hint="Re-run it with sudo or from a root shell.",
        )


def ensure_host_utilities(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    exists: Callable[[str], bool] = command_exists,
) -> List[str]:
    """
    Make sure the utilities the helper scripts depend on are present.

    apt-get itself cannot be installed on the fly and is reported as a
    DependencyError; anything else missing is installed through apt.

    Returns:
        The packages that had to be installed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)

    if not exists("apt-get"):
        raise DependencyError(
            "'apt-get' was not found; this installer supports Debian and Ubuntu hosts only.",
        )

    missing_packages = []
    for command_name, package_name in static_config.REQUIRED_HOST_UTILITIES.items():
        if not exists(command_name):
            log_installer(
                f"{symbols.get('warning', '!')} '{command_name}' is missing; will install '{package_name}'.",
                "warning",
                logger_to_use,
                install_settings,
            )
            if package_name not in missing_packages:
                missing_packages.append(package_name)

    if not missing_packages:
        return []

    apt = AptManager(install_settings, logger=logger_to_use)
    try:
        apt.install(missing_packages, update_first=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise DependencyError(
            f"Could not install required host utilities ({', '.join(missing_packages)}): {e}",
            hint="Install them manually with apt-get and re-run the installer.",
        ) from e
    return missing_packages


def run_preflight(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Run every pre-flight check in order."""
    logger_to_use = current_logger if current_logger else module_logger
    check_memory(install_settings, current_logger=logger_to_use)
    check_root()
    ensure_host_utilities(install_settings, current_logger=logger_to_use)
