# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the installer.

This module includes functions for reading host memory, checking for root,
restarting and querying services through the init system and changing
ownership of installed paths.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Union

from common.command_utils import (
    get_symbols,
    log_installer,
    run_elevated_command,
)
from installer.config_models import InstallSettings

module_logger = logging.getLogger(__name__)


def read_total_memory_kb(meminfo_path: Union[str, Path] = "/proc/meminfo") -> int:
    """
    Return total memory in kB from the first line of /proc/meminfo.

    The first line has the form ``MemTotal:        2048000 kB``.

    Raises:
        ValueError: If the first line cannot be parsed.
    """
    with open(meminfo_path, "r", encoding="utf-8") as f:
        first_line = f.readline()
    parts = first_line.split()
    if len(parts) < 2 or not parts[1].isdigit():
        raise ValueError(f"Unexpected {meminfo_path} format: {first_line.strip()!r}")
    return int(parts[1])


def is_running_as_root() -> bool:
    return os.geteuid() == 0


def restart_service(
    service_name: str,
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Restart a service through the init system's `service` wrapper, which
    works under both systemd and upstart.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    log_installer(
        f"{symbols.get('gear', '⚙️')} Restarting {service_name}...",
        "info",
        logger_to_use,
        install_settings,
    )
    run_elevated_command(
        ["service", service_name, "restart"],
        install_settings,
        current_logger=logger_to_use,
    )
    log_installer(
        f"{symbols.get('success', '✅')} {service_name} restarted.",
        "success",
        logger_to_use,
        install_settings,
    )


def chown_paths(
    owner: str,
    paths: Iterable[Union[str, Path]],
    install_settings: InstallSettings,
    recursive: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Change ownership of paths to owner:owner."""
    logger_to_use = current_logger if current_logger else module_logger
    command = ["chown"]
    if recursive:
        command.append("-R")
    command.append(f"{owner}:{owner}")
    command.extend(str(p) for p in paths)
    run_elevated_command(command, install_settings, current_logger=logger_to_use)


def command_succeeds(
    command: list,
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Run a probe command and report whether it exited zero.

    Output is captured so a failing probe does not clutter the console.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        result = run_elevated_command(
            command,
            install_settings,
            check=False,
            capture_output=True,
            current_logger=logger_to_use,
        )
    except FileNotFoundError:
        return False
    return result.returncode == 0
