# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from installer.config_models import SYMBOLS_DEFAULT, InstallSettings

module_logger = logging.getLogger(__name__)


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    install_settings: Optional[InstallSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs an installer message at the given level.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info".
            "success" is logged at info level.
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        install_settings (Optional[InstallSettings]): Optional installer settings.
        exc_info (bool): Include exception details in the log. Defaults to False.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def get_symbols(install_settings: Optional[InstallSettings]) -> Dict[str, str]:
    if install_settings is not None and install_settings.symbols:
        return install_settings.symbols
    return SYMBOLS_DEFAULT


def _get_elevated_command_prefix() -> List[str]:
    """
    Returns ["sudo"] when the process is not already running as root.
    """
    return [] if os.geteuid() == 0 else ["sudo"]


def run_command(
    command: Union[List[str], str],
    install_settings: Optional[InstallSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a system command, logging the command line and, when captured,
    its output.

    No timeout is applied: a hung helper hangs the installer.

    Args:
        command (Union[List[str], str]): The command to execute. A string is only
            passed through unchanged when shell is True.
        install_settings (Optional[InstallSettings]): Installer settings, used for log symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code. Defaults to True.
        shell (bool): Execute through the shell. Defaults to False.
        capture_output (bool): Capture stdout and stderr. Defaults to False.
        text (bool): Decode output streams as text. Defaults to True.
        cmd_input (Optional[str]): Data for the command's standard input.
        current_logger (Optional[logging.Logger]): Logger to use; defaults to the module logger.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command; inherits ours when None.

    Returns:
        subprocess.CompletedProcess: The completed process.

    Raises:
        subprocess.CalledProcessError: If check is True and the command fails.
        FileNotFoundError: If the executable does not exist.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    command_to_run: Union[List[str], str]

    if shell:
        command_to_run = " ".join(command) if isinstance(command, list) else command
        command_to_log_str = str(command_to_run)
    else:
        if isinstance(command, str):
            log_installer(
                f"{symbols.get('warning', '!')} Running string command '{command}' without shell=True. Consider list format.",
                "warning",
                effective_logger,
                install_settings,
            )
            command_to_run = command.split()
            command_to_log_str = command
        else:
            command_to_run = [str(part) for part in command]
            command_to_log_str = subprocess.list2cmdline(command_to_run)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}".rstrip(),
        "info",
        effective_logger,
        install_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output and result.stdout and result.stdout.strip():
            log_installer(
                f"   stdout: {result.stdout.strip()}",
                "debug",
                effective_logger,
                install_settings,
            )
        return result
    except subprocess.CalledProcessError as e:
        cmd_executed_str = (
            subprocess.list2cmdline(e.cmd) if isinstance(e.cmd, list) else str(e.cmd)
        )
        log_installer(
            f"{symbols.get('error', '❌')} Command `{cmd_executed_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            install_settings,
        )
        if e.stdout and hasattr(e.stdout, "strip") and e.stdout.strip():
            log_installer(f"   stdout: {e.stdout.strip()}", "error", effective_logger, install_settings)
        if e.stderr and hasattr(e.stderr, "strip") and e.stderr.strip():
            log_installer(f"   stderr: {e.stderr.strip()}", "error", effective_logger, install_settings)
        raise
    except FileNotFoundError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            install_settings,
        )
        raise


def run_elevated_command(
    command: List[str],
    install_settings: Optional[InstallSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with root privileges, prefixing sudo when needed.

    Accepts the same arguments as run_command, minus shell/text.
    """
    prefix = _get_elevated_command_prefix()
    return run_command(
        prefix + list(command),
        install_settings,
        check=check,
        shell=False,
        capture_output=capture_output,
        text=True,
        cmd_input=cmd_input,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.
    """
    return shutil.which(command_name) is not None
