# installer/helpers.py
# -*- coding: utf-8 -*-
"""
Invocation of the helper scripts shipped inside the release tree.

Helpers are opaque collaborators: they either succeed or the whole
install stops with an ExternalToolError naming the helper.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from common.command_utils import get_symbols, log_installer, run_elevated_command
from installer.config_models import InstallSettings
from installer.errors import ExternalToolError

module_logger = logging.getLogger(__name__)


def run_helper(
    install_settings: InstallSettings,
    script: str,
    args: Sequence[str] = (),
    description: Optional[str] = None,
    hint: Optional[str] = None,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Run a helper script from the release tree as root.

    Args:
        install_settings: Installer settings; locates the release tree.
        script: Helper path relative to the release tree.
        args: Arguments for the helper.
        description: Human readable name used in log and error messages.
        hint: Remediation hint attached to the error on failure.
        capture_output: Capture the helper's stdout (for helpers that print a result).
        current_logger: Optional logger instance.

    Raises:
        ExternalToolError: If the helper is missing or exits non-zero.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    helper_path: Path = install_settings.helper(script)
    label = description or script
    command: List[str] = [str(helper_path), *[str(a) for a in args]]

    log_installer(
        f"{symbols.get('step', '➡️')} Running {label}...",
        "info",
        logger_to_use,
        install_settings,
    )
    try:
        return run_elevated_command(
            command,
            install_settings,
            capture_output=capture_output,
            current_logger=logger_to_use,
        )
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(
            f"{label} ({script}) exited with status {e.returncode}.",
            hint=hint or "See the helper's output above and in the install log.",
            returncode=e.returncode,
        ) from e
    except FileNotFoundError as e:
        raise ExternalToolError(
            f"{label} could not be run: {helper_path} does not exist.",
            hint="Run the installer from the root of an unpacked Zulip release (or set ZULIP_PATH).",
        ) from e
