# common/core_utils.py
# -*- coding: utf-8 -*-
"""
Core utility functions for the installer.

This module provides logging setup: console output plus an append-only
install log, with a level symbol injected into every record.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from installer.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER = "{log_prefix}%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
SIMPLE_LOG_FORMAT_NO_PREFIX = (
    "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
)


class SymbolFormatter(logging.Formatter):
    """
    A custom formatter that adds symbols to log messages based on the log level.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = "%",
        validate: bool = True,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt, style, validate)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == logging.INFO:
            record.symbol = self.symbols.get("info", "ℹ️")
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        return super().format(record)


def resolve_log_level(level_name: str) -> int:
    """Map a level name such as "debug" to its numeric value, defaulting to INFO."""
    level = getattr(logging, str(level_name).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Configures root logging for the installer.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        Path of the install log. Records are appended so that the log of
        a failed run survives the re-run.
    log_to_console: bool
        Whether to log to the console (stdout). Defaults to True.
    log_prefix: Optional[str]
        Optional prefix for every formatted line.
    symbols: Optional[Dict[str, str]]
        Level symbol map for SymbolFormatter.

    Returns:
    Optional[str]
        The log file actually in use, or None when the file could not be
        opened (a warning is printed to stderr and console logging continues).
    """
    handlers: List[logging.Handler] = []
    log_file_in_use: Optional[str] = None
    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
            log_file_in_use = str(log_file_path)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if not handlers:  # pragma: no cover
        handlers.append(logging.StreamHandler(sys.stdout))

    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    if actual_prefix:
        final_format_str = SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER.format(
            log_prefix=actual_prefix
        )
    else:
        final_format_str = SIMPLE_LOG_FORMAT_NO_PREFIX

    formatter = SymbolFormatter(
        fmt=final_format_str,
        datefmt="%Y-%m-%d %H:%M:%S",
        symbols=symbols,
    )

    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. File: {log_file_in_use or 'none'}"
    )
    return log_file_in_use
