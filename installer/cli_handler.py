# installer/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the installer:
argument parsing, the failure report and the completion report.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, TextIO

from common.command_utils import get_symbols, log_installer
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import InstallError

module_logger = logging.getLogger(__name__)

USAGE = "install [--hostname=zulip.example.com] [--email=admin@example.com] [--certbot]"


class InstallArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = InstallArgumentParser(
        prog="install",
        usage=USAGE,
        description="Install a Zulip production server on this host.",
        epilog=(
            "Environment: APT_OPTIONS, ADDITIONAL_PACKAGES, DEPLOYMENT_TYPE, "
            "PUPPET_CLASSES, VIRTUALENV_NEEDED, TRAVIS, ZULIP_PATH."
        ),
    )
    parser.add_argument(
        "--certbot",
        action="store_true",
        help="Obtain a TLS certificate with certbot. Requires --hostname and --email.",
    )
    parser.add_argument(
        "--hostname",
        metavar="HOST",
        default=None,
        help="Public hostname of this server, e.g. zulip.example.com.",
    )
    parser.add_argument(
        "--email",
        metavar="ADDR",
        default=None,
        help="Administrator contact address, e.g. admin@example.com.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help=f"YAML file with installer setting overrides (default: {static_config.INSTALL_CONFIG_PATH} if present).",
    )
    return parser


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_arg_parser().parse_args(argv)


def print_failure_report(
    error: InstallError,
    log_path: Optional[str],
    stream: Optional[TextIO] = None,
) -> None:
    out = stream if stream is not None else sys.stderr
    print("", file=out)
    print(error.report(), file=out)
    if log_path:
        print(f"A log of this installation is available in {log_path}", file=out)
    print("", file=out)


def completion_report(install_settings: InstallSettings) -> str:
    current = Path(install_settings.paths.deployments_dir) / "current"
    return (
        "\n"
        " Installation complete!\n"
        "\n"
        f" Now edit {install_settings.paths.settings_file} and fill in the mandatory values.\n"
        "\n"
        " Once you've done that, please run:\n"
        "\n"
        f" su {install_settings.service_user} -c {current / static_config.INITIALIZE_DATABASE_SCRIPT}\n"
        "\n"
        " To configure the initial database.\n"
    )


def print_completion_report(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    stream: Optional[TextIO] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    log_installer(
        f"{symbols.get('sparkles', '✨')} All installation steps finished.",
        "success",
        logger_to_use,
        install_settings,
    )
    print(completion_report(install_settings), file=stream if stream is not None else sys.stdout)
