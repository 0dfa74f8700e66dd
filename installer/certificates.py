# installer/certificates.py
# -*- coding: utf-8 -*-
"""
Early check for the TLS certificate and key nginx will need.
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from common.command_utils import get_symbols, log_installer
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import MissingArtifactError

module_logger = logging.getLogger(__name__)


def missing_certificate_files(
    install_settings: InstallSettings,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> List[Path]:
    paths = install_settings.paths
    return [p for p in (paths.ssl_key, paths.ssl_cert) if not path_exists(str(p))]


def check_certificates_present(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> None:
    """
    Fail early when the certificate or key for the reverse proxy is missing.

    Only reads the filesystem, so it is safe to repeat on every run.

    Raises:
        MissingArtifactError: naming each missing file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    missing = missing_certificate_files(install_settings, path_exists)
    if missing:
        details = "\n".join(f" - {p} is missing!" for p in missing)
        raise MissingArtifactError(
            f"Could not find SSL certificates!\n{details}",
            hint=(
                f"See {static_config.INSTALL_DOCS_URL} for instructions on SSL certificates, "
                "or pass --certbot --hostname=<host> --email=<addr> to obtain one automatically."
            ),
        )
    log_installer(
        f"{symbols.get('success', '✅')} SSL certificate and key are present.",
        "success",
        logger_to_use,
        install_settings,
    )
