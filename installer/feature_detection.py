# installer/feature_detection.py
# -*- coding: utf-8 -*-
"""
Detects which optional subsystems the manifests installed.

Each subsystem has its own probe so tests can substitute the existence
check without touching a real filesystem.
"""

import logging
import os
from typing import Callable, Optional

from common.command_utils import get_symbols, log_installer
from installer.config_models import FeatureDetectionFlags, InstallSettings

module_logger = logging.getLogger(__name__)

PathExists = Callable[[str], bool]


def probe_reverse_proxy(install_settings: InstallSettings, path_exists: PathExists = os.path.exists) -> bool:
    return path_exists(str(install_settings.paths.nginx_marker))


def probe_app_server(install_settings: InstallSettings, path_exists: PathExists = os.path.exists) -> bool:
    return path_exists(str(install_settings.paths.app_server_marker))


def probe_broker(install_settings: InstallSettings, path_exists: PathExists = os.path.exists) -> bool:
    return path_exists(str(install_settings.paths.rabbitmq_marker))


def probe_database(install_settings: InstallSettings, path_exists: PathExists = os.path.exists) -> bool:
    return path_exists(str(install_settings.paths.postgres_marker))


def probe_cache_proxy(install_settings: InstallSettings, path_exists: PathExists = os.path.exists) -> bool:
    return path_exists(str(install_settings.paths.camo_marker))


def detect_features(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    path_exists: PathExists = os.path.exists,
) -> FeatureDetectionFlags:
    """
    Probe the marker files left by the manifests.

    For the containerized deployment type every flag is False without
    probing: the container orchestrator owns those services.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)

    if install_settings.is_containerized:
        log_installer(
            f"{symbols.get('info', 'ℹ️')} Deployment type '{install_settings.deployment_type}' manages "
            "its services externally; skipping service setup.",
            "info",
            logger_to_use,
            install_settings,
        )
        return FeatureDetectionFlags()

    flags = FeatureDetectionFlags(
        has_proxy=probe_reverse_proxy(install_settings, path_exists),
        has_app_server=probe_app_server(install_settings, path_exists),
        has_broker=probe_broker(install_settings, path_exists),
        has_database=probe_database(install_settings, path_exists),
        has_cache_proxy=probe_cache_proxy(install_settings, path_exists),
    )
    log_installer(
        f"{symbols.get('info', 'ℹ️')} Detected subsystems: "
        + ", ".join(f"{name}={value}" for name, value in flags.model_dump().items()),
        "info",
        logger_to_use,
        install_settings,
    )
    return flags
