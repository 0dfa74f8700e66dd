# configure/supervisor_configurator.py
# -*- coding: utf-8 -*-
"""
Hands the supervisord control socket to the service account so the
application's management commands can restart its workers.
"""

import logging
import os
from typing import Callable, Optional

from common.system_utils import chown_paths
from installer.config_models import InstallSettings

module_logger = logging.getLogger(__name__)


def supervisor_socket_exists(
    install_settings: InstallSettings, path_exists: Callable[[str], bool] = os.path.exists
) -> bool:
    return path_exists(str(install_settings.paths.supervisor_socket))


def fix_supervisor_socket_ownership(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    chown_paths(
        install_settings.service_user,
        [install_settings.paths.supervisor_socket],
        install_settings,
        current_logger=logger_to_use,
    )
