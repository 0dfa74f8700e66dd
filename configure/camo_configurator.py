# configure/camo_configurator.py
# -*- coding: utf-8 -*-
"""
Restarts camo, the image proxy, so it picks up the key the secrets
generator just rotated.
"""

import logging
from typing import Optional

from common.system_utils import restart_service
from installer.config_models import InstallSettings

module_logger = logging.getLogger(__name__)


def restart_camo(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    restart_service("camo", install_settings, current_logger=logger_to_use)
