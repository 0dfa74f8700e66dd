# configure/postgres_configurator.py
# -*- coding: utf-8 -*-
"""
Handles PostgreSQL database initialization.
"""

import logging
from typing import Optional

from installer import config as static_config
from installer.config_models import InstallSettings
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def initialize_postgres_database(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Create the application's database and role if they do not exist yet."""
    run_helper(
        install_settings,
        static_config.POSTGRES_INIT_DB_SCRIPT,
        description="PostgreSQL database initialization",
        hint="Check that the postgresql service is running (`service postgresql status`).",
        current_logger=current_logger,
    )
