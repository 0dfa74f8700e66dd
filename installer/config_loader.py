# installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment
variables and an optional YAML file, applying this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (via Pydantic's BaseSettings)
3. YAML Configuration File
Command-line flags are kept apart in InstallOptions.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import ConfigurationError

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from `overrides`.

    Nested dictionaries are merged key by key; any other value in
    `overrides` replaces the one in `source`. None values in `overrides`
    never replace an existing value.

    Returns:
        Dict[str, Any]: The updated `source` dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def read_yaml_overrides(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping of setting overrides.

    A missing file yields no overrides. A file that is not a YAML mapping,
    or cannot be parsed, is a ConfigurationError: silently ignoring an
    operator's config would install something they did not ask for.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(config_file_path)
    if not path.is_file():
        logger_to_use.info(
            f"Configuration file '{path}' not found. Using defaults and environment variables."
        )
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse YAML config file '{path}': {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read config file '{path}': {e}") from e

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        raise ConfigurationError(
            f"Config file '{path}' does not contain a YAML mapping."
        )
    logger_to_use.info(f"Loaded installer configuration from {path}")
    return yaml_data


def load_install_settings(
    config_file_path: Optional[Union[str, Path]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> InstallSettings:
    """
    Loads installer settings with the following precedence:
    1. Pydantic Model Defaults.
    2. Environment Variables (loaded by BaseSettings).
    3. Values from the YAML configuration file.

    Args:
        config_file_path: Path to the YAML configuration file; defaults to
            /etc/zulip/install.yaml, which is optional.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An immutable InstallSettings with the fully resolved configuration.

    Raises:
        ConfigurationError: If the YAML file or any resolved value is invalid.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_path = config_file_path or static_config.INSTALL_CONFIG_PATH

    try:
        settings_after_env_and_defaults = InstallSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid installer environment: {e}") from e

    overrides = read_yaml_overrides(yaml_path, current_logger=logger_to_use)
    if not overrides:
        return settings_after_env_and_defaults

    current_values_dict = settings_after_env_and_defaults.model_dump()
    current_values_dict = _deep_update(current_values_dict, overrides)
    try:
        final_settings = InstallSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Invalid installer configuration in '{yaml_path}': {e}") from e

    logger_to_use.info("Successfully loaded and validated installer settings")
    return final_settings
