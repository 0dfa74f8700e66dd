# installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for installer configuration.

This module defines the structured settings for the installer: the
command-line options, the environment-derived defaults, the fixed system
paths and the feature flags detected after the manifests are applied.
It utilizes Pydantic for data validation and settings management.
"""

import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from installer import config as static_config

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛",
}

TRUTHY_VALUES = {"yes", "true", "1", "on", "y"}


class InstallOptions(BaseModel):
    """Options taken from the command line."""
    model_config = ConfigDict(frozen=True)

    use_certbot: bool = Field(default=False, description="Acquire a certificate with certbot (standalone).")
    external_host: Optional[str] = Field(default=None, description="Public hostname of this server.")
    administrator_email: Optional[str] = Field(default=None, description="Administrator contact address.")

    @field_validator("external_host", "administrator_email", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _certbot_needs_host_and_email(self) -> "InstallOptions":
        if self.use_certbot and not (self.external_host and self.administrator_email):
            raise ValueError("--certbot requires both --hostname and --email")
        return self


class InstallPaths(BaseModel):
    """Fixed system paths touched by the installer."""
    model_config = ConfigDict(frozen=True)

    zulip_conf: Path = static_config.ZULIP_CONF_PATH
    settings_file: Path = static_config.SETTINGS_PATH
    ssl_key: Path = static_config.SSL_KEY_PATH
    ssl_cert: Path = static_config.SSL_CERT_PATH
    service_home: Path = static_config.SERVICE_HOME
    deployments_dir: Path = static_config.DEPLOYMENTS_DIR
    prod_static_dir: Path = static_config.PROD_STATIC_DIR
    log_dir: Path = static_config.LOG_DIR
    install_log: Path = static_config.INSTALL_LOG_PATH
    supervisor_socket: Path = static_config.SUPERVISOR_SOCKET_PATH
    meminfo: Path = static_config.MEMINFO_PATH

    nginx_marker: Path = static_config.NGINX_MARKER
    app_server_marker: Path = static_config.APP_SERVER_MARKER
    rabbitmq_marker: Path = static_config.RABBITMQ_MARKER
    postgres_marker: Path = static_config.POSTGRES_MARKER
    camo_marker: Path = static_config.CAMO_MARKER


class InstallSettings(BaseSettings):
    """Environment-derived installer settings, resolved once at startup."""
    model_config = SettingsConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    apt_options: str = Field(default="", description="Extra options passed to every apt-get invocation.")
    additional_packages: str = Field(default="", description="Whitespace separated extra packages to install.")
    deployment_type: str = Field(default=static_config.DEPLOYMENT_TYPE_DEFAULT,
                                 description="Deployment type written to zulip.conf.")
    puppet_classes: str = Field(default=static_config.PUPPET_CLASSES_DEFAULT,
                                description="Comma separated puppet manifest classes to apply.")
    virtualenv_needed: bool = Field(default=True,
                                    description="Create the production Python virtual environment.")
    ci: bool = Field(default=False, validation_alias=AliasChoices("ci", "TRAVIS"),
                     description="Running under CI; skips the camo restart which hangs there.")
    zulip_path: Path = Field(default_factory=Path.cwd, validate_default=True,
                             description="Root of the unpacked release tree to install.")
    log_level: str = Field(default="INFO", description="Logging level for console and install log.")
    locale: str = Field(default=static_config.LOCALE_DEFAULT,
                        validation_alias=AliasChoices("locale", "INSTALL_LOCALE"),
                        description="Locale forced for every external command.")
    service_user: str = Field(default=static_config.SERVICE_USER_DEFAULT,
                              validation_alias=AliasChoices("service_user", "ZULIP_SERVICE_USER"),
                              description="Restricted account owning the deployment.")

    paths: InstallPaths = Field(default_factory=InstallPaths)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("virtualenv_needed", mode="before")
    @classmethod
    def _parse_yes_no(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY_VALUES
        return value

    @field_validator("ci", mode="before")
    @classmethod
    def _non_empty_is_set(cls, value: Any) -> Any:
        # Matches the shell convention `[ -n "$TRAVIS" ]`.
        if isinstance(value, str):
            return bool(value.strip())
        return value

    @field_validator("zulip_path")
    @classmethod
    def _resolve_release_tree(cls, value: Path) -> Path:
        # The deployment stage leaves a symlink to deployments/next where the
        # tree used to be; only the real directory may be moved.
        try:
            resolved = Path(value).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise ValueError(f"release tree {value} cannot be resolved: {e}") from e
        if not resolved.is_dir():
            raise ValueError(f"release tree {resolved} is not a directory")
        return resolved

    @field_validator("puppet_classes")
    @classmethod
    def _classes_not_empty(cls, value: str) -> str:
        if not [c for c in value.split(",") if c.strip()]:
            raise ValueError("at least one puppet class must be selected")
        return value

    @property
    def puppet_class_list(self) -> List[str]:
        return [c.strip() for c in self.puppet_classes.split(",") if c.strip()]

    @property
    def additional_package_list(self) -> List[str]:
        return self.additional_packages.split()

    @property
    def apt_option_list(self) -> List[str]:
        return shlex.split(self.apt_options)

    @property
    def is_containerized(self) -> bool:
        return self.deployment_type == static_config.CONTAINERIZED_DEPLOYMENT_TYPE

    @property
    def requires_tls_proxy(self) -> bool:
        return any(c in static_config.TLS_PROXY_PUPPET_CLASSES for c in self.puppet_class_list)

    def helper(self, relative_path: str) -> Path:
        """Absolute path of a helper script inside the release tree."""
        return Path(self.zulip_path) / relative_path


class FeatureDetectionFlags(BaseModel):
    """Optional subsystems the manifests installed on this host."""
    model_config = ConfigDict(frozen=True)

    has_proxy: bool = False
    has_app_server: bool = False
    has_broker: bool = False
    has_database: bool = False
    has_cache_proxy: bool = False
