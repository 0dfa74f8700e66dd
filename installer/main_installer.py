# installer/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point and orchestrator for the Zulip production installer.

Parses the command line, resolves settings, configures logging and runs
the installation stages in order. Every stage failure is fatal: the
failure report is printed and the process exits with status 1.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from common.command_utils import get_symbols, log_installer
from common.core_utils import resolve_log_level, setup_logging
from configure.camo_configurator import restart_camo
from configure.deployment_configurator import finalize_deployment
from configure.nginx_configurator import configure_nginx
from configure.postgres_configurator import initialize_postgres_database
from configure.puppet_configurator import apply_manifests
from configure.rabbitmq_configurator import configure_rabbitmq
from configure.settings_configurator import configure_app_server_settings
from configure.supervisor_configurator import (
    fix_supervisor_socket_ownership,
    supervisor_socket_exists,
)
from installer import config as static_config
from installer.certbot_installer import acquire_certificate
from installer.certificates import check_certificates_present
from installer.cli_handler import (
    parse_cli_args,
    print_completion_report,
    print_failure_report,
)
from installer.config_loader import load_install_settings
from installer.config_models import (
    FeatureDetectionFlags,
    InstallOptions,
    InstallSettings,
)
from installer.errors import InstallError
from installer.feature_detection import detect_features
from installer.nodejs_installer import install_frontend_tooling
from installer.package_installer import (
    apply_init_system_shim,
    install_system_packages,
    setup_package_sources,
    upgrade_system_packages,
)
from installer.preflight import run_preflight, validate_options
from installer.python_env_installer import create_production_venv
from installer.step_executor import PipelineResult, Stage, run_pipeline

logger = logging.getLogger(__name__)


@dataclass
class InstallContext:
    """State shared by the stages of a single installer run."""

    settings: InstallSettings
    options: InstallOptions
    logger: logging.Logger
    features: FeatureDetectionFlags = field(default_factory=FeatureDetectionFlags)
    deploy_path: Optional[Path] = None


def _preflight(ctx: InstallContext) -> None:
    run_preflight(ctx.settings, current_logger=ctx.logger)


def _package_sources(ctx: InstallContext) -> None:
    setup_package_sources(ctx.settings, current_logger=ctx.logger)


def _init_system_shim(ctx: InstallContext) -> None:
    apply_init_system_shim(ctx.settings, current_logger=ctx.logger)


def _certbot(ctx: InstallContext) -> None:
    acquire_certificate(ctx.options, ctx.settings, current_logger=ctx.logger)


def _certificate_check(ctx: InstallContext) -> None:
    check_certificates_present(ctx.settings, current_logger=ctx.logger)


def _system_packages(ctx: InstallContext) -> None:
    install_system_packages(ctx.settings, current_logger=ctx.logger)


def _python_env(ctx: InstallContext) -> None:
    create_production_venv(ctx.settings, current_logger=ctx.logger)


def _frontend_tooling(ctx: InstallContext) -> None:
    install_frontend_tooling(ctx.settings, current_logger=ctx.logger)


def _apply_manifests(ctx: InstallContext) -> None:
    apply_manifests(ctx.settings, ctx.options, current_logger=ctx.logger)


def _feature_detection(ctx: InstallContext) -> None:
    ctx.features = detect_features(ctx.settings, current_logger=ctx.logger)


def _second_upgrade(ctx: InstallContext) -> None:
    upgrade_system_packages(ctx.settings, current_logger=ctx.logger)


def _nginx(ctx: InstallContext) -> None:
    configure_nginx(ctx.settings, current_logger=ctx.logger)


def _app_server_settings(ctx: InstallContext) -> None:
    configure_app_server_settings(ctx.settings, ctx.options, current_logger=ctx.logger)


def _camo(ctx: InstallContext) -> None:
    restart_camo(ctx.settings, current_logger=ctx.logger)


def _rabbitmq(ctx: InstallContext) -> None:
    configure_rabbitmq(ctx.settings, current_logger=ctx.logger)


def _postgres(ctx: InstallContext) -> None:
    initialize_postgres_database(ctx.settings, current_logger=ctx.logger)


def _deployment(ctx: InstallContext) -> None:
    ctx.deploy_path = finalize_deployment(ctx.settings, current_logger=ctx.logger)


def _supervisor_socket(ctx: InstallContext) -> None:
    fix_supervisor_socket_ownership(ctx.settings, current_logger=ctx.logger)


def _completion_report(ctx: InstallContext) -> None:
    print_completion_report(ctx.settings, current_logger=ctx.logger)


def build_stages() -> List[Stage]:
    """The installation stages, in execution order."""
    return [
        Stage("PREFLIGHT", "Preflight checks", _preflight),
        Stage("PACKAGE_SOURCES", "Package repository setup", _package_sources),
        Stage("INIT_SYSTEM_SHIM", "Init system compatibility check", _init_system_shim),
        Stage(
            "CERTBOT",
            "TLS certificate acquisition",
            _certbot,
            applies=lambda ctx: ctx.options.use_certbot,
        ),
        Stage(
            "CERTIFICATE_CHECK",
            "TLS certificate check",
            _certificate_check,
            applies=lambda ctx: ctx.settings.requires_tls_proxy,
        ),
        Stage("SYSTEM_PACKAGES", "System package installation", _system_packages),
        Stage(
            "PYTHON_ENV",
            "Production virtual environment",
            _python_env,
            applies=lambda ctx: ctx.settings.virtualenv_needed,
        ),
        Stage("FRONTEND_TOOLING", "Node.js toolchain installation", _frontend_tooling),
        Stage("APPLY_MANIFESTS", "Puppet manifest application", _apply_manifests),
        Stage("FEATURE_DETECTION", "Installed service detection", _feature_detection),
        Stage("SECOND_UPGRADE", "System package upgrade", _second_upgrade),
        Stage(
            "NGINX",
            "nginx configuration",
            _nginx,
            applies=lambda ctx: ctx.features.has_proxy,
        ),
        Stage(
            "APP_SERVER_SETTINGS",
            "Application server settings",
            _app_server_settings,
            applies=lambda ctx: ctx.features.has_app_server,
        ),
        # Restarting camo hangs on CI workers.
        Stage(
            "CAMO",
            "camo restart",
            _camo,
            applies=lambda ctx: ctx.features.has_cache_proxy and not ctx.settings.ci,
        ),
        Stage(
            "RABBITMQ",
            "RabbitMQ configuration",
            _rabbitmq,
            applies=lambda ctx: ctx.features.has_broker,
        ),
        Stage(
            "POSTGRES",
            "PostgreSQL initialization",
            _postgres,
            applies=lambda ctx: ctx.features.has_database,
        ),
        Stage(
            "DEPLOYMENT",
            "Deployment activation",
            _deployment,
            applies=lambda ctx: ctx.features.has_app_server,
        ),
        Stage(
            "SUPERVISOR_SOCKET",
            "supervisor socket ownership",
            _supervisor_socket,
            applies=lambda ctx: supervisor_socket_exists(ctx.settings),
        ),
        Stage("COMPLETION_REPORT", "Completion report", _completion_report),
    ]


def export_locale(install_settings: InstallSettings) -> None:
    """Force the locale of every command the installer spawns."""
    for variable in ("LC_ALL", "LANG", "LANGUAGE"):
        os.environ[variable] = install_settings.locale


def run_install(
    ctx: InstallContext, stages: Optional[List[Stage]] = None
) -> PipelineResult:
    symbols = get_symbols(ctx.settings)
    log_installer(
        f"{symbols.get('rocket', '🚀')} Installing Zulip from {ctx.settings.zulip_path}",
        "info",
        ctx.logger,
        ctx.settings,
    )
    return run_pipeline(
        stages if stages is not None else build_stages(),
        ctx,
        current_logger=ctx.logger,
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_cli_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    try:
        options = validate_options(args.certbot, args.hostname, args.email)
        install_settings = load_install_settings(args.config, current_logger=logger)
    except InstallError as e:
        print_failure_report(e, log_path=None)
        return 1

    export_locale(install_settings)
    log_file = setup_logging(
        log_level=resolve_log_level(install_settings.log_level),
        log_file=str(install_settings.paths.install_log),
        log_to_console=True,
        log_prefix=static_config.LOG_PREFIX_DEFAULT,
        symbols=install_settings.symbols,
    )

    ctx = InstallContext(settings=install_settings, options=options, logger=logger)
    result = run_install(ctx)
    if result.failure is not None:
        print_failure_report(result.failure.error, log_path=log_file)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
