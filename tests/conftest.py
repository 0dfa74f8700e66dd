# tests/conftest.py
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from installer.config_models import InstallOptions, InstallPaths, InstallSettings

INSTALLER_ENV_VARS = [
    "APT_OPTIONS",
    "ADDITIONAL_PACKAGES",
    "DEPLOYMENT_TYPE",
    "PUPPET_CLASSES",
    "VIRTUALENV_NEEDED",
    "TRAVIS",
    "CI",
    "ZULIP_PATH",
    "LOG_LEVEL",
    "LOCALE",
    "INSTALL_LOCALE",
    "SERVICE_USER",
    "ZULIP_SERVICE_USER",
    "PATHS",
    "SYMBOLS",
]


@pytest.fixture(autouse=True)
def clean_installer_env(monkeypatch):
    """Keep the developer's or CI runner's environment out of InstallSettings."""
    for name in INSTALLER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_paths(root: Path) -> InstallPaths:
    """InstallPaths with every fixed system path redirected under root."""
    etc = root / "etc"
    home = root / "home" / "zulip"
    log_dir = root / "var" / "log" / "zulip"
    return InstallPaths(
        zulip_conf=etc / "zulip" / "zulip.conf",
        settings_file=etc / "zulip" / "settings.py",
        ssl_key=etc / "ssl" / "private" / "zulip.key",
        ssl_cert=etc / "ssl" / "certs" / "zulip.combined-chain.crt",
        service_home=home,
        deployments_dir=home / "deployments",
        prod_static_dir=home / "prod-static",
        log_dir=log_dir,
        install_log=log_dir / "install.log",
        supervisor_socket=root / "var" / "run" / "supervisor.sock",
        meminfo=root / "proc" / "meminfo",
        nginx_marker=etc / "init.d" / "nginx",
        app_server_marker=etc / "supervisor" / "conf.d" / "zulip.conf",
        rabbitmq_marker=etc / "cron.d" / "rabbitmq-numconsumers",
        postgres_marker=etc / "init.d" / "postgresql",
        camo_marker=etc / "init.d" / "camo",
    )


@pytest.fixture
def release_tree(tmp_path) -> Path:
    tree = tmp_path / "zulip-server-1.0"
    (tree / "zproject").mkdir(parents=True)
    (tree / "zproject" / "prod_settings_template.py").write_text(
        "# Production settings\n"
        "EXTERNAL_HOST = 'zulip.example.com'\n"
        "ZULIP_ADMINISTRATOR = 'zulip-admin@example.com'\n"
        "ALLOWED_HOSTS = [EXTERNAL_HOST]\n",
        encoding="utf-8",
    )
    return tree.resolve()


@pytest.fixture
def install_settings(tmp_path, release_tree) -> InstallSettings:
    """Settings whose paths all live under tmp_path."""
    return InstallSettings(zulip_path=release_tree, paths=make_paths(tmp_path / "root"))


@pytest.fixture
def install_options() -> InstallOptions:
    return InstallOptions(
        use_certbot=False,
        external_host="chat.example.org",
        administrator_email="admin@example.org",
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)
