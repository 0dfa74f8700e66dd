# installer/config.py
"""
Centralized constants and default values for the production installer.

This module defines fixed system paths, marker files used for feature
detection, package lists for apt installation and the helper scripts that
ship inside the release tree.
"""

from pathlib import Path
from typing import Dict, List, Tuple

# --- Default Environment Values (overridable via env/YAML) ---
DEPLOYMENT_TYPE_DEFAULT: str = "voyager"
# Deployment type whose services are managed by an external orchestrator.
CONTAINERIZED_DEPLOYMENT_TYPE: str = "dockervoyager"
PUPPET_CLASSES_DEFAULT: str = "zulip::voyager"
# Manifest classes that put an nginx TLS terminator on this host.
TLS_PROXY_PUPPET_CLASSES: Tuple[str, ...] = ("zulip::voyager",)
LOCALE_DEFAULT: str = "en_US.UTF-8"
SERVICE_USER_DEFAULT: str = "zulip"
LOG_PREFIX_DEFAULT: str = "[ZULIP-INSTALL]"

# --- Resource Requirements ---
# ~1.9GB; below this pip and puppet fail in confusing ways.
MIN_MEMORY_KB: int = 1900000

# --- Fixed System Paths ---
ZULIP_CONF_DIR: Path = Path("/etc/zulip")
ZULIP_CONF_PATH: Path = ZULIP_CONF_DIR / "zulip.conf"
SETTINGS_PATH: Path = ZULIP_CONF_DIR / "settings.py"
INSTALL_CONFIG_PATH: Path = ZULIP_CONF_DIR / "install.yaml"
SSL_KEY_PATH: Path = Path("/etc/ssl/private/zulip.key")
SSL_CERT_PATH: Path = Path("/etc/ssl/certs/zulip.combined-chain.crt")
SERVICE_HOME: Path = Path("/home/zulip")
DEPLOYMENTS_DIR: Path = SERVICE_HOME / "deployments"
PROD_STATIC_DIR: Path = SERVICE_HOME / "prod-static"
LOG_DIR: Path = Path("/var/log/zulip")
INSTALL_LOG_PATH: Path = LOG_DIR / "install.log"
SUPERVISOR_SOCKET_PATH: Path = Path("/var/run/supervisor.sock")
MEMINFO_PATH: Path = Path("/proc/meminfo")

# --- Feature Marker Paths (present once puppet installed the subsystem) ---
NGINX_MARKER: Path = Path("/etc/init.d/nginx")
APP_SERVER_MARKER: Path = Path("/etc/supervisor/conf.d/zulip.conf")
RABBITMQ_MARKER: Path = Path("/etc/cron.d/rabbitmq-numconsumers")
POSTGRES_MARKER: Path = Path("/etc/init.d/postgresql")
CAMO_MARKER: Path = Path("/etc/init.d/camo")

# --- Helper scripts, relative to the release tree ---
SETUP_APT_REPO_SCRIPT: str = "scripts/lib/setup-apt-repo"
CHECK_UPSTART_SCRIPT: str = "scripts/lib/check-upstart"
SETUP_CERTBOT_SCRIPT: str = "scripts/setup/setup-certbot"
CREATE_VENV_SCRIPT: str = "scripts/lib/create-production-venv"
INSTALL_NODE_SCRIPT: str = "scripts/lib/install-node"
PUPPET_APPLY_SCRIPT: str = "scripts/zulip-puppet-apply"
GENERATE_SECRETS_SCRIPT: str = "scripts/setup/generate_secrets.py"
CONFIGURE_RABBITMQ_SCRIPT: str = "scripts/setup/configure-rabbitmq"
POSTGRES_INIT_DB_SCRIPT: str = "scripts/setup/postgres-init-db"
ZULIP_TOOLS_SCRIPT: str = "scripts/lib/zulip_tools.py"
UPDATE_PROD_STATIC_SCRIPT: str = "tools/update-prod-static"
INITIALIZE_DATABASE_SCRIPT: str = "scripts/setup/initialize-database"

SETTINGS_TEMPLATE: str = "zproject/prod_settings_template.py"
SETTINGS_LINK: str = "zproject/prod_settings.py"
PROD_STATIC_SERVE_DIR: str = "prod-static/serve"

# --- Package Lists (for apt installation) ---
BASE_PACKAGES: List[str] = [
    "puppet",
    "git",
    "python",
    "python3",
    "crudini",
]

# Utilities the helper scripts assume; installed on the fly when missing.
# Maps command name -> Debian package providing it.
REQUIRED_HOST_UTILITIES: Dict[str, str] = {
    "lsb_release": "lsb-release",
    "curl": "curl",
    "gpg": "gnupg",
    "crudini": "crudini",
}

RABBITMQ_PACKAGE: str = "rabbitmq-server"
RABBITMQ_NODENAME: str = "zulip@localhost"

INSTALL_DOCS_URL: str = "https://zulip.readthedocs.io/en/latest/prod-install.html"
RABBITMQ_HOSTS_ISSUE_URL: str = "https://github.com/zulip/zulip/issues/53"
