# configure/deployment_configurator.py
# -*- coding: utf-8 -*-
"""
Finalizes the deployment directory layout.

The unpacked release tree is moved into a freshly allocated, uniquely
named directory under /home/zulip/deployments. The ``next`` and
``current`` symlinks are pointed at it, and the original location is
left as a symlink to ``next`` so paths printed earlier in the run keep
working.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional

from common.command_utils import get_symbols, log_installer, run_elevated_command
from common.file_utils import atomic_symlink, merge_copy_tree
from common.system_utils import chown_paths
from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import ExternalToolError
from installer.helpers import run_helper

module_logger = logging.getLogger(__name__)


def allocate_deploy_path(
    install_settings: InstallSettings, current_logger: Optional[logging.Logger] = None
) -> Path:
    """
    Ask the release's path allocator for a new, unused deployment directory.

    Raises:
        ExternalToolError: if the helper fails, prints nothing, or returns a
            path that already exists.
    """
    result = run_helper(
        install_settings,
        static_config.ZULIP_TOOLS_SCRIPT,
        args=["make_deploy_path"],
        description="Deployment path allocation",
        capture_output=True,
        current_logger=current_logger,
    )
    lines = [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]
    if not lines:
        raise ExternalToolError("Deployment path allocation printed no path.")
    deploy_path = Path(lines[-1])
    if os.path.lexists(deploy_path):
        raise ExternalToolError(
            f"Deployment path allocation returned {deploy_path}, which already exists.",
            hint="Remove the stale directory or wait a second and re-run the installer.",
        )
    return deploy_path


def build_static_assets(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Run the static asset pipeline as the service account."""
    logger_to_use = current_logger if current_logger else module_logger
    current_link = Path(install_settings.paths.deployments_dir) / "current"
    build_command = f"{current_link / static_config.UPDATE_PROD_STATIC_SCRIPT} --authors-not-required"
    try:
        run_elevated_command(
            ["su", install_settings.service_user, "-c", build_command],
            install_settings,
            current_logger=logger_to_use,
        )
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(
            f"Building static assets failed with status {e.returncode}.",
            hint="The asset pipeline needs Node.js and network access to the npm registry.",
            returncode=e.returncode,
        ) from e


def finalize_deployment(
    install_settings: InstallSettings,
    current_logger: Optional[logging.Logger] = None,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> Path:
    """
    Move the release tree into a new deployment directory and activate it.

    Returns:
        The new deployment path.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    paths = install_settings.paths
    release_tree = Path(install_settings.zulip_path)
    deployments_dir = Path(paths.deployments_dir)
    next_link = deployments_dir / "next"
    current_link = deployments_dir / "current"

    deploy_path = allocate_deploy_path(install_settings, current_logger=logger_to_use)
    log_installer(
        f"{symbols.get('rocket', '🚀')} Moving {release_tree} to {deploy_path}",
        "info",
        logger_to_use,
        install_settings,
    )
    deploy_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(release_tree), str(deploy_path))

    atomic_symlink(next_link, release_tree, install_settings, current_logger=logger_to_use)
    atomic_symlink(deploy_path, next_link, install_settings, current_logger=logger_to_use)
    atomic_symlink(deploy_path, current_link, install_settings, current_logger=logger_to_use)
    atomic_symlink(
        paths.settings_file,
        deploy_path / static_config.SETTINGS_LINK,
        install_settings,
        current_logger=logger_to_use,
    )

    serve_dir = deploy_path / static_config.PROD_STATIC_SERVE_DIR
    serve_dir.mkdir(parents=True, exist_ok=True)
    merge_copy_tree(serve_dir, paths.prod_static_dir, install_settings, current_logger=logger_to_use)

    chown_paths(
        install_settings.service_user,
        [paths.service_home, paths.log_dir, paths.settings_file],
        install_settings,
        recursive=True,
        current_logger=logger_to_use,
    )

    # Release tarballs ship prebuilt assets; a git checkout does not.
    if not path_exists(str(Path(paths.prod_static_dir) / "generated")):
        build_static_assets(install_settings, current_logger=logger_to_use)

    log_installer(
        f"{symbols.get('success', '✅')} Deployment {deploy_path} is now current.",
        "success",
        logger_to_use,
        install_settings,
    )
    return deploy_path
