# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from common.command_utils import (
    command_exists,
    run_command,
    run_elevated_command,
)
from installer.config_models import InstallSettings


class AptManager:
    """
    A centralized manager for Debian apt packages using the command-line tools.

    Every mutating call raises subprocess.CalledProcessError on failure;
    callers decide how fatal that is.
    """

    def __init__(
        self,
        install_settings: InstallSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the AptManager.
        Args:
            install_settings: Installer settings; supplies the extra apt options.
            logger: An optional logging object.
        """
        self.install_settings = install_settings
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    @staticmethod
    def _noninteractive_env() -> Dict[str, str]:
        return dict(os.environ, DEBIAN_FRONTEND="noninteractive")

    def _apt_get(self, args: Sequence[str]) -> None:
        cmd = ["apt-get", "-y", *args, *self.install_settings.apt_option_list]
        run_elevated_command(
            cmd,
            self.install_settings,
            current_logger=self.logger,
            env=self._noninteractive_env(),
        )

    def update(self) -> None:
        """Refreshes the package index via 'apt-get update'."""
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        self._apt_get(["update"])
        self.logger.info("Apt package lists updated successfully.")

    def dist_upgrade(self) -> None:
        """Upgrades every package, allowing dependency changes."""
        self.logger.info("Upgrading all packages via 'apt-get dist-upgrade'...")
        self._apt_get(["dist-upgrade"])
        self.logger.info("Packages upgraded successfully.")

    def upgrade(self) -> None:
        """Upgrades installed packages without adding or removing any."""
        self.logger.info("Upgrading packages via 'apt-get upgrade'...")
        self._apt_get(["upgrade"])
        self.logger.info("Packages upgraded successfully.")

    def is_installed(self, package_name: str) -> bool:
        """
        Reports whether a package is installed according to 'apt-cache policy'.

        A package apt has never heard of counts as not installed.
        """
        result = run_command(
            ["apt-cache", "policy", package_name],
            self.install_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
        )
        if result.returncode != 0:
            return False
        for line in (result.stdout or "").splitlines():
            stripped = line.strip()
            if stripped.startswith("Installed:"):
                return stripped.split(":", 1)[1].strip() != "(none)"
        return False

    def install(
        self,
        packages: Union[List[str], str],
        update_first: bool = False,
    ) -> List[str]:
        """
        Installs packages using 'apt-get install', skipping ones dpkg already
        reports as installed.

        Args:
            packages: A single package name or a list of package names.
            update_first: Whether to update the package lists before installing.

        Returns:
            The packages that were actually handed to apt-get.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            self.update()

        packages_to_install = []
        for pkg_name in packages:
            try:
                result = run_command(
                    ["dpkg-query", "-W", "-f=${db:Status-Status}", pkg_name],
                    self.install_settings,
                    capture_output=True,
                    check=True,
                    current_logger=self.logger,
                )
                if (result.stdout or "").strip() == "installed":
                    self.logger.info(
                        f"Package '{pkg_name}' is already installed. Skipping."
                    )
                else:
                    packages_to_install.append(pkg_name)
            except subprocess.CalledProcessError:
                self.logger.info(f"Marking package for installation: {pkg_name}")
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return []

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        self._apt_get(["install", *packages_to_install])
        self.logger.info("Packages installed successfully.")
        return packages_to_install
