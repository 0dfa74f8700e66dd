# tests/test_apt_manager.py
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from common.debian.apt_manager import AptManager
from installer.config_models import InstallSettings

POLICY_INSTALLED = """rabbitmq-server:
  Installed: 3.8.2-0ubuntu1
  Candidate: 3.8.2-0ubuntu1
"""

POLICY_NOT_INSTALLED = """rabbitmq-server:
  Installed: (none)
  Candidate: 3.8.2-0ubuntu1
"""


@pytest.fixture
def apt_manager():
    """Fixture to initialize AptManager with mocked dependencies."""
    mock_logger = MagicMock()
    settings = InstallSettings(apt_options="-o Dpkg::Options::=--force-confold")
    with (
        patch(
            "common.debian.apt_manager.run_elevated_command"
        ) as mock_run_elevated,
        patch("common.debian.apt_manager.run_command") as mock_run_cmd,
        patch("common.debian.apt_manager.command_exists", return_value=True),
    ):
        manager = AptManager(settings, logger=mock_logger)
        yield manager, mock_logger, mock_run_elevated, mock_run_cmd, settings


def test_requires_apt_get():
    with patch("common.debian.apt_manager.command_exists", return_value=False):
        with pytest.raises(FileNotFoundError):
            AptManager(InstallSettings())


def test_install_new_package(apt_manager):
    """Test installation of a new package."""
    manager, logger, mock_run_elevated, mock_run_cmd, settings = apt_manager
    mock_run_cmd.side_effect = subprocess.CalledProcessError(1, "dpkg-query")

    installed = manager.install(["pkg1"], update_first=False)

    assert installed == ["pkg1"]
    logger.info.assert_any_call("Marking package for installation: pkg1")
    logger.info.assert_any_call("Committing installation for: pkg1")
    args, kwargs = mock_run_elevated.call_args
    assert args[0] == [
        "apt-get", "-y", "install", "pkg1", "-o", "Dpkg::Options::=--force-confold",
    ]
    assert args[1] is settings
    assert kwargs["env"]["DEBIAN_FRONTEND"] == "noninteractive"


def test_install_already_installed(apt_manager):
    """Test installation of an already installed package."""
    manager, logger, mock_run_elevated, mock_run_cmd, _ = apt_manager
    mock_run_cmd.return_value = MagicMock(stdout="installed")

    assert manager.install(["pkg1"]) == []

    logger.info.assert_any_call("Package 'pkg1' is already installed. Skipping.")
    mock_run_elevated.assert_not_called()


def test_install_update_first(apt_manager):
    manager, _, mock_run_elevated, mock_run_cmd, _ = apt_manager
    mock_run_cmd.return_value = MagicMock(stdout="not-installed")

    manager.install("curl", update_first=True)

    commands = [call.args[0] for call in mock_run_elevated.call_args_list]
    assert commands[0][:3] == ["apt-get", "-y", "update"]
    assert commands[1][:4] == ["apt-get", "-y", "install", "curl"]


def test_install_failure_propagates(apt_manager):
    manager, _, mock_run_elevated, mock_run_cmd, _ = apt_manager
    mock_run_cmd.return_value = MagicMock(stdout="")
    mock_run_elevated.side_effect = subprocess.CalledProcessError(100, "apt-get")

    with pytest.raises(subprocess.CalledProcessError):
        manager.install(["pkg1"])


@pytest.mark.parametrize(
    "method, verb",
    [("update", "update"), ("dist_upgrade", "dist-upgrade"), ("upgrade", "upgrade")],
)
def test_upgrade_commands(apt_manager, method, verb):
    manager, _, mock_run_elevated, _, _ = apt_manager

    getattr(manager, method)()

    assert mock_run_elevated.call_args.args[0] == [
        "apt-get", "-y", verb, "-o", "Dpkg::Options::=--force-confold",
    ]


@pytest.mark.parametrize(
    "returncode, stdout, expected",
    [
        (0, POLICY_INSTALLED, True),
        (0, POLICY_NOT_INSTALLED, False),
        (0, "", False),
        (100, "", False),
    ],
)
def test_is_installed(apt_manager, returncode, stdout, expected):
    manager, _, _, mock_run_cmd, _ = apt_manager
    mock_run_cmd.return_value = MagicMock(returncode=returncode, stdout=stdout)

    assert manager.is_installed("rabbitmq-server") is expected
    assert mock_run_cmd.call_args.args[0] == ["apt-cache", "policy", "rabbitmq-server"]
