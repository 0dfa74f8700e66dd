import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from installer.errors import ConfigurationError, DependencyError, ResourceError
from installer.preflight import (
    check_memory,
    check_root,
    ensure_host_utilities,
    run_preflight,
    validate_options,
)


def test_validate_options_certbot_without_hostname():
    with pytest.raises(ConfigurationError, match="--certbot requires both --hostname and --email") as excinfo:
        validate_options(True, None, "admin@example.org")
    assert "Usage:" in excinfo.value.hint


def test_validate_options_without_certbot_allows_missing_values():
    options = validate_options(False, None, None)
    assert options.external_host is None
    assert options.use_certbot is False


def test_check_memory_rejects_small_hosts(install_settings, mock_logger):
    with pytest.raises(ResourceError, match="Zulip requires at least 2GB of RAM"):
        check_memory(install_settings, mock_logger, read_memory=lambda _path: 1899999)


def test_check_memory_reads_meminfo(install_settings, mock_logger):
    meminfo = install_settings.paths.meminfo
    meminfo.parent.mkdir(parents=True)
    meminfo.write_text("MemTotal:        4015424 kB\n", encoding="utf-8")

    assert check_memory(install_settings, mock_logger) == 4015424


def test_check_memory_unreadable_meminfo(install_settings, mock_logger):
    with pytest.raises(ResourceError, match="Could not determine available memory"):
        check_memory(install_settings, mock_logger)


def test_check_root(mocker: MockerFixture):
    mocker.patch("installer.preflight.is_running_as_root", return_value=False)
    with pytest.raises(ConfigurationError, match="must be run as root"):
        check_root()


def test_missing_apt_get_is_dependency_error(mocker: MockerFixture, install_settings):
    mock_apt_cls = mocker.patch("installer.preflight.AptManager")
    with pytest.raises(DependencyError, match="apt-get"):
        ensure_host_utilities(install_settings, exists=lambda name: name != "apt-get")
    mock_apt_cls.assert_not_called()


def test_all_utilities_present(mocker: MockerFixture, install_settings):
    mock_apt_cls = mocker.patch("installer.preflight.AptManager")
    assert ensure_host_utilities(install_settings, exists=lambda _name: True) == []
    mock_apt_cls.assert_not_called()


def test_missing_utilities_are_installed(mocker: MockerFixture, install_settings, mock_logger):
    mock_apt = MagicMock()
    mocker.patch("installer.preflight.AptManager", return_value=mock_apt)
    present = {"apt-get", "lsb_release", "crudini"}

    installed = ensure_host_utilities(install_settings, mock_logger, exists=lambda name: name in present)

    assert installed == ["curl", "gnupg"]
    mock_apt.install.assert_called_once_with(["curl", "gnupg"], update_first=True)


def test_utility_install_failure(mocker: MockerFixture, install_settings):
    mock_apt = MagicMock()
    mock_apt.install.side_effect = subprocess.CalledProcessError(100, "apt-get")
    mocker.patch("installer.preflight.AptManager", return_value=mock_apt)

    with pytest.raises(DependencyError):
        ensure_host_utilities(install_settings, exists=lambda name: name == "apt-get")


def test_run_preflight_order(mocker: MockerFixture, install_settings):
    manager = MagicMock()
    mocker.patch("installer.preflight.check_memory", manager.check_memory)
    mocker.patch("installer.preflight.check_root", manager.check_root)
    mocker.patch("installer.preflight.ensure_host_utilities", manager.ensure_host_utilities)

    run_preflight(install_settings)

    assert [c[0] for c in manager.mock_calls] == ["check_memory", "check_root", "ensure_host_utilities"]
