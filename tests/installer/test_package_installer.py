import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from installer import config as static_config
from installer.config_models import InstallSettings
from installer.errors import ExternalToolError
from installer.package_installer import (
    apply_init_system_shim,
    base_package_list,
    install_system_packages,
    setup_package_sources,
    upgrade_system_packages,
)
from installer.python_env_installer import create_production_venv


def test_helper_backed_stages(mocker: MockerFixture, install_settings):
    mock_run_helper = mocker.patch("installer.package_installer.run_helper")

    setup_package_sources(install_settings)
    apply_init_system_shim(install_settings)

    scripts = [c.args[1] for c in mock_run_helper.call_args_list]
    assert scripts == [static_config.SETUP_APT_REPO_SCRIPT, static_config.CHECK_UPSTART_SCRIPT]


def test_create_production_venv_passes_release_tree(mocker: MockerFixture, install_settings):
    mock_run_helper = mocker.patch("installer.python_env_installer.run_helper")

    create_production_venv(install_settings)

    assert mock_run_helper.call_args.args[1] == static_config.CREATE_VENV_SCRIPT
    assert mock_run_helper.call_args.kwargs["args"] == [str(install_settings.zulip_path)]


def test_base_package_list_appends_extras_once(monkeypatch):
    monkeypatch.setenv("ADDITIONAL_PACKAGES", "htop git")
    assert base_package_list(InstallSettings()) == [
        "puppet", "git", "python", "python3", "crudini", "htop",
    ]


def test_install_system_packages_upgrades_first(mocker: MockerFixture, install_settings):
    mock_apt = MagicMock()
    mocker.patch("installer.package_installer.AptManager", return_value=mock_apt)

    install_system_packages(install_settings)

    assert [c[0] for c in mock_apt.mock_calls] == ["dist_upgrade", "install"]
    mock_apt.install.assert_called_once_with(static_config.BASE_PACKAGES)


def test_install_system_packages_failure(mocker: MockerFixture, install_settings):
    mock_apt = MagicMock()
    mock_apt.dist_upgrade.side_effect = subprocess.CalledProcessError(100, "apt-get")
    mocker.patch("installer.package_installer.AptManager", return_value=mock_apt)

    with pytest.raises(ExternalToolError) as excinfo:
        install_system_packages(install_settings)

    assert excinfo.value.returncode == 100
    mock_apt.install.assert_not_called()


def test_upgrade_system_packages(mocker: MockerFixture, install_settings):
    mock_apt = MagicMock()
    mocker.patch("installer.package_installer.AptManager", return_value=mock_apt)

    upgrade_system_packages(install_settings)

    mock_apt.upgrade.assert_called_once_with()
