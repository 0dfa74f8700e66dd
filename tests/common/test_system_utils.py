import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from common.system_utils import (
    chown_paths,
    command_succeeds,
    read_total_memory_kb,
    restart_service,
)


def test_read_total_memory_kb(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemTotal:        2048000 kB\nMemFree:          100000 kB\n", encoding="utf-8")
    assert read_total_memory_kb(meminfo) == 2048000


def test_read_total_memory_kb_rejects_garbage(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("garbage\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_total_memory_kb(meminfo)


def test_restart_service(mocker: MockerFixture, install_settings, mock_logger):
    mock_elevated = mocker.patch("common.system_utils.run_elevated_command")

    restart_service("nginx", install_settings, current_logger=mock_logger)

    mock_elevated.assert_called_once_with(
        ["service", "nginx", "restart"], install_settings, current_logger=mock_logger
    )


def test_restart_service_propagates_failure(mocker: MockerFixture, install_settings):
    mocker.patch(
        "common.system_utils.run_elevated_command",
        side_effect=subprocess.CalledProcessError(1, ["service", "camo", "restart"]),
    )
    with pytest.raises(subprocess.CalledProcessError):
        restart_service("camo", install_settings)


def test_chown_paths_recursive(mocker: MockerFixture, install_settings):
    mock_elevated = mocker.patch("common.system_utils.run_elevated_command")

    chown_paths("zulip", ["/home/zulip", "/var/log/zulip"], install_settings, recursive=True)

    assert mock_elevated.call_args[0][0] == [
        "chown", "-R", "zulip:zulip", "/home/zulip", "/var/log/zulip",
    ]


def test_command_succeeds_reports_exit_status(mocker: MockerFixture, install_settings):
    mock_elevated = mocker.patch(
        "common.system_utils.run_elevated_command",
        side_effect=[MagicMock(returncode=0), MagicMock(returncode=2)],
    )

    assert command_succeeds(["rabbitmqctl", "status"], install_settings) is True
    assert command_succeeds(["rabbitmqctl", "status"], install_settings) is False
    _, kwargs = mock_elevated.call_args
    assert kwargs["check"] is False
    assert kwargs["capture_output"] is True


def test_command_succeeds_missing_tool(mocker: MockerFixture, install_settings):
    mocker.patch("common.system_utils.run_elevated_command", side_effect=FileNotFoundError)
    assert command_succeeds(["rabbitmqctl", "status"], install_settings) is False
