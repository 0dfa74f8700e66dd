import io

import pytest

from installer.cli_handler import (
    build_arg_parser,
    completion_report,
    parse_cli_args,
    print_failure_report,
)
from installer.config_models import InstallSettings
from installer.errors import RERUN_NOTICE, ResourceError


def test_parse_equals_style_flags():
    args = parse_cli_args(["--hostname=chat.example.org", "--email=admin@example.org", "--certbot"])
    assert args.hostname == "chat.example.org"
    assert args.email == "admin@example.org"
    assert args.certbot is True
    assert args.config is None


def test_defaults():
    args = parse_cli_args([])
    assert args.certbot is False
    assert args.hostname is None
    assert args.email is None


def test_unknown_flag_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args(["--bogus"])
    assert excinfo.value.code == 1
    assert "usage: install" in capsys.readouterr().err


def test_help_exits_with_status_0(capsys):
    with pytest.raises(SystemExit) as excinfo:
        build_arg_parser().parse_args(["--help"])
    assert excinfo.value.code == 0
    assert "--certbot" in capsys.readouterr().out


def test_failure_report_mentions_rerun_and_log():
    out = io.StringIO()
    error = ResourceError("Insufficient RAM (1000 kB).", hint="Add memory.")

    print_failure_report(error, "/var/log/zulip/install.log", stream=out)

    text = out.getvalue()
    assert "ResourceError: Insufficient RAM (1000 kB)." in text
    assert "Add memory." in text
    assert RERUN_NOTICE in text
    assert "/var/log/zulip/install.log" in text


def test_completion_report():
    report = completion_report(InstallSettings())
    assert "Installation complete!" in report
    assert "/etc/zulip/settings.py" in report
    assert "su zulip -c /home/zulip/deployments/current/scripts/setup/initialize-database" in report
