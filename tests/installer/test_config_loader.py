from pathlib import Path

import pytest

from installer.config_loader import _deep_update, load_install_settings, read_yaml_overrides
from installer.errors import ConfigurationError


def test_deep_update_merges_nested_dicts():
    source = {"a": 1, "nested": {"x": 1, "y": 2}, "keep": "v"}
    result = _deep_update(source, {"nested": {"y": 3}, "keep": None, "new": None})
    assert result == {"a": 1, "nested": {"x": 1, "y": 3}, "keep": "v", "new": None}


def test_missing_file_uses_env_and_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("DEPLOYMENT_TYPE", "dockervoyager")

    settings = load_install_settings(tmp_path / "absent.yaml")

    assert settings.deployment_type == "dockervoyager"
    assert read_yaml_overrides(tmp_path / "absent.yaml") == {}


def test_yaml_overrides_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DEPLOYMENT_TYPE", "voyager")
    monkeypatch.setenv("ADDITIONAL_PACKAGES", "htop")
    config_file = tmp_path / "install.yaml"
    config_file.write_text(
        "deployment_type: dockervoyager\n"
        "ci: true\n"
        "paths:\n"
        f"  zulip_conf: {tmp_path / 'zulip.conf'}\n",
        encoding="utf-8",
    )

    settings = load_install_settings(config_file)

    assert settings.deployment_type == "dockervoyager"
    assert settings.ci is True
    assert settings.additional_package_list == ["htop"]
    assert settings.paths.zulip_conf == tmp_path / "zulip.conf"
    assert settings.paths.settings_file == Path("/etc/zulip/settings.py")


def test_empty_yaml_file(tmp_path):
    config_file = tmp_path / "install.yaml"
    config_file.write_text("", encoding="utf-8")
    assert load_install_settings(config_file).deployment_type == "voyager"


@pytest.mark.parametrize(
    "content",
    ["deployment_type: [unclosed\n", "- just\n- a list\n", "puppet_classes: ''\n"],
)
def test_invalid_yaml_is_configuration_error(tmp_path, content):
    config_file = tmp_path / "install.yaml"
    config_file.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_install_settings(config_file)


def test_invalid_environment_is_configuration_error(monkeypatch, tmp_path):
    monkeypatch.setenv("PUPPET_CLASSES", ",")
    with pytest.raises(ConfigurationError):
        load_install_settings(tmp_path / "absent.yaml")


def test_missing_release_tree_is_configuration_error(monkeypatch, tmp_path):
    monkeypatch.setenv("ZULIP_PATH", str(tmp_path / "no-such-release"))
    with pytest.raises(ConfigurationError, match="release tree"):
        load_install_settings(tmp_path / "absent.yaml")
