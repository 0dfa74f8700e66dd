from unittest.mock import MagicMock

import pytest

from installer.config_models import InstallSettings
from installer.feature_detection import (
    detect_features,
    probe_app_server,
    probe_broker,
    probe_cache_proxy,
    probe_database,
    probe_reverse_proxy,
)


@pytest.mark.parametrize(
    "probe, marker",
    [
        (probe_reverse_proxy, "/etc/init.d/nginx"),
        (probe_app_server, "/etc/supervisor/conf.d/zulip.conf"),
        (probe_broker, "/etc/cron.d/rabbitmq-numconsumers"),
        (probe_database, "/etc/init.d/postgresql"),
        (probe_cache_proxy, "/etc/init.d/camo"),
    ],
)
def test_probe_checks_its_marker(probe, marker):
    settings = InstallSettings()
    assert probe(settings, path_exists=lambda p: p == marker) is True
    assert probe(settings, path_exists=lambda p: False) is False


def test_detect_features_from_markers(install_settings, mock_logger):
    present = {
        str(install_settings.paths.nginx_marker),
        str(install_settings.paths.postgres_marker),
    }

    flags = detect_features(install_settings, mock_logger, path_exists=lambda p: p in present)

    assert flags.has_proxy is True
    assert flags.has_database is True
    assert flags.has_app_server is False
    assert flags.has_broker is False
    assert flags.has_cache_proxy is False


def test_containerized_deployment_disables_everything(monkeypatch):
    monkeypatch.setenv("DEPLOYMENT_TYPE", "dockervoyager")
    path_exists = MagicMock(return_value=True)

    flags = detect_features(InstallSettings(), path_exists=path_exists)

    assert not any(flags.model_dump().values())
    path_exists.assert_not_called()
