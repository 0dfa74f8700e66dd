import pytest

from installer.certificates import check_certificates_present, missing_certificate_files
from installer.errors import MissingArtifactError


def test_both_files_missing(install_settings):
    with pytest.raises(MissingArtifactError) as excinfo:
        check_certificates_present(install_settings, path_exists=lambda _p: False)

    message = excinfo.value.message
    assert message.startswith("Could not find SSL certificates!")
    assert f" - {install_settings.paths.ssl_key} is missing!" in message
    assert f" - {install_settings.paths.ssl_cert} is missing!" in message
    assert "--certbot" in excinfo.value.hint


def test_only_certificate_missing(install_settings):
    key = str(install_settings.paths.ssl_key)
    missing = missing_certificate_files(install_settings, path_exists=lambda p: p == key)
    assert missing == [install_settings.paths.ssl_cert]


def test_certificates_present(install_settings, mock_logger):
    for path in (install_settings.paths.ssl_key, install_settings.paths.ssl_cert):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("pem", encoding="utf-8")

    check_certificates_present(install_settings, mock_logger)

    mock_logger.info.assert_called_once()
