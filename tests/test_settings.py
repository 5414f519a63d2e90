from __future__ import annotations

import pytest

from huddle_backend.errors import ConfigurationError
from huddle_backend.settings import AppSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("APP_ID", "APP_CERTIFICATE", "PORT", "HUDDLE_CONFIG_FILE", "HUDDLE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.port == 8080
    assert settings.cors_origins == ["*"]
    assert settings.default_token_expiry_seconds == 3600
    assert settings.log_level == "INFO"


def test_credentials_and_port_read_unprefixed(monkeypatch) -> None:
    monkeypatch.setenv("APP_ID", "abc")
    monkeypatch.setenv("APP_CERTIFICATE", "s3cret")
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("HUDDLE_LOG_LEVEL", "debug")

    settings = AppSettings()

    assert settings.app_id == "abc"
    assert settings.app_certificate == "s3cret"
    assert settings.port == 9090
    assert settings.log_level == "DEBUG"
    settings.require_credentials()


def test_yaml_file_is_lowest_priority(monkeypatch, tmp_path) -> None:
    config = tmp_path / "huddle.yaml"
    config.write_text("app_id: from-yaml\napp_certificate: yaml-cert\ndefault_token_expiry_seconds: 60\n")
    monkeypatch.setenv("HUDDLE_CONFIG_FILE", str(config))
    monkeypatch.setenv("APP_ID", "from-env")

    settings = AppSettings()

    assert settings.app_id == "from-env"
    assert settings.app_certificate == "yaml-cert"
    assert settings.default_token_expiry_seconds == 60


def test_yaml_must_be_a_mapping(monkeypatch, tmp_path) -> None:
    config = tmp_path / "huddle.yaml"
    config.write_text("- just\n- a list\n")
    monkeypatch.setenv("HUDDLE_CONFIG_FILE", str(config))

    with pytest.raises(ConfigurationError):
        AppSettings()


def test_require_credentials() -> None:
    with pytest.raises(ConfigurationError, match="APP_ID and APP_CERTIFICATE"):
        AppSettings().require_credentials()
    with pytest.raises(ConfigurationError):
        AppSettings(app_id="abc").require_credentials()
