from __future__ import annotations

import pytest

from settings import get_settings

_ENV_NAMES = (
    "MQTT_BROKER_HOST",
    "MQTT_BROKER_PORT",
    "MQTT_TOPIC",
    "MQTT_KEEPALIVE",
    "PUBLISH_MAX_ATTEMPTS",
    "PUBLISH_WAIT_TIMEOUT",
    "SIMULATION_INTERVAL",
    "ASYNCAPI_DOCUMENT",
    "ASYNCAPI_SERVER",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_environment() -> None:
    settings = get_settings()

    assert settings.broker_host == "test.mosquitto.org"
    assert settings.broker_port == 1883
    assert settings.topic == "temperature/changed"
    assert settings.keepalive == 60
    assert settings.max_attempts == 3
    assert settings.wait_timeout == 5.0
    assert settings.asyncapi_document is None
    assert settings.asyncapi_server == "dev"
    assert settings.log_level == "INFO"
    assert settings.log_file == "temperature_client.log"


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    document = tmp_path / "asyncapi.yml"
    monkeypatch.setenv("MQTT_BROKER_HOST", "broker.internal")
    monkeypatch.setenv("MQTT_BROKER_PORT", "1884")
    monkeypatch.setenv("PUBLISH_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("PUBLISH_WAIT_TIMEOUT", "0.25")
    monkeypatch.setenv("ASYNCAPI_DOCUMENT", str(document))
    monkeypatch.setenv("ASYNCAPI_SERVER", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FILE", "   ")

    settings = get_settings()

    assert settings.broker_host == "broker.internal"
    assert settings.broker_port == 1884
    assert settings.max_attempts == 5
    assert settings.wait_timeout == 0.25
    assert settings.asyncapi_document == str(document)
    assert settings.asyncapi_server == "production"
    assert settings.log_level == "DEBUG"
    assert settings.log_file is None


@pytest.mark.parametrize("raw", ["zero", "0", "-2", ""])
def test_invalid_numbers_fall_back_to_defaults(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("MQTT_BROKER_PORT", raw)
    monkeypatch.setenv("PUBLISH_WAIT_TIMEOUT", raw)

    settings = get_settings()

    assert settings.broker_port == 1883
    assert settings.wait_timeout == 5.0
