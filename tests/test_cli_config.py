from __future__ import annotations

from dataclasses import replace

import pytest

from cli.config import load_config
from services.errors import ConfigurationError
from settings import Settings


def _settings(**overrides) -> Settings:
    base = Settings(
        broker_host="env.local",
        broker_port=1885,
        topic="env/topic",
        keepalive=45,
        max_attempts=4,
        wait_timeout=2.0,
        simulation_interval=7.0,
        asyncapi_document=None,
        asyncapi_server="dev",
        log_level="INFO",
        log_file=None,
    )
    return replace(base, **overrides)


def test_environment_settings_used_without_document() -> None:
    config = load_config(settings=_settings())

    assert config.broker.host == "env.local"
    assert config.broker.port == 1885
    assert config.broker.topic == "env/topic"
    assert config.keepalive == 45
    assert config.max_attempts == 4
    assert config.wait_timeout == 2.0
    assert config.interval == 7.0


def test_document_from_environment_overrides_settings(fixtures_dir) -> None:
    settings = _settings(
        asyncapi_document=str(fixtures_dir / "asyncapi.yml"),
        asyncapi_server="production",
    )

    config = load_config(settings=settings)

    assert config.broker.host == "broker.example.com"
    assert config.broker.topic == "temperature/changed"
    assert config.broker.title == "Temperature Service"


def test_flags_override_document(fixtures_dir) -> None:
    config = load_config(
        host="flag.local",
        port=2883,
        asyncapi=fixtures_dir / "asyncapi.yml",
        retries=1,
        interval=0,
        settings=_settings(),
    )

    assert config.broker.host == "flag.local"
    assert config.broker.port == 2883
    assert config.broker.protocol == "mqtt"
    assert config.max_attempts == 1
    assert config.interval == 0


def test_unknown_server_raises(fixtures_dir) -> None:
    with pytest.raises(ConfigurationError):
        load_config(asyncapi=fixtures_dir / "asyncapi.yml", server="staging", settings=_settings())
