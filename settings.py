from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_HOST_ENV = "MQTT_BROKER_HOST"
_PORT_ENV = "MQTT_BROKER_PORT"
_TOPIC_ENV = "MQTT_TOPIC"
_KEEPALIVE_ENV = "MQTT_KEEPALIVE"
_MAX_ATTEMPTS_ENV = "PUBLISH_MAX_ATTEMPTS"
_WAIT_TIMEOUT_ENV = "PUBLISH_WAIT_TIMEOUT"
_INTERVAL_ENV = "SIMULATION_INTERVAL"
_DOCUMENT_ENV = "ASYNCAPI_DOCUMENT"
_SERVER_ENV = "ASYNCAPI_SERVER"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_LOG_FILE_ENV = "LOG_FILE"


@dataclass(frozen=True)
class Settings:
    broker_host: str
    broker_port: int
    topic: str
    keepalive: int
    max_attempts: int
    wait_timeout: float
    simulation_interval: float
    asyncapi_document: Optional[str]
    asyncapi_server: str
    log_level: str
    log_file: Optional[str]


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        broker_host=_read_str_env(_HOST_ENV, "test.mosquitto.org"),
        broker_port=_read_positive_int(_PORT_ENV, 1883),
        topic=_read_str_env(_TOPIC_ENV, "temperature/changed"),
        keepalive=_read_positive_int(_KEEPALIVE_ENV, 60),
        max_attempts=_read_positive_int(_MAX_ATTEMPTS_ENV, 3),
        wait_timeout=_read_positive_float(_WAIT_TIMEOUT_ENV, 5.0),
        simulation_interval=_read_positive_float(_INTERVAL_ENV, 5.0),
        asyncapi_document=_read_optional_env(_DOCUMENT_ENV, None),
        asyncapi_server=_read_str_env(_SERVER_ENV, "dev"),
        log_level=_read_log_level("INFO"),
        log_file=_read_optional_env(_LOG_FILE_ENV, "temperature_client.log"),
    )
