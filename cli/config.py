from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from services.asyncapi import BrokerConfig, load_broker_config
from settings import Settings, get_settings

SAMPLE_TEMPERATURE = 22.5


@dataclass(frozen=True)
class CLIConfig:
    broker: BrokerConfig
    keepalive: int
    max_attempts: int
    wait_timeout: float
    interval: float


def load_config(
    host: Optional[str] = None,
    port: Optional[int] = None,
    asyncapi: Optional[Path] = None,
    server: Optional[str] = None,
    retries: Optional[int] = None,
    interval: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> CLIConfig:
    """Merge flags over the AsyncAPI document over environment settings."""
    settings = settings or get_settings()

    document = asyncapi
    if document is None and settings.asyncapi_document:
        document = Path(settings.asyncapi_document)

    if document is not None:
        broker = load_broker_config(document, server=server or settings.asyncapi_server)
    else:
        broker = BrokerConfig(
            host=settings.broker_host,
            port=settings.broker_port,
            topic=settings.topic,
        )

    if host:
        broker = replace(broker, host=host)
    if port is not None:
        broker = replace(broker, port=port)

    return CLIConfig(
        broker=broker,
        keepalive=settings.keepalive,
        max_attempts=retries if retries is not None else settings.max_attempts,
        wait_timeout=settings.wait_timeout,
        interval=interval if interval is not None else settings.simulation_interval,
    )
