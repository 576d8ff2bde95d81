"""Resolve broker, channel and payload schema settings from an AsyncAPI document."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlsplit

import yaml

from services.errors import ConfigurationError
from services.validation import DEFAULT_REQUIRED_FIELDS, DEFAULT_TEMPERATURE_ID_PATTERN

DEFAULT_HOST = "test.mosquitto.org"
DEFAULT_PORT = 1883
DEFAULT_SECURE_PORT = 8883
DEFAULT_PROTOCOL = "mqtt"
DEFAULT_SERVER = "dev"
DEFAULT_CHANNEL = "temperature/changed"


@dataclass(frozen=True)
class BrokerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    protocol: str = DEFAULT_PROTOCOL
    topic: str = DEFAULT_CHANNEL
    temperature_id_pattern: str = DEFAULT_TEMPERATURE_ID_PATTERN
    required_fields: Tuple[str, ...] = tuple(DEFAULT_REQUIRED_FIELDS)
    title: str = "Untitled Specification"
    version: str = "0.0.0"

    @property
    def broker_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"


def load_document(path: Path) -> Dict[str, Any]:
    """Parse a YAML or JSON AsyncAPI document."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read AsyncAPI document {path}: {exc}") from exc

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid AsyncAPI document {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigurationError(f"AsyncAPI document {path} must be a mapping.")
    return document


def _resolve_server(document: Mapping[str, Any], server: str) -> Tuple[str, int, str]:
    servers = document.get("servers")
    if not servers:
        raise ConfigurationError(
            "No servers defined in AsyncAPI document. Please define at least one server."
        )
    entry = servers.get(server)
    if not isinstance(entry, Mapping):
        available = ", ".join(sorted(servers))
        raise ConfigurationError(
            f"Server {server!r} not found in AsyncAPI document. Available servers: {available}"
        )

    protocol = str(entry.get("protocol") or DEFAULT_PROTOCOL)
    # AsyncAPI 2 uses ``url``; AsyncAPI 3 uses ``host``.
    host = str(entry.get("host") or entry.get("url") or "").strip()
    if not host:
        raise ConfigurationError(f"Server {server!r} does not define a host.")

    try:
        parsed = urlsplit(host if "://" in host else f"mqtt://{host}")
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid server URL configuration for server {server!r}: {exc}"
        ) from exc
    if not hostname:
        raise ConfigurationError(f"Invalid server URL configuration for server {server!r}.")

    if port is None:
        port = DEFAULT_PORT if protocol == "mqtt" else DEFAULT_SECURE_PORT
    return hostname, port, protocol


def _resolve_channel(
    document: Mapping[str, Any], channel: str
) -> Tuple[str, Mapping[str, Any]]:
    channels = document.get("channels")
    if not channels:
        raise ConfigurationError("No channels defined in AsyncAPI document")

    entry = channels.get(channel)
    if not isinstance(entry, Mapping):
        available = ", ".join(sorted(channels))
        raise ConfigurationError(
            f"Channel {channel!r} not found in AsyncAPI document. Available channels: {available}"
        )

    messages = entry.get("messages")
    if isinstance(messages, Mapping) and messages:
        message = next(iter(messages.values()))
    else:
        operation = entry.get("publish") or entry.get("subscribe") or {}
        message = operation.get("message")

    if not isinstance(message, Mapping):
        raise ConfigurationError(f"No messages defined for channel {channel!r}")
    topic = str(entry.get("address") or channel)
    return topic, _dereference(document, message)


def _dereference(document: Mapping[str, Any], node: Mapping[str, Any]) -> Mapping[str, Any]:
    ref = node.get("$ref")
    if not isinstance(ref, str):
        return node
    if not ref.startswith("#/"):
        raise ConfigurationError(f"Only local references are supported, got {ref!r}")

    target: Any = document
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(target, Mapping) or part not in target:
            raise ConfigurationError(f"Unresolvable reference {ref!r}")
        target = target[part]
    if not isinstance(target, Mapping):
        raise ConfigurationError(f"Reference {ref!r} does not point to an object")
    return target


def _temperature_id_pattern(document: Mapping[str, Any], properties: Mapping[str, Any]) -> str:
    prop = properties.get("temperatureId")
    if not isinstance(prop, Mapping):
        return DEFAULT_TEMPERATURE_ID_PATTERN

    schema = _dereference(document, prop)
    pattern = schema.get("pattern")
    if pattern is None:
        # A referenced wrapper object may nest the field under its own properties.
        nested = (schema.get("properties") or {}).get("temperatureId") or {}
        pattern = nested.get("pattern")
    if pattern is None:
        return DEFAULT_TEMPERATURE_ID_PATTERN

    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"Invalid temperatureId pattern {pattern!r}: {exc}") from exc
    return pattern


def resolve_broker_config(
    document: Mapping[str, Any],
    server: str = DEFAULT_SERVER,
    channel: str = DEFAULT_CHANNEL,
) -> BrokerConfig:
    host, port, protocol = _resolve_server(document, server)
    topic, message = _resolve_channel(document, channel)

    payload = message.get("payload")
    if not isinstance(payload, Mapping):
        raise ConfigurationError("No payload schema found for message")
    payload = _dereference(document, payload)

    properties = payload.get("properties") or {}
    required = payload.get("required") or list(DEFAULT_REQUIRED_FIELDS)
    info = document.get("info") or {}

    return BrokerConfig(
        host=host,
        port=port,
        protocol=protocol,
        topic=topic,
        temperature_id_pattern=_temperature_id_pattern(document, properties),
        required_fields=tuple(str(name) for name in required),
        title=str(info.get("title") or "Untitled Specification"),
        version=str(info.get("version") or "0.0.0"),
    )


def load_broker_config(
    path: Path,
    server: Optional[str] = None,
    channel: Optional[str] = None,
) -> BrokerConfig:
    document = load_document(path)
    return resolve_broker_config(
        document,
        server=server or DEFAULT_SERVER,
        channel=channel or DEFAULT_CHANNEL,
    )
