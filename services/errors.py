"""Error taxonomy for payload validation, transport and configuration."""

from __future__ import annotations

from typing import Iterable


class TemperatureClientError(Exception):
    """Base class for errors raised by the temperature client."""


class FormatError(TemperatureClientError, ValueError):
    """A temperature identifier does not match the schema pattern."""


class SchemaError(TemperatureClientError, ValueError):
    """A payload is missing one or more required fields."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {self.missing}")


class TransportError(TemperatureClientError, RuntimeError):
    """The MQTT transport failed to connect, publish or disconnect."""


class ConfigurationError(TemperatureClientError, ValueError):
    """Server, channel or schema configuration cannot be resolved."""
