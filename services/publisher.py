"""Bounded-retry publishing of temperature readings."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from models.messages import TemperatureMessage
from services.asyncapi import BrokerConfig
from services.session import ConnectionSession
from services.validation import PayloadValidator, generate_temperature_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_WAIT_TIMEOUT = 5.0


class TemperatureClient:
    """Publishes one reading per call, retrying transient transport failures."""

    def __init__(
        self,
        session: ConnectionSession,
        validator: Optional[PayloadValidator] = None,
        wait_timeout: float = DEFAULT_WAIT_TIMEOUT,
        id_factory: Callable[[], str] = generate_temperature_id,
    ) -> None:
        self.session = session
        self.validator = validator or PayloadValidator()
        self.wait_timeout = wait_timeout
        self._id_factory = id_factory

    @property
    def topic(self) -> str:
        return self.session.topic

    def _create_payload(self, temp_id: str, value: Union[int, float]) -> TemperatureMessage:
        return self.validator.create_payload(temp_id, value)

    def publish_temperature(
        self, value: Union[int, float], retries: int = DEFAULT_MAX_ATTEMPTS
    ) -> bool:
        """Publish ``value`` and return whether the broker acknowledged it.

        Validation errors propagate immediately. Transport failures are logged
        and retried up to ``retries`` attempts in total.
        """
        if retries < 1:
            raise ValueError("retries must be at least 1")

        for attempt in range(1, retries + 1):
            payload = self._create_payload(self._id_factory(), value)
            context = {
                "attempt": attempt,
                "max_attempts": retries,
                "temperature_id": payload.temperature_id,
                "value": payload.value,
            }
            try:
                logger.info("Publishing temperature reading", extra=context)
                self.session.connect()
                if not self.session.wait_connected(self.wait_timeout):
                    logger.warning("Broker connection not established", extra=context)
                    continue

                self.session.publish(payload)
                if self.session.wait_published(self.wait_timeout):
                    logger.info("Temperature reading published", extra=context)
                    return True
                logger.warning("Publish was not acknowledged", extra=context)
            except Exception as exc:  # noqa: BLE001 - any attempt failure is retried
                logger.error("Attempt failed: %s", exc, extra=context)
            finally:
                self.session.reset()

        logger.error(
            "Failed to publish temperature after %d attempts",
            retries,
            extra={"value": value, "topic": self.topic},
        )
        return False


def build_temperature_client(
    config: BrokerConfig,
    keepalive: int = 60,
    wait_timeout: float = DEFAULT_WAIT_TIMEOUT,
    client_factory=None,
) -> TemperatureClient:
    """Wire a session and validator from resolved broker configuration."""
    session = ConnectionSession(
        host=config.host,
        port=config.port,
        topic=config.topic,
        keepalive=keepalive,
        client_factory=client_factory,
    )
    validator = PayloadValidator(
        pattern=config.temperature_id_pattern,
        required_fields=config.required_fields,
    )
    return TemperatureClient(session=session, validator=validator, wait_timeout=wait_timeout)
