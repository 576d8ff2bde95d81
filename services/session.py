"""MQTT connection lifecycle bridged from transport callbacks to a blocking caller."""

from __future__ import annotations

import logging
from concurrent import futures
from enum import Enum
from threading import Lock
from typing import Any, Callable, Optional

import paho.mqtt.client as mqtt

from models.messages import TemperatureMessage
from services.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_KEEPALIVE = 60
PUBLISH_QOS = 1


class SessionState(str, Enum):
    """Lifecycle states of a single-shot publishing connection."""

    idle = "idle"
    connecting = "connecting"
    connected = "connected"
    publishing = "publishing"
    disconnected = "disconnected"


def default_client_factory() -> mqtt.Client:
    return mqtt.Client(callback_api_version=mqtt.CallbackAPIVersion.VERSION2)


class ConnectionSession:
    """Owns one MQTT client and exposes connect/publish as blocking waits.

    Callbacks run on the transport's network loop thread. They resolve
    single-slot futures which the caller waits on, so the caller never reads
    state that is still being written by the loop thread.
    """

    def __init__(
        self,
        host: str,
        port: int,
        topic: str,
        keepalive: int = DEFAULT_KEEPALIVE,
        client_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.topic = topic
        self.keepalive = keepalive
        self._lock = Lock()
        self._state = SessionState.idle
        self._connected = False
        self._published = False
        self._connect_outcome: futures.Future[bool] = futures.Future()
        self._publish_outcome: futures.Future[bool] = futures.Future()

        self.client = (client_factory or default_client_factory)()
        self.client.on_connect = self._on_connect
        self.client.on_publish = self._on_publish
        self.client.on_disconnect = self._on_disconnect
        self.client.on_log = self._on_log

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def published(self) -> bool:
        return self._published

    def connect(self) -> None:
        """Open the connection and start the background network loop."""
        with self._lock:
            self._clear()
            self._state = SessionState.connecting
        logger.info(
            "Connecting to broker",
            extra={"host": self.host, "port": self.port},
        )
        try:
            self.client.connect(self.host, self.port, self.keepalive)
        except OSError as exc:
            with self._lock:
                self._state = SessionState.disconnected
            raise TransportError(
                f"Could not connect to {self.host}:{self.port}: {exc}"
            ) from exc
        self.client.loop_start()

    def wait_connected(self, timeout: float) -> bool:
        return self._wait(self._connect_outcome, timeout)

    def publish(self, message: TemperatureMessage) -> int:
        """Publish ``message`` at QoS 1 and return the transport message id."""
        with self._lock:
            if self._state is not SessionState.connected:
                raise TransportError(
                    f"Cannot publish while session is {self._state.value}"
                )
            self._state = SessionState.publishing

        info = self.client.publish(self.topic, message.to_json(), qos=PUBLISH_QOS)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise TransportError(
                f"Publish to {self.topic} rejected by transport: {mqtt.error_string(info.rc)}"
            )
        logger.debug(
            "Publish issued",
            extra={"topic": self.topic, "mid": info.mid, "temperature_id": message.temperature_id},
        )
        return info.mid

    def wait_published(self, timeout: float) -> bool:
        return self._wait(self._publish_outcome, timeout)

    def reset(self) -> None:
        """Force the session back to idle, releasing the connection and loop."""
        try:
            self.client.loop_stop()
        except Exception as exc:  # noqa: BLE001 - cleanup must not raise
            logger.warning("Stopping network loop failed: %s", exc)

        # The loop thread is gone, so no callback can flip the flag after this read.
        with self._lock:
            connected = self._connected
        if connected:
            try:
                self.client.disconnect()
            except Exception as exc:  # noqa: BLE001 - cleanup must not raise
                logger.warning("Disconnect during cleanup failed: %s", exc)

        with self._lock:
            self._clear()
            self._state = SessionState.idle

    def _clear(self) -> None:
        # Caller holds the lock. Pending waiters from the previous attempt wake with False.
        self._resolve(self._connect_outcome, False)
        self._resolve(self._publish_outcome, False)
        self._connected = False
        self._published = False
        self._connect_outcome = futures.Future()
        self._publish_outcome = futures.Future()

    @staticmethod
    def _wait(outcome: futures.Future[bool], timeout: float) -> bool:
        try:
            return outcome.result(timeout=timeout)
        except futures.TimeoutError:
            return False

    @staticmethod
    def _resolve(outcome: futures.Future[bool], value: bool) -> None:
        if not outcome.done():
            outcome.set_result(value)

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            logger.error(
                "Connection failed",
                extra={"host": self.host, "port": self.port, "reason_code": reason_code},
            )
            with self._lock:
                self._resolve(self._connect_outcome, False)
            client.disconnect()
            return

        with self._lock:
            self._connected = True
            self._state = SessionState.connected
            self._resolve(self._connect_outcome, True)
        logger.info("Connected", extra={"host": self.host, "port": self.port})

    def _on_publish(self, client, userdata, mid, reason_code, properties) -> None:
        if reason_code.is_failure:
            logger.error(
                "Publish failed",
                extra={"mid": mid, "reason_code": reason_code},
            )
            with self._lock:
                self._resolve(self._publish_outcome, False)
        else:
            with self._lock:
                if self._connected:
                    self._published = True
                self._resolve(self._publish_outcome, self._published)
            logger.info("Message acknowledged by broker", extra={"mid": mid})
        client.disconnect()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties) -> None:
        with self._lock:
            self._connected = False
            self._state = SessionState.disconnected
            self._resolve(self._connect_outcome, False)
            self._resolve(self._publish_outcome, False)
        logger.info("Disconnected", extra={"reason_code": reason_code})

    def _on_log(self, client, userdata, level, buf) -> None:
        if level == mqtt.MQTT_LOG_ERR:
            logger.error("MQTT error: %s", buf)
        elif level == mqtt.MQTT_LOG_WARNING:
            logger.warning("MQTT warning: %s", buf)
