from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class FakeReasonCode:
    def __init__(self, name: str = "Success", failure: bool = False) -> None:
        self.name = name
        self.is_failure = failure

    def __str__(self) -> str:
        return self.name


class FakePublishInfo:
    def __init__(self, rc: int, mid: int) -> None:
        self.rc = rc
        self.mid = mid


class FakeMqttClient:
    """In-process stand-in for ``paho.mqtt.client.Client``.

    Each ``*_results`` entry scripts one attempt: ``"success"``, ``"failure"``
    or ``"silent"`` (no callback at all). The last entry repeats.
    """

    def __init__(
        self,
        connect_results: Iterable[str] = ("success",),
        publish_results: Iterable[str] = ("success",),
        connect_error: Optional[Exception] = None,
        publish_rc: int = 0,
    ) -> None:
        self.connect_results = list(connect_results)
        self.publish_results = list(publish_results)
        self.connect_error = connect_error
        self.publish_rc = publish_rc
        self.on_connect = None
        self.on_publish = None
        self.on_disconnect = None
        self.on_log = None
        self.connect_calls: List[tuple[str, int, int]] = []
        self.publish_calls: List[tuple[str, str, int]] = []
        self.disconnect_calls = 0
        self.loop_start_calls = 0
        self.loop_stop_calls = 0
        self.loop_running = False
        self._mid = 0

    @staticmethod
    def _next(script: List[str]) -> str:
        return script.pop(0) if len(script) > 1 else script[0]

    def connect(self, host: str, port: int, keepalive: int) -> int:
        self.connect_calls.append((host, port, keepalive))
        if self.connect_error is not None:
            raise self.connect_error
        return 0

    def loop_start(self) -> int:
        self.loop_start_calls += 1
        self.loop_running = True
        outcome = self._next(self.connect_results)
        if outcome == "success":
            self.on_connect(self, None, {}, FakeReasonCode(), None)
        elif outcome == "failure":
            self.on_connect(self, None, {}, FakeReasonCode("Not authorized", failure=True), None)
        return 0

    def publish(self, topic: str, payload: str, qos: int = 0) -> FakePublishInfo:
        self._mid += 1
        self.publish_calls.append((topic, payload, qos))
        if self.publish_rc == 0:
            outcome = self._next(self.publish_results)
            if outcome == "success":
                self.on_publish(self, None, self._mid, FakeReasonCode(), None)
            elif outcome == "failure":
                self.on_publish(
                    self, None, self._mid, FakeReasonCode("Unspecified error", failure=True), None
                )
        return FakePublishInfo(self.publish_rc, self._mid)

    def disconnect(self) -> int:
        self.disconnect_calls += 1
        self.on_disconnect(self, None, {}, FakeReasonCode("Normal disconnection"), None)
        return 0

    def loop_stop(self) -> int:
        self.loop_stop_calls += 1
        self.loop_running = False
        return 0


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture()
def make_fake_mqtt() -> Callable[..., FakeMqttClient]:
    """Factory for scripted fake clients; see ``FakeMqttClient`` for arguments."""

    def factory(**kwargs) -> FakeMqttClient:
        return FakeMqttClient(**kwargs)

    return factory


@pytest.fixture()
def fake_mqtt(make_fake_mqtt) -> FakeMqttClient:
    return make_fake_mqtt()
