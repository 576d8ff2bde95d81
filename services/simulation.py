"""Synthetic temperature feed driving the publisher on a fixed interval."""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Optional, Protocol

from services.errors import TemperatureClientError

logger = logging.getLogger(__name__)

MIN_TEMPERATURE = 18.0
MAX_TEMPERATURE = 28.0
RECENT_VALUES_LIMIT = 100


class Publisher(Protocol):
    def publish_temperature(self, value: float, retries: int = ...) -> bool: ...


@dataclass
class SimulationSummary:
    """Outcome counters for a simulation run.

    ``recent`` keeps only the last ``RECENT_VALUES_LIMIT`` readings.
    """

    readings: int = 0
    published: int = 0
    failed: int = 0
    recent: Deque[float] = field(default_factory=lambda: deque(maxlen=RECENT_VALUES_LIMIT))


def random_temperature(rng: Optional[random.Random] = None) -> float:
    source = rng or random
    return round(source.uniform(MIN_TEMPERATURE, MAX_TEMPERATURE), 1)


def simulate_temperature(
    client: Publisher,
    interval: float = 5,
    iterations: Optional[int] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SimulationSummary:
    """Continuously generate and publish readings until interrupted.

    ``iterations`` bounds the run; ``None`` means run until ``KeyboardInterrupt``.
    Rejected or undelivered readings are logged and counted as failed.
    """
    summary = SimulationSummary()
    logger.info("Starting temperature simulation (interval=%ss)", interval)
    try:
        while iterations is None or summary.readings < iterations:
            value = random_temperature(rng)
            try:
                delivered = client.publish_temperature(value)
            except (TemperatureClientError, TypeError) as exc:
                logger.error("Simulated reading rejected: %s", exc, extra={"value": value})
                delivered = False
            summary.readings += 1
            summary.recent.append(value)
            if delivered:
                summary.published += 1
            else:
                summary.failed += 1
                logger.warning("Simulated reading was not delivered", extra={"value": value})
            sleep(interval)
    except KeyboardInterrupt:
        logger.info("Simulation stopped by user")

    logger.info(
        "Simulation finished: %d published, %d failed",
        summary.published,
        summary.failed,
    )
    return summary
