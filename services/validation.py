"""Payload validation and identifier generation for temperature readings."""

from __future__ import annotations

import math
import re
import uuid
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from models.messages import TemperatureMessage
from services.errors import FormatError, SchemaError

DEFAULT_TEMPERATURE_ID_PATTERN = r"^temp-[a-zA-Z0-9]{5}$"
DEFAULT_REQUIRED_FIELDS: Sequence[str] = ("temperatureId", "value")


def generate_temperature_id() -> str:
    """Return a random identifier of the form ``temp-xxxxx``."""
    return f"temp-{uuid.uuid4().hex[:5]}"


def _is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PayloadValidator:
    """Enforces the temperature message schema.

    The identifier check and the payload check share one compiled pattern so
    that both paths apply identical rules.
    """

    def __init__(
        self,
        pattern: str = DEFAULT_TEMPERATURE_ID_PATTERN,
        required_fields: Optional[Iterable[str]] = None,
    ) -> None:
        self._pattern = re.compile(pattern)
        self.required_fields: tuple[str, ...] = tuple(
            required_fields if required_fields is not None else DEFAULT_REQUIRED_FIELDS
        )

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def validate_temperature_id(self, temp_id: Any) -> None:
        if not isinstance(temp_id, str) or self._pattern.fullmatch(temp_id) is None:
            raise FormatError(
                f"Invalid temperature ID format {temp_id!r}. Must match: {self.pattern}"
            )

    def validate_payload(self, payload: Mapping[str, Any]) -> None:
        missing = [name for name in self.required_fields if name not in payload]
        if missing:
            raise SchemaError(missing)

        if "temperatureId" in payload:
            self.validate_temperature_id(payload["temperatureId"])

        if "value" in payload and not _is_numeric(payload["value"]):
            raise TypeError("Temperature value must be numeric")

    def create_payload(self, temp_id: str, value: Union[int, float]) -> TemperatureMessage:
        """Build an immutable message, rounding ``value`` to one decimal place."""
        self.validate_temperature_id(temp_id)

        if not _is_numeric(value):
            raise TypeError("Temperature value must be numeric")
        if not math.isfinite(value):
            raise TypeError("Temperature value must be a finite number")

        payload = {
            "temperatureId": temp_id,
            "value": round(float(value), 1),
        }
        self.validate_payload(payload)
        return TemperatureMessage.model_validate(payload)
