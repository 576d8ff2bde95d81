"""Wire models published to the broker."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TemperatureMessage(BaseModel):
    """Temperature change notification sent on ``temperature/changed``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    temperature_id: str = Field(..., alias="temperatureId")
    value: float = Field(..., description="Temperature in degrees Celsius.")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
