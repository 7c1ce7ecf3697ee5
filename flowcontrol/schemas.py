from __future__ import annotations

from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .duration import Duration


class _ExternalModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class ListWorkEstimatorConfigSchema(_ExternalModel):
    objects_per_seat: Optional[float] = Field(default=None, alias="objectsPerSeat")


class MutatingWorkEstimatorConfigSchema(_ExternalModel):
    enabled: Optional[bool] = Field(default=None, alias="enable")
    event_additional_duration: Optional[Duration] = Field(
        default=None, alias="eventAdditionalDurationMs"
    )
    watches_per_seat: Optional[float] = Field(default=None, alias="watchesPerSeat")

    @field_validator("event_additional_duration", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Duration.parse(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            logger.warning(
                "eventAdditionalDurationMs given as bare number {}, reading it as milliseconds",
                value,
            )
            return Duration.from_milliseconds(value)
        if value is None or isinstance(value, Duration):
            return value
        raise ValueError(
            f"eventAdditionalDurationMs must be a duration string, got {type(value).__name__}"
        )

    @field_serializer("event_additional_duration", when_used="json")
    def _render_duration(self, value: Optional[Duration]) -> Optional[str]:
        return None if value is None else str(value)


class WorkEstimatorConfigSchema(_ExternalModel):
    list_config: Optional[ListWorkEstimatorConfigSchema] = Field(
        default=None, alias="listWorkEstimatorConfig"
    )
    mutating_config: Optional[MutatingWorkEstimatorConfigSchema] = Field(
        default=None, alias="mutatingWorkEstimatorConfig"
    )
    minimum_seats: Optional[int] = Field(default=None, alias="minimumSeats")
    maximum_seats: Optional[int] = Field(default=None, alias="maximumSeats")
