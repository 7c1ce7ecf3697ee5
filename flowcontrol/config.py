from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from .duration import Duration


MINIMUM_SEATS = 1
MAXIMUM_SEATS = 10
OBJECTS_PER_SEAT = 100.0
WATCHES_PER_SEAT = 10.0
ENABLE_MUTATING_WORK_ESTIMATOR = True

EVENT_ADDITIONAL_DURATION = Duration.from_milliseconds(5)


@dataclass(frozen=True, slots=True)
class ListWorkEstimatorConfig:
    """Work estimator parameters related to list requests."""

    objects_per_seat: float = OBJECTS_PER_SEAT  # must be > 0, not checked here


@dataclass(frozen=True, slots=True)
class MutatingWorkEstimatorConfig:
    """Work estimator parameters related to watches of mutating objects."""

    enabled: bool = ENABLE_MUTATING_WORK_ESTIMATOR
    event_additional_duration: Duration = EVENT_ADDITIONAL_DURATION
    watches_per_seat: float = WATCHES_PER_SEAT  # must be > 0, not checked here

    @property
    def event_additional_timedelta(self) -> timedelta:
        """The per-event extra duration, independent of the unit it was written in."""
        return self.event_additional_duration.timedelta


def default_list_work_estimator_config() -> ListWorkEstimatorConfig:
    return ListWorkEstimatorConfig(objects_per_seat=OBJECTS_PER_SEAT)


def default_mutating_work_estimator_config() -> MutatingWorkEstimatorConfig:
    return MutatingWorkEstimatorConfig(
        enabled=ENABLE_MUTATING_WORK_ESTIMATOR,
        event_additional_duration=EVENT_ADDITIONAL_DURATION,
        watches_per_seat=WATCHES_PER_SEAT,
    )


@dataclass(frozen=True, slots=True)
class WorkEstimatorConfig:
    """Work estimator parameters.

    ``list_config`` and ``mutating_config`` may be ``None``, meaning the owner
    has not set them. The seat bounds are a contract for the estimator
    (``1 <= minimum_seats <= maximum_seats``) and are not validated.
    """

    list_config: Optional[ListWorkEstimatorConfig] = field(
        default_factory=default_list_work_estimator_config
    )
    mutating_config: Optional[MutatingWorkEstimatorConfig] = field(
        default_factory=default_mutating_work_estimator_config
    )
    minimum_seats: int = MINIMUM_SEATS
    # the estimator's seat histogram uses this as its upper bucket bound
    maximum_seats: int = MAXIMUM_SEATS


def default_work_estimator_config() -> WorkEstimatorConfig:
    """Build a new WorkEstimatorConfig with every field set to its default."""
    return WorkEstimatorConfig(
        list_config=default_list_work_estimator_config(),
        mutating_config=default_mutating_work_estimator_config(),
        minimum_seats=MINIMUM_SEATS,
        maximum_seats=MAXIMUM_SEATS,
    )
