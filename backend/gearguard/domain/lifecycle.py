# backend/gearguard/domain/lifecycle.py
"""
Maintenance request stage transitions.

``transition`` is a pure function: given the stored stage and the incoming
values it returns either ``Accepted`` (the stage and completion date to
write) or ``Rejection`` (a message for a 400). Nothing here touches the
database.

    NEW         -> ASSIGNED, IN_PROGRESS, SCRAPPED
    ASSIGNED    -> NEW, IN_PROGRESS, SCRAPPED
    IN_PROGRESS -> ASSIGNED, REPAIRED, SCRAPPED

REPAIRED and SCRAPPED are terminal.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Union

from .constants import RequestType, Stage

ALLOWED_TRANSITIONS: Dict[Stage, FrozenSet[Stage]] = {
    Stage.NEW: frozenset({Stage.ASSIGNED, Stage.IN_PROGRESS, Stage.SCRAPPED}),
    Stage.ASSIGNED: frozenset({Stage.NEW, Stage.IN_PROGRESS, Stage.SCRAPPED}),
    Stage.IN_PROGRESS: frozenset({Stage.ASSIGNED, Stage.REPAIRED, Stage.SCRAPPED}),
    Stage.REPAIRED: frozenset(),
    Stage.SCRAPPED: frozenset(),
}

SCHEDULE_REQUIRED = "Scheduled date is required for preventive maintenance"
DURATION_REQUIRED = "Duration is required for completed requests"


@dataclass(frozen=True)
class Accepted:
    stage: Stage
    completed_date: Optional[datetime]


@dataclass(frozen=True)
class Rejection:
    reason: str


Outcome = Union[Accepted, Rejection]


def can_transition(current: Stage, target: Stage) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def check_requirements(
    stage: Stage,
    request_type: RequestType,
    scheduled_date: Optional[datetime],
    duration_hours: Optional[float],
) -> Optional[Rejection]:
    """Field rules that hold for a record in ``stage`` no matter how it got there."""
    if request_type == RequestType.PREVENTIVE and scheduled_date is None:
        return Rejection(SCHEDULE_REQUIRED)
    # 0 hours is treated as "not filled in"
    if stage == Stage.REPAIRED and not duration_hours:
        return Rejection(DURATION_REQUIRED)
    return None


def transition(
    current: Stage,
    *,
    stage: Stage,
    request_type: RequestType,
    scheduled_date: Optional[datetime],
    duration_hours: Optional[float],
    completed_date: Optional[datetime],
    now: datetime,
) -> Outcome:
    current, stage = Stage(current), Stage(stage)

    if not can_transition(current, stage):
        if not ALLOWED_TRANSITIONS[current]:
            return Rejection(f"Request is {current.value} and can no longer change stage")
        return Rejection(f"Cannot move a request from {current.value} to {stage.value}")

    rejected = check_requirements(stage, RequestType(request_type), scheduled_date, duration_hours)
    if rejected is not None:
        return rejected

    if stage == Stage.REPAIRED and completed_date is None:
        completed_date = now
    return Accepted(stage=stage, completed_date=completed_date)
