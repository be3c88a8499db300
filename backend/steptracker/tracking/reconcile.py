"""Merge device-reported daily step batches into the stored per-day records.

Each date is handled on its own: a new date is created with missing optional
fields set to zero; an existing date always takes the device's step count and
only replaces distance, calories and active minutes when the device sent them.
Re-applying a batch therefore leaves the records unchanged.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Optional

from steptracker.core.constants import MAX_DAILY_STEPS
from steptracker.core.errors import ValidationError
from steptracker.tracking.statistics import DailySteps


class SyncAction(str, Enum):
    created = "created"
    updated = "updated"


@dataclass(frozen=True)
class DailyStepsInput:
    date: date
    steps: int
    distance_m: Optional[float] = None
    calories: Optional[int] = None
    active_minutes: Optional[int] = None


@dataclass(frozen=True)
class SyncResult:
    date: date
    action: SyncAction
    record: DailySteps


def validate_input(item: DailyStepsInput) -> None:
    if not 0 <= item.steps <= MAX_DAILY_STEPS:
        raise ValidationError(f"{item.date}: steps must be between 0 and {MAX_DAILY_STEPS}")
    for name in ("distance_m", "calories", "active_minutes"):
        value = getattr(item, name)
        if value is not None and value < 0:
            raise ValidationError(f"{item.date}: {name} must be >= 0")


def _pick(incoming, stored):
    return stored if incoming is None else incoming


def merge_day(item: DailyStepsInput, existing: Optional[DailySteps]) -> SyncResult:
    if existing is None:
        record = DailySteps(
            date=item.date,
            steps=item.steps,
            distance_m=float(item.distance_m or 0.0),
            calories=int(item.calories or 0),
            active_minutes=int(item.active_minutes or 0),
        )
        return SyncResult(date=item.date, action=SyncAction.created, record=record)

    record = DailySteps(
        date=item.date,
        steps=item.steps,
        distance_m=float(_pick(item.distance_m, existing.distance_m)),
        calories=int(_pick(item.calories, existing.calories)),
        active_minutes=int(_pick(item.active_minutes, existing.active_minutes)),
    )
    return SyncResult(date=item.date, action=SyncAction.updated, record=record)


def reconcile(batch: Iterable[DailyStepsInput], existing: Mapping[date, DailySteps]) -> list[SyncResult]:
    """Plan the writes for a batch. The whole batch is validated before anything is merged.

    A date repeated inside the batch sees the result of its earlier entry.
    """
    batch = list(batch)
    for item in batch:
        validate_input(item)

    working = dict(existing)
    results = []
    for item in batch:
        result = merge_day(item, working.get(item.date))
        working[item.date] = result.record
        results.append(result)
    return results
