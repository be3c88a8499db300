"""Statistics over historical daily step records.

Callers pass only the rows that exist; a missing date always means a day with
zero steps. Sums and averages use the rows that are present, while anything
that depends on consecutive days (streaks, moving averages, habit series)
runs over a dense calendar built by `densify`.
"""
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional, Sequence

from steptracker.core.constants import (
    ACTIVITY_LEVEL_BOUNDS,
    HABIT_TRACKER_DAYS,
    MOVING_AVERAGE_WINDOW,
)
from steptracker.core.errors import ValidationError
from steptracker.core.time_utils import add_period


@dataclass(frozen=True)
class DailySteps:
    date: date
    steps: int
    distance_m: float = 0.0
    calories: int = 0
    active_minutes: int = 0


@dataclass(frozen=True)
class StepStatistics:
    start_date: date
    end_date: date
    total_steps: int
    total_distance: float
    total_calories: int
    total_active_minutes: int
    average_steps: int
    current_streak: int
    longest_streak: int
    days_with_data: int


@dataclass(frozen=True)
class MovingAveragePoint:
    date: date
    average_steps: int


@dataclass(frozen=True)
class StepTrends:
    days: int
    daily: list
    moving_averages: list


@dataclass(frozen=True)
class WindowSummary:
    start_date: date
    end_date: date
    total_steps: int
    average_steps: int
    days_with_data: int
    goal_progress: float


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative counts used here."""
    return int(math.floor(value + 0.5))


def date_range(start: date, end: date) -> Iterator[date]:
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("endDate must be on or after startDate")


def records_in_range(records: Iterable[DailySteps], start: date, end: date) -> list[DailySteps]:
    return [r for r in records if start <= r.date <= end]


def densify(records: Iterable[DailySteps], start: date, end: date) -> list[DailySteps]:
    """One entry per calendar day in [start, end], zero-filled where no row exists."""
    by_date = {r.date: r for r in records if start <= r.date <= end}
    return [by_date.get(d) or DailySteps(date=d, steps=0) for d in date_range(start, end)]


def streaks(series: Sequence[DailySteps]) -> tuple[int, int]:
    """Return (current, longest) runs of days with steps > 0 over a dense, sorted series.

    `current` is the run still open at the last day of the series, 0 if the last
    day had no steps.
    """
    run = 0
    longest = 0
    for day in series:
        if day.steps > 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return run, longest


def compute_statistics(
    records: Iterable[DailySteps],
    start: date,
    end: date,
    today: Optional[date] = None,
) -> StepStatistics:
    """Totals, average and streaks for [start, end].

    When `today` is given the streak scan stops there, so days that have not
    happened yet do not end the current streak.
    """
    _check_range(start, end)
    present = sorted(records_in_range(records, start, end), key=lambda r: r.date)

    total_steps = sum(r.steps for r in present)
    days_with_data = len(present)
    average = round_half_up(total_steps / days_with_data) if days_with_data else 0

    scan_end = min(end, today) if today is not None else end
    if scan_end >= start:
        current, longest = streaks(densify(present, start, scan_end))
    else:
        current, longest = 0, 0

    return StepStatistics(
        start_date=start,
        end_date=end,
        total_steps=total_steps,
        total_distance=float(sum(r.distance_m or 0.0 for r in present)),
        total_calories=sum(r.calories or 0 for r in present),
        total_active_minutes=sum(r.active_minutes or 0 for r in present),
        average_steps=average,
        current_streak=current,
        longest_streak=longest,
        days_with_data=days_with_data,
    )


def moving_averages(series: Sequence[DailySteps], window: int = MOVING_AVERAGE_WINDOW) -> list[MovingAveragePoint]:
    """Trailing mean of steps; the first entry is for the `window`-th day."""
    points = []
    for i in range(window - 1, len(series)):
        chunk = series[i - window + 1:i + 1]
        points.append(
            MovingAveragePoint(
                date=series[i].date,
                average_steps=round_half_up(sum(d.steps for d in chunk) / window),
            )
        )
    return points


def compute_trends(records: Iterable[DailySteps], days: int, today: date) -> StepTrends:
    if days < 1:
        raise ValidationError("days must be >= 1")
    start = today - timedelta(days=days - 1)
    daily = densify(records, start, today)
    return StepTrends(days=days, daily=daily, moving_averages=moving_averages(daily))


def period_range(period: str, start: Optional[date] = None, today: Optional[date] = None) -> tuple[date, date]:
    """Resolve a week/month/year window.

    With a start date the window runs forward one period from it; otherwise it
    is the period ending today (both ends inclusive).
    """
    if period not in ("week", "month", "year"):
        raise ValidationError("period must be one of week, month, year")
    if start is not None:
        return start, add_period(start, period) - timedelta(days=1)
    today = today or date.today()
    return add_period(today, period, -1) + timedelta(days=1), today


def trailing_streak(records: Iterable[DailySteps], as_of: date) -> int:
    """Consecutive days with steps ending on `as_of` (0 if `as_of` itself has none)."""
    steps_by_date = {r.date: r.steps for r in records}
    streak = 0
    d = as_of
    while steps_by_date.get(d, 0) > 0:
        streak += 1
        d -= timedelta(days=1)
    return streak


def goal_progress(steps: int, goal: int) -> float:
    """Percentage of a goal reached, capped at 100."""
    if goal <= 0:
        return 0.0
    return min(steps / goal * 100.0, 100.0)


def window_summary(records: Iterable[DailySteps], days: int, today: date, daily_goal: int) -> WindowSummary:
    """Summary of the last `days` days; only days with steps count as active."""
    start = today - timedelta(days=days - 1)
    steps = [r.steps for r in records_in_range(records, start, today)]
    total = sum(steps)
    active_days = len([s for s in steps if s > 0])
    return WindowSummary(
        start_date=start,
        end_date=today,
        total_steps=total,
        average_steps=round_half_up(total / active_days) if active_days else 0,
        days_with_data=active_days,
        goal_progress=goal_progress(total, daily_goal * days),
    )


def activity_level(steps: int) -> int:
    if steps <= 0:
        return 0
    for level, bound in enumerate(ACTIVITY_LEVEL_BOUNDS, start=1):
        if steps < bound:
            return level
    return len(ACTIVITY_LEVEL_BOUNDS) + 1


def habit_series(records: Iterable[DailySteps], today: date, days: int = HABIT_TRACKER_DAYS) -> list[tuple[date, int, int]]:
    start = today - timedelta(days=days - 1)
    return [(d.date, d.steps, activity_level(d.steps)) for d in densify(records, start, today)]
