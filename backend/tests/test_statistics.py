from datetime import date, timedelta

import pytest

from steptracker.core.errors import ValidationError
from steptracker.tracking import statistics as stats
from steptracker.tracking.reconcile import DailyStepsInput, SyncAction, reconcile
from steptracker.tracking.statistics import DailySteps


def days(start, steps):
    return [DailySteps(date=start + timedelta(days=i), steps=s) for i, s in enumerate(steps)]


def test_statistics_week_with_gaps():
    # 2024-01-03 and 2024-01-05 have no rows at all
    records = [
        DailySteps(date(2024, 1, 1), 8000, distance_m=6000.0, calories=320, active_minutes=60),
        DailySteps(date(2024, 1, 2), 9000),
        DailySteps(date(2024, 1, 4), 4000),
        DailySteps(date(2024, 1, 6), 5000),
        DailySteps(date(2024, 1, 7), 6000),
    ]
    result = stats.compute_statistics(records, date(2024, 1, 1), date(2024, 1, 7))
    assert result.total_steps == 32000
    assert result.days_with_data == 5
    assert result.average_steps == 6400
    assert result.current_streak == 2
    assert result.longest_streak == 2
    assert result.total_distance == 6000.0
    assert result.total_calories == 320
    assert result.total_active_minutes == 60


def test_zero_step_day_breaks_streak():
    records = days(date(2024, 3, 1), [100, 200, 300, 0, 100])
    result = stats.compute_statistics(records, date(2024, 3, 1), date(2024, 3, 5))
    assert result.longest_streak == 3
    assert result.current_streak == 1
    # the zero row still counts as a stored day
    assert result.days_with_data == 5
    assert result.average_steps == 140


def test_streak_scan_stops_at_today():
    records = days(date(2024, 5, 1), [1000, 1000, 1000])
    result = stats.compute_statistics(records, date(2024, 5, 1), date(2024, 5, 7), today=date(2024, 5, 3))
    assert result.current_streak == 3
    unclamped = stats.compute_statistics(records, date(2024, 5, 1), date(2024, 5, 7))
    assert unclamped.current_streak == 0


def test_empty_range_is_all_zero():
    result = stats.compute_statistics([], date(2024, 1, 1), date(2024, 1, 7))
    assert result.total_steps == 0
    assert result.average_steps == 0
    assert result.current_streak == 0
    assert result.longest_streak == 0


def test_reversed_range_raises():
    with pytest.raises(ValidationError):
        stats.compute_statistics([], date(2024, 1, 7), date(2024, 1, 1))


def test_average_rounds_half_up():
    records = days(date(2024, 1, 1), [1, 2])
    assert stats.compute_statistics(records, date(2024, 1, 1), date(2024, 1, 2)).average_steps == 2


def test_moving_average_of_constant_series():
    today = date(2024, 6, 10)
    records = days(today - timedelta(days=9), [7000] * 10)
    trends = stats.compute_trends(records, 10, today)
    assert len(trends.daily) == 10
    assert len(trends.moving_averages) == 4
    assert trends.moving_averages[0].date == today - timedelta(days=3)
    assert all(p.average_steps == 7000 for p in trends.moving_averages)


def test_trends_zero_fill_missing_days():
    today = date(2024, 6, 10)
    trends = stats.compute_trends([DailySteps(today, 700)], 7, today)
    assert [d.steps for d in trends.daily] == [0, 0, 0, 0, 0, 0, 700]
    assert trends.moving_averages[0].average_steps == 100


def test_period_range():
    assert stats.period_range("week", date(2024, 1, 1)) == (date(2024, 1, 1), date(2024, 1, 7))
    assert stats.period_range("month", date(2024, 1, 31)) == (date(2024, 1, 31), date(2024, 2, 28))
    assert stats.period_range("year", today=date(2024, 3, 15)) == (date(2023, 3, 16), date(2024, 3, 15))
    with pytest.raises(ValidationError):
        stats.period_range("decade")


def test_goal_helpers():
    records = days(date(2024, 1, 1), [5000, 0, 8000, 9000])
    assert stats.trailing_streak(records, date(2024, 1, 4)) == 2
    assert stats.trailing_streak(records, date(2024, 1, 5)) == 0
    assert stats.goal_progress(15000, 10000) == 100.0
    assert stats.goal_progress(2500, 10000) == 25.0
    assert stats.activity_level(0) == 0
    assert stats.activity_level(4999) == 1
    assert stats.activity_level(7500) == 3
    assert stats.activity_level(10000) == 4


def test_window_summary_counts_active_days():
    today = date(2024, 1, 7)
    records = days(date(2024, 1, 1), [7000, 0, 7000, 0, 0, 7000, 7000])
    s = stats.window_summary(records, 7, today, daily_goal=10000)
    assert s.total_steps == 28000
    assert s.days_with_data == 4
    assert s.average_steps == 7000
    assert s.goal_progress == pytest.approx(40.0)


def test_reconcile_create_then_partial_update():
    first = reconcile(
        [DailyStepsInput(date(2024, 1, 1), 5000, distance_m=3800.0, calories=200, active_minutes=40)],
        {},
    )
    assert first[0].action == SyncAction.created
    stored = {r.date: r.record for r in first}

    second = reconcile([DailyStepsInput(date(2024, 1, 1), 6000)], stored)
    assert second[0].action == SyncAction.updated
    record = second[0].record
    assert record.steps == 6000
    assert record.distance_m == 3800.0
    assert record.calories == 200
    assert record.active_minutes == 40


def test_reconcile_is_idempotent():
    batch = [
        DailyStepsInput(date(2024, 1, 1), 5000, distance_m=3800.0),
        DailyStepsInput(date(2024, 1, 2), 0, calories=0),
    ]
    once = {r.date: r.record for r in reconcile(batch, {})}
    twice = {r.date: r.record for r in reconcile(batch, once)}
    assert once == twice


def test_reconcile_zero_overwrites_stored_value():
    stored = {date(2024, 1, 1): DailySteps(date(2024, 1, 1), 5000, calories=200)}
    result = reconcile([DailyStepsInput(date(2024, 1, 1), 5000, calories=0)], stored)
    assert result[0].record.calories == 0


def test_reconcile_rejects_whole_batch_on_bad_entry():
    batch = [
        DailyStepsInput(date(2024, 1, 1), 5000),
        DailyStepsInput(date(2024, 1, 2), 100_001),
    ]
    with pytest.raises(ValidationError):
        reconcile(batch, {})
    with pytest.raises(ValidationError):
        reconcile([DailyStepsInput(date(2024, 1, 1), 10, distance_m=-1.0)], {})


def test_reconcile_duplicate_date_in_batch():
    batch = [
        DailyStepsInput(date(2024, 1, 1), 1000, calories=50),
        DailyStepsInput(date(2024, 1, 1), 2000),
    ]
    results = reconcile(batch, {})
    assert [r.action for r in results] == [SyncAction.created, SyncAction.updated]
    assert results[1].record.steps == 2000
    assert results[1].record.calories == 50
