import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from steptracker.api.deps import current_user_id
from steptracker.api.goals import goal_for_user
from steptracker.core.config import settings
from steptracker.core.constants import (
    HABIT_TRACKER_DAYS,
    SUMMARY_WINDOWS,
    TRENDS_DEFAULT_DAYS,
    TRENDS_MAX_DAYS,
    TRENDS_MIN_DAYS,
)
from steptracker.core.time_utils import local_today
from steptracker.db import get_db
from steptracker.models.step_data import StepData
from steptracker.schemas.step import (
    BestDayRead,
    HabitDay,
    MovingAverageRead,
    StatisticsPeriod,
    StepDay,
    StepStatisticsRead,
    StepSummaryRead,
    StepSyncRequest,
    StepSyncResponse,
    StepSyncResult,
    StepTrendsRead,
    SummaryWindow,
    TrendDay,
)
from steptracker.tracking import statistics as stats
from steptracker.tracking.reconcile import DailyStepsInput, reconcile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/steps", tags=["steps"])


def to_daily(row: StepData) -> stats.DailySteps:
    return stats.DailySteps(
        date=row.date,
        steps=row.steps or 0,
        distance_m=float(row.distance_meters or 0.0),
        calories=row.calories or 0,
        active_minutes=row.active_minutes or 0,
    )


def to_step_day(record: stats.DailySteps) -> StepDay:
    return StepDay(
        date=record.date,
        steps=record.steps,
        distance_meters=record.distance_m,
        calories=record.calories,
        active_minutes=record.active_minutes,
    )


def load_daily(db: Session, user_id: str, start: date, end: date) -> list[stats.DailySteps]:
    rows = (
        db.query(StepData)
        .filter(StepData.user_id == user_id)
        .filter(StepData.date >= start)
        .filter(StepData.date <= end)
        .order_by(StepData.date)
        .all()
    )
    return [to_daily(r) for r in rows]


def _today() -> date:
    return local_today(settings.timezone)


@router.get("/daily", response_model=StepDay)
def get_daily_steps(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """One day's totals; a day with no row comes back zero-filled."""
    day = day or _today()
    row = (
        db.query(StepData)
        .filter(StepData.user_id == user_id, StepData.date == day)
        .first()
    )
    if not row:
        return StepDay(date=day, steps=0)
    return to_step_day(to_daily(row))


@router.get("/range", response_model=list[StepDay])
def get_step_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """
    Stored days within [startDate, endDate], oldest first.

      GET /steps/range?startDate=2025-01-06&endDate=2025-01-12
    """
    if end_date < start_date:
        raise HTTPException(status_code=422, detail="endDate must be on or after startDate")
    return [to_step_day(r) for r in load_daily(db, user_id, start_date, end_date)]


@router.post("/sync", response_model=StepSyncResponse)
def sync_steps(
    payload: StepSyncRequest,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Upsert a batch of device days. Safe to retry: each date is idempotent."""
    batch = [
        DailyStepsInput(
            date=item.date,
            steps=item.steps,
            distance_m=item.distance_meters,
            calories=item.calories,
            active_minutes=item.active_minutes,
        )
        for item in payload.steps
    ]
    dates = {item.date for item in batch}
    rows = (
        db.query(StepData)
        .filter(StepData.user_id == user_id, StepData.date.in_(sorted(dates)))
        .all()
        if dates
        else []
    )
    by_date = {r.date: r for r in rows}
    results = reconcile(batch, {d: to_daily(r) for d, r in by_date.items()})

    try:
        for res in results:
            row = by_date.get(res.date)
            if row is None:
                row = StepData(user_id=user_id, date=res.date)
                db.add(row)
                by_date[res.date] = row
            row.steps = res.record.steps
            row.distance_meters = res.record.distance_m
            row.calories = res.record.calories
            row.active_minutes = res.record.active_minutes
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("step sync failed for user=%s (%d days)", user_id, len(batch))
        raise

    logger.info(
        "synced %d days for user=%s (%d created)",
        len(results), user_id, sum(1 for r in results if r.action == "created"),
    )
    return StepSyncResponse(
        message="Step data synced successfully",
        results=[StepSyncResult(date=r.date, action=r.action) for r in results],
    )


@router.get("/statistics", response_model=StepStatisticsRead)
def get_step_statistics(
    period: StatisticsPeriod = Query(...),
    start_date: Optional[date] = Query(None, alias="startDate"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    today = _today()
    start, end = stats.period_range(period.value, start_date, today)
    result = stats.compute_statistics(load_daily(db, user_id, start, end), start, end, today=today)
    return StepStatisticsRead(
        period=period,
        start_date=result.start_date,
        end_date=result.end_date,
        total_steps=result.total_steps,
        total_distance=result.total_distance,
        total_calories=result.total_calories,
        total_active_minutes=result.total_active_minutes,
        average_steps=result.average_steps,
        current_streak=result.current_streak,
        longest_streak=result.longest_streak,
        days_with_data=result.days_with_data,
    )


@router.get("/trends", response_model=StepTrendsRead)
def get_step_trends(
    days: int = Query(TRENDS_DEFAULT_DAYS, ge=TRENDS_MIN_DAYS, le=TRENDS_MAX_DAYS),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """
    Dense daily series for the last `days` days plus a 7-day moving average.

    - Days without data appear with 0 steps.
    - The first moving-average entry is for the 7th day of the series.
    """
    today = _today()
    records = load_daily(db, user_id, today - timedelta(days=days - 1), today)
    trends = stats.compute_trends(records, days, today)
    return StepTrendsRead(
        daily_data=[
            TrendDay(date=d.date, steps=d.steps, distance_meters=d.distance_m, calories=d.calories)
            for d in trends.daily
        ],
        moving_averages=[
            MovingAverageRead(date=p.date, average_steps=p.average_steps)
            for p in trends.moving_averages
        ],
        period=f"{days} days",
    )


@router.get("/summary", response_model=StepSummaryRead)
def get_step_summary(
    window: SummaryWindow = Query(SummaryWindow.week),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    today = _today()
    days = SUMMARY_WINDOWS[window.value]
    records = load_daily(db, user_id, today - timedelta(days=days - 1), today)
    daily_goal, _ = goal_for_user(db, user_id)
    s = stats.window_summary(records, days, today, daily_goal)
    return StepSummaryRead(
        window=window,
        start_date=s.start_date,
        end_date=s.end_date,
        total_steps=s.total_steps,
        average_steps=s.average_steps,
        days_with_data=s.days_with_data,
        goal_progress=round(s.goal_progress, 1),
    )


@router.get("/best-day", response_model=Optional[BestDayRead])
def get_best_day(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    row = (
        db.query(StepData)
        .filter(StepData.user_id == user_id)
        .order_by(StepData.steps.desc(), StepData.date.desc())
        .first()
    )
    if not row:
        return None
    return BestDayRead(date=row.date, steps=row.steps)


@router.get("/habits", response_model=list[HabitDay])
def get_habit_tracker(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Last 365 days with an activity level per day, for the habit grid."""
    today = _today()
    records = load_daily(db, user_id, today - timedelta(days=HABIT_TRACKER_DAYS - 1), today)
    return [
        HabitDay(date=d, steps=steps, level=level)
        for d, steps, level in stats.habit_series(records, today)
    ]
