from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from steptracker.api.deps import current_user_id
from steptracker.core.config import settings
from steptracker.core.time_utils import local_today
from steptracker.db import get_db
from steptracker.models.step_data import StepData
from steptracker.models.step_goal import StepGoal
from steptracker.schemas.goal import GoalProgressRead, StepGoalRead, StepGoalUpsert
from steptracker.tracking import statistics as stats


router = APIRouter(prefix="/goals", tags=["goals"])


def _weekly_default(daily_steps: int) -> int:
    return settings.default_weekly_goal or daily_steps * 7


def goal_for_user(db: Session, user_id: str) -> tuple[int, int]:
    """(daily, weekly) step goal, falling back to configured defaults."""
    row = db.query(StepGoal).filter(StepGoal.user_id == user_id).first()
    if not row:
        daily = settings.default_daily_goal
        return daily, _weekly_default(daily)
    return row.daily_steps, row.weekly_steps or row.daily_steps * 7


@router.get("/", response_model=StepGoalRead)
def get_goal(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    daily, weekly = goal_for_user(db, user_id)
    return StepGoalRead(daily_steps=daily, weekly_steps=weekly)


@router.put("/", response_model=StepGoalRead)
def upsert_goal(
    payload: StepGoalUpsert,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    row = db.query(StepGoal).filter(StepGoal.user_id == user_id).first()
    if not row:
        row = StepGoal(user_id=user_id, daily_steps=payload.daily_steps, weekly_steps=payload.weekly_steps)
        db.add(row)
    else:
        row.daily_steps = payload.daily_steps
        row.weekly_steps = payload.weekly_steps
    db.commit()
    db.refresh(row)
    return StepGoalRead(
        daily_steps=row.daily_steps,
        weekly_steps=row.weekly_steps or row.daily_steps * 7,
    )


@router.get("/progress", response_model=GoalProgressRead)
def get_goal_progress(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """
    Progress towards the daily goal on `date` (default today) and towards the
    weekly goal over the 7 days ending on `date`.
    """
    day = day or local_today(settings.timezone)
    week_start = day - timedelta(days=6)
    rows = (
        db.query(StepData)
        .filter(StepData.user_id == user_id)
        .filter(StepData.date <= day)
        .order_by(StepData.date.desc())
        .all()
    )
    records = [stats.DailySteps(date=r.date, steps=r.steps or 0) for r in rows]

    daily_goal, weekly_goal = goal_for_user(db, user_id)
    today_steps = next((r.steps for r in records if r.date == day), 0)
    weekly_steps = sum(r.steps for r in stats.records_in_range(records, week_start, day))

    return GoalProgressRead(
        date=day,
        daily_goal=daily_goal,
        today_steps=today_steps,
        daily_progress=round(stats.goal_progress(today_steps, daily_goal), 1),
        weekly_goal=weekly_goal,
        weekly_steps=weekly_steps,
        weekly_progress=round(stats.goal_progress(weekly_steps, weekly_goal), 1),
        weekly_goal_achieved=weekly_steps >= weekly_goal,
        current_streak=stats.trailing_streak(records, day),
    )
