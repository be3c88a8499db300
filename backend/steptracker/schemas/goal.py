from datetime import date
from typing import Optional

from pydantic import Field

from steptracker.schemas.common import CamelModel


class StepGoalRead(CamelModel):
    daily_steps: int
    weekly_steps: int


class StepGoalUpsert(CamelModel):
    daily_steps: int = Field(..., gt=0)
    weekly_steps: Optional[int] = Field(None, gt=0)


class GoalProgressRead(CamelModel):
    date: date
    daily_goal: int
    today_steps: int
    daily_progress: float
    weekly_goal: int
    weekly_steps: int
    weekly_progress: float
    weekly_goal_achieved: bool
    current_streak: int
