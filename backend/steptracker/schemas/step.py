from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from steptracker.core.constants import MAX_DAILY_STEPS
from steptracker.schemas.common import CamelModel
from steptracker.tracking.reconcile import SyncAction


class StatisticsPeriod(str, Enum):
    week = "week"
    month = "month"
    year = "year"


class SummaryWindow(str, Enum):
    week = "week"
    month = "month"


class StepDay(CamelModel):
    date: date
    steps: int
    distance_meters: float = 0.0
    calories: int = 0
    active_minutes: int = 0


class StepSyncItem(CamelModel):
    date: date
    steps: int = Field(..., ge=0, le=MAX_DAILY_STEPS)
    distance_meters: Optional[float] = Field(None, ge=0)
    calories: Optional[int] = Field(None, ge=0)
    active_minutes: Optional[int] = Field(None, ge=0)


class StepSyncRequest(CamelModel):
    steps: list[StepSyncItem]


class StepSyncResult(CamelModel):
    date: date
    action: SyncAction


class StepSyncResponse(CamelModel):
    message: str
    results: list[StepSyncResult]


class StepStatisticsRead(CamelModel):
    period: StatisticsPeriod
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


class TrendDay(CamelModel):
    date: date
    steps: int
    distance_meters: float
    calories: int


class MovingAverageRead(CamelModel):
    date: date
    average_steps: int


class StepTrendsRead(CamelModel):
    daily_data: list[TrendDay]
    moving_averages: list[MovingAverageRead]
    period: str  # e.g. "30 days"


class StepSummaryRead(CamelModel):
    window: SummaryWindow
    start_date: date
    end_date: date
    total_steps: int
    average_steps: int
    days_with_data: int
    goal_progress: float


class BestDayRead(CamelModel):
    date: date
    steps: int


class HabitDay(CamelModel):
    date: date
    steps: int
    level: int  # 0 (none) .. 4 (goal reached)
