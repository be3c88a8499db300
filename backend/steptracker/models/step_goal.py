from sqlalchemy import Column, Integer, String
from steptracker.db import Base


class StepGoal(Base):
    __tablename__ = "step_goals"

    # One goal row per user
    user_id = Column(String(64), primary_key=True, index=True, nullable=False)

    daily_steps = Column(Integer, nullable=False)
    weekly_steps = Column(Integer, nullable=True)  # if NULL, 7 * daily_steps
