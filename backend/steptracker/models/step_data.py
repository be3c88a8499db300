from sqlalchemy import Column, Integer, String, Date, DateTime, Float, UniqueConstraint
from sqlalchemy.sql import func
from steptracker.db import Base


class StepData(Base):
    __tablename__ = "step_data"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_step_data_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    # One calendar day per user
    date = Column(Date, nullable=False)

    steps = Column(Integer, nullable=False, default=0)
    distance_meters = Column(Float, nullable=False, default=0.0)
    calories = Column(Integer, nullable=False, default=0)
    active_minutes = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
