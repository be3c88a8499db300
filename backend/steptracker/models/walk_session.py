from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float
from sqlalchemy.sql import func
from steptracker.db import Base


class WalkSession(Base):
    __tablename__ = "walk_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    name = Column(String(255), nullable=True)
    notes = Column(String, nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)

    # Derived at save time; NULL while unknown (no end time / no distance)
    duration_seconds = Column(Integer, nullable=True)
    distance_meters = Column(Float, nullable=True)
    steps = Column(Integer, nullable=True)
    average_pace_minutes_per_km = Column(Float, nullable=True)
    max_elevation_meters = Column(Float, nullable=True)
    elevation_gain_meters = Column(Float, nullable=True)
    calories = Column(Integer, nullable=True)

    # AUTO_ROUTE, DRAW_ROUTE, JUST_WALK
    mode = Column(String(20), nullable=False, server_default="JUST_WALK")

    # Source of walk data: tracked (live session), manual, gpx
    source = Column(String(20), nullable=False, server_default="manual")

    is_saved = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
