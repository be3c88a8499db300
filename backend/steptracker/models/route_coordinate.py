from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from steptracker.db import Base


class RouteCoordinate(Base):
    __tablename__ = "route_coordinates"

    id = Column(Integer, primary_key=True, index=True)
    walk_session_id = Column(
        Integer, ForeignKey("walk_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    seq = Column(Integer, nullable=False)  # 0-based order within the walk
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    elevation_meters = Column(Float, nullable=True)
    accuracy_meters = Column(Float, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=True)
