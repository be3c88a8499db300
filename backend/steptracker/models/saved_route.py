from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float
from sqlalchemy.sql import func
from steptracker.db import Base


class SavedRoute(Base):
    __tablename__ = "saved_routes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    distance_meters = Column(Float, nullable=False)
    estimated_minutes = Column(Integer, nullable=True)

    # Encoded polyline (Google polyline algorithm) as produced by the map client
    route_polyline = Column(String, nullable=False)
    start_location = Column(String(255), nullable=True)  # address or description

    is_favorite = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
