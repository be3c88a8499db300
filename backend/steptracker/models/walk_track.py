from sqlalchemy import Column, Integer, ForeignKey, JSON
from steptracker.db import Base


class WalkTrack(Base):
    __tablename__ = "walk_tracks"

    walk_session_id = Column(
        Integer, ForeignKey("walk_sessions.id", ondelete="CASCADE"), primary_key=True
    )
    geojson = Column(JSON, nullable=True)  # LineString
    bounds = Column(JSON, nullable=True)   # {minLat, minLon, maxLat, maxLon}
    points_count = Column(Integer, nullable=True)
