from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from steptracker.schemas.common import CamelModel
from steptracker.tracking.session import WalkMode


class RouteCoordinateIn(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    elevation_meters: Optional[float] = None
    timestamp: Optional[datetime] = None
    accuracy_meters: Optional[float] = Field(None, ge=0)


class RouteCoordinateRead(RouteCoordinateIn):
    pass


class WalkCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    start_time: datetime
    end_time: Optional[datetime] = None
    distance_meters: Optional[float] = Field(None, ge=0)
    steps: Optional[int] = Field(None, ge=0)
    mode: WalkMode = WalkMode.JUST_WALK
    notes: Optional[str] = None
    is_public: bool = False
    is_saved: bool = False
    route_coordinates: list[RouteCoordinateIn] = []


class WalkCreated(CamelModel):
    message: str
    walk_session_id: int


class WalkUpdate(CamelModel):
    """All fields optional; derived metrics cannot be edited."""

    name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    is_public: Optional[bool] = None
    is_saved: Optional[bool] = None

    # Be lenient with extra fields from clients
    model_config = ConfigDict(extra="ignore")


class WalkRead(CamelModel):
    id: int
    name: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    duration: Optional[str] = None  # "HH:MM:SS"
    distance_meters: Optional[float] = None
    steps: Optional[int] = None
    average_pace_minutes_per_km: Optional[float] = None
    pace: Optional[str] = None  # e.g. "11:30/km"
    max_elevation_meters: Optional[float] = None
    elevation_gain_meters: Optional[float] = None
    calories: Optional[int] = None
    mode: WalkMode
    source: Optional[str] = None
    notes: Optional[str] = None
    is_saved: bool = False
    is_public: bool = False
    created_at: Optional[datetime] = None


class WalkTrackRead(CamelModel):
    geojson: Optional[dict] = None
    bounds: Optional[dict] = None
    points_count: Optional[int] = None


class WalkDetail(WalkRead):
    route_coordinates: list[RouteCoordinateRead] = []
    track: Optional[WalkTrackRead] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class WalkList(CamelModel):
    walk_sessions: list[WalkRead]
    pagination: Pagination


class WalkHighlight(CamelModel):
    id: int
    name: Optional[str] = None
    distance_meters: Optional[float] = None
    average_pace_minutes_per_km: Optional[float] = None
    date: datetime


class WalkSummary(CamelModel):
    total_walks: int
    total_distance_meters: float
    total_duration_seconds: int
    average_pace_minutes_per_km: float
    longest_walk: Optional[WalkHighlight] = None
    fastest_walk: Optional[WalkHighlight] = None
