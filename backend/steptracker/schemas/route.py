from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from steptracker.schemas.common import CamelModel


class SavedRouteCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    distance_meters: float = Field(..., ge=0)
    estimated_minutes: Optional[int] = Field(None, ge=0)
    route_polyline: str = Field(..., min_length=1)
    start_location: Optional[str] = Field(None, max_length=255)
    is_favorite: bool = False


class SavedRouteUpdate(CamelModel):
    """All fields optional."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    distance_meters: Optional[float] = Field(None, ge=0)
    estimated_minutes: Optional[int] = Field(None, ge=0)
    route_polyline: Optional[str] = Field(None, min_length=1)
    start_location: Optional[str] = Field(None, max_length=255)
    is_favorite: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")


class FavoriteUpdate(CamelModel):
    is_favorite: bool


class SavedRouteRead(CamelModel):
    id: int
    name: str
    distance_meters: float
    estimated_minutes: Optional[int] = None
    route_polyline: str
    start_location: Optional[str] = None
    is_favorite: bool
    created_at: Optional[datetime] = None
