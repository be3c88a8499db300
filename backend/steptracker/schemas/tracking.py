from datetime import datetime
from typing import Optional

from pydantic import Field

from steptracker.schemas.common import CamelModel
from steptracker.tracking.geo import GeoSample
from steptracker.tracking.session import SessionPhase, WalkMode


class TrackingStart(CamelModel):
    mode: WalkMode = WalkMode.JUST_WALK


class GeoSampleIn(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude_meters: Optional[float] = None
    accuracy_meters: Optional[float] = Field(None, ge=0)
    timestamp_millis: int = Field(..., ge=0)

    def to_sample(self) -> GeoSample:
        return GeoSample(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp_ms=self.timestamp_millis,
            altitude_m=self.altitude_meters,
            accuracy_m=self.accuracy_meters,
        )


class GeoSampleBatch(CamelModel):
    samples: list[GeoSampleIn]


class StepCounterIn(CamelModel):
    counter: int = Field(..., ge=0)  # lifetime step counter from the device


class SessionSnapshotRead(CamelModel):
    phase: SessionPhase
    mode: Optional[WalkMode] = None
    start_time: Optional[datetime] = None
    elapsed_seconds: int
    distance_meters: float
    max_elevation_meters: Optional[float] = None
    elevation_gain_meters: float
    steps: int
    accepted_samples: int
    rejected_samples: int
    current_pace_minutes_per_km: Optional[float] = None


class IngestResult(CamelModel):
    accepted: int
    rejected: int
    snapshot: SessionSnapshotRead


class StepCounterResult(CamelModel):
    steps: int
