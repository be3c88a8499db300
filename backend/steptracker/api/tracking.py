"""Live walk tracking.

Each user has at most one in-memory `WalkSessionAggregator`. The device streams
location fixes and step-counter readings here while walking; `stop` finalizes
the walk and stores it like any other walk.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from steptracker.api.deps import current_user_id
from steptracker.api.walks import _walk_read, save_finished_walk
from steptracker.core.config import settings
from steptracker.core.errors import InvalidStateError
from steptracker.db import get_db
from steptracker.schemas.tracking import (
    GeoSampleBatch,
    IngestResult,
    SessionSnapshotRead,
    StepCounterIn,
    StepCounterResult,
    TrackingStart,
)
from steptracker.schemas.walk import WalkRead
from steptracker.tracking.geo import SampleFilter
from steptracker.tracking.session import (
    DurationPolicy,
    SessionRegistry,
    SessionSnapshot,
    WalkSessionAggregator,
)

router = APIRouter(prefix="/tracking", tags=["tracking"])


def new_aggregator() -> WalkSessionAggregator:
    return WalkSessionAggregator(
        sample_filter=SampleFilter(settings.max_accuracy_m),
        policy=DurationPolicy(settings.pause_policy),
        weight_kg=settings.body_weight_kg,
    )


registry = SessionRegistry(new_aggregator)


def get_registry() -> SessionRegistry:
    return registry


def _existing(reg: SessionRegistry, user_id: str) -> WalkSessionAggregator:
    agg = reg.find(user_id)
    if agg is None:
        raise InvalidStateError("No walk in progress")
    return agg


def _snapshot_read(snap: SessionSnapshot) -> SessionSnapshotRead:
    return SessionSnapshotRead(
        phase=snap.phase,
        mode=snap.mode,
        start_time=snap.start_time,
        elapsed_seconds=snap.elapsed_seconds,
        distance_meters=snap.distance_m,
        max_elevation_meters=snap.max_elevation_m,
        elevation_gain_meters=snap.elevation_gain_m,
        steps=snap.steps,
        accepted_samples=snap.accepted_samples,
        rejected_samples=snap.rejected_samples,
        current_pace_minutes_per_km=snap.current_pace_min_per_km,
    )


@router.get("/", response_model=SessionSnapshotRead)
def get_session(
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    agg = reg.find(user_id)
    return _snapshot_read(agg.snapshot() if agg else SessionSnapshot.idle())


@router.post("/start", response_model=SessionSnapshotRead, status_code=201)
def start_session(
    payload: Optional[TrackingStart] = Body(None),
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    payload = payload or TrackingStart()
    return _snapshot_read(reg.start(user_id, payload.mode))


@router.post("/samples", response_model=IngestResult)
def ingest_samples(
    payload: GeoSampleBatch,
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    """Feed location fixes in device order. Fixes sent while paused are dropped."""
    agg = _existing(reg, user_id)
    accepted = 0
    for item in payload.samples:
        if agg.ingest(item.to_sample()):
            accepted += 1
    return IngestResult(
        accepted=accepted,
        rejected=len(payload.samples) - accepted,
        snapshot=_snapshot_read(agg.snapshot()),
    )


@router.post("/steps", response_model=StepCounterResult)
def record_step_counter(
    payload: StepCounterIn,
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    return StepCounterResult(steps=_existing(reg, user_id).record_step_counter(payload.counter))


@router.post("/steps/reset", response_model=SessionSnapshotRead)
def reset_step_counter(
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    agg = _existing(reg, user_id)
    agg.reset_step_count()
    return _snapshot_read(agg.snapshot())


@router.post("/pause", response_model=SessionSnapshotRead)
def pause_session(
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    return _snapshot_read(_existing(reg, user_id).pause())


@router.post("/resume", response_model=SessionSnapshotRead)
def resume_session(
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    return _snapshot_read(_existing(reg, user_id).resume())


@router.post("/stop", response_model=WalkRead, status_code=201)
def stop_session(
    name: Optional[str] = Body(None, embed=True),
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    """Stop the walk and store it.

    A failed save leaves the walk on the session; calling stop again retries it.
    """
    agg = _existing(reg, user_id)
    finished = agg.stop()
    walk = save_finished_walk(db, user_id, finished, name=name)
    agg.mark_saved(finished)
    return _walk_read(walk)


@router.delete("/")
def discard_session(
    user_id: str = Depends(current_user_id),
    reg: SessionRegistry = Depends(get_registry),
):
    reg.discard(user_id)
    return {"message": "Tracking session discarded"}
