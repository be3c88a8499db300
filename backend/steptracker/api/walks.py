import logging
import math
from datetime import datetime, timezone
from typing import Optional

import gpxpy
import gpxpy.gpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from steptracker.api.deps import current_user_id
from steptracker.core.config import settings
from steptracker.core.time_utils import format_pace, seconds_to_hhmmss
from steptracker.db import get_db
from steptracker.models.route_coordinate import RouteCoordinate
from steptracker.models.walk_session import WalkSession
from steptracker.models.walk_track import WalkTrack
from steptracker.schemas.walk import (
    Pagination,
    RouteCoordinateIn,
    RouteCoordinateRead,
    WalkCreate,
    WalkCreated,
    WalkDetail,
    WalkHighlight,
    WalkList,
    WalkRead,
    WalkSummary,
    WalkTrackRead,
    WalkUpdate,
)
from steptracker.tracking.accumulator import accumulate
from steptracker.tracking.geo import GeoSample, route_geojson
from steptracker.tracking.session import (
    FinishedWalk,
    WalkMode,
    average_pace,
    estimate_calories,
    estimate_distance_m,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/walks", tags=["walks"])


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    # naive timestamps from clients are taken as UTC
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _ms_to_datetime(ms: Optional[int]) -> Optional[datetime]:
    if not ms:
        return None
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def _coordinate_to_sample(coord: RouteCoordinateIn) -> GeoSample:
    ts = _aware(coord.timestamp)
    return GeoSample(
        latitude=coord.latitude,
        longitude=coord.longitude,
        timestamp_ms=int(ts.timestamp() * 1000) if ts else 0,
        altitude_m=coord.elevation_meters,
        accuracy_m=coord.accuracy_meters,
    )


def _add_route(db: Session, walk_id: int, samples: list[GeoSample]) -> None:
    """Persist ordered raw points plus the GeoJSON track for a walk."""
    for idx, s in enumerate(samples):
        db.add(
            RouteCoordinate(
                walk_session_id=walk_id,
                seq=idx,
                latitude=s.latitude,
                longitude=s.longitude,
                elevation_meters=s.altitude_m,
                accuracy_meters=s.accuracy_m,
                timestamp=_ms_to_datetime(s.timestamp_ms),
            )
        )
    geojson, bounds = route_geojson(samples)
    db.add(
        WalkTrack(
            walk_session_id=walk_id,
            geojson=geojson,
            bounds=bounds,
            points_count=len(samples),
        )
    )


def create_walk_record(db: Session, user_id: str, payload: WalkCreate, source: str = "manual") -> WalkSession:
    """Derive metrics from the submitted route and persist the walk.

    Duration needs an end time; pace needs duration and a non-zero distance.
    Distance falls back to the route length when the client sent none, then
    to a stride-based estimate from the step count.
    """
    start = _aware(payload.start_time)
    end = _aware(payload.end_time)
    if end is not None and end < start:
        raise HTTPException(status_code=422, detail="endTime must not be before startTime")

    samples = [_coordinate_to_sample(c) for c in payload.route_coordinates]
    track = accumulate(samples)

    duration = int((end - start).total_seconds()) if end is not None else None
    if payload.distance_meters is not None:
        distance = payload.distance_meters
    else:
        distance = track.distance_m if samples else None
    if distance is None and payload.steps:
        distance = estimate_distance_m(payload.steps, settings.step_length_m)
    has_elevation = track.max_elevation_m is not None

    walk = WalkSession(
        user_id=user_id,
        name=payload.name,
        notes=payload.notes,
        start_time=start,
        end_time=end,
        duration_seconds=duration,
        distance_meters=distance,
        steps=payload.steps,
        average_pace_minutes_per_km=average_pace(duration, distance),
        max_elevation_meters=track.max_elevation_m,
        elevation_gain_meters=track.elevation_gain_m if has_elevation else None,
        calories=estimate_calories(payload.steps, settings.body_weight_kg) if payload.steps else None,
        mode=payload.mode.value,
        source=source,
        is_public=payload.is_public,
        is_saved=payload.is_saved,
    )
    return _persist(db, walk, samples)


def save_finished_walk(db: Session, user_id: str, finished: FinishedWalk, name: Optional[str] = None) -> WalkSession:
    """Persist a walk handed over by a stopped live session."""
    walk = WalkSession(
        user_id=user_id,
        name=name,
        start_time=finished.start_time,
        end_time=finished.end_time,
        duration_seconds=finished.duration_seconds,
        distance_meters=finished.distance_m,
        steps=finished.steps,
        average_pace_minutes_per_km=finished.average_pace_min_per_km,
        max_elevation_meters=finished.max_elevation_m,
        elevation_gain_meters=finished.elevation_gain_m if finished.max_elevation_m is not None else None,
        calories=finished.calories,
        mode=finished.mode.value,
        source="tracked",
        is_public=False,
        is_saved=False,
    )
    return _persist(db, walk, list(finished.samples))


def _persist(db: Session, walk: WalkSession, samples: list[GeoSample]) -> WalkSession:
    try:
        db.add(walk)
        db.flush()
        _add_route(db, walk.id, samples)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failed to save walk for user=%s", walk.user_id)
        raise
    db.refresh(walk)
    logger.info(
        "saved walk id=%s user=%s source=%s distance=%s points=%d",
        walk.id, walk.user_id, walk.source, walk.distance_meters, len(samples),
    )
    return walk


def _walk_read(walk: WalkSession, cls=WalkRead):
    out = cls.model_validate(walk)
    out.duration = seconds_to_hhmmss(walk.duration_seconds) if walk.duration_seconds is not None else None
    out.pace = format_pace(walk.average_pace_minutes_per_km)
    return out


def _get_owned(db: Session, walk_id: int, user_id: str) -> WalkSession:
    walk = (
        db.query(WalkSession)
        .filter(WalkSession.id == walk_id, WalkSession.user_id == user_id)
        .first()
    )
    if not walk:
        raise HTTPException(status_code=404, detail="Walk session not found")
    return walk


@router.post("/", response_model=WalkCreated, status_code=201)
def create_walk(
    payload: WalkCreate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    walk = create_walk_record(db, user_id, payload)
    return WalkCreated(message="Walk session created successfully", walk_session_id=walk.id)


@router.get("/", response_model=WalkList)
def list_walks(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """
    List walks, most recent first, optionally filtered by start time.

      GET /walks?page=2&limit=10&startDate=2025-01-01
    """
    query = db.query(WalkSession).filter(WalkSession.user_id == user_id)
    if start_date is not None:
        query = query.filter(WalkSession.start_time >= _aware(start_date))
    if end_date is not None:
        query = query.filter(WalkSession.start_time <= _aware(end_date))

    total = query.count()
    walks = (
        query.order_by(WalkSession.start_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return WalkList(
        walk_sessions=[_walk_read(w) for w in walks],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get("/statistics/summary", response_model=WalkSummary)
def get_walk_summary(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    query = db.query(WalkSession).filter(WalkSession.user_id == user_id)

    total_walks = query.count()
    total_distance = query.with_entities(func.sum(WalkSession.distance_meters)).scalar() or 0
    total_duration = query.with_entities(func.sum(WalkSession.duration_seconds)).scalar() or 0
    avg_pace = (
        query.filter(WalkSession.average_pace_minutes_per_km.isnot(None))
        .with_entities(func.avg(WalkSession.average_pace_minutes_per_km))
        .scalar()
    )

    longest = (
        query.filter(WalkSession.distance_meters.isnot(None))
        .order_by(WalkSession.distance_meters.desc())
        .first()
    )
    fastest = (
        query.filter(WalkSession.average_pace_minutes_per_km.isnot(None))
        .order_by(WalkSession.average_pace_minutes_per_km.asc())
        .first()
    )

    def highlight(w: Optional[WalkSession]):
        if w is None:
            return None
        return WalkHighlight(
            id=w.id,
            name=w.name,
            distance_meters=w.distance_meters,
            average_pace_minutes_per_km=w.average_pace_minutes_per_km,
            date=w.start_time,
        )

    return WalkSummary(
        total_walks=total_walks,
        total_distance_meters=float(total_distance),
        total_duration_seconds=int(total_duration),
        average_pace_minutes_per_km=float(avg_pace or 0.0),
        longest_walk=highlight(longest),
        fastest_walk=highlight(fastest),
    )


@router.post("/import", response_model=WalkRead, status_code=201)
def import_gpx(
    file: UploadFile = File(...),
    mode: WalkMode = Form(WalkMode.JUST_WALK),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Create a walk from a GPX track; metrics come from the track points."""
    filename = file.filename or "upload.gpx"
    if not filename.lower().endswith(".gpx"):
        raise HTTPException(status_code=422, detail="Only .gpx files are supported")

    try:
        gpx = gpxpy.parse(file.file.read().decode("utf-8"))
    except (gpxpy.gpx.GPXException, UnicodeDecodeError) as e:
        raise HTTPException(status_code=422, detail=f"Could not parse GPX file: {e}")

    coords = []
    for track in gpx.tracks:
        for segment in track.segments:
            for p in segment.points:
                coords.append(
                    RouteCoordinateIn(
                        latitude=p.latitude,
                        longitude=p.longitude,
                        elevation_meters=p.elevation,
                        timestamp=p.time,
                    )
                )
    if not coords:
        raise HTTPException(status_code=422, detail="GPX file has no track points")

    times = [c.timestamp for c in coords if c.timestamp is not None]
    if not times:
        raise HTTPException(status_code=422, detail="GPX track points carry no timestamps")

    name = gpx.tracks[0].name if gpx.tracks and gpx.tracks[0].name else gpx.name
    payload = WalkCreate(
        name=name or filename,
        start_time=times[0],
        end_time=times[-1],
        mode=mode,
        route_coordinates=coords,
    )
    walk = create_walk_record(db, user_id, payload, source="gpx")
    return _walk_read(walk)


@router.get("/{walk_id}", response_model=WalkDetail)
def get_walk(
    walk_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    walk = _get_owned(db, walk_id, user_id)
    coords = (
        db.query(RouteCoordinate)
        .filter(RouteCoordinate.walk_session_id == walk_id)
        .order_by(RouteCoordinate.seq)
        .all()
    )
    track = db.query(WalkTrack).filter(WalkTrack.walk_session_id == walk_id).first()

    out = _walk_read(walk, WalkDetail)
    out.route_coordinates = [RouteCoordinateRead.model_validate(c) for c in coords]
    out.track = WalkTrackRead.model_validate(track) if track else None
    return out


@router.put("/{walk_id}", response_model=WalkRead)
def update_walk(
    walk_id: int,
    payload: WalkUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Edit the descriptive fields of a finished walk (name, notes, visibility, saved)."""
    walk = _get_owned(db, walk_id, user_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in ("is_public", "is_saved"):
            continue
        setattr(walk, key, value)
    db.commit()
    db.refresh(walk)
    return _walk_read(walk)


@router.delete("/{walk_id}")
def delete_walk(
    walk_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    walk = _get_owned(db, walk_id, user_id)
    # explicit deletes: sqlite does not enforce ON DELETE CASCADE by default
    db.query(RouteCoordinate).filter(RouteCoordinate.walk_session_id == walk_id).delete()
    db.query(WalkTrack).filter(WalkTrack.walk_session_id == walk_id).delete()
    db.delete(walk)
    db.commit()
    return {"message": "Walk session deleted"}
