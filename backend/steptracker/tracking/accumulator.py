"""Running distance and elevation totals over accepted GPS samples.

State is a frozen value: `update` returns a new `TrackState` and never touches
the one it was given, so a caller can keep the previous state around (or hand
it to readers) while the next sample is folded in.
"""
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from steptracker.tracking.geo import GeoSample, sample_distance_m


@dataclass(frozen=True)
class TrackState:
    distance_m: float = 0.0
    max_elevation_m: Optional[float] = None
    elevation_gain_m: float = 0.0
    last_altitude_m: Optional[float] = None
    last_sample: Optional[GeoSample] = None
    sample_count: int = 0


def update(state: TrackState, sample: GeoSample) -> TrackState:
    distance = state.distance_m
    if state.last_sample is not None:
        distance += sample_distance_m(state.last_sample, sample)

    max_elevation = state.max_elevation_m
    gain = state.elevation_gain_m
    last_altitude = state.last_altitude_m
    alt = sample.altitude_m
    if alt is not None:
        max_elevation = alt if max_elevation is None else max(max_elevation, alt)
        # gain only between two real altitudes; descents are ignored
        if last_altitude is not None and alt > last_altitude:
            gain += alt - last_altitude
        last_altitude = alt

    return replace(
        state,
        distance_m=distance,
        max_elevation_m=max_elevation,
        elevation_gain_m=gain,
        last_altitude_m=last_altitude,
        last_sample=sample,
        sample_count=state.sample_count + 1,
    )


def accumulate(samples: Iterable[GeoSample], state: TrackState | None = None) -> TrackState:
    state = state or TrackState()
    for s in samples:
        state = update(state, s)
    return state
