import math
from dataclasses import dataclass
from typing import Optional

from steptracker.core.constants import DEFAULT_MAX_ACCURACY_M, EARTH_RADIUS_M


@dataclass(frozen=True)
class GeoSample:
    """One location fix as delivered by the location provider."""

    latitude: float
    longitude: float
    timestamp_ms: int
    altitude_m: Optional[float] = None
    accuracy_m: Optional[float] = None


def haversine_m(lat1, lon1, lat2, lon2):
    """Return great-circle distance in meters between two WGS84 points.

    Uses the standard haversine formula; sufficient for per-point distances
    over a typical GPS walk track.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def sample_distance_m(a: GeoSample, b: GeoSample) -> float:
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


class SampleFilter:
    """Drops low-accuracy fixes and fixes that do not move time forward.

    Holds only its threshold; the caller supplies the last accepted sample.
    """

    def __init__(self, max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M):
        self.max_accuracy_m = max_accuracy_m

    def accept(self, sample: GeoSample, previous: Optional[GeoSample]) -> bool:
        if sample.accuracy_m is None or sample.accuracy_m > self.max_accuracy_m:
            return False
        if previous is not None and sample.timestamp_ms <= previous.timestamp_ms:
            return False
        return True


def route_geojson(samples: list[GeoSample]):
    """Build (geojson LineString, bounds) for a route, or (None, None) if empty."""
    if not samples:
        return None, None
    lats = [s.latitude for s in samples]
    lons = [s.longitude for s in samples]
    bounds = {
        "minLat": min(lats),
        "minLon": min(lons),
        "maxLat": max(lats),
        "maxLon": max(lons),
    }
    coords = [[s.longitude, s.latitude] for s in samples]
    return {"type": "LineString", "coordinates": coords}, bounds
