import pytest

from steptracker.core.errors import InvalidStateError, ValidationError
from steptracker.tracking.accumulator import TrackState, accumulate, update
from steptracker.tracking.geo import GeoSample, SampleFilter, haversine_m, route_geojson


PARIS = [
    GeoSample(48.8566, 2.3522, 1_000, altitude_m=35.0, accuracy_m=5.0),
    GeoSample(48.8570, 2.3530, 2_000, altitude_m=40.0, accuracy_m=5.0),
    GeoSample(48.8575, 2.3540, 3_000, altitude_m=38.0, accuracy_m=5.0),
]


def test_haversine_one_degree_latitude():
    d = haversine_m(0.0, 0.0, 1.0, 0.0)
    assert d == pytest.approx(111_195, rel=1e-3)


def test_filter_rejects_inaccurate_and_stale_fixes():
    f = SampleFilter(max_accuracy_m=50.0)
    prev = GeoSample(1.0, 1.0, 5_000, accuracy_m=5.0)

    assert f.accept(GeoSample(1.0, 1.0, 6_000, accuracy_m=50.0), prev)
    assert not f.accept(GeoSample(1.0, 1.0, 6_000, accuracy_m=50.1), prev)
    assert not f.accept(GeoSample(1.0, 1.0, 6_000, accuracy_m=None), prev)
    # timestamps must strictly increase
    assert not f.accept(GeoSample(1.0, 1.0, 5_000, accuracy_m=5.0), prev)
    assert not f.accept(GeoSample(1.0, 1.0, 4_000, accuracy_m=5.0), prev)
    assert f.accept(GeoSample(1.0, 1.0, 0, accuracy_m=5.0), None)


def test_accumulate_distance_and_elevation():
    state = accumulate(PARIS)
    expected = (
        haversine_m(48.8566, 2.3522, 48.8570, 2.3530)
        + haversine_m(48.8570, 2.3530, 48.8575, 2.3540)
    )
    assert state.distance_m == pytest.approx(expected)
    assert state.elevation_gain_m == pytest.approx(5.0)
    assert state.max_elevation_m == 40.0
    assert state.sample_count == 3


def test_update_does_not_mutate_previous_state():
    first = update(TrackState(), PARIS[0])
    second = update(first, PARIS[1])
    assert first.sample_count == 1
    assert first.distance_m == 0.0
    assert second.sample_count == 2
    assert second.distance_m > 0


def test_missing_altitude_does_not_create_gain():
    samples = [
        GeoSample(0.0, 0.0, 1, altitude_m=10.0),
        GeoSample(0.0, 0.0001, 2, altitude_m=None),
        GeoSample(0.0, 0.0002, 3, altitude_m=12.0),
    ]
    state = accumulate(samples)
    assert state.elevation_gain_m == pytest.approx(2.0)
    assert state.max_elevation_m == 12.0

    no_alt = accumulate([GeoSample(0.0, 0.0, 1), GeoSample(0.0, 0.001, 2)])
    assert no_alt.max_elevation_m is None
    assert no_alt.elevation_gain_m == 0.0


def test_route_geojson_bounds():
    geojson, bounds = route_geojson(PARIS)
    assert geojson["type"] == "LineString"
    assert geojson["coordinates"][0] == [2.3522, 48.8566]
    assert bounds == {"minLat": 48.8566, "minLon": 2.3522, "maxLat": 48.8575, "maxLon": 2.3540}
    assert route_geojson([]) == (None, None)


def test_error_status_codes():
    assert InvalidStateError("x").status_code == 409
    assert ValidationError("x").status_code == 422
