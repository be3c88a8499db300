import pytest
from sqlalchemy.exc import OperationalError

from steptracker.api import tracking
from steptracker.api.tracking import registry


def fix(lat, lon, ts, alt=None, acc=5.0):
    return {"latitude": lat, "longitude": lon, "altitudeMeters": alt, "accuracyMeters": acc, "timestampMillis": ts}


def test_tracked_walk_is_saved(client, user_headers):
    r = client.post("/tracking/start", json={"mode": "JUST_WALK"}, headers=user_headers)
    assert r.status_code == 201, r.text
    assert r.json()["phase"] == "ACTIVE"

    r = client.post(
        "/tracking/samples",
        json={
            "samples": [
                fix(48.8566, 2.3522, 1_000, alt=35.0),
                fix(48.8570, 2.3530, 2_000, alt=40.0),
                fix(48.8571, 2.3531, 2_000),  # same timestamp
                fix(48.8575, 2.3540, 3_000, acc=120.0),  # too inaccurate
            ]
        },
        headers=user_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["accepted"] == 2
    assert body["rejected"] == 2
    assert body["snapshot"]["distanceMeters"] > 0

    client.post("/tracking/steps", json={"counter": 20_000}, headers=user_headers)
    r = client.post("/tracking/steps", json={"counter": 20_500}, headers=user_headers)
    assert r.json() == {"steps": 500}

    r = client.post("/tracking/stop", json={"name": "Evening"}, headers=user_headers)
    assert r.status_code == 201, r.text
    walk = r.json()
    assert walk["name"] == "Evening"
    assert walk["source"] == "tracked"
    assert walk["steps"] == 500
    assert walk["calories"] == 20
    assert walk["elevationGainMeters"] == 5.0

    listed = client.get("/walks/", headers=user_headers).json()
    assert [w["id"] for w in listed["walkSessions"]] == [walk["id"]]
    detail = client.get(f"/walks/{walk['id']}", headers=user_headers).json()
    assert len(detail["routeCoordinates"]) == 2


def test_pause_drops_samples(client, user_headers):
    client.post("/tracking/start", headers=user_headers)
    client.post("/tracking/samples", json={"samples": [fix(0.0, 0.0, 1_000)]}, headers=user_headers)
    assert client.post("/tracking/pause", headers=user_headers).json()["phase"] == "PAUSED"

    body = client.post("/tracking/samples", json={"samples": [fix(0.0, 0.01, 2_000)]}, headers=user_headers).json()
    assert body["accepted"] == 0
    assert body["snapshot"]["acceptedSamples"] == 1

    assert client.post("/tracking/resume", headers=user_headers).json()["phase"] == "ACTIVE"
    client.delete("/tracking/", headers=user_headers)


def test_invalid_transitions_conflict(client, user_headers):
    assert client.post("/tracking/stop", headers=user_headers).status_code == 409
    assert client.post("/tracking/pause", headers=user_headers).status_code == 409

    client.post("/tracking/start", headers=user_headers)
    assert client.post("/tracking/start", headers=user_headers).status_code == 409
    assert client.post("/tracking/stop", headers=user_headers).status_code == 201
    assert client.post("/tracking/stop", headers=user_headers).status_code == 409

    # a stopped session does not block the next walk
    assert client.post("/tracking/start", headers=user_headers).status_code == 201
    client.delete("/tracking/", headers=user_headers)
    assert client.get("/tracking/", headers=user_headers).json()["phase"] == "IDLE"


def test_stop_without_steps_or_fixes(client, user_headers):
    client.post("/tracking/start", headers=user_headers)
    walk = client.post("/tracking/stop", headers=user_headers).json()
    assert walk["steps"] == 0
    assert walk["distanceMeters"] == 0.0
    assert walk["averagePaceMinutesPerKm"] is None


def test_stop_can_be_retried_after_failed_save(client, user_headers, monkeypatch):
    client.post("/tracking/start", headers=user_headers)
    client.post(
        "/tracking/samples",
        json={"samples": [fix(48.8566, 2.3522, 1_000), fix(48.8570, 2.3530, 2_000)]},
        headers=user_headers,
    )
    client.post("/tracking/steps", json={"counter": 100}, headers=user_headers)
    client.post("/tracking/steps", json={"counter": 400}, headers=user_headers)

    def failing_save(*args, **kwargs):
        raise OperationalError("INSERT INTO walk_sessions", {}, Exception("database is locked"))

    monkeypatch.setattr(tracking, "save_finished_walk", failing_save)
    with pytest.raises(OperationalError):
        client.post("/tracking/stop", headers=user_headers)
    assert client.get("/tracking/", headers=user_headers).json()["phase"] == "STOPPED"
    assert client.get("/walks/", headers=user_headers).json()["pagination"]["total"] == 0

    monkeypatch.undo()
    r = client.post("/tracking/stop", headers=user_headers)
    assert r.status_code == 201, r.text
    assert r.json()["steps"] == 300
    assert client.get("/walks/", headers=user_headers).json()["pagination"]["total"] == 1

    # stored now, so a further stop is a conflict and a new walk can start
    assert client.post("/tracking/stop", headers=user_headers).status_code == 409
    assert client.post("/tracking/start", headers=user_headers).status_code == 201
    client.delete("/tracking/", headers=user_headers)


def test_reads_do_not_create_sessions(client, user_headers):
    user_id = user_headers["X-User-Id"]
    snap = client.get("/tracking/", headers=user_headers).json()
    assert snap["phase"] == "IDLE"
    assert snap["elapsedSeconds"] == 0
    assert client.post("/tracking/steps/reset", headers=user_headers).status_code == 409
    assert client.post("/tracking/steps", json={"counter": 5}, headers=user_headers).status_code == 409
    assert registry.find(user_id) is None
