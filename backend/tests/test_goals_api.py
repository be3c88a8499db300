from datetime import date, timedelta


def test_default_goal(client, user_headers):
    r = client.get("/goals/", headers=user_headers)
    assert r.status_code == 200
    assert r.json() == {"dailySteps": 10000, "weeklySteps": 70000}


def test_upsert_goal(client, user_headers):
    r = client.put("/goals/", json={"dailySteps": 8000}, headers=user_headers)
    assert r.status_code == 200
    assert r.json() == {"dailySteps": 8000, "weeklySteps": 56000}

    r = client.put("/goals/", json={"dailySteps": 8000, "weeklySteps": 50000}, headers=user_headers)
    assert r.json()["weeklySteps"] == 50000
    assert client.get("/goals/", headers=user_headers).json()["weeklySteps"] == 50000

    assert client.put("/goals/", json={"dailySteps": 0}, headers=user_headers).status_code == 422


def test_goal_progress(client, user_headers):
    day = date(2024, 4, 10)
    items = [
        {"date": (day - timedelta(days=i)).isoformat(), "steps": s}
        for i, s in enumerate([6000, 4000, 0, 9000])
    ]
    client.post("/steps/sync", json={"steps": items}, headers=user_headers)
    client.put("/goals/", json={"dailySteps": 8000, "weeklySteps": 20000}, headers=user_headers)

    r = client.get("/goals/progress", params={"date": day.isoformat()}, headers=user_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["todaySteps"] == 6000
    assert data["dailyProgress"] == 75.0
    assert data["weeklySteps"] == 19000
    assert data["weeklyProgress"] == 95.0
    assert data["weeklyGoalAchieved"] is False
    assert data["currentStreak"] == 2
