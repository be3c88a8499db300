ROUTE = {
    "name": "River loop",
    "distanceMeters": 4200.0,
    "estimatedMinutes": 50,
    "routePolyline": "_p~iF~ps|U_ulLnnqC_mqNvxq`@",
    "startLocation": "Pont Neuf",
}


def create(client, headers, **overrides):
    payload = dict(ROUTE, **overrides)
    r = client.post("/routes/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get(client, user_headers):
    route = create(client, user_headers)
    assert route["isFavorite"] is False
    assert route["routePolyline"] == ROUTE["routePolyline"]

    r = client.get(f"/routes/{route['id']}", headers=user_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "River loop"
    assert client.get(f"/routes/{route['id']}", headers={"X-User-Id": "intruder"}).status_code == 404


def test_create_validates(client, user_headers):
    assert client.post("/routes/", json=dict(ROUTE, distanceMeters=-1), headers=user_headers).status_code == 422
    assert client.post("/routes/", json=dict(ROUTE, name=""), headers=user_headers).status_code == 422


def test_favorites_filter_and_toggle(client, user_headers):
    first = create(client, user_headers, name="Park")
    second = create(client, user_headers, name="Harbour")

    r = client.put(f"/routes/{first['id']}/favorite", json={"isFavorite": True}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["isFavorite"] is True

    all_routes = client.get("/routes/", headers=user_headers).json()
    assert [x["id"] for x in all_routes] == [second["id"], first["id"]]
    favorites = client.get("/routes/", params={"favorites": "true"}, headers=user_headers).json()
    assert [x["name"] for x in favorites] == ["Park"]

    client.put(f"/routes/{first['id']}/favorite", json={"isFavorite": False}, headers=user_headers)
    assert client.get("/routes/", params={"favorites": "true"}, headers=user_headers).json() == []


def test_update_and_delete(client, user_headers):
    route = create(client, user_headers)
    r = client.put(f"/routes/{route['id']}", json={"name": "Long river loop", "estimatedMinutes": 70}, headers=user_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Long river loop"
    assert data["estimatedMinutes"] == 70
    assert data["distanceMeters"] == 4200.0

    assert client.delete(f"/routes/{route['id']}", headers=user_headers).status_code == 200
    assert client.get(f"/routes/{route['id']}", headers=user_headers).status_code == 404
