def test_health_ok(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    data = r.json()
    assert data["ok"] is True
    assert data["data"]["db"] == "ok"


def test_health_is_not_gated(client):
    r = client.get("/health", follow_redirects=False)
    assert r.status_code == 200


def test_unknown_api_route_uses_envelope(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"ok": False, "error": "Not Found"}
