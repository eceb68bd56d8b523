def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "HR Portal API running"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"x-request-id": "abc-123"})

    assert response.headers.get("x-request-id") == "abc-123"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
