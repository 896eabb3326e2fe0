from fastapi.testclient import TestClient

from internhub.main import app
from internhub.services import feeds


def test_meta_health_endpoint_shape():
    client = TestClient(app)
    response = client.get("/api/meta/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert "database" in payload
    assert "ai" in payload
    assert "storage" in payload
    assert payload["mail"]["enabled"] in (True, False)


def test_request_id_is_echoed():
    client = TestClient(app)
    response = client.get("/api/meta/ai", headers={"X-Request-Id": "req-123"})
    assert response.headers["X-Request-Id"] == "req-123"
    assert "ai_enabled" in response.json()


def test_unhandled_errors_are_opaque(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("connection string leaked: postgres://secret")

    monkeypatch.setattr(feeds, "active_announcements", explode)
    raw_client = TestClient(client.app, raise_server_exceptions=False)

    response = raw_client.get("/api/chat/announcements")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_unhandled_errors_keep_the_request_id(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(feeds, "active_announcements", explode)
    raw_client = TestClient(client.app, raise_server_exceptions=False)

    echoed = raw_client.get("/api/chat/announcements", headers={"X-Request-Id": "req-500"})
    generated = raw_client.get("/api/chat/announcements")

    assert echoed.status_code == 500
    assert echoed.headers["X-Request-Id"] == "req-500"
    assert generated.status_code == 500
    assert len(generated.headers["X-Request-Id"]) == 32
