import os
import importlib
from fastapi.testclient import TestClient


def setup_app():
    os.environ["API_KEY"] = "test-key"
    os.environ["API_KEY_SECRET"] = "test-secret"
    os.environ["CLIENT_ID"] = "test-client"
    os.environ["RATE_LIMIT_PER_MIN"] = "10"
    # reload settings
    import lipi.core.config as config
    importlib.reload(config)
    import lipi.main as main
    importlib.reload(main)
    return main.app


def test_auth_success():
    app = setup_app()
    client = TestClient(app)
    headers = {
        "X-API-Key": "test-key",
        "X-Client-Id": "test-client",
    }
    resp = client.post("/api/v1/transliterate", json={"text": "namaste", "target_script": "devanagari"}, headers=headers)
    assert resp.status_code == 200
    assert resp.headers["X-Request-Id"]
    assert resp.headers["X-RateLimit-Remaining"] == "9"


def test_auth_missing_headers():
    app = setup_app()
    client = TestClient(app)
    resp = client.post("/api/v1/transliterate", json={"text": "namaste", "target_script": "devanagari"})
    assert resp.status_code == 401


def test_auth_wrong_key():
    app = setup_app()
    client = TestClient(app)
    headers = {"X-API-Key": "nope", "X-Client-Id": "test-client"}
    resp = client.post("/api/v1/detect", json={"text": "namaste"}, headers=headers)
    assert resp.status_code == 401


def test_health_is_public():
    app = setup_app()
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
    assert resp.json()["scripts"] == 10
