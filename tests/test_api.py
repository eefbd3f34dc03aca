import os
import importlib

import pytest
from fastapi.testclient import TestClient

HEADERS = {"X-API-Key": "api-key", "X-Client-Id": "api-client"}


@pytest.fixture
def client():
    os.environ["API_KEY"] = "api-key"
    os.environ["API_KEY_SECRET"] = "api-secret"
    os.environ["CLIENT_ID"] = "api-client"
    os.environ["RATE_LIMIT_PER_MIN"] = "100"
    import lipi.core.config as config
    importlib.reload(config)
    import lipi.main as main
    importlib.reload(main)
    from lipi.api import routes
    routes.pipeline.cache.clear()
    return TestClient(main.app)


def test_scripts(client):
    resp = client.get("/api/v1/scripts", headers=HEADERS)
    assert resp.status_code == 200
    scripts = {s["id"]: s for s in resp.json()}
    assert len(scripts) == 10
    assert scripts["tamil"]["has_conjuncts"] is False
    assert scripts["devanagari"]["unicode_range"] == [0x0900, 0x097F]


def test_detect(client):
    resp = client.post("/api/v1/detect", json={"text": "வணக்கம்"}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json()["script"] == "tamil"
    assert resp.json()["confidence"] == 1.0


def test_transliterate_and_cache_header(client):
    body = {"text": "रेलवे स्टेशन", "source_script": "devanagari", "target_script": "tamil"}
    first = client.post("/api/v1/transliterate", json=body, headers=HEADERS)
    assert first.status_code == 200
    assert first.headers["X-Lipi-Cache"] == "miss"
    data = first.json()
    assert data["result"] == "ரேல்வே ஸ்டேஷன்"
    assert data["validation"]["is_valid"] is True
    assert data["source_script"] == "devanagari"
    second = client.post("/api/v1/transliterate", json=body, headers=HEADERS)
    assert second.headers["X-Lipi-Cache"] == "hit"
    assert second.json()["result"] == data["result"]


def test_auto_detection_reported(client):
    body = {"text": "Hotel होटल", "target_script": "devanagari"}
    data = client.post("/api/v1/transliterate", json=body, headers=HEADERS).json()
    assert data["result"] == "होटल होटल"
    assert data["detection"]["script"] == "romanization"
    assert "AmbiguousDetection" in data["warnings"]


def test_unsupported_script_is_400(client):
    body = {"text": "abc", "source_script": "romanization", "target_script": "klingon"}
    resp = client.post("/api/v1/transliterate", json=body, headers=HEADERS)
    assert resp.status_code == 400
    assert "klingon" in resp.json()["detail"]


def test_batch(client):
    items = [
        {"text": "1234", "source_script": "romanization", "target_script": "devanagari"},
        {"text": "Chennai", "source_script": "romanization", "target_script": "tamil"},
    ]
    resp = client.post("/api/v1/transliterate/batch", json={"items": items}, headers=HEADERS)
    assert resp.status_code == 200
    assert [r["result"] for r in resp.json()["results"]] == ["१२३४", "சென்னை"]


def test_corrections(client):
    body = {"text": "नमस्ते", "source_script": "devanagari", "target_script": "tamil"}
    client.post("/api/v1/transliterate", json=body, headers=HEADERS)
    resp = client.post("/api/v1/corrections", json={"original": "नमस्ते", "corrected": "வணக்கம்"}, headers=HEADERS)
    assert resp.status_code == 201
    after = client.post("/api/v1/transliterate", json=body, headers=HEADERS)
    assert after.headers["X-Lipi-Cache"] == "miss"
    assert after.json()["result"] == "வணக்கம்"


def test_evaluate(client, monkeypatch):
    import lipi.adapters.aksharamukha as aksharamukha

    monkeypatch.setattr(aksharamukha, "process", lambda source, target, text: "নমস্তে")
    body = {"text": "नमस्ते", "source_script": "devanagari", "target_script": "bengali", "truth": "নমস্তে"}
    resp = client.post("/api/v1/evaluate", json=body, headers=HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"] == "নমস্তে"
    assert data["round_trip"] == "नमस्ते"
    assert data["round_trip_accuracy"] == 1.0
    assert data["reference_agreement"] == 1.0
    assert data["metrics"]["character_accuracy"] == 1.0


def test_evaluate_without_reference(client, monkeypatch):
    import lipi.adapters.aksharamukha as aksharamukha

    monkeypatch.setattr(aksharamukha, "process", None)
    body = {"text": "संत", "source_script": "devanagari", "target_script": "romanization"}
    data = client.post("/api/v1/evaluate", json=body, headers=HEADERS).json()
    assert data["result"] == "sant"
    assert data["round_trip_accuracy"] == 1.0
    assert data["reference_agreement"] is None
    assert data["metrics"] is None


def test_evaluate_unknown_script_is_400(client):
    body = {"text": "abc", "source_script": "klingon", "target_script": "tamil"}
    resp = client.post("/api/v1/evaluate", json=body, headers=HEADERS)
    assert resp.status_code == 400
