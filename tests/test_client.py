import asyncio
import json

import httpx
import pytest

from lipi.clients.lipi_client import LipiClient, LipiClientError


def make_client(handler):
    return LipiClient(
        "http://lipi.test/",
        client_id="test-client",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


def test_transliterate_sends_credentials_and_payload():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": "நமஸ்தே", "confidence": 0.9})

    client = make_client(handler)
    data = asyncio.run(client.transliterate("नमस्ते", "tamil", source_script="devanagari", ocr_confidence=0.8))
    assert data["result"] == "நமஸ்தே"
    assert seen["path"] == "/api/v1/transliterate"
    assert seen["headers"]["X-Client-Id"] == "test-client"
    assert seen["headers"]["X-API-Key"] == "test-key"
    assert seen["body"] == {
        "text": "नमस्ते",
        "target_script": "tamil",
        "source_script": "devanagari",
        "ocr_confidence": 0.8,
    }


def test_detect():
    def handler(request):
        assert request.url.path == "/api/v1/detect"
        return httpx.Response(200, json={"script": "tamil", "confidence": 1.0, "alternatives": [], "ambiguous": False})

    data = asyncio.run(make_client(handler).detect("வணக்கம்"))
    assert data["script"] == "tamil"


def test_error_status_raises():
    def handler(request):
        return httpx.Response(400, json={"detail": "Unsupported script: 'klingon'"})

    with pytest.raises(LipiClientError) as exc:
        asyncio.run(make_client(handler).transliterate("abc", "klingon"))
    assert exc.value.status_code == 400
    assert "klingon" in exc.value.detail


def test_evaluate_posts_truth():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": "সন্ত", "reference_agreement": None})

    data = asyncio.run(make_client(handler).evaluate("संत", "devanagari", "bengali", truth="সন্ত"))
    assert data["result"] == "সন্ত"
    assert seen["path"] == "/api/v1/evaluate"
    assert seen["body"] == {
        "text": "संत",
        "source_script": "devanagari",
        "target_script": "bengali",
        "truth": "সন্ত",
    }
