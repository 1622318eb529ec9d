"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.
The LLM provider is swapped for a mock, so no network calls.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware/dependency injection bugs
  - Response format regressions
"""

from __future__ import annotations

import base64
import hashlib

import pytest
from fastapi.testclient import TestClient

from tests.fakes import EXPLANATION, MESSAGE, MockLLM


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the ScamRadar API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def empty_cache():
    from scamradar.cache import response_cache
    response_cache._cache.clear()
    yield
    response_cache._cache.clear()


@pytest.fixture
def mock_llm(monkeypatch):
    from api import main
    llm = MockLLM()
    monkeypatch.setattr(main, "_llm", llm)
    return llm


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:
    """Verify /health returns correct structure."""

    def test_health_returns_200(self, client):
        r = client.get("/health")
        assert r.status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["catalog_version"] == "1.0.0"
        assert "llm_provider" in data
        assert "llm_configured" in data
        assert "cache_entries" in data

    def test_security_headers(self, client):
        r = client.get("/health")
        assert r.headers["X-Content-Type-Options"] == "nosniff"
        assert r.headers["X-Frame-Options"] == "DENY"
        assert r.headers["X-Catalog-Version"] == "1.0.0"

    def test_oversized_body_rejected(self, client):
        from api.main import MAX_BODY_BYTES
        r = client.post(
            "/score",
            content=b"{}",
            headers={"content-type": "application/json", "content-length": str(MAX_BODY_BYTES + 1)},
        )
        assert r.status_code == 413
        assert r.headers["X-Frame-Options"] == "DENY"


# ============================================================
# ANALYZE
# ============================================================

class TestAnalyze:
    def test_full_assessment(self, client, mock_llm):
        r = client.post("/analyze", json={"content": MESSAGE})
        assert r.status_code == 200
        data = r.json()
        assert data["risk_percentage"] == 71
        assert data["model_result"]["probability"] == 60
        assert len(data["indicators"]) == 3
        assert data["cached"] is False

    def test_repeat_is_cached(self, client, mock_llm):
        client.post("/analyze", json={"content": MESSAGE})
        data = client.post("/analyze", json={"content": MESSAGE}).json()
        assert data["cached"] is True
        assert len(mock_llm.calls) == 1

    def test_image_passed_to_llm(self, client, mock_llm):
        encoded = base64.b64encode(b"\x89PNG fake image").decode()
        r = client.post("/analyze", json={
            "content": "What is this?",
            "image_base64": encoded,
            "image_mime_type": "image/png",
        })
        assert r.status_code == 200
        media = mock_llm.calls[0]["media"]
        assert media[0].data == b"\x89PNG fake image"
        assert media[0].mime_type == "image/png"

    def test_empty_submission_rejected(self, client, mock_llm):
        r = client.post("/analyze", json={"content": "   "})
        assert r.status_code == 422

    def test_invalid_base64_rejected(self, client, mock_llm):
        r = client.post("/analyze", json={"content": "x", "image_base64": "!!!not base64"})
        assert r.status_code == 400

    def test_bad_mime_type_rejected(self, client, mock_llm):
        r = client.post("/analyze", json={"content": "x", "image_mime_type": "text/html"})
        assert r.status_code == 422

    def test_provider_failure_is_502(self, client, monkeypatch):
        from api import main
        monkeypatch.setattr(main, "_llm", MockLLM(error=RuntimeError("quota")))
        r = client.post("/analyze", json={"content": MESSAGE})
        assert r.status_code == 502

    def test_unparseable_reply_still_scored(self, client, monkeypatch):
        from api import main
        monkeypatch.setattr(main, "_llm", MockLLM(raw_text="no json here"))
        r = client.post("/analyze", json={"content": MESSAGE})
        assert r.status_code == 200
        assert r.json()["model_result"]["parse_error"] is True


# ============================================================
# SCORE / URL / CATALOG
# ============================================================

class TestScore:
    def test_local_scoring(self, client):
        r = client.post("/score", json={
            "content": MESSAGE, "api_percent": 60, "explanation": EXPLANATION,
        })
        assert r.status_code == 200
        data = r.json()
        assert data["risk_percentage"] == 71
        assert data["local_score"] == 75
        assert data["indicators"][0]["name"] == "Request for personal data"
        assert data["evaluations"]["Urgent action required"]["detected"] is True

    def test_api_percent_range_enforced(self, client):
        r = client.post("/score", json={"content": "x", "api_percent": 150})
        assert r.status_code == 422


class TestUrlAnalyze:
    def test_spoofed_domain(self, client):
        r = client.post("/url/analyze", json={"url": "bdo-secure.com"})
        assert r.status_code == 200
        data = r.json()
        assert data["is_potential_spoofing"] is True
        assert data["spoofing_technique"] == "dash-insertion"

    def test_empty_url_rejected(self, client):
        assert client.post("/url/analyze", json={"url": ""}).status_code == 422


class TestIndicators:
    def test_catalog(self, client):
        data = client.get("/indicators").json()
        assert data["total"] == 28
        assert data["max_possible_severity"] == 107
        assert data["indicators"][0]["name"] == "Urgent action required"


# ============================================================
# CACHE ADMIN
# ============================================================

class TestCacheAdmin:
    def test_stats_open_in_dev_mode(self, client, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(auth, "_VALID_KEY_HASHES", set())
        r = client.get("/cache/stats")
        assert r.status_code == 200
        assert r.json()["max_size"] == 1000

    def test_clear(self, client, mock_llm, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(auth, "_VALID_KEY_HASHES", set())
        client.post("/analyze", json={"content": MESSAGE})
        data = client.post("/cache/clear").json()
        assert data["size"] == 0
        assert data["total_requests"] == 0

    def test_reset_stats(self, client, mock_llm, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(auth, "_VALID_KEY_HASHES", set())
        client.post("/analyze", json={"content": MESSAGE})
        data = client.post("/cache/reset-stats").json()
        assert data["size"] == 1
        assert data["hits"] == 0

    def test_missing_key_401(self, client, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(
            auth, "_VALID_KEY_HASHES", {hashlib.sha256(b"sr_admin").hexdigest()},
        )
        assert client.get("/cache/stats").status_code == 401

    def test_wrong_key_403(self, client, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(
            auth, "_VALID_KEY_HASHES", {hashlib.sha256(b"sr_admin").hexdigest()},
        )
        r = client.get("/cache/stats", headers={"X-Admin-Key": "sr_wrong"})
        assert r.status_code == 403

    def test_valid_key(self, client, monkeypatch):
        from scamradar import auth
        monkeypatch.setattr(
            auth, "_VALID_KEY_HASHES", {hashlib.sha256(b"sr_admin").hexdigest()},
        )
        r = client.get("/cache/stats", headers={"X-Admin-Key": "sr_admin"})
        assert r.status_code == 200
