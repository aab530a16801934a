"""
tests/test_health.py -- Integration tests for GET / and GET /api/health.

Covers:
  - 200 response with status, version, and components in the envelope meta
  - components.database reports 'ok' against a live store
  - No authentication required
  - 503 'degraded' when the credential store does not answer its ping
"""

from __future__ import annotations


def test_health_returns_200_with_components(client):
    """Health endpoint returns 200 with status, version, and components."""
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    meta = data["meta"]
    assert meta["status"] == "healthy"
    assert "version" in meta
    assert meta["components"] == {"app": "ok", "database": "ok"}


def test_health_no_auth_required(client):
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200


def test_root_banner(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["message"] == "REST API Authentication and Authorization"


def test_health_degraded_when_store_does_not_answer(client, monkeypatch):
    monkeypatch.setattr(client.app.state.user_store, "ping", lambda: False)
    resp = client.get("/api/health")
    assert resp.status_code == 503
    data = resp.json()
    assert data["success"] is False
    assert data["meta"]["status"] == "degraded"
    assert data["meta"]["components"]["database"] == "error"
