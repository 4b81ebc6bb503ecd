"""Health and root endpoint tests."""

import pytest

from taskboard import __version__


@pytest.mark.asyncio
async def test_health_reports_database(unauthenticated_client):
    """Health returns server status, version, and a database check.

    Redis is never initialized under test, so overall status is degraded.
    """
    resp = await unauthenticated_client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["version"] == __version__
    assert data["database"] == "ok"
    assert data["redis"].startswith("error:")
    assert data["status"] == "degraded"


@pytest.mark.asyncio
async def test_root(unauthenticated_client):
    resp = await unauthenticated_client.get("/")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Task Manager API is running"
