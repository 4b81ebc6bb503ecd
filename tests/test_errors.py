"""Error envelope tests — every failure is {"message": ...}."""

import pytest
from sqlalchemy.exc import OperationalError

from taskboard.api import tasks as tasks_api
from taskboard.errors import InternalError
from taskboard.main import app


@pytest.mark.asyncio
async def test_unknown_route(unauthenticated_client):
    r = await unauthenticated_client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"message": "Route not found"}


@pytest.mark.asyncio
async def test_wrong_method(unauthenticated_client):
    r = await unauthenticated_client.patch("/api/auth/login", json={})
    assert r.status_code == 405
    assert set(r.json()) == {"message"}


@pytest.mark.asyncio
async def test_malformed_json_body(client):
    r = await client.post(
        "/api/tasks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert "message" in r.json()


class _BrokenTaskService:
    async def list_tasks(self, user):
        raise OperationalError("SELECT ...", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_database_failure_is_generic_500(client):
    """Persistence errors become a 500 without leaking the driver message."""
    app.dependency_overrides[tasks_api._task_svc] = lambda: _BrokenTaskService()

    r = await client.get("/api/tasks")
    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong on the server"}
    assert "connection refused" not in r.text


class _CrashingTaskService:
    async def list_tasks(self, user):
        raise RuntimeError("boom at line 42")


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500_with_request_id(client):
    """Errors with no handler still get the envelope and the request id."""
    app.dependency_overrides[tasks_api._task_svc] = lambda: _CrashingTaskService()

    r = await client.get("/api/tasks", headers={"X-Request-ID": "trace-500"})
    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong on the server"}
    assert r.headers["X-Request-ID"] == "trace-500"
    assert "boom" not in r.text


class _FailingTaskService:
    async def list_tasks(self, user):
        raise InternalError("Could not load tasks")


@pytest.mark.asyncio
async def test_internal_error_keeps_its_message(client):
    app.dependency_overrides[tasks_api._task_svc] = lambda: _FailingTaskService()

    r = await client.get("/api/tasks")
    assert r.status_code == 500
    assert r.json() == {"message": "Could not load tasks"}
