"""TaskService tests — ownership scoping at the service boundary."""

import uuid

import pytest

from conftest import make_user
from taskboard.auth.identity import CurrentUser
from taskboard.errors import NotFoundError, ValidationError
from taskboard.services.task_service import UNSET, TaskChanges, TaskService


@pytest.fixture
def svc(db_session):
    return TaskService(db_session)


@pytest.fixture
async def alice(db_session):
    return CurrentUser.from_user(await make_user(db_session, "alice"))


@pytest.fixture
async def bob(db_session):
    return CurrentUser.from_user(await make_user(db_session, "bob"))


@pytest.mark.asyncio
async def test_create_defaults(svc, alice):
    task = await svc.create_task(alice, "Buy milk")
    assert task.user_id == alice.id
    assert task.completed is False
    assert task.description == ""


@pytest.mark.asyncio
async def test_create_then_list_round_trip(svc, alice):
    await svc.create_task(alice, "older")
    created = await svc.create_task(alice, "newer", "with details")

    tasks = await svc.list_tasks(alice)
    assert tasks[0].id == created.id
    assert (tasks[0].title, tasks[0].description) == ("newer", "with details")


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "x" * 201, None])
async def test_create_rejects_bad_titles(svc, alice, title):
    with pytest.raises(ValidationError):
        await svc.create_task(alice, title)


@pytest.mark.asyncio
async def test_other_users_tasks_are_invisible(svc, alice, bob):
    task = await svc.create_task(alice, "alice only")

    assert await svc.list_tasks(bob) == []
    with pytest.raises(NotFoundError):
        await svc.update_task(bob, task.id, TaskChanges(title="hijacked"))
    with pytest.raises(NotFoundError):
        await svc.delete_task(bob, task.id)

    [still_there] = await svc.list_tasks(alice)
    assert still_there.title == "alice only"


@pytest.mark.asyncio
async def test_update_applies_only_present_fields(svc, alice):
    task = await svc.create_task(alice, "title", "desc")

    updated = await svc.update_task(alice, task.id, TaskChanges(completed=True))
    assert (updated.title, updated.description, updated.completed) == ("title", "desc", True)

    updated = await svc.update_task(alice, str(task.id), TaskChanges(title="renamed"))
    assert (updated.title, updated.description, updated.completed) == ("renamed", "desc", True)


@pytest.mark.asyncio
async def test_update_rejects_non_bool_completed(svc, alice):
    task = await svc.create_task(alice, "t")
    with pytest.raises(ValidationError, match="Completed must be true or false"):
        await svc.update_task(alice, task.id, TaskChanges(completed="yes"))


@pytest.mark.asyncio
async def test_delete_then_missing(svc, alice):
    task = await svc.create_task(alice, "t")
    await svc.delete_task(alice, task.id)
    with pytest.raises(NotFoundError):
        await svc.delete_task(alice, task.id)
    with pytest.raises(NotFoundError):
        await svc.update_task(alice, uuid.uuid4(), TaskChanges(completed=True))


def test_task_changes_tracks_presence():
    assert TaskChanges().present() == {}
    assert TaskChanges(description="").present() == {"description": ""}
    assert TaskChanges(completed=False, title=UNSET).present() == {"completed": False}
