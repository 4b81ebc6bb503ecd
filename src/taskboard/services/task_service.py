"""Task service — per-user task CRUD.

Learn: Every query in this module starts from _owned(user), which is
``select(Task).where(Task.user_id == user.id)``. Lookups by id add the
id to that same WHERE clause, so a task owned by someone else is simply
not found: there is no fetch-then-check step that could leak whether
the id exists. Missing and foreign tasks both raise NotFoundError.

The owner comes from the CurrentUser argument, never from request data.
"""

import uuid
from dataclasses import dataclass, fields
from typing import Any, Optional

import structlog
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth.identity import CurrentUser
from taskboard.db.models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task
from taskboard.errors import NotFoundError, ValidationError

logger = structlog.get_logger()

TASK_NOT_FOUND = "Task not found"


class _Unset:
    """Marker for a field that was not part of a partial update."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class TaskChanges:
    """Partial update. Fields left as UNSET are not touched.

    Learn: None and UNSET mean different things here. ``title=None``
    is an attempt to clear the title (rejected), while an UNSET title
    leaves it alone.
    """

    title: Any = UNSET
    description: Any = UNSET
    completed: Any = UNSET

    def present(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


# ─── Field validation ────────────────────────────────────


def _clean_title(title: Optional[str], *, required_message: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError(required_message)
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError("Title cannot exceed 200 characters")
    return title


def _clean_description(description: Optional[str]) -> str:
    description = (description or "").strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError("Description cannot exceed 1000 characters")
    return description


def _parse_task_id(task_id: Any) -> uuid.UUID:
    if isinstance(task_id, uuid.UUID):
        return task_id
    try:
        return uuid.UUID(str(task_id))
    except ValueError:
        # A malformed id can't match anything; answer like any other miss.
        raise NotFoundError(TASK_NOT_FOUND)


# ─── Service ─────────────────────────────────────────────


class TaskService:
    """Task CRUD, always scoped to one user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _owned(user: CurrentUser) -> Select:
        return select(Task).where(Task.user_id == user.id)

    async def _get_owned(self, user: CurrentUser, task_id: Any) -> Task:
        q = self._owned(user).where(Task.id == _parse_task_id(task_id))
        result = await self.db.execute(q)
        task = result.scalars().first()
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(self, user: CurrentUser) -> list[Task]:
        """The user's tasks, newest first."""
        q = self._owned(user).order_by(Task.created_at.desc())
        result = await self.db.execute(q)
        return list(result.scalars().all())

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        user: CurrentUser,
        title: Optional[str],
        description: Optional[str] = None,
    ) -> Task:
        """Create a task owned by ``user``. New tasks are never completed."""
        task = Task(
            user_id=user.id,
            title=_clean_title(title, required_message="Task title is required"),
            description=_clean_description(description),
            completed=False,
        )
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)

        logger.info("task.created", task_id=str(task.id), user_id=str(user.id))
        return task

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        user: CurrentUser,
        task_id: Any,
        changes: TaskChanges,
    ) -> Task:
        """Apply the present fields of ``changes`` to one of the user's tasks.

        Raises:
            NotFoundError: no such task for this user
            ValidationError: a present field fails the create-time rules
        """
        task = await self._get_owned(user, task_id)
        present = changes.present()

        # Validate everything before touching the row.
        updates: dict[str, Any] = {}
        if "title" in present:
            updates["title"] = _clean_title(
                present["title"], required_message="Title cannot be empty"
            )
        if "description" in present:
            updates["description"] = _clean_description(present["description"])
        if "completed" in present:
            if not isinstance(present["completed"], bool):
                raise ValidationError("Completed must be true or false")
            updates["completed"] = present["completed"]

        for field_name, value in updates.items():
            setattr(task, field_name, value)

        await self.db.commit()
        await self.db.refresh(task)

        logger.info(
            "task.updated",
            task_id=str(task.id),
            user_id=str(user.id),
            fields=sorted(updates),
        )
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, user: CurrentUser, task_id: Any) -> None:
        """Delete one of the user's tasks. NotFoundError otherwise."""
        task = await self._get_owned(user, task_id)
        await self.db.delete(task)
        await self.db.commit()

        logger.info("task.deleted", task_id=str(task.id), user_id=str(user.id))
