"""Task API routes.

Learn: These routes are the HTTP interface to TaskService. The service
does the validation and the ownership scoping; routes translate HTTP
to service calls. Domain errors (ValidationError, NotFoundError) are
turned into {"message": ...} responses by the handlers in main.py.

The caller is always taken from the bearer token (get_current_user),
never from the request body.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth.dependencies import get_current_user
from taskboard.auth.identity import CurrentUser
from taskboard.db.engine import get_db
from taskboard.schemas.task import (
    MessageResponse,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from taskboard.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's tasks, newest first."""
    return await svc.list_tasks(user)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task. It starts out not completed."""
    return await svc.create_task(user, title=body.title, description=body.description)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Update title, description and/or completed. Absent keys are left alone."""
    return await svc.update_task(user, task_id, body.to_changes())


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Delete a task."""
    await svc.delete_task(user, task_id)
    return MessageResponse(message="Task deleted successfully")
