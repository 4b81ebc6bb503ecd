"""Pydantic schemas for tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (every field optional)
- TaskRead: what the API returns

Length and emptiness rules live in TaskService, not here, so the HTTP
layer and direct service callers get the same messages. There is no
owner field on any request schema; unknown keys are ignored.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from taskboard.services.task_service import TaskChanges


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial update — only keys present in the request body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    # Type-checked in TaskService so non-booleans get its message
    completed: Any = None

    def to_changes(self) -> TaskChanges:
        return TaskChanges(**self.model_dump(exclude_unset=True))


class TaskRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
