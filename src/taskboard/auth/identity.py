"""The resolved identity of the caller."""

import uuid
from dataclasses import dataclass

from taskboard.db.models import User


@dataclass(frozen=True)
class CurrentUser:
    """Represents the authenticated user making the request.

    Learn: This is the auth context handed to the service layer. It is
    built from a verified token plus a fresh user lookup, and carries no
    password hash. TaskService filters every query by ``id``.
    """

    id: uuid.UUID
    username: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(id=user.id, username=user.username, email=user.email)
