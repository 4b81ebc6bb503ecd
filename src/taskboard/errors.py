"""Domain error taxonomy.

Learn: Services raise these instead of HTTPException so the business
logic stays usable outside FastAPI (tests, CLI, scripts). Each error
carries the HTTP status it maps to; the exception handlers in main.py
turn any of them into a ``{"message": ...}`` body.
"""


class TaskboardError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    """Malformed input (bad username, title too long, ...)."""

    status_code = 400


class ConflictError(TaskboardError):
    """Email or username already taken."""

    status_code = 400


class AuthError(TaskboardError):
    """Missing, invalid or expired credential."""

    status_code = 401


class NotFoundError(TaskboardError):
    """Record absent, or owned by someone else. Callers can't tell which."""

    status_code = 404


class InternalError(TaskboardError):
    """Persistence or unexpected failure."""

    status_code = 500
