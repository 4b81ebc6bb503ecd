"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current user from the request. The task router also
lists get_current_user in its include_router dependencies, so a
missing or bad token is rejected with 401 before any handler or
service code runs.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth.identity import CurrentUser
from taskboard.db.engine import get_db
from taskboard.errors import AuthError
from taskboard.services.auth_service import AuthService

NO_TOKEN = "Not authorized, no token"


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the bearer token to a CurrentUser (401 if absent or invalid)."""
    token = bearer_token(authorization)
    if token is None:
        raise AuthError(NO_TOKEN)
    return await AuthService(db).validate(token)
