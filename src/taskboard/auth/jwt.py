"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The
server signs {sub, iat, exp} with settings.jwt_secret; validity is
purely signature + expiry, so there is nothing to look up or revoke.
Tokens live for settings.token_expire_days (30 by default).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from taskboard.config import settings


class TokenError(Exception):
    """Raised when token verification fails."""


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """Create a signed access token for a user id."""
    issued = now or datetime.now(timezone.utc)
    expires = issued + (expires_delta or timedelta(days=settings.token_expire_days))
    payload = {
        "sub": user_id,
        "iat": issued,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
