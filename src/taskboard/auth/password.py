"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt generates a random salt
per hash and embeds it in the output ("$2b$<rounds>$<salt><digest>"),
so nothing but the hash string needs storing. The work factor comes
from settings.bcrypt_rounds (10 by default, ~60ms per hash).
Passwords are truncated to 72 bytes (bcrypt's limit).

These are CPU-bound and blocking. Async callers run them through
asyncio.to_thread so the event loop keeps serving other requests.
"""

from functools import lru_cache

import bcrypt

from taskboard.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash (constant-time compare)."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """A throwaway hash at the configured cost.

    Login verifies against this when the email is unknown, so a miss
    costs the same bcrypt round-trip as a wrong password.
    """
    return hash_password("taskboard-timing-equalizer")
