"""Auth service — registration, login, and token validation.

Learn: This is the Authenticator. It turns credentials into a verified
user and a bearer token, and turns a bearer token back into a user:

  register: validate → uniqueness (email, then username) → bcrypt → insert → token
  login:    validate → lookup by email → bcrypt verify → token
  validate: JWT signature/expiry → lookup by id → CurrentUser

Login never says which half of the credential was wrong. Unknown emails
are verified against a dummy hash so both failure paths cost one bcrypt
check.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth.identity import CurrentUser
from taskboard.auth.jwt import TokenError, create_access_token, verify_token
from taskboard.auth.password import dummy_hash, hash_password, verify_password
from taskboard.db.models import User
from taskboard.errors import AuthError, ConflictError, ValidationError

logger = structlog.get_logger()

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

INVALID_EMAIL = "Please provide a valid email"
INVALID_CREDENTIALS = "Invalid email or password"
TOKEN_FAILED = "Not authorized, token failed"
USER_NOT_FOUND = "User not found"


@dataclass
class AuthResult:
    """A freshly authenticated user and the token issued for them."""

    user: User
    token: str


def clean_email(email: str) -> str:
    """Syntax-check an address and return it lower-cased.

    Deliverability (DNS) is not checked; only the address syntax is.
    """
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError(INVALID_EMAIL)
    return result.normalized.lower()


def _check_password(password: str, stored_hash: Optional[str]) -> bool:
    # No stored hash means unknown email: burn the same bcrypt cost anyway.
    if stored_hash is None:
        verify_password(password, dummy_hash())
        return False
    return verify_password(password, stored_hash)


class AuthService:
    """Credential checks and token issuance against the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Register ────────────────────────────────────────

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """Create an account and log it in.

        Raises:
            ValidationError: first failing field, in order username, email, password
            ConflictError: email or username already in use
        """
        username = username.strip()
        if len(username) < USERNAME_MIN_LENGTH:
            raise ValidationError("Username must be at least 3 characters long")
        email = clean_email(email)
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError("Password must be at least 6 characters long")

        if await self._find_by_email(email):
            raise ConflictError("User already exists with this email")
        q = select(User.id).where(User.username == username)
        if (await self.db.execute(q)).first():
            raise ConflictError("Username already taken")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email/username
            await self.db.rollback()
            raise ConflictError("User already exists with this email or username")
        await self.db.refresh(user)

        logger.info("auth.registered", user_id=str(user.id), username=user.username)
        return AuthResult(user=user, token=self.issue_token(user))

    # ─── Login ───────────────────────────────────────────

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify email/password and issue a token.

        Raises:
            ValidationError: malformed email or empty password
            AuthError: unknown email or wrong password (same message for both)
        """
        email = clean_email(email)
        if not password:
            raise ValidationError("Password is required")

        user = await self._find_by_email(email)
        stored_hash = user.password_hash if user else None
        password_ok = await asyncio.to_thread(_check_password, password, stored_hash)

        if user is None or not password_ok:
            logger.info(
                "auth.login_failed",
                reason="unknown_email" if user is None else "bad_password",
            )
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("auth.login_succeeded", user_id=str(user.id))
        return AuthResult(user=user, token=self.issue_token(user))

    # ─── Tokens ──────────────────────────────────────────

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(str(user.id))

    async def validate(self, token: str) -> CurrentUser:
        """Resolve a bearer token to the user it was issued for.

        Raises AuthError if the token is malformed, badly signed, expired,
        or names a user that no longer exists.
        """
        try:
            payload = verify_token(token)
            user_id = uuid.UUID(str(payload["sub"]))
        except (TokenError, ValueError) as e:
            logger.info("auth.token_rejected", reason=str(e))
            raise AuthError(TOKEN_FAILED)

        user = await self.db.get(User, user_id)
        if user is None:
            logger.info("auth.token_rejected", reason="user_missing", user_id=str(user_id))
            raise AuthError(USER_NOT_FOUND)
        return CurrentUser.from_user(user)

    # ─── Helpers ─────────────────────────────────────────

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()
