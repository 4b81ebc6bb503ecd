"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine on an in-memory SQLite database
   (aiosqlite driver, StaticPool so every session shares the one
   connection), with the schema created from the ORM models.
2. get_db is overridden to hand that session to the app.
3. The engine is disposed after the test and the database vanishes.

Env vars are set before any taskboard import: bcrypt at its minimum
cost keeps the suite fast, and a fixed secret makes tokens reproducible.
"""

import os

os.environ.setdefault("TASKBOARD_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TASKBOARD_JWT_SECRET", "test-secret-please-ignore-0123456789")

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.auth.identity import CurrentUser
from taskboard.auth.password import hash_password
from taskboard.db.engine import get_db
from taskboard.db.models import Base, User
from taskboard.main import app


TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a throwaway in-memory database."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


async def make_user(db_session, username: str, password: str = "password123") -> User:
    """Insert a user row directly (bypasses the API)."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture()
async def current_user(db_session) -> CurrentUser:
    user = await make_user(db_session, f"user-{uuid.uuid4().hex[:8]}")
    return CurrentUser.from_user(user)


@pytest_asyncio.fixture()
async def client(db_session, current_user):
    """HTTP client with get_db and auth overridden for testing.

    Learn: We override get_current_user to return a real, seeded user so
    task routes work without going through register+login first. Tests
    about tokens and cross-user isolation use unauthenticated_client.
    """
    from taskboard.auth.dependencies import get_current_user

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session):
    """HTTP client WITHOUT auth override — the real bearer-token pipeline runs."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def register(client, username: str, password: str = "password123") -> dict:
    """Register through the API; returns the response body (token + user)."""
    r = await client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
