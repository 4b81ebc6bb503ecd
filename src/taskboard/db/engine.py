"""Async SQLAlchemy engine and session factory.

Learn: One engine per process, built from settings.database_url. Postgres
(asyncpg) gets a sized connection pool; SQLite keeps SQLAlchemy's own
pool choice, since in-memory SQLite runs on a single shared connection
and rejects pool sizing arguments.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskboard.config import settings


def engine_options(database_url: str) -> dict:
    """Keyword arguments for create_async_engine for this URL."""
    options = {"echo": settings.debug}
    if make_url(database_url).get_backend_name() != "sqlite":
        # Pool: 5 kept open, up to 20 under load
        options.update(pool_size=5, max_overflow=15, pool_pre_ping=True)
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency: one session per request, closed afterwards."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
