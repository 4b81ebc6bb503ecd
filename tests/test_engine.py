"""Engine option tests — pool sizing depends on the database backend."""

from taskboard.db.engine import engine_options


def test_postgres_gets_a_sized_pool():
    options = engine_options("postgresql+asyncpg://u:p@localhost:5432/taskboard")
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 15


def test_sqlite_keeps_default_pool():
    options = engine_options("sqlite+aiosqlite://")
    assert "pool_size" not in options
    assert "max_overflow" not in options
