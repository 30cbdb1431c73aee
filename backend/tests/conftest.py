from contextlib import asynccontextmanager

import pytest

from scoreboard.db.database import Database


@pytest.fixture
def database_url(tmp_path):
    """A throwaway SQLite database per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def open_db(database_url):
    """
    Async context manager yielding an open Database with a fresh schema.
    Use inside a single asyncio.run so the pool stays on one event loop.
    """

    @asynccontextmanager
    async def _open():
        db = Database(database_url)
        db.open()
        assert await db.create_schema(drop=True)
        try:
            yield db
        finally:
            await db.close()

    return _open
