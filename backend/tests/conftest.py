"""
MoodJourney Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── sample_user / sample_entry: Transient ORM objects
    ├── database: Connected gateway on a throwaway SQLite file
    ├── db_session: Session on that gateway for arranging rows directly
    └── test_client: HTTPX AsyncClient bound to an app using `database`
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Before any moodjourney import: the module-level app reads these
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["STATIC_DIR"] = "./__no_static_assets__"

from moodjourney.database import Database  # noqa: E402
from moodjourney.main import create_app  # noqa: E402
from moodjourney.models.mood_entry import MoodEntry  # noqa: E402
from moodjourney.models.user import User  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalars.return_value.first.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def assign_id_on_flush(mock_db_session):
    """
    Makes flush() behave like an INSERT by giving the added object an id.

    Returns the mock session for convenience.
    """
    async def flush():
        obj = mock_db_session.add.call_args[0][0]
        if getattr(obj, "id", None) is None:
            obj.id = 42

    mock_db_session.flush = AsyncMock(side_effect=flush)
    return mock_db_session


@pytest.fixture
def sample_user():
    now = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    return User(
        id=1,
        username="ava",
        email="ava@x.com",
        created_at=now,
        updated_at=now,
        deleted_at=None,
    )


@pytest.fixture
def sample_entry():
    now = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    return MoodEntry(
        id=7,
        user_id="ava",
        mood_rating=6,
        day_highlight="Long walk by the river",
        dream_type="lucid",
        dream_notes="Flying over the city",
        sleep_start_time=2330,
        sleep_end_time=700,
        created_at=now,
        updated_at=now,
        deleted_at=None,
    )


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (SQLite through aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path):
    """
    A connected gateway on a fresh SQLite file.

    File-backed rather than :memory: so every session sees the same data.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'moodjourney_test.db'}")
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """Session for arranging rows that the API cannot create (e.g. old timestamps)."""
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database, tmp_path):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport skips the lifespan, so the gateway is connected by the
    `database` fixture and injected through create_app().
    """
    app = create_app(database=database, static_dir=str(tmp_path / "no-static"))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
