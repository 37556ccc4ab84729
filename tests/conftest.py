"""
notekeeper — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Store and CLI tests run against a throwaway SQLite database (through
       aiosqlite) created in pytest's tmp_path; dispatcher unit tests use an
       AsyncMock in place of the store.

Fixture Hierarchy (all function-scoped):
    ├── database_url: sqlite+aiosqlite URL inside tmp_path (no schema yet)
    ├── settings: Settings pointing at database_url
    ├── engine / session_factory / note_store: schema created with create_all
    ├── prepared_database_url: URL with the schema created (for CLI tests)
    ├── mock_store: AsyncMock with NoteStore's interface
    └── sample_note: the "passwords" NoteRecord
"""

import asyncio
import os
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Test runs use the default log level and never a developer DATABASE_URL
os.environ.pop("LOG_LEVEL", None)
os.environ.pop("DATABASE_URL", None)

from notekeeper.config import Settings
from notekeeper.database import Base, build_engine, create_session_factory
from notekeeper.models.note import Note  # noqa: F401
from notekeeper.schemas.note import NoteRecord
from notekeeper.services.note_store import NoteStore


async def create_schema(settings: Settings) -> None:
    """Create the notes table the way the migration would."""
    engine = build_engine(settings)
    try:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def database_url(tmp_path):
    """URL of an empty SQLite file that has no tables yet."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notebook.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(database_url=database_url, log_level="ERROR")


@pytest.fixture
def prepared_database_url(settings):
    """
    URL of a SQLite database with the notes table created.

    Synchronous so CLI tests (which call asyncio.run themselves) can use it.
    """
    asyncio.run(create_schema(settings))
    return settings.database_url


@pytest_asyncio.fixture
async def engine(settings):
    """Async engine over a freshly created schema; disposed after the test."""
    engine = build_engine(settings)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def note_store(session_factory):
    return NoteStore(session_factory)


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_store():
    """
    A NoteStore stand-in whose methods are AsyncMocks.

    Usage:
        mock_store.get_by_name.return_value = sample_note
        mock_store.delete.side_effect = NotFoundError(name="x")
    """
    return AsyncMock(spec=NoteStore)


@pytest.fixture
def sample_note():
    return NoteRecord(
        id=1,
        name="passwords",
        data="login: krutoy_4el\npassword: 1234",
    )
