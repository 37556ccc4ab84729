"""
notekeeper — Database Session Management
========================================

What:  Async SQLAlchemy engine, session factory and transactional scope.
How:   `build_engine()` turns Settings into an AsyncEngine,
       `create_session_factory()` wraps it, and `session_scope()` yields a
       session that commits on success and rolls back on any error.
Who:   The runtime builds one engine per invocation and passes the session
       factory to the Note Store; there is no module-level engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notekeeper.config import Settings
from notekeeper.exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models and Alembic's autogenerate.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for one invocation.

    Pool sizing only applies to server backends; SQLite picks its own pool.
    SQL is echoed when LOG_LEVEL is DEBUG.

    Raises:
        BackendUnavailableError: the URL is malformed or its driver is missing
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
        )

    try:
        return create_async_engine(settings.database_url, **options)
    except (SQLAlchemyError, ImportError, ValueError) as e:
        logger.warning("Could not create database engine: %s", e)
        raise BackendUnavailableError(
            message=f"Could not use the configured database URL: {e}",
            context={"error_type": type(e).__name__},
        ) from e


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: objects stay readable after the transaction ends,
# so the store can copy them into schemas after commit
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide a session wrapped in a single transaction.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller, which performs its queries
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises unchanged
        5. Always: closes the session (returns the connection to the pool)

    Example:
        async with session_scope(factory) as session:
            session.add(Note(name="todo", data="milk"))
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes every pooled connection held by `engine`."""
    await engine.dispose()
