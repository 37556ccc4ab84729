"""
notekeeper — Alembic Migration Environment
==========================================

What:  Applies the `notes` schema to the database named by DATABASE_URL.
How:   The URL comes from notekeeper's Settings (environment or `.env`), not
       from alembic.ini, so `alembic upgrade head` and the CLI always agree
       on the target. Online runs go through an async engine and hand a
       sync connection to Alembic with `connection.run_sync()`.
Who:   `alembic upgrade head` before first use; `alembic downgrade base`
       to drop every note.

Backends:
    PostgreSQL (asyncpg)   production notebook
    SQLite (aiosqlite)     local notebooks; migrations run in batch mode
                           because SQLite cannot ALTER most constraints
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from notekeeper.config import load_settings
from notekeeper.database import Base

# The model module registers the notes table on Base.metadata
from notekeeper.models.note import Note  # noqa: F401

config = context.config

# alembic.ini carries the logger setup for migration runs
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Fails with the same DATABASE_URL hint the CLI prints
settings = load_settings()
settings.validate_required()
config.set_main_option("sqlalchemy.url", settings.database_url)


def _configure(**options) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=settings.is_sqlite,
        **options,
    )


def run_migrations_offline() -> None:
    """Print the migration SQL for the configured backend instead of running it."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def apply_migrations(connection) -> None:
    _configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Connect once, migrate, disconnect.

    NullPool: the migration run owns its single connection and nothing is
    left pooled when Alembic exits.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    try:
        async with connectable.connect() as connection:
            await connection.run_sync(apply_migrations)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
