"""
notekeeper — Package Initializer
================================

What: A personal notebook that keeps short, named, free-text notes in a
      relational database and reads them back by name.
Who:  Used by the `notekeeper` console script, by Alembic, and by pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │        CLI (Typer front end)        │  ← argv → Command
    ├─────────────────────────────────────┤
    │   Command Dispatcher + Input Reader │  ← orchestration, user-facing text
    ├─────────────────────────────────────┤
    │            Note Store               │  ← transactions, uniqueness
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async engine / sessions
    └─────────────────────────────────────┘

    Each invocation builds its own engine, runs exactly one command and
    disposes the engine again; nothing is shared between invocations.
"""

__version__ = "1.0.0"
