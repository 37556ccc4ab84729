"""
notekeeper — Note SQLAlchemy Model
==================================

What:  ORM model for the `notes` table.
Who:   Used by the Note Store for CRUD and by Alembic for schema management.

Table Design:
    - Integer primary key: assigned by the backend (SERIAL on PostgreSQL,
      AUTOINCREMENT on SQLite), so identifiers only ever grow and a deleted
      note's id is never handed out again
    - name: unique, non-empty lookup key (case-sensitive)
    - data: full note body, empty string when nothing was typed
"""

from sqlalchemy import CheckConstraint, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.database import Base

NAME_MAX_LENGTH = 255


class Note(Base):
    """
    A named note.

    Lifecycle:
        1. Created by `add-note` with a name and a body
        2. Read any number of times by `display-note` and the listing
        3. Optionally updated, cleared or renamed (the id never changes)
        4. Optionally deleted by `delete-note` or `delete-all`
    """

    __tablename__ = "notes"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Store-assigned identifier, monotonically increasing",
    )

    # ── Name ──────────────────────────────────────────────────────────────
    # Uniqueness lives in the database so concurrent inserts are serialised
    # by the constraint, not by a select-then-insert in Python
    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        comment="Human-facing lookup key, unique across all notes",
    )

    # ── Body ──────────────────────────────────────────────────────────────
    data: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Free-text note body, may span multiple lines",
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_notes_name"),
        CheckConstraint("name <> ''", name="ck_notes_name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, name='{self.name}')>"
