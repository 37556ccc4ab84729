"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `notes` table holding every notebook entry.
How:   Integer auto-increment key, unique non-empty name, text body.

Rollback: downgrade() drops the table entirely (destructive, all notes lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the notes table with its constraints.

    Column rationale is documented on notekeeper/models/note.py.
    """
    op.create_table(
        "notes",

        # Store-assigned id; SERIAL on PostgreSQL, AUTOINCREMENT on SQLite
        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Store-assigned identifier, monotonically increasing",
        ),

        # Human-facing lookup key
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Human-facing lookup key, unique across all notes",
        ),

        # Full note body (TEXT, no length limit)
        sa.Column(
            "data",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Free-text note body, may span multiple lines",
        ),

        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_notes_name"),
        sa.CheckConstraint("name <> ''", name="ck_notes_name_not_empty"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    """
    Drop the notes table entirely.

    WARNING: destructive. Every note is permanently lost.
    """
    op.drop_table("notes")
