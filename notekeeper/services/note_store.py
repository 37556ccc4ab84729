"""
notekeeper — Note Store (Persistence Layer)
===========================================

What:  Durable create/read/list/update/delete of notes.
How:   Every public method runs in its own transaction through
       `session_scope()`; results are copied into pydantic schemas before the
       session closes.
Who:   Called by the Command Dispatcher.

Consistency rules:
    - Name uniqueness is enforced by the `uq_notes_name` constraint. An
      `IntegrityError` from the insert/update becomes DuplicateNameError;
      there is no check-then-insert.
    - An empty name is rejected with InvalidCommandError before any SQL runs,
      so the non-empty check constraint never surfaces as a duplicate.
    - Identifiers come from the backend's auto-increment.
    - A failed operation rolls back, so a failed create adds no row and a
      failed delete leaves the note in place.
    - Any other SQLAlchemy or socket failure becomes BackendUnavailableError.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.database import session_scope
from notekeeper.exceptions import (
    BackendUnavailableError,
    DuplicateNameError,
    InvalidCommandError,
    NotFoundError,
)
from notekeeper.models.note import Note
from notekeeper.schemas.note import NoteRecord, NoteSummary

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Persistence for notes, bound to one session factory.

    Responsibilities:
        - create(): insert a new note, rejecting duplicate names
        - get_by_name(): full note lookup by exact name
        - list_all(): (id, name) summaries in ascending id order
        - delete(): remove one note by name
        - update() / clear() / rename(): modify an existing note in place
        - delete_all(): empty the notebook
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """
        session_scope() plus translation of backend failures.

        Notebook errors raised inside the block pass through untouched after
        the rollback.
        """
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database error: %s", _short_error(e))
            logger.debug("Database error details", exc_info=True)
            raise BackendUnavailableError(
                message=f"The notebook database is unavailable: {_short_error(e)}",
                context={"error_type": type(e).__name__},
            ) from e

    async def _locked_note(self, session: AsyncSession, name: str) -> Note:
        result = await session.execute(
            select(Note).where(Note.name == name).with_for_update()
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(name=name)
        return note

    async def create(self, name: str, data: str) -> NoteRecord:
        """
        Insert a new note and return it with its assigned id.

        Raises:
            InvalidCommandError: `name` is empty
            DuplicateNameError: a note called `name` already exists
            BackendUnavailableError: the database could not be used
        """
        _require_name(name)
        async with self._transaction() as session:
            note = Note(name=name, data=data)
            session.add(note)
            try:
                # Flush assigns the id; the unique constraint fires here
                await session.flush()
            except IntegrityError as e:
                logger.warning("Rejected duplicate note name %r", name)
                raise DuplicateNameError(name=name) from e
            record = NoteRecord.model_validate(note)

        logger.info("Note %r created with id %d", record.name, record.id)
        return record

    async def get_by_name(self, name: str) -> NoteRecord:
        """
        Fetch the full note called `name`.

        Raises:
            NotFoundError: no note has that name
            BackendUnavailableError: the database could not be used
        """
        async with self._transaction() as session:
            result = await session.execute(select(Note).where(Note.name == name))
            note = result.scalar_one_or_none()
            if note is None:
                raise NotFoundError(name=name)
            return NoteRecord.model_validate(note)

    async def list_all(self) -> List[NoteSummary]:
        """Every note as an (id, name) summary, oldest first. Empty list when none exist."""
        async with self._transaction() as session:
            result = await session.execute(
                select(Note.id, Note.name).order_by(Note.id.asc())
            )
            return [NoteSummary(id=row.id, name=row.name) for row in result.all()]

    async def delete(self, name: str) -> None:
        """
        Remove the note called `name`.

        Deleting a name twice fails the second time.

        Raises:
            NotFoundError: no note has that name
            BackendUnavailableError: the database could not be used
        """
        async with self._transaction() as session:
            result = await session.execute(delete(Note).where(Note.name == name))
            if result.rowcount == 0:
                raise NotFoundError(name=name)

        logger.info("Note %r deleted", name)

    async def update(self, name: str, data: str) -> NoteRecord:
        """
        Replace the body of the note called `name`, keeping its id.

        Raises:
            NotFoundError: no note has that name
            BackendUnavailableError: the database could not be used
        """
        async with self._transaction() as session:
            note = await self._locked_note(session, name)
            note.data = data
            await session.flush()
            record = NoteRecord.model_validate(note)

        logger.info("Note %r updated (%d chars)", name, len(data))
        return record

    async def clear(self, name: str) -> NoteRecord:
        """Empty the body of the note called `name`."""
        return await self.update(name, "")

    async def rename(self, name: str, new_name: str) -> NoteRecord:
        """
        Give the note called `name` a new name, keeping its id and body.

        Raises:
            NotFoundError: no note has that name
            InvalidCommandError: `new_name` is empty
            DuplicateNameError: `new_name` is already in use
            BackendUnavailableError: the database could not be used
        """
        _require_name(new_name)
        async with self._transaction() as session:
            note = await self._locked_note(session, name)
            note.name = new_name
            try:
                await session.flush()
            except IntegrityError as e:
                logger.warning("Rejected rename of %r to taken name %r", name, new_name)
                raise DuplicateNameError(name=new_name) from e
            record = NoteRecord.model_validate(note)

        logger.info("Note %r renamed to %r", name, new_name)
        return record

    async def delete_all(self) -> int:
        """Remove every note and return how many were removed."""
        async with self._transaction() as session:
            result = await session.execute(delete(Note))
            removed = result.rowcount or 0

        logger.info("Deleted all notes (%d removed)", removed)
        return removed


def _require_name(name: str) -> None:
    # Only the unique constraint may raise IntegrityError on insert or rename
    if not name:
        raise InvalidCommandError(message="A note name must not be empty")


def _short_error(error: Exception) -> str:
    """First line of a driver error, without SQLAlchemy's background link."""
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__
