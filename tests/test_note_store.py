"""
notekeeper — Note Store Tests
=============================

What:  Tests for NoteStore against a real SQLite database.
How:   Each test gets a fresh database file with the notes table created.

What we test:
    ✅ create → get_by_name round trip with store-assigned, increasing ids
    ✅ duplicate names rejected by the unique constraint, first body kept
    ✅ empty names rejected as invalid, never reported as taken
    ✅ NotFoundError for unknown names on get/delete/update/rename
    ✅ list_all ordering and the empty notebook
    ✅ update / clear / rename / delete_all
    ✅ ids are never reused
    ✅ backend failures surface as BackendUnavailableError
"""

import asyncio

import pytest

from notekeeper.config import Settings
from notekeeper.database import build_engine, create_session_factory
from notekeeper.exceptions import (
    BackendUnavailableError,
    DuplicateNameError,
    InvalidCommandError,
    NotFoundError,
)
from notekeeper.schemas.note import NoteRecord, NoteSummary
from notekeeper.services.note_store import NoteStore


class TestNoteStoreCreate:
    """Tests for create()."""

    @pytest.mark.asyncio
    async def test_empty_name_is_invalid_not_duplicate(self, note_store):
        with pytest.raises(InvalidCommandError) as exc_info:
            await note_store.create("", "x")

        assert not isinstance(exc_info.value, DuplicateNameError)
        assert "must not be empty" in exc_info.value.message
        assert await note_store.list_all() == []

    @pytest.mark.asyncio
    async def test_create_then_get_returns_same_note(self, note_store):
        created = await note_store.create("passwords", "login: a\npassword: b")
        fetched = await note_store.get_by_name("passwords")

        assert created.id >= 1
        assert fetched == NoteRecord(id=created.id, name="passwords", data="login: a\npassword: b")

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self, note_store):
        ids = [(await note_store.create(f"note-{i}", str(i))).id for i in range(5)]

        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    @pytest.mark.asyncio
    async def test_empty_body_is_allowed(self, note_store):
        await note_store.create("blank", "")

        assert (await note_store.get_by_name("blank")).data == ""

    @pytest.mark.asyncio
    async def test_duplicate_name_keeps_first_body(self, note_store):
        first = await note_store.create("todo", "milk")

        with pytest.raises(DuplicateNameError) as exc_info:
            await note_store.create("todo", "bread")

        assert exc_info.value.name == "todo"
        stored = await note_store.get_by_name("todo")
        assert stored.data == "milk"
        assert stored.id == first.id
        assert len(await note_store.list_all()) == 1

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, note_store):
        await note_store.create("Todo", "upper")
        await note_store.create("todo", "lower")

        assert (await note_store.get_by_name("Todo")).data == "upper"
        assert (await note_store.get_by_name("todo")).data == "lower"

    @pytest.mark.asyncio
    async def test_concurrent_creates_with_same_name_one_wins(self, note_store):
        """Two racing inserts: the unique constraint lets exactly one through."""
        results = await asyncio.gather(
            note_store.create("race", "first"),
            note_store.create("race", "second"),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, NoteRecord)]
        rejected = [r for r in results if isinstance(r, DuplicateNameError)]
        assert len(created) == 1
        assert len(rejected) == 1
        assert (await note_store.get_by_name("race")).data == created[0].data


class TestNoteStoreGet:
    """Tests for get_by_name()."""

    @pytest.mark.asyncio
    async def test_unknown_name_raises_not_found(self, note_store):
        with pytest.raises(NotFoundError):
            await note_store.get_by_name("never-added")

    @pytest.mark.asyncio
    async def test_returns_full_body(self, note_store):
        body = "\n".join(f"line {i}: " + "x" * 80 for i in range(200))
        await note_store.create("long", body)

        assert (await note_store.get_by_name("long")).data == body


class TestNoteStoreList:
    """Tests for list_all()."""

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, note_store):
        assert await note_store.list_all() == []

    @pytest.mark.asyncio
    async def test_lists_every_note_in_insertion_order(self, note_store):
        names = ["zeta", "alpha", "mid"]
        for name in names:
            await note_store.create(name, f"body of {name}")

        listing = await note_store.list_all()

        assert [n.name for n in listing] == names
        assert [n.id for n in listing] == sorted(n.id for n in listing)
        assert all(isinstance(n, NoteSummary) for n in listing)

    @pytest.mark.asyncio
    async def test_listing_is_stable_without_writes(self, note_store):
        await note_store.create("a", "1")
        await note_store.create("b", "2")

        assert await note_store.list_all() == await note_store.list_all()


class TestNoteStoreDelete:
    """Tests for delete() and delete_all()."""

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, note_store):
        await note_store.create("gone", "soon")

        await note_store.delete("gone")

        with pytest.raises(NotFoundError):
            await note_store.get_by_name("gone")

    @pytest.mark.asyncio
    async def test_delete_unknown_name_raises_not_found(self, note_store):
        with pytest.raises(NotFoundError):
            await note_store.delete("never-added")

    @pytest.mark.asyncio
    async def test_second_delete_raises_not_found(self, note_store):
        await note_store.create("once", "")
        await note_store.delete("once")

        with pytest.raises(NotFoundError):
            await note_store.delete("once")

    @pytest.mark.asyncio
    async def test_failed_delete_leaves_other_notes(self, note_store):
        await note_store.create("keep", "me")

        with pytest.raises(NotFoundError):
            await note_store.delete("other")

        assert (await note_store.get_by_name("keep")).data == "me"

    @pytest.mark.asyncio
    async def test_ids_are_not_reused_after_deleting_latest(self, note_store):
        first = await note_store.create("a", "")
        second = await note_store.create("b", "")
        await note_store.delete("b")

        third = await note_store.create("c", "")

        assert third.id > second.id > first.id

    @pytest.mark.asyncio
    async def test_delete_all_returns_count_and_empties_store(self, note_store):
        for name in ("a", "b", "c"):
            await note_store.create(name, "")

        assert await note_store.delete_all() == 3
        assert await note_store.list_all() == []
        assert await note_store.delete_all() == 0

    @pytest.mark.asyncio
    async def test_ids_keep_growing_after_delete_all(self, note_store):
        last = await note_store.create("a", "")
        await note_store.delete_all()

        assert (await note_store.create("a", "")).id > last.id


class TestNoteStoreModify:
    """Tests for update(), clear() and rename()."""

    @pytest.mark.asyncio
    async def test_update_replaces_body_and_keeps_id(self, note_store):
        created = await note_store.create("passwords", "old")

        updated = await note_store.update("passwords", "new\nbody")

        assert updated == NoteRecord(id=created.id, name="passwords", data="new\nbody")
        assert (await note_store.get_by_name("passwords")).data == "new\nbody"

    @pytest.mark.asyncio
    async def test_update_unknown_name_raises_not_found(self, note_store):
        with pytest.raises(NotFoundError):
            await note_store.update("missing", "text")

    @pytest.mark.asyncio
    async def test_clear_empties_body(self, note_store):
        await note_store.create("scratch", "lots of text")

        cleared = await note_store.clear("scratch")

        assert cleared.data == ""
        assert (await note_store.get_by_name("scratch")).data == ""

    @pytest.mark.asyncio
    async def test_rename_keeps_id_and_body(self, note_store):
        created = await note_store.create("draft", "body")

        renamed = await note_store.rename("draft", "final")

        assert renamed == NoteRecord(id=created.id, name="final", data="body")
        with pytest.raises(NotFoundError):
            await note_store.get_by_name("draft")

    @pytest.mark.asyncio
    async def test_rename_onto_taken_name_changes_nothing(self, note_store):
        await note_store.create("one", "1")
        await note_store.create("two", "2")

        with pytest.raises(DuplicateNameError) as exc_info:
            await note_store.rename("one", "two")

        assert exc_info.value.name == "two"
        assert (await note_store.get_by_name("one")).data == "1"
        assert (await note_store.get_by_name("two")).data == "2"

    @pytest.mark.asyncio
    async def test_rename_unknown_name_raises_not_found(self, note_store):
        with pytest.raises(NotFoundError):
            await note_store.rename("missing", "anything")

    @pytest.mark.asyncio
    async def test_rename_to_empty_name_is_invalid(self, note_store):
        await note_store.create("draft", "text")

        with pytest.raises(InvalidCommandError):
            await note_store.rename("draft", "")

        assert (await note_store.get_by_name("draft")).data == "text"


class TestNoteStoreBackend:
    """Backend failures become BackendUnavailableError."""

    @pytest.mark.asyncio
    async def test_missing_schema_is_backend_unavailable(self, settings):
        engine = build_engine(settings)  # no create_all: the table does not exist
        store = NoteStore(create_session_factory(engine))
        try:
            with pytest.raises(BackendUnavailableError):
                await store.list_all()
            with pytest.raises(BackendUnavailableError):
                await store.create("x", "y")
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_unreachable_database_is_backend_unavailable(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'no-such-dir' / 'notebook.db'}"
        engine = build_engine(Settings(database_url=url))
        store = NoteStore(create_session_factory(engine))
        try:
            with pytest.raises(BackendUnavailableError):
                await store.get_by_name("anything")
        finally:
            await engine.dispose()
