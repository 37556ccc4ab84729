"""
notekeeper — Command Dispatcher
===============================

What:  Turns one parsed Command into one Note Store interaction and a
       user-facing DispatchResult.
How:   A handler table keyed by CommandKind; each handler awaits the store
       and returns the text to print. Notebook errors raised anywhere below
       are translated here, and only here, into messages and exit codes.
Who:   Called once per process by the runtime (notekeeper.main).

Flow (add-note):
    prompt ──▶ read body (until sentinel) ──▶ store.create ──▶ "added with ID n"
    Input capture finishes before the store is touched; an aborted capture
    never reaches the database.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional

from notekeeper.commands import USAGE, Command, CommandKind
from notekeeper.exceptions import (
    BackendUnavailableError,
    DuplicateNameError,
    IncompleteInputError,
    InvalidCommandError,
    NotebookError,
    NotFoundError,
)
from notekeeper.schemas.note import DispatchResult, NoteRecord, NoteSummary
from notekeeper.services.input_reader import end_of_note_hint, read_note_body
from notekeeper.services.note_store import NoteStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_BACKEND = 3

# Checked in order; the first matching class wins
_EXIT_CODES = (
    (InvalidCommandError, EXIT_USAGE),
    (BackendUnavailableError, EXIT_BACKEND),
    (DuplicateNameError, EXIT_FAILURE),
    (NotFoundError, EXIT_FAILURE),
    (IncompleteInputError, EXIT_FAILURE),
)

EMPTY_NOTEBOOK = "Notebook is empty."


# ── Formatting ────────────────────────────────────────────────────────────
def format_note(note: NoteRecord) -> str:
    """Fixed single-note layout: ID, Name, Data header, then the body verbatim."""
    return f"ID: {note.id}\nName: {note.name}\nData:\n{note.data}"


def format_listing(notes: List[NoteSummary]) -> str:
    if not notes:
        return EMPTY_NOTEBOOK
    lines = ["All notes in notebook:"]
    lines.extend(f"ID: {note.id}  Name: {note.name}" for note in notes)
    return "\n".join(lines)


def translate_error(error: NotebookError) -> DispatchResult:
    """
    Map a notebook error to the text and exit code shown to the caller.

    Context is logged at DEBUG; only the message is printed.
    """
    exit_code = EXIT_FAILURE
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            exit_code = code
            break

    logger.debug("%s (exit %d, context=%s)", error.message, exit_code, error.context)

    output = error.message
    if isinstance(error, InvalidCommandError):
        output = f"{error.message}\n{USAGE}"
    return DispatchResult(output=output, exit_code=exit_code)


def _silent(message: str) -> None:
    pass


class CommandDispatcher:
    """
    Executes commands against a NoteStore.

    Holds no state between calls; `read_body` and `prompt` are the
    interactive channels (stdin capture and the hint/prompt sink).
    """

    def __init__(
        self,
        store: NoteStore,
        read_body: Callable[[], str] = read_note_body,
        prompt: Optional[Callable[[str], None]] = None,
    ):
        self._store = store
        self._read_body = read_body
        self._prompt = prompt or _silent
        self._handlers: Dict[CommandKind, Callable[[Command], Awaitable[str]]] = {
            CommandKind.LIST_ALL: self._list_all,
            CommandKind.ADD_NOTE: self._add_note,
            CommandKind.DISPLAY_NOTE: self._display_note,
            CommandKind.DELETE_NOTE: self._delete_note,
            CommandKind.UPDATE_NOTE: self._update_note,
            CommandKind.CLEAR_NOTE: self._clear_note,
            CommandKind.RENAME_NOTE: self._rename_note,
            CommandKind.DELETE_ALL: self._delete_all,
        }

    @property
    def handled_kinds(self) -> frozenset:
        return frozenset(self._handlers)

    async def dispatch(self, command: Command) -> DispatchResult:
        """
        Run `command` and describe the outcome.

        Notebook errors become a non-zero DispatchResult; anything else
        propagates unchanged.
        """
        handler = self._handlers.get(command.kind)
        if handler is None:
            return translate_error(
                InvalidCommandError(
                    message=f"Unknown command `{command.kind.value}`",
                    command=command.kind.value,
                )
            )

        logger.debug("Dispatching %s", command)
        try:
            output = await handler(command)
        except NotebookError as e:
            return translate_error(e)
        return DispatchResult(output=output, exit_code=EXIT_OK)

    # ── Handlers ──────────────────────────────────────────────────────────
    async def _list_all(self, command: Command) -> str:
        return format_listing(await self._store.list_all())

    async def _add_note(self, command: Command) -> str:
        self._prompt(f"Enter the note you want to add into `{command.name}`")
        self._prompt(end_of_note_hint())
        data = self._read_body()

        note = await self._store.create(command.name, data)
        return f"Note `{note.name}` added with ID {note.id}"

    async def _display_note(self, command: Command) -> str:
        return format_note(await self._store.get_by_name(command.name))

    async def _delete_note(self, command: Command) -> str:
        await self._store.delete(command.name)
        return f"Note `{command.name}` deleted"

    async def _update_note(self, command: Command) -> str:
        # Fail on a missing note before asking the caller to type anything
        current = await self._store.get_by_name(command.name)
        self._prompt(f"Current content of `{current.name}`:\n{current.data}")
        self._prompt(f"Enter the note you want to put instead of the old one in `{current.name}`")
        self._prompt(end_of_note_hint())
        data = self._read_body()

        note = await self._store.update(command.name, data)
        return f"Note `{note.name}` updated"

    async def _clear_note(self, command: Command) -> str:
        note = await self._store.clear(command.name)
        return f"Content of `{note.name}` was cleared"

    async def _rename_note(self, command: Command) -> str:
        note = await self._store.rename(command.name, command.new_name)
        return f"Note `{command.name}` renamed to `{note.name}`"

    async def _delete_all(self, command: Command) -> str:
        removed = await self._store.delete_all()
        return f"Deleted {removed} note(s) from the notebook"
