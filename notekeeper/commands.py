"""
notekeeper — Command Variants
=============================

What:  The closed set of notebook commands and the validated value the CLI
       hands to the dispatcher.
How:   `CommandKind` enumerates every command; `Command` pairs a kind with its
       arguments and rejects missing or empty ones with InvalidCommandError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from notekeeper.exceptions import InvalidCommandError
from notekeeper.models.note import NAME_MAX_LENGTH


class CommandKind(str, Enum):
    """Every command the notebook understands, keyed by its CLI token."""

    LIST_ALL = "list"
    ADD_NOTE = "add-note"
    DISPLAY_NOTE = "display-note"
    DELETE_NOTE = "delete-note"
    UPDATE_NOTE = "update-note"
    CLEAR_NOTE = "clear-note"
    RENAME_NOTE = "rename-note"
    DELETE_ALL = "delete-all"

    @property
    def needs_name(self) -> bool:
        return self not in (CommandKind.LIST_ALL, CommandKind.DELETE_ALL)

    @property
    def needs_new_name(self) -> bool:
        return self is CommandKind.RENAME_NOTE


USAGE = (
    "Usage: notekeeper [add-note NAME | display-note NAME | delete-note NAME | "
    "update-note NAME | clear-note NAME | rename-note NAME NEW_NAME | delete-all]\n"
    "Run without a command to list all notes."
)


@dataclass(frozen=True)
class Command:
    """
    One parsed invocation.

    `name` is required for every kind except LIST_ALL and DELETE_ALL;
    `new_name` only for RENAME_NOTE.
    """

    kind: CommandKind
    name: Optional[str] = None
    new_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind.needs_name and not _present(self.name):
            raise InvalidCommandError(
                message=f"`{self.kind.value}` requires a note name",
                command=self.kind.value,
            )
        if self.kind.needs_new_name and not _present(self.new_name):
            raise InvalidCommandError(
                message=f"`{self.kind.value}` requires a new note name",
                command=self.kind.value,
            )
        for value in (self.name, self.new_name):
            if value is not None and len(value) > NAME_MAX_LENGTH:
                raise InvalidCommandError(
                    message=f"Note names are limited to {NAME_MAX_LENGTH} characters",
                    command=self.kind.value,
                )


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""
