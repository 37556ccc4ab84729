"""
notekeeper — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for every failure a command can hit.
How:   Each exception carries a user-facing message and an optional context
       dict. The Note Store and Input Reader raise them; the Command
       Dispatcher is the only place that turns them into output and exit codes.

Exception Hierarchy:
    NotebookError (base)
    ├── InvalidCommandError       → exit 2 (usage)
    ├── DuplicateNameError        → exit 1
    ├── NotFoundError             → exit 1
    ├── IncompleteInputError      → exit 1
    └── BackendUnavailableError   → exit 3
"""

from typing import Any, Dict, Optional


class NotebookError(Exception):
    """
    Base exception for all notebook errors.

    Attributes:
        message:  User-facing error description (safe to print)
        context:  Additional debug info (logged, never printed)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidCommandError(NotebookError):
    """
    Raised when a command token is unknown or a required argument is missing.

    The dispatcher reports it together with a usage hint.
    """

    def __init__(
        self,
        message: str = "Invalid command",
        command: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if command:
            ctx["command"] = command
        super().__init__(message=message, context=ctx)
        self.command = command


class DuplicateNameError(NotebookError):
    """
    Raised when a note is created (or renamed) onto a name already in use.

    Produced by translating the unique-constraint violation reported by the
    database, so two racing inserts cannot both succeed.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The note name `{name}` is already taken; try another note name"
        ctx = context or {}
        ctx["name"] = name
        super().__init__(message=message, context=ctx)
        self.name = name


class NotFoundError(NotebookError):
    """
    Raised when a command refers to a note name that does not exist.

    SQLAlchemy returns None (or a zero rowcount) for missing rows; the store
    converts that into this exception.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Note `{name}` was not found"
        ctx = context or {}
        ctx["name"] = name
        super().__init__(message=message, context=ctx)
        self.name = name


class IncompleteInputError(NotebookError):
    """
    Raised when input ends before the end-of-note sentinel line.

    The partially typed body is discarded; nothing is written to the store.
    """

    def __init__(
        self,
        sentinel: str,
        lines_read: int = 0,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Input ended before the `{sentinel}` line; "
            f"the note was not saved ({lines_read} line(s) discarded)"
        )
        ctx = context or {}
        ctx["lines_read"] = lines_read
        super().__init__(message=message, context=ctx)
        self.sentinel = sentinel
        self.lines_read = lines_read


class BackendUnavailableError(NotebookError):
    """
    Raised when the database cannot be used for this invocation.

    Covers connection failures, a missing schema, an unknown driver and a
    missing DATABASE_URL. Fatal to the current invocation; there is no
    in-process retry.
    """

    def __init__(
        self,
        message: str = "The notebook database is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
