"""
notekeeper — Runtime
====================

What:  Logging setup and the lifecycle of one notebook invocation.
How:   `run_command()` builds the engine from settings, wires the session
       factory into a NoteStore and a CommandDispatcher, runs exactly one
       command and disposes the engine again, whatever the outcome.

Lifecycle:
    1. Build async engine (no connection is opened yet)
    2. Dispatch the command (one transaction, opened on first query)
    3. Dispose engine (close every pooled connection)
"""

import logging
import sys
from typing import Callable, Optional

from notekeeper.commands import Command
from notekeeper.config import Settings
from notekeeper.database import build_engine, create_session_factory, dispose_engine
from notekeeper.exceptions import BackendUnavailableError
from notekeeper.schemas.note import DispatchResult
from notekeeper.services.dispatcher import CommandDispatcher, translate_error
from notekeeper.services.input_reader import read_note_body
from notekeeper.services.note_store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

class StderrHandler(logging.StreamHandler):
    """
    StreamHandler that writes to whatever `sys.stderr` is at emit time.

    CliRunner and other test runners swap `sys.stderr` per invocation.
    """

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def setup_logging(level: str = "ERROR") -> None:
    """
    Configure logging for the whole process.

    Everything goes to stderr so stdout carries only command output.
    Called once by the CLI before any command runs. Failures the user is
    shown anyway are logged at WARNING or below, under the ERROR default.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.ERROR),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[StderrHandler()],
        force=True,
    )

    # SQL statements are echoed by the engine itself in DEBUG mode
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Invocation Lifecycle
# ══════════════════════════════════════════════════════════════════════════

async def run_command(
    command: Command,
    settings: Settings,
    read_body: Callable[[], str] = read_note_body,
    prompt: Optional[Callable[[str], None]] = None,
) -> DispatchResult:
    """
    Execute one command against the configured database.

    Configuration and engine failures are reported as BackendUnavailable
    results, exactly like failures that happen mid-command.
    """
    try:
        settings.validate_required()
        engine = build_engine(settings)
    except ValueError as e:
        return translate_error(BackendUnavailableError(message=str(e)))
    except BackendUnavailableError as e:
        return translate_error(e)

    logger.debug("Engine ready for %s", engine.url.render_as_string(hide_password=True))
    try:
        store = NoteStore(create_session_factory(engine))
        dispatcher = CommandDispatcher(store, read_body=read_body, prompt=prompt)
        return await dispatcher.dispatch(command)
    finally:
        await dispose_engine(engine)
        logger.debug("Engine disposed")