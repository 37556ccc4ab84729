"""
notekeeper — Command-Line Front End
===================================

What:  Typer application exposing the notebook commands.
How:   Each subcommand builds a Command and hands it to the runtime, which
       runs it against the database named by DATABASE_URL. Results go to
       stdout; prompts and error messages go to stderr. The process exits
       with the dispatcher's exit code.

Usage:
    notekeeper                              list all notes
    notekeeper add-note passwords           type the body, end with #endnote#
    notekeeper display-note passwords
    notekeeper update-note passwords
    notekeeper clear-note passwords
    notekeeper rename-note passwords logins
    notekeeper delete-note logins
    notekeeper delete-all --yes
"""

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError

from notekeeper.commands import Command, CommandKind
from notekeeper.config import load_settings
from notekeeper.exceptions import InvalidCommandError
from notekeeper.main import run_command, setup_logging
from notekeeper.services.dispatcher import EXIT_USAGE, translate_error

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
app = typer.Typer(
    help=(
        "Personal notebook: keep short named notes in a database.\n\n"
        "Run without a command to list every note."
    ),
    add_completion=False,
)


def _prompt(message: str) -> None:
    typer.echo(message, err=True)


def _execute(
    ctx: typer.Context,
    kind: CommandKind,
    name: Optional[str] = None,
    new_name: Optional[str] = None,
) -> None:
    """Run one command and exit with its status."""
    try:
        command = Command(kind, name, new_name)
    except InvalidCommandError as e:
        result = translate_error(e)
    else:
        result = asyncio.run(run_command(command, ctx.obj, prompt=_prompt))

    if result.output:
        typer.echo(result.output, err=not result.ok)
    if not result.ok:
        raise typer.Exit(code=result.exit_code)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    ),
) -> None:
    """Load settings once, configure logging, and list notes when no command is given."""
    overrides = {"log_level": log_level} if log_level else {}
    try:
        settings = load_settings(**overrides)
    except ValidationError as e:
        typer.echo(f"Invalid configuration:\n{e}", err=True)
        raise typer.Exit(code=EXIT_USAGE)

    setup_logging(settings.log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        _execute(ctx, CommandKind.LIST_ALL)


# ---------------------------------------------------------------------------
# Note commands
# ---------------------------------------------------------------------------
@app.command("add-note")
def add_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new note."),
) -> None:
    """Create a note; its body is read from stdin up to a `#endnote#` line."""
    _execute(ctx, CommandKind.ADD_NOTE, name)


@app.command("display-note")
def display_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the note to show."),
) -> None:
    """Print the id, name and full body of a note."""
    _execute(ctx, CommandKind.DISPLAY_NOTE, name)


@app.command("delete-note")
def delete_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the note to delete."),
) -> None:
    """Delete a note."""
    _execute(ctx, CommandKind.DELETE_NOTE, name)


@app.command("update-note")
def update_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the note to rewrite."),
) -> None:
    """Replace a note's body with new text read from stdin."""
    _execute(ctx, CommandKind.UPDATE_NOTE, name)


@app.command("clear-note")
def clear_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the note to empty."),
) -> None:
    """Empty a note's body, keeping the note itself."""
    _execute(ctx, CommandKind.CLEAR_NOTE, name)


@app.command("rename-note")
def rename_note(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Current note name."),
    new_name: str = typer.Argument(..., help="New note name."),
) -> None:
    """Rename a note; its id and body are unchanged."""
    _execute(ctx, CommandKind.RENAME_NOTE, name, new_name)


@app.command("delete-all")
def delete_all(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete every note in the notebook."""
    if not yes:
        typer.confirm("Delete every note in the notebook?", abort=True, err=True)
    _execute(ctx, CommandKind.DELETE_ALL)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
