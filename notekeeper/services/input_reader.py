"""
notekeeper — Input Reader
=========================

What:  Captures a multi-line note body typed at the terminal.
How:   Reads one line at a time until a line equal to the end-of-note
       sentinel arrives. The sentinel must fill the whole line; `#endnote#`
       inside ordinary text does not end the note.

States:
    accumulating ──(line == sentinel)──▶ terminated   → body returned
         │
         └──(end of input)──▶ IncompleteInputError     → body discarded
"""

import sys
from typing import List, Optional, TextIO

from notekeeper.exceptions import IncompleteInputError

END_OF_NOTE = "#endnote#"


def read_note_body(stream: Optional[TextIO] = None, sentinel: str = END_OF_NOTE) -> str:
    """
    Read lines from `stream` (stdin by default) up to the sentinel line.

    Line terminators are stripped before comparing; the returned body joins
    the captured lines with "\\n" and never contains the sentinel.

    Raises:
        IncompleteInputError: the stream ended before the sentinel was seen
    """
    if stream is None:
        stream = sys.stdin

    lines: List[str] = []
    terminated = False
    while not terminated:
        raw = stream.readline()
        if raw == "":
            raise IncompleteInputError(sentinel=sentinel, lines_read=len(lines))

        line = raw.rstrip("\r\n")
        terminated = line == sentinel
        if not terminated:
            lines.append(line)

    return "\n".join(lines)


def end_of_note_hint(sentinel: str = END_OF_NOTE) -> str:
    """Instruction shown before interactive capture starts."""
    return f"(At the end of the note, enter `{sentinel}` on its own line to finish writing the note)"
