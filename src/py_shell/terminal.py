"""Terminal helpers: size queries and clearing the screen.

Both are thin wrappers.  The size query falls back to a configured
default when the output isn't a terminal (pipes, files, tests), and
``clear`` is delegated to the external ``clear`` program so it honours
whatever ``TERM`` the session exports.
"""

import shutil
import subprocess
from dataclasses import dataclass

from py_shell.config import DEFAULT_TERMINAL_SIZE
from py_shell.errors import ProcessExitError, ProcessStartError
from py_shell.session import Session


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions in character cells."""

    columns: int
    rows: int


def terminal_size(fallback: tuple[int, int] = DEFAULT_TERMINAL_SIZE) -> TerminalSize:
    """Return the current terminal size, or *fallback* (columns, rows)."""
    size = shutil.get_terminal_size(fallback=fallback)
    return TerminalSize(columns=size.columns, rows=size.lines)


def clear_screen(session: Session) -> None:
    """Run the external ``clear`` program on the session's terminal.

    Raises:
        ProcessStartError: If ``clear`` cannot be started.
        ProcessExitError: If ``clear`` exits nonzero.

    """
    session.streams.flush()
    try:
        completed = subprocess.run(  # noqa: S603
            ["clear"],  # noqa: S607
            stdout=session.streams.stdout,
            stderr=session.streams.stderr,
            env=session.env.as_dict(),
            cwd=session.cwd,
            check=False,
        )
    except OSError as e:
        raise ProcessStartError(1, "clear", e.strerror or str(e)) from e
    if completed.returncode != 0:
        msg = f"exit status {completed.returncode}"
        raise ProcessExitError(1, "clear", msg, returncode=completed.returncode)
