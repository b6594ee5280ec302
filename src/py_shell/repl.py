"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the thin I/O wrapper around ``Shell``:

    1. **Read**: display a prompt and read one line (readline gives
       line editing, arrow-key history and tab completion).
    2. **Eval**: pass the line to ``shell.execute()``.  Builtins and
       external programs write their own output.
    3. **Loop**: repeat until ``exit`` or end-of-input.

Accepted lines are also appended to a history file so arrow-key recall
survives restarts.  That file belongs to readline; the in-memory
``HistoryBuffer`` the ``history`` builtin shows starts empty each
session.

Ctrl+C at the prompt abandons the current line and shows a new prompt.
Ctrl+C while a command runs stops waiting for it and does the same.
Ctrl+D (end-of-input) prints the farewell and exits with status 0.
"""

import contextlib
import os
import readline
from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

from py_shell.builtins import Outcome
from py_shell.completer import Completer
from py_shell.config import ShellConfig
from py_shell.session import Session
from py_shell.shell import Shell

LineReader: TypeAlias = Callable[[str], str]


class HistoryFile:
    """Persist accepted lines through readline's history file."""

    def __init__(self, path: Path) -> None:
        """Remember where history is stored."""
        self._path = path

    def load(self) -> None:
        """Load earlier sessions' lines into readline, if the file exists."""
        with contextlib.suppress(OSError):
            readline.read_history_file(self._path)

    def save(self, line: str) -> None:  # noqa: ARG002
        """Append *line* to the history file.

        readline already holds the line in memory once ``input()`` has
        returned it; this only makes it durable.
        """
        with contextlib.suppress(OSError):
            self._path.touch(exist_ok=True)
            readline.append_history_file(1, self._path)


def configure_readline(shell: Shell) -> Completer:
    """Wire tab completion into readline and return the completer."""
    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t|")
    readline.parse_and_bind("tab: complete")
    return completer


def run_loop(
    shell: Shell,
    read_line: LineReader,
    *,
    on_accept: Callable[[str], None] | None = None,
) -> int:
    """Feed lines from *read_line* to *shell* until exit or end-of-input.

    Args:
        shell: The shell to drive.
        read_line: Called with the prompt; returns a line or raises
            ``EOFError`` / ``KeyboardInterrupt``.
        on_accept: Called with every non-blank line before it runs.

    Returns:
        The shell's exit status (always 0).

    """
    session = shell.session
    prompt = session.config.prompt
    while session.running:
        try:
            line = read_line(prompt)
        except KeyboardInterrupt:
            session.writeln("^C")
            continue
        except EOFError:
            session.writeln()
            session.writeln(session.config.farewell)
            break

        if line.strip() and on_accept is not None:
            on_accept(line.strip())
        try:
            outcome = shell.execute(line)
        except KeyboardInterrupt:
            session.writeln("^C")
            continue
        if outcome is Outcome.EXIT:
            break
    session.streams.flush()
    return 0


def run() -> int:
    """Start an interactive shell on the terminal.

    This is the ``py-shell`` console entry point.
    """
    config = ShellConfig.from_environ(os.environ)
    shell = Shell(session=Session(config=config))
    configure_readline(shell)
    history_file = HistoryFile(config.history_file)
    history_file.load()
    return run_loop(shell, input, on_accept=history_file.save)


def main() -> None:
    """Run the shell and exit with its status."""
    raise SystemExit(run())
