"""Session: the one piece of mutable state a shell owns.

A real shell process keeps its environment, history and working
directory as process globals.  Here they live in a single ``Session``
value created once by the main loop and passed explicitly to the
builtins and the pipeline executor, so two shells (or two tests) never
share state by accident.

The working directory is tracked by the session rather than by
``os.chdir``: builtins resolve paths against ``session.cwd`` and every
spawned process is started in it.

Streams are text files.  Builtins write to them directly; the pipeline
executor hands their file descriptors to child processes, so anything
used as a session stream for external commands must be backed by a
real file descriptor (a terminal, a regular file, ``/dev/null``).
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from py_shell.config import ShellConfig
from py_shell.env import EnvironmentStore
from py_shell.errors import ShellError
from py_shell.history import HistoryBuffer
from py_shell.logging import Logger


@dataclass
class Streams:
    """The three standard streams a session reads from and writes to."""

    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    def flush(self) -> None:
        """Flush both output streams."""
        self.stdout.flush()
        self.stderr.flush()


class Session:
    """Shell state shared by the dispatcher and the executor."""

    def __init__(
        self,
        *,
        env: EnvironmentStore | None = None,
        cwd: Path | None = None,
        streams: Streams | None = None,
        config: ShellConfig | None = None,
    ) -> None:
        """Create a session.

        Args:
            env: Variables to export; seeded from the process when omitted.
            cwd: Starting directory (defaults to the process cwd).
            streams: Standard streams (defaults to ``sys`` streams).
            config: Shell settings (defaults to ``ShellConfig()``).

        """
        self.config = config or ShellConfig()
        self.env = env if env is not None else EnvironmentStore.from_process(
            ls_colors=self.config.ls_colors
        )
        self.history = HistoryBuffer()
        self.cwd = (cwd or Path.cwd()).resolve()
        self.streams = streams or Streams()
        self.logger = Logger()
        self.running = True

    def resolve(self, path: str) -> Path:
        """Resolve *path* against the session's working directory."""
        return self.cwd / Path(path).expanduser()

    def chdir(self, path: Path) -> None:
        """Make *path* the working directory (caller has validated it)."""
        self.cwd = path.resolve()

    def write(self, text: str) -> None:
        """Write *text* to the session's standard output."""
        self.streams.stdout.write(text)

    def writeln(self, text: str = "") -> None:
        """Write *text* plus a newline to standard output."""
        self.streams.stdout.write(text + "\n")

    def report(self, error: ShellError, *, source: str) -> None:
        """Write *error* to the error stream and log it."""
        line = error.report()
        self.streams.stderr.write(line + "\n")
        self.logger.error(line, source=source)
