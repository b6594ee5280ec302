"""Shared fixtures.

External programs write to file descriptors, so sessions under test
use real files in ``tmp_path`` for their streams.  Output files are
opened in append mode so writes from the shell and from its children
land in order.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

from py_shell.env import EnvironmentStore
from py_shell.session import Session, Streams

DEFAULT_PATH = "/usr/local/bin:/usr/bin:/bin"


@dataclass
class CapturedSession:
    """A session plus easy access to what it wrote."""

    session: Session
    stdout_path: Path
    stderr_path: Path

    def out(self) -> str:
        """Return everything written to stdout so far."""
        self.session.streams.flush()
        return self.stdout_path.read_text(encoding="utf-8")

    def err(self) -> str:
        """Return everything written to stderr so far."""
        self.session.streams.flush()
        return self.stderr_path.read_text(encoding="utf-8")


@pytest.fixture
def captured(tmp_path: Path) -> Iterator[CapturedSession]:
    """Yield a session rooted in a scratch directory with file streams."""
    work = tmp_path / "work"
    work.mkdir()
    stdout_path = tmp_path / "stdout.txt"
    stderr_path = tmp_path / "stderr.txt"
    env = EnvironmentStore({"PATH": os.environ.get("PATH", DEFAULT_PATH), "HOME": str(work)})
    with (
        Path(os.devnull).open(encoding="utf-8") as stdin,
        stdout_path.open("a", encoding="utf-8") as stdout,
        stderr_path.open("a", encoding="utf-8") as stderr,
    ):
        streams = Streams(stdin=stdin, stdout=stdout, stderr=stderr)
        session = Session(env=env, cwd=work, streams=streams)
        yield CapturedSession(session=session, stdout_path=stdout_path, stderr_path=stderr_path)
