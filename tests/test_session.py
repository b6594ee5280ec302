"""Tests for the session context and terminal helpers."""

from pathlib import Path

import pytest

from py_shell.config import ShellConfig
from py_shell.env import LS_COLORS, EnvironmentStore
from py_shell.errors import UsageError
from py_shell.session import Session
from py_shell.terminal import TerminalSize, terminal_size


class TestSession:
    """Verify session defaults and helpers."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """A bare session seeds from the process and starts in its cwd."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(LS_COLORS, raising=False)
        session = Session()
        assert session.cwd == tmp_path.resolve()
        assert session.env.get(LS_COLORS) == ShellConfig().ls_colors
        assert len(session.history) == 0
        assert session.running is True

    def test_sessions_are_independent(self, tmp_path: Path) -> None:
        """Two sessions never share state."""
        first = Session(env=EnvironmentStore(), cwd=tmp_path)
        second = Session(env=EnvironmentStore(), cwd=tmp_path)
        first.env.set("A", "1")
        first.history.append("ls")
        assert "A" not in second.env
        assert len(second.history) == 0

    def test_resolve_relative_and_absolute(self, tmp_path: Path) -> None:
        """Relative paths join the cwd; absolute paths stand alone."""
        session = Session(env=EnvironmentStore(), cwd=tmp_path)
        assert session.resolve("sub") == tmp_path.resolve() / "sub"
        assert session.resolve("/etc") == Path("/etc")

    def test_report_writes_and_logs(self, tmp_path: Path) -> None:
        """report() writes one line to stderr and logs it."""
        with (tmp_path / "err").open("a", encoding="utf-8") as err:
            session = Session(env=EnvironmentStore(), cwd=tmp_path)
            session.streams.stderr = err
            session.report(UsageError("unset KEY"), source="builtin")
        assert (tmp_path / "err").read_text(encoding="utf-8") == "Usage: unset KEY\n"
        assert session.logger.entries[0].message == "Usage: unset KEY"


class TestTerminalSize:
    """Verify the size query."""

    def test_columns_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """COLUMNS/LINES override the detected size."""
        monkeypatch.setenv("COLUMNS", "123")
        monkeypatch.setenv("LINES", "45")
        assert terminal_size() == TerminalSize(columns=123, rows=45)
