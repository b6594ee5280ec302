"""Tests for the REPL loop and its history file.

The loop is driven with a scripted line reader instead of a terminal.
"""

import os
import signal
import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

from conftest import CapturedSession

from py_shell.builtins import Outcome
from py_shell.repl import HistoryFile, configure_readline, run_loop
from py_shell.shell import Shell


def _reader(*lines: str | type[BaseException]) -> Callable[[str], str]:
    """Return a reader that yields *lines*, raising exception classes, then EOF."""
    script: Iterator[str | type[BaseException]] = iter(lines)

    def read(_prompt: str) -> str:
        item = next(script, EOFError)
        if isinstance(item, type):
            raise item
        return item

    return read


class TestRunLoop:
    """Verify the read-eval loop."""

    def test_exit_stops_loop(self, captured: CapturedSession) -> None:
        """Lines after exit are never read."""
        shell = Shell(session=captured.session)
        status = run_loop(shell, _reader("echo one", "exit", "echo two"))
        assert status == 0
        assert captured.out() == "one\nGoodbye!\n"

    def test_end_of_input_says_goodbye(self, captured: CapturedSession) -> None:
        """EOF prints the farewell and returns 0."""
        shell = Shell(session=captured.session)
        assert run_loop(shell, _reader("echo hi")) == 0
        assert captured.out() == "hi\n\nGoodbye!\n"

    def test_interrupt_continues(self, captured: CapturedSession) -> None:
        """Ctrl+C abandons the line and keeps reading."""
        shell = Shell(session=captured.session)
        run_loop(shell, _reader(KeyboardInterrupt, "echo after"))
        assert "after\n" in captured.out()

    def test_accepted_lines_forwarded(self, captured: CapturedSession) -> None:
        """Non-blank lines are passed to on_accept, trimmed."""
        accepted: list[str] = []
        shell = Shell(session=captured.session)
        run_loop(shell, _reader("  pwd ", "   ", "exit"), on_accept=accepted.append)
        assert accepted == ["pwd", "exit"]

    def test_failures_keep_looping(self, captured: CapturedSession) -> None:
        """A failing command doesn't end the loop."""
        shell = Shell(session=captured.session)
        run_loop(shell, _reader("no-such-program-xyz", "echo ok"))
        assert "ok\n" in captured.out()
        assert "no-such-program-xyz" in captured.err()

    def test_interrupt_during_command_keeps_looping(self, captured: CapturedSession) -> None:
        """SIGINT while a program runs leaves the loop alive for the next line."""
        shell = Shell(session=captured.session)
        timer = threading.Timer(0.3, os.kill, args=(os.getpid(), signal.SIGINT))
        timer.start()
        try:
            status = run_loop(shell, _reader("sleep 1", "echo survived", "exit"))
        finally:
            timer.cancel()
        assert status == 0
        assert "survived\n" in captured.out()
        assert captured.out().endswith("Goodbye!\n")

    def test_interrupt_escaping_a_command_shows_new_prompt(self, captured: CapturedSession) -> None:
        """A KeyboardInterrupt out of execute() prints ^C and the loop goes on."""
        shell = Shell(session=captured.session)
        with patch.object(shell, "execute", side_effect=[KeyboardInterrupt, Outcome.EXIT]):
            status = run_loop(shell, _reader("clear", "exit"))
        assert status == 0
        assert captured.out() == "^C\n"


class TestHistoryFile:
    """Verify readline history persistence."""

    def test_load_missing_file_is_quiet(self, tmp_path: Path) -> None:
        """A missing history file is not an error."""
        HistoryFile(tmp_path / "missing").load()

    def test_save_appends(self, tmp_path: Path) -> None:
        """save() creates the file and appends the latest readline entry."""
        path = tmp_path / "history"
        with patch("py_shell.repl.readline") as fake:
            HistoryFile(path).save("ls")
        assert path.exists()
        fake.append_history_file.assert_called_once_with(1, path)

    def test_load_reads_file(self, tmp_path: Path) -> None:
        """load() hands the file to readline."""
        path = tmp_path / "history"
        with patch("py_shell.repl.readline") as fake:
            HistoryFile(path).load()
        fake.read_history_file.assert_called_once_with(path)

    def test_save_unwritable_is_quiet(self, tmp_path: Path) -> None:
        """An unwritable history location doesn't break the shell."""
        HistoryFile(tmp_path / "no" / "such" / "dir" / "history").save("ls")


class TestReadlineSetup:
    """Verify readline wiring."""

    def test_completer_installed(self, captured: CapturedSession) -> None:
        """configure_readline installs the completer callback."""
        shell = Shell(session=captured.session)
        with patch("py_shell.repl.readline") as fake:
            completer = configure_readline(shell)
        fake.set_completer.assert_called_once_with(completer.complete)
        fake.parse_and_bind.assert_called_once_with("tab: complete")
