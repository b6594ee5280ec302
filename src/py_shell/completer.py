"""Tab completion.

What a word completes to depends on where it sits in the line:

- a command position (the first word, or the word after ``|``): builtin
  names plus executables on the exported ``PATH``;
- the argument of ``unset``: exported variable names;
- the argument of a file command (``cd``, ``ls``, ``cat`` ...), or any
  word containing ``/``: paths under the session's working directory.

``candidates(text, line)`` holds that logic and needs no terminal.
``complete(text, state)`` adapts it to readline, which calls it with
state 0, 1, 2 ... until it gets ``None``.
"""

from __future__ import annotations

import os
import readline
from pathlib import Path
from typing import TYPE_CHECKING

from py_shell.tokenizer import PIPE

if TYPE_CHECKING:
    from py_shell.shell import Shell

_FILE_COMMANDS = frozenset({"cd", "ls", "cat", "less", "head", "tail", "wc"})
_VARIABLE_COMMANDS = frozenset({"unset"})


class Completer:
    """Readline completer for one shell."""

    def __init__(self, shell: Shell) -> None:
        self._shell = shell
        self._matches: list[str] = []

    def complete(self, text: str, state: int) -> str | None:
        """Return match number *state* for *text*, or None past the end.

        The matches are worked out once, when readline asks for state 0.
        """
        if state == 0:
            self._matches = self.candidates(text, readline.get_line_buffer())
        return self._matches[state] if state < len(self._matches) else None

    def candidates(self, text: str, line: str) -> list[str]:
        """Return the sorted completions of *text* given the *line* so far."""
        before = line.replace(PIPE, f" {PIPE} ").split()
        if text and before and before[-1] == text:
            before.pop()

        if not before or before[-1] == PIPE:
            return self._commands(text)
        if before[0] in _VARIABLE_COMMANDS:
            return self._variables(text)
        if before[0] in _FILE_COMMANDS or "/" in text:
            return self._paths(text)
        return []

    def _commands(self, prefix: str) -> list[str]:
        found = {name for name in self._shell.command_names if name.startswith(prefix)}
        found.update(self._programs(prefix))
        return sorted(found)

    def _programs(self, prefix: str) -> set[str]:
        """Executables on the exported ``PATH`` whose names start with *prefix*."""
        programs: set[str] = set()
        for entry in self._shell.session.env.get("PATH").split(os.pathsep):
            if not entry:
                continue
            try:
                children = list(Path(entry).iterdir())
            except OSError:
                continue
            programs.update(
                child.name
                for child in children
                if child.name.startswith(prefix) and child.is_file() and os.access(child, os.X_OK)
            )
        return programs

    def _variables(self, prefix: str) -> list[str]:
        return [key for key in self._shell.session.env.keys() if key.startswith(prefix)]

    def _paths(self, text: str) -> list[str]:
        """Entries of the directory part of *text*, filtered by the name part.

        Directories are offered with a trailing ``/`` so the next tab
        descends into them.
        """
        head, sep, tail = text.rpartition("/")
        parent = head + sep
        try:
            children = list(self._shell.session.resolve(parent or ".").iterdir())
        except OSError:
            return []
        return sorted(
            parent + child.name + ("/" if child.is_dir() else "")
            for child in children
            if child.name.startswith(tail)
        )
