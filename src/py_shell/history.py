"""Command history: the ordered log of accepted input lines.

Every non-empty line the user enters is recorded, except that a line
identical to the one just before it is skipped.  Only *adjacent*
repeats are suppressed; running ``ls``, ``pwd``, ``ls`` keeps all three.

Entries are never removed or reordered.  Display numbering starts at 1.
Saving history to disk is the REPL's job (via readline), not this
buffer's.
"""


class HistoryBuffer:
    """Append-only history with adjacent-duplicate suppression."""

    def __init__(self) -> None:
        """Create an empty history."""
        self._lines: list[str] = []

    def append(self, line: str) -> bool:
        """Record *line* unless it is empty or repeats the last entry.

        Returns:
            True if the line was stored.

        """
        if not line or (self._lines and self._lines[-1] == line):
            return False
        self._lines.append(line)
        return True

    def all(self) -> list[str]:
        """Return every entry, oldest first."""
        return list(self._lines)

    def numbered(self) -> list[tuple[int, str]]:
        """Return ``(number, line)`` pairs numbered from 1."""
        return list(enumerate(self._lines, start=1))

    def last(self) -> str | None:
        """Return the most recent entry, or None if history is empty."""
        return self._lines[-1] if self._lines else None

    def __len__(self) -> int:
        return len(self._lines)
