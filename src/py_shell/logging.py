"""Session log: a structured record of what the shell did.

Three components write here.  ``builtin`` logs each dispatch,
``pipeline`` logs each launch, and all of them log every error they
report to the user.  Nothing is printed; the web front end reads the
recent errors back through its status endpoint.

The log is a bounded ring.  A shell can stay open for days, so once
``capacity`` entries are held the oldest ones are dropped.  Entries are
numbered from 1 in the order they were logged, and the numbers keep
counting across drops and ``clear()``.

- **LogLevel**: IntEnum, so ``min_level`` filtering is a plain ``>=``.
- **LogEntry**: one frozen record (sequence number, level, source,
  message).
- **Logger**: the ring plus ``filter``, ``recent`` and ``clear``.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from itertools import count

DEFAULT_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One record in the session log.

    Attributes:
        seq: Position in the session's log, starting at 1.
        level: Severity.
        source: ``shell``, ``builtin`` or ``pipeline``.
        message: What happened.

    """

    seq: int
    level: LogLevel
    source: str
    message: str

    def __str__(self) -> str:
        return f"#{self.seq} [{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Bounded in-memory log for one session."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Create an empty log holding at most *capacity* entries."""
        self._ring: deque[LogEntry] = deque(maxlen=capacity)
        self._seq = count(1)

    @property
    def entries(self) -> list[LogEntry]:
        """Return the retained entries, oldest first."""
        return list(self._ring)

    def log(self, level: LogLevel, message: str, *, source: str) -> LogEntry:
        """Record an event and return the new entry."""
        entry = LogEntry(seq=next(self._seq), level=level, source=source, message=message)
        self._ring.append(entry)
        return entry

    def debug(self, message: str, *, source: str) -> LogEntry:
        return self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> LogEntry:
        return self.log(LogLevel.INFO, message, source=source)

    def error(self, message: str, *, source: str) -> LogEntry:
        return self.log(LogLevel.ERROR, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel = LogLevel.DEBUG,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return retained entries at or above *min_level*, optionally from one *source*."""
        return [
            e
            for e in self._ring
            if e.level >= min_level and (source is None or e.source == source)
        ]

    def recent(self, limit: int, *, min_level: LogLevel = LogLevel.DEBUG) -> list[LogEntry]:
        """Return the last *limit* entries at or above *min_level*, oldest first."""
        if limit <= 0:
            return []
        return self.filter(min_level=min_level)[-limit:]

    def clear(self) -> None:
        """Drop every retained entry (numbering continues)."""
        self._ring.clear()

    def __len__(self) -> int:
        return len(self._ring)
