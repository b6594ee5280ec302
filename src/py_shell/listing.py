"""Colorized directory listing for the ``ls`` builtin.

Plain ``ls`` (no flags, at most one directory) is rendered in-process:
entries are sorted directories-first then by name, decorated with a
color and an icon chosen from the entry's kind or extension, and packed
into as many columns as the terminal width allows.

Entry kinds come from ``lstat`` so symlinks are shown as links rather
than as whatever they point to.
"""

import re
import stat
from dataclasses import dataclass
from pathlib import Path

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
WHITE = "\033[37m"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

# Icons and emoji render two cells wide; the trailing space makes three.
_ICON_WIDTH = 3
_COLUMN_PADDING = 2

_DEFAULT_STYLE = ("📄 ", RESET)

# Extension → (icon, color) for regular, non-executable files.
_EXTENSION_STYLES: dict[str, tuple[str, str]] = {}
for _exts, _style in (
    ((".txt", ".md", ".log", ".csv"), ("📄 ", WHITE)),
    ((".pdf",), ("📕 ", RED)),
    ((".doc", ".docx", ".odt"), ("📘 ", BLUE)),
    ((".xls", ".xlsx", ".ods"), ("📗 ", GREEN)),
    ((".ppt", ".pptx", ".odp"), ("📙 ", YELLOW)),
    ((".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg"), ("🖼️  ", MAGENTA)),
    ((".mp3", ".wav", ".flac", ".ogg", ".m4a"), ("🎵 ", CYAN)),
    ((".mp4", ".avi", ".mkv", ".mov", ".wmv"), ("🎬 ", YELLOW)),
    ((".zip", ".tar", ".gz", ".rar", ".7z"), ("📦 ", RED)),
    ((".go",), ("🔹 ", CYAN)),
    ((".py",), ("🐍 ", YELLOW)),
    ((".js", ".ts"), ("🟨 ", YELLOW)),
    ((".html", ".htm"), ("🌐 ", BOLD + RED)),
    ((".css",), ("🎨 ", BOLD + MAGENTA)),
    ((".c", ".cpp", ".h", ".hpp"), ("🔶 ", BLUE)),
    ((".java",), ("☕ ", RED)),
    ((".sh", ".bash", ".zsh"), ("💲 ", GREEN)),
    ((".rb",), ("💎 ", RED)),
    ((".json", ".yaml", ".yml", ".toml", ".xml"), ("🔧 ", YELLOW)),
):
    for _ext in _exts:
        _EXTENSION_STYLES[_ext] = _style


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _ANSI_RE.sub("", text)


@dataclass(frozen=True)
class ListingEntry:
    """One decorated directory entry.

    Attributes:
        name: Display name (directories get a trailing ``/``).
        icon: Emoji prefix.
        color: ANSI color sequence.

    """

    name: str
    icon: str
    color: str

    @property
    def width(self) -> int:
        """Return the number of terminal cells the entry occupies."""
        return len(strip_ansi(self.name)) + _ICON_WIDTH

    def render(self) -> str:
        """Return the colored, icon-prefixed text."""
        return f"{self.color}{self.icon}{self.name}{RESET}"


def classify(path: Path) -> ListingEntry:
    """Pick the icon and color for *path* based on its kind."""
    name = path.name
    try:
        mode = path.lstat().st_mode
    except OSError:
        return ListingEntry(name=name, icon="", color="")

    if stat.S_ISDIR(mode):
        return ListingEntry(name=name + "/", icon="📁 ", color=BOLD + BLUE)
    if stat.S_ISLNK(mode):
        return ListingEntry(name=name, icon="🔗 ", color=BOLD + CYAN)
    if stat.S_ISBLK(mode) or stat.S_ISCHR(mode):
        return ListingEntry(name=name, icon="💽 ", color=BOLD + YELLOW)
    if stat.S_ISFIFO(mode):
        return ListingEntry(name=name, icon="📊 ", color=BOLD + YELLOW)
    if stat.S_ISSOCK(mode):
        return ListingEntry(name=name, icon="🔌 ", color=BOLD + MAGENTA)
    if mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
        return ListingEntry(name=name, icon="⚙️  ", color=BOLD + GREEN)

    icon, color = _EXTENSION_STYLES.get(path.suffix.lower(), _DEFAULT_STYLE)
    return ListingEntry(name=name, icon=icon, color=color)


def _is_directory(path: Path) -> bool:
    """Return True for a real directory; a link to one does not count."""
    try:
        return stat.S_ISDIR(path.lstat().st_mode)
    except OSError:
        return False


def list_directory(directory: Path) -> list[ListingEntry]:
    """Return the decorated entries of *directory*, directories first.

    Raises:
        OSError: If *directory* can't be read.

    """
    paths = list(directory.iterdir())
    paths.sort(key=lambda p: (not _is_directory(p), p.name))
    return [classify(p) for p in paths]


def render_columns(entries: list[ListingEntry], width: int) -> str:
    """Pack *entries* row by row into as many columns as fit in *width*."""
    if not entries:
        return ""
    column_width = max(e.width for e in entries) + _COLUMN_PADDING
    columns = max(1, width // column_width)

    lines: list[str] = []
    for start in range(0, len(entries), columns):
        row = entries[start : start + columns]
        cells = [e.render() + " " * (column_width - e.width) for e in row[:-1]]
        cells.append(row[-1].render())
        lines.append("".join(cells))
    return "\n".join(lines) + "\n"
