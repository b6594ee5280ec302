"""Shell configuration.

All tunables live in one frozen ``ShellConfig`` value.  The defaults
are module constants; a couple of them can be overridden from the
process environment when the shell starts (``PY_SHELL_PROMPT`` and
``PY_SHELL_HISTORY_FILE``), which is handy for running several shells
side by side without sharing a history file.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PROMPT = "py-shell> "
DEFAULT_HISTORY_FILE = Path("/tmp/py_shell_history")  # noqa: S108
DEFAULT_LS_COLORS = (
    "di=1;34:ln=1;36:so=1;35:pi=1;33:ex=1;32:bd=1;33:cd=1;33:su=1;31:sg=1;31:tw=1;34:ow=1;34"
)
DEFAULT_LS_COLOR_FLAG = "--color=auto"
DEFAULT_TERMINAL_SIZE = (80, 24)
FAREWELL = "Goodbye!"

_PROMPT_VAR = "PY_SHELL_PROMPT"
_HISTORY_VAR = "PY_SHELL_HISTORY_FILE"


@dataclass(frozen=True)
class ShellConfig:
    """Settings for one shell session.

    Attributes:
        prompt: Text shown before each input line.
        history_file: Where readline persists accepted lines.
        ls_colors: ``LS_COLORS`` value seeded when the process has none.
        ls_color_flag: Flag inserted into external ``ls`` invocations.
        terminal_size: (columns, rows) used when the terminal can't be queried.
        farewell: Message printed on ``exit`` and end-of-input.

    """

    prompt: str = DEFAULT_PROMPT
    history_file: Path = field(default=DEFAULT_HISTORY_FILE)
    ls_colors: str = DEFAULT_LS_COLORS
    ls_color_flag: str = DEFAULT_LS_COLOR_FLAG
    terminal_size: tuple[int, int] = DEFAULT_TERMINAL_SIZE
    farewell: str = FAREWELL

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "ShellConfig":
        """Build a config, applying overrides found in *environ*."""
        prompt = environ.get(_PROMPT_VAR, DEFAULT_PROMPT)
        history = environ.get(_HISTORY_VAR)
        history_file = Path(history) if history else DEFAULT_HISTORY_FILE
        return cls(prompt=prompt, history_file=history_file)
