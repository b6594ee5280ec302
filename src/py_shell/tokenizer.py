"""Tokenizer: turn one input line into a pipeline of commands.

The grammar is deliberately tiny.  The pipe character ``|`` separates
stages and runs of whitespace separate arguments.  There is no quoting,
escaping, globbing or variable expansion, so neither ``|`` nor a space
can ever be part of an argument.  That is a known limitation.

Stages that turn out empty (``"ls || wc"``, a trailing ``|``) are
dropped rather than becoming empty commands, so every ``Command`` in a
``Pipeline`` has a program name.
"""

from dataclasses import dataclass

PIPE = "|"


@dataclass(frozen=True)
class Command:
    """A program name and its arguments.

    Attributes:
        program: The executable to run (never empty).
        args: Arguments passed after the program name.

    """

    program: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector, program first."""
        return [self.program, *self.args]

    def __str__(self) -> str:
        """Format as the words that produced this command."""
        return " ".join(self.argv)


@dataclass(frozen=True)
class Pipeline:
    """An ordered, non-empty chain of commands."""

    commands: tuple[Command, ...]

    def __post_init__(self) -> None:
        """Enforce the non-empty invariant."""
        if not self.commands:
            msg = "A pipeline needs at least one command"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.commands)

    def __str__(self) -> str:
        return f" {PIPE} ".join(str(cmd) for cmd in self.commands)


def split_words(line: str) -> list[str]:
    """Split a whole line on whitespace, pipes included as plain words."""
    return line.split()


def tokenize(line: str) -> Pipeline | None:
    """Parse *line* into a pipeline.

    Args:
        line: One raw input line.

    Returns:
        The pipeline, or None when the line has nothing to run
        (blank, or nothing but pipe characters).

    """
    stripped = line.strip()
    if not stripped:
        return None

    commands: list[Command] = []
    for stage in stripped.split(PIPE):
        words = stage.split()
        if not words:
            continue
        commands.append(Command(program=words[0], args=tuple(words[1:])))

    if not commands:
        return None
    return Pipeline(commands=tuple(commands))
