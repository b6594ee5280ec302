"""Shell error taxonomy.

Every failure the shell can report is a ``ShellError``.  The main loop
catches this one base class around each line, writes the message to
the session's error stream, and keeps going.  No error ends the shell
except the ``exit`` builtin or end-of-input.

The subclasses exist so callers (and tests) can tell failures apart:

- **UsageError**: a builtin got missing or malformed arguments.
  ``ExportSyntaxError`` narrows it to a bad ``export`` argument.
- **FilesystemError**: ``cd`` was pointed at something that is not
  a directory.
- **ProcessStartError**: an external program could not be started
  (not found, permission denied).
- **ProcessExitError**: an external program exited nonzero, or
  waiting on it failed.
- **PipeCreationError**: the OS refused to create a pipe.

Process errors carry the 1-based stage index and program name, so a
report can say *which* stage of a pipeline went wrong.
"""


class ShellError(Exception):
    """Base class for every error the shell reports and survives."""

    prefix = "Error"

    def report(self) -> str:
        """Format the error as a single line for the error stream."""
        return f"{self.prefix}: {self}"


class UsageError(ShellError):
    """Raised when a builtin is invoked with bad arguments."""

    prefix = "Usage"


class ExportSyntaxError(UsageError):
    """Raised for an ``export`` argument that is not ``KEY=VALUE``."""

    prefix = "Invalid export syntax"


class FilesystemError(ShellError):
    """Raised when a filesystem target is missing or of the wrong kind."""


class PipeCreationError(ShellError):
    """Raised when an OS pipe cannot be created while wiring a pipeline."""


class _StageError(ShellError):
    """An error tied to one stage of a pipeline."""

    def __init__(self, stage: int, program: str, reason: str) -> None:
        """Create a stage error.

        Args:
            stage: 1-based position of the stage in its pipeline.
            program: The program the stage runs.
            reason: Human-readable cause.

        """
        super().__init__(f"stage {stage} ({program}): {reason}")
        self.stage = stage
        self.program = program
        self.reason = reason


class ProcessStartError(_StageError):
    """Raised when a stage's program cannot be started."""


class ProcessExitError(_StageError):
    """Raised when a stage exits nonzero or cannot be waited on."""

    def __init__(
        self, stage: int, program: str, reason: str, *, returncode: int | None = None
    ) -> None:
        """Create an exit error, remembering the exit status if known."""
        super().__init__(stage, program, reason)
        self.returncode = returncode
