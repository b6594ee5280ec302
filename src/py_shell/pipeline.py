"""Pipeline builder and executor: run a chain of external programs.

``echo hello | tr l L`` runs two real processes with the standard
output of the first connected to the standard input of the second
through an OS pipe.  Getting that right comes down to handle
bookkeeping, so the work is split into explicit phases over a chain of
``Stage`` nodes:

1. **Build**: one ``Stage`` per command.  ``ls`` stages get the color
   flag inserted.
2. **Connect**: create the N-1 pipes.  Each stage ends up with at most
   one input handle and one output handle; the first stage reads the
   session's stdin and the last writes the session's stdout.  Every
   stage writes errors straight to the session's stderr.
3. **Start**: start *every* stage, left to right, before waiting on
   any of them.  If we waited on stage *i* first, and its output filled
   the pipe buffer with nobody reading yet, we would deadlock.
4. **Release**: right after a stage has been started (or failed to
   start), the parent closes its copies of that stage's pipe ends.  A
   write end left open in the parent means the reader never sees EOF.
5. **Reap**: wait for every started stage.

Errors never abort the pipeline.  A stage whose program cannot be
started is marked failed and its siblings still run: the reader after
it sees EOF, the writer before it gets a broken pipe, and both finish
on their own.  Nonzero exits are reported per stage too.  The only
error that stops a pipeline is failing to create a pipe, and since all
wiring happens before anything starts, no process is left behind.

Stage states::

    built ──► wired ──► running ──► reaped
      │         │          │
      └─────────┴──────────┴──► failed
"""

import os
import signal
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import pairwise
from typing import TextIO, TypeAlias

from py_shell.errors import PipeCreationError, ProcessExitError, ProcessStartError, ShellError
from py_shell.session import Session
from py_shell.tokenizer import Command, Pipeline

_Handle: TypeAlias = int | TextIO
PipeFactory: TypeAlias = Callable[[], tuple[int, int]]

_SOURCE = "pipeline"


class StageState(StrEnum):
    """Lifecycle of one stage in a running pipeline."""

    BUILT = "built"
    WIRED = "wired"
    RUNNING = "running"
    REAPED = "reaped"
    FAILED = "failed"


@dataclass
class Stage:
    """One command in a pipeline and the handles it will inherit.

    Attributes:
        index: 1-based position in the pipeline.
        command: The command to run.
        stdin: Pipe read end or session stream for standard input.
        stdout: Pipe write end or session stream for standard output.
        owned: Pipe descriptors the parent must close after handoff.
        process: The running child, once started.
        state: Where the stage is in its lifecycle.
        error: The error that failed this stage, if any.
        returncode: Exit status, once reaped.

    """

    index: int
    command: Command
    stdin: _Handle | None = None
    stdout: _Handle | None = None
    owned: list[int] = field(default_factory=list)
    process: subprocess.Popen[bytes] | None = None
    state: StageState = StageState.BUILT
    error: ShellError | None = None
    returncode: int | None = None

    def fail(self, error: ShellError) -> None:
        """Move the stage to the terminal failed state."""
        self.state = StageState.FAILED
        self.error = error

    def release(self) -> None:
        """Close the parent's copies of this stage's pipe ends."""
        for fd in self.owned:
            os.close(fd)
        self.owned.clear()


@dataclass(frozen=True)
class StageResult:
    """The outcome of one stage, after the pipeline has finished."""

    index: int
    command: Command
    state: StageState
    returncode: int | None = None
    error: ShellError | None = None


@dataclass(frozen=True)
class PipelineResult:
    """The outcome of running a whole pipeline."""

    stages: tuple[StageResult, ...]
    error: PipeCreationError | None = None

    @property
    def errors(self) -> list[ShellError]:
        """Return every error raised while running, in stage order."""
        found: list[ShellError] = [self.error] if self.error else []
        found.extend(s.error for s in self.stages if s.error is not None)
        return found

    @property
    def ok(self) -> bool:
        """Return True if every stage ran and exited zero."""
        return not self.errors


def _describe_status(returncode: int) -> str:
    """Return a human-readable reason for a nonzero exit status."""
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = f"signal {-returncode}"
        return f"terminated by {name}"
    return f"exit status {returncode}"


class PipelineExecutor:
    """Build, wire, start and reap the processes of a pipeline."""

    def __init__(self, session: Session, *, pipe_factory: PipeFactory = os.pipe) -> None:
        """Create an executor bound to a session.

        Args:
            session: Supplies streams, environment, cwd and the logger.
            pipe_factory: Creates one OS pipe as ``(read_fd, write_fd)``.

        """
        self._session = session
        self._pipe_factory = pipe_factory

    def run(self, pipeline: Pipeline) -> PipelineResult:
        """Run *pipeline* to completion and report any stage errors.

        Args:
            pipeline: The commands to run, left to right.

        Returns:
            Per-stage results plus the pipe creation error, if any.

        """
        session = self._session
        session.logger.debug(f"launching: {pipeline}", source=_SOURCE)
        stages = self.build(pipeline)
        try:
            self.connect(stages)
        except PipeCreationError as e:
            session.report(e, source=_SOURCE)
            return PipelineResult(stages=self._results(stages), error=e)

        environment = session.env.as_dict()
        self.start(stages, environment)
        self.reap(stages)

        for stage in stages:
            if stage.error is not None:
                session.report(stage.error, source=_SOURCE)
        return PipelineResult(stages=self._results(stages))

    def build(self, pipeline: Pipeline) -> list[Stage]:
        """Create one stage per command, coloring ``ls`` output."""
        flag = self._session.config.ls_color_flag
        stages: list[Stage] = []
        for index, command in enumerate(pipeline.commands, start=1):
            if command.program == "ls" and flag not in command.args:
                command = Command(program=command.program, args=(flag, *command.args))
            stages.append(Stage(index=index, command=command))
        return stages

    def connect(self, stages: list[Stage]) -> None:
        """Create the pipes between consecutive stages.

        Raises:
            PipeCreationError: If the OS refuses to create a pipe.  Any
                pipes created before the failure are closed first.

        """
        for upstream, downstream in pairwise(stages):
            try:
                read_fd, write_fd = self._pipe_factory()
            except OSError as e:
                for stage in stages:
                    stage.release()
                msg = f"cannot create pipe after stage {upstream.index}: {e}"
                raise PipeCreationError(msg) from e
            upstream.stdout = write_fd
            upstream.owned.append(write_fd)
            downstream.stdin = read_fd
            downstream.owned.append(read_fd)

        streams = self._session.streams
        if stages[0].stdin is None:
            stages[0].stdin = streams.stdin
        if stages[-1].stdout is None:
            stages[-1].stdout = streams.stdout
        for stage in stages:
            stage.state = StageState.WIRED

    def start(self, stages: list[Stage], environment: dict[str, str]) -> None:
        """Start every stage before any is waited on.

        Each stage's pipe ends are released in the parent as soon as
        the start attempt is over, whether or not it succeeded.  A
        Ctrl+C while starting fails the stages not yet started; the
        ones already running are still reaped.
        """
        streams = self._session.streams
        streams.flush()
        try:
            for stage in stages:
                try:
                    stage.process = subprocess.Popen(  # noqa: S603
                        stage.command.argv,
                        stdin=stage.stdin,
                        stdout=stage.stdout,
                        stderr=streams.stderr,
                        env=environment,
                        cwd=self._session.cwd,
                    )
                except OSError as e:
                    reason = e.strerror or str(e)
                    stage.fail(ProcessStartError(stage.index, stage.command.program, reason))
                else:
                    stage.state = StageState.RUNNING
                finally:
                    stage.release()
        except KeyboardInterrupt:
            self._session.logger.info("interrupted while starting", source=_SOURCE)
            for stage in stages:
                if stage.process is None and stage.state is not StageState.FAILED:
                    program = stage.command.program
                    stage.fail(ProcessStartError(stage.index, program, "interrupted"))
        finally:
            for stage in stages:
                stage.release()

    def reap(self, stages: list[Stage]) -> None:
        """Wait for every started stage and record its exit status."""
        for stage in stages:
            if stage.process is None:
                continue
            program = stage.command.program
            try:
                returncode = self._wait(stage.process)
            except (OSError, subprocess.SubprocessError) as e:
                stage.fail(ProcessExitError(stage.index, program, f"wait failed: {e}"))
                continue
            stage.returncode = returncode
            if returncode != 0:
                reason = _describe_status(returncode)
                stage.fail(ProcessExitError(stage.index, program, reason, returncode=returncode))
            else:
                stage.state = StageState.REAPED

    def _wait(self, process: subprocess.Popen[bytes]) -> int:
        """Wait for *process*, riding out Ctrl+C.

        The terminal delivers SIGINT to the children too, so they decide
        whether to stop; the shell keeps waiting and never leaves a
        zombie behind.
        """
        while True:
            try:
                return process.wait()
            except KeyboardInterrupt:
                msg = f"interrupted waiting on pid {process.pid}"
                self._session.logger.info(msg, source=_SOURCE)

    @staticmethod
    def _results(stages: list[Stage]) -> tuple[StageResult, ...]:
        return tuple(
            StageResult(
                index=s.index,
                command=s.command,
                state=s.state,
                returncode=s.returncode,
                error=s.error,
            )
            for s in stages
        )
