"""Builtin commands: the ones the shell runs in its own process.

Some commands can't be external programs at all.  ``cd`` has to change
the *shell's* working directory and ``export`` has to change the
*shell's* environment; a child process doing the same would only
change its own copy.  Others (``echo``, ``pwd``, ``ls``) are builtins
for convenience.

Recognition rule: only the **first word of the whole line** is looked
up.  Everything after it, pipe characters included, is handed to the
builtin as plain arguments.  So ``cd /tmp | ls`` runs ``cd`` with the
arguments ``["/tmp", "|", "ls"]`` and never builds a pipeline.

Design choices:
    - **A registry, not an if/elif chain.**  Each builtin is an object
      with ``accepts``, ``validate`` and ``execute``.  Adding one means
      writing a class and registering it.
    - **accepts() lets a builtin decline.**  Only ``ls`` uses it: with
      flags or a pipe it steps aside so the line runs the real ``ls``.
    - **validate() raises, execute() acts.**  Usage errors surface
      before any state is touched.
"""

import os
from collections.abc import Iterator
from enum import StrEnum

from py_shell.errors import ExportSyntaxError, FilesystemError, ShellError, UsageError
from py_shell.listing import list_directory, render_columns
from py_shell.session import Session
from py_shell.terminal import clear_screen, terminal_size
from py_shell.tokenizer import PIPE

_SOURCE = "builtin"


class Outcome(StrEnum):
    """What the main loop should do after a builtin finishes."""

    CONTINUE = "continue"
    EXIT = "exit"


class Builtin:
    """Base class for a command executed inside the shell process.

    Subclasses set ``name``, ``usage`` and ``summary`` and override
    ``execute``; ``accepts`` and ``validate`` default to allowing
    anything.
    """

    name: str = ""
    usage: str = ""
    summary: str = ""

    def accepts(self, args: list[str]) -> bool:  # noqa: ARG002
        """Return True if this builtin handles an invocation with *args*."""
        return True

    def validate(self, args: list[str]) -> None:
        """Raise ``UsageError`` if *args* are malformed."""

    def execute(self, session: Session, args: list[str]) -> Outcome:
        """Run the builtin against *session*."""
        raise NotImplementedError


def _write_env(session: Session) -> None:
    for entry in session.env.snapshot():
        session.writeln(entry)


class Cd(Builtin):
    """Change the working directory."""

    name = "cd"
    usage = "cd [dir]"
    summary = "Change directory (default: HOME)"

    def execute(self, session: Session, args: list[str]) -> Outcome:
        """Change the session directory; with no argument go to ``$HOME``.

        ``HOME`` is read from the shell process's own environment, not
        from the exported variables, so ``unset HOME`` doesn't strand
        the user.
        """
        target = args[0] if args else os.environ.get("HOME", "")
        if not target:
            msg = "cd: HOME not set"
            raise FilesystemError(msg)
        path = session.resolve(target)
        if not path.exists():
            msg = f"cd: {target}: No such file or directory"
            raise FilesystemError(msg)
        if not path.is_dir():
            msg = f"cd: {target}: Not a directory"
            raise FilesystemError(msg)
        if not os.access(path, os.X_OK):
            msg = f"cd: {target}: Permission denied"
            raise FilesystemError(msg)
        session.chdir(path)
        return Outcome.CONTINUE


class Clear(Builtin):
    """Clear the terminal."""

    name = "clear"
    usage = "clear"
    summary = "Clear the screen"

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        clear_screen(session)
        return Outcome.CONTINUE


class Echo(Builtin):
    """Print words."""

    name = "echo"
    usage = "echo [args...]"
    summary = "Print arguments"

    def execute(self, session: Session, args: list[str]) -> Outcome:
        """Print the arguments joined by single spaces, no escapes."""
        session.writeln(" ".join(args))
        return Outcome.CONTINUE


class Env(Builtin):
    """List exported variables."""

    name = "env"
    usage = "env"
    summary = "Display environment variables"

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        _write_env(session)
        return Outcome.CONTINUE


class Exit(Builtin):
    """Leave the shell."""

    name = "exit"
    usage = "exit"
    summary = "Exit the shell"

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        """Say goodbye and stop the main loop."""
        session.writeln(session.config.farewell)
        session.running = False
        return Outcome.EXIT


class Export(Builtin):
    """Set exported variables."""

    name = "export"
    usage = "export [KEY=VALUE]"
    summary = "Set environment variables"

    def execute(self, session: Session, args: list[str]) -> Outcome:
        """Set each ``KEY=VALUE``; with no arguments behave like ``env``.

        A malformed argument is reported on its own and the remaining
        arguments are still processed.
        """
        if not args:
            _write_env(session)
            return Outcome.CONTINUE
        for arg in args:
            key, sep, value = arg.partition("=")
            if not sep or not key:
                session.report(ExportSyntaxError(arg), source=_SOURCE)
                continue
            session.env.set(key, value)
        return Outcome.CONTINUE


class Help(Builtin):
    """Describe every registered builtin."""

    name = "help"
    usage = "help"
    summary = "Show this help message"

    def __init__(self, registry: "BuiltinRegistry") -> None:
        self._registry = registry

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        session.writeln("Available commands:")
        for builtin in self._registry:
            session.writeln(f"  {builtin.usage:<18} {builtin.summary}")
        return Outcome.CONTINUE


class History(Builtin):
    """Show accepted lines."""

    name = "history"
    usage = "history"
    summary = "Show command history"

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        for number, line in session.history.numbered():
            session.writeln(f"{number}  {line}")
        return Outcome.CONTINUE


class Ls(Builtin):
    """Colorized listing of one directory."""

    name = "ls"
    usage = "ls [dir]"
    summary = "List directory contents with colorized output"

    def accepts(self, args: list[str]) -> bool:
        """Claim only plain listings: no flags, no pipe, one directory at most.

        Anything else (``ls -l``, ``ls a b``, ``ls | wc -l``) is left to
        the external ``ls`` via the pipeline path.
        """
        if len(args) > 1 or PIPE in args:
            return False
        return not any(arg.startswith("-") for arg in args)

    def execute(self, session: Session, args: list[str]) -> Outcome:
        directory = session.resolve(args[0]) if args else session.cwd
        try:
            entries = list_directory(directory)
        except OSError as e:
            msg = f"ls: {args[0] if args else directory}: {e.strerror or e}"
            raise FilesystemError(msg) from e
        width = terminal_size(session.config.terminal_size).columns
        session.write(render_columns(entries, width))
        return Outcome.CONTINUE


class Pwd(Builtin):
    """Print the working directory."""

    name = "pwd"
    usage = "pwd"
    summary = "Print working directory"

    def execute(self, session: Session, args: list[str]) -> Outcome:  # noqa: ARG002
        session.writeln(str(session.cwd))
        return Outcome.CONTINUE


class Unset(Builtin):
    """Remove exported variables."""

    name = "unset"
    usage = "unset KEY"
    summary = "Remove environment variable"

    def validate(self, args: list[str]) -> None:
        if not args:
            raise UsageError(self.usage)

    def execute(self, session: Session, args: list[str]) -> Outcome:
        for key in args:
            session.env.unset(key)
        return Outcome.CONTINUE


class BuiltinRegistry:
    """Name → builtin lookup plus the dispatch step itself."""

    def __init__(self) -> None:
        """Create an empty registry."""
        self._builtins: dict[str, Builtin] = {}

    def register(self, builtin: Builtin) -> None:
        """Add *builtin*, replacing any builtin with the same name."""
        self._builtins[builtin.name] = builtin

    def get(self, name: str) -> Builtin | None:
        """Return the builtin called *name*, or None."""
        return self._builtins.get(name)

    @property
    def names(self) -> list[str]:
        """Return all builtin names, sorted."""
        return sorted(self._builtins)

    def __iter__(self) -> Iterator[Builtin]:
        return iter(self._builtins[name] for name in self.names)

    def __contains__(self, name: object) -> bool:
        return name in self._builtins

    def resolve(self, words: list[str]) -> Builtin | None:
        """Return the builtin that claims the line split into *words*."""
        if not words:
            return None
        builtin = self._builtins.get(words[0])
        if builtin is None or not builtin.accepts(words[1:]):
            return None
        return builtin

    def dispatch(self, session: Session, words: list[str]) -> Outcome | None:
        """Run the line as a builtin if one claims it.

        Args:
            session: The session the builtin acts on.
            words: The whole line split on whitespace.

        Returns:
            The builtin's outcome, or None if the line isn't a builtin.

        """
        builtin = self.resolve(words)
        if builtin is None:
            return None
        args = words[1:]
        session.logger.info(f"{builtin.name} {args}", source=_SOURCE)
        try:
            builtin.validate(args)
            return builtin.execute(session, args)
        except ShellError as e:
            session.report(e, source=_SOURCE)
            return Outcome.CONTINUE


def default_registry() -> BuiltinRegistry:
    """Return a registry holding the standard builtins."""
    registry = BuiltinRegistry()
    for builtin in (
        Cd(),
        Clear(),
        Echo(),
        Env(),
        Exit(),
        Export(),
        Help(registry),
        History(),
        Ls(),
        Pwd(),
        Unset(),
    ):
        registry.register(builtin)
    return registry
