"""The shell: what happens to one line of input.

For every line the shell:

1. Trims it.  A blank line is ignored entirely (not even recorded).
2. Records it in history (adjacent duplicates are skipped).
3. Looks the first word up in the builtin registry.  If a builtin
   claims the line it runs in-process with the rest of the words as
   arguments, and the line never reaches the pipeline executor.
4. Otherwise tokenizes the line into a pipeline and runs it as
   external processes.

``execute`` returns an ``Outcome`` telling the caller whether to keep
reading lines.  Output and errors go to the session's streams; nothing
is returned as text, because external programs write straight to the
shell's file descriptors.
"""

from py_shell.builtins import BuiltinRegistry, Outcome, default_registry
from py_shell.pipeline import PipelineExecutor, PipelineResult
from py_shell.session import Session
from py_shell.tokenizer import split_words, tokenize

_SOURCE = "shell"


class Shell:
    """Command interpreter bound to one session."""

    def __init__(
        self,
        *,
        session: Session | None = None,
        registry: BuiltinRegistry | None = None,
        executor: PipelineExecutor | None = None,
    ) -> None:
        """Create a shell.

        Args:
            session: The state to act on (a fresh one when omitted).
            registry: Builtins to recognise (the standard set when omitted).
            executor: Runs external pipelines (bound to *session* when omitted).

        """
        self._session = session or Session()
        self._registry = registry or default_registry()
        self._executor = executor or PipelineExecutor(self._session)
        self.last_result: PipelineResult | None = None

    @property
    def session(self) -> Session:
        """Return the session this shell operates on."""
        return self._session

    @property
    def command_names(self) -> list[str]:
        """Return the sorted list of builtin names."""
        return self._registry.names

    def execute(self, line: str) -> Outcome:
        """Run one input line.

        Args:
            line: The raw line as typed.

        Returns:
            ``Outcome.EXIT`` after ``exit``, else ``Outcome.CONTINUE``.

        """
        session = self._session
        stripped = line.strip()
        if not stripped:
            return Outcome.CONTINUE
        session.history.append(stripped)

        try:
            outcome = self._registry.dispatch(session, split_words(stripped))
            if outcome is not None:
                return outcome

            pipeline = tokenize(stripped)
            if pipeline is None:
                session.logger.info(f"nothing to run in {stripped!r}", source=_SOURCE)
                return Outcome.CONTINUE
            self.last_result = self._executor.run(pipeline)
            return Outcome.CONTINUE
        finally:
            session.streams.flush()
