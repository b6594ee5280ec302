"""Flask application factory for the py-shell web UI.

The ``create_app`` function creates a shell and returns a Flask app
with three endpoints:

- ``GET /``: render the terminal HTML page.
- ``POST /api/execute``: run one line and return its output as JSON.
- ``GET /api/status``: return the running flag, cwd, history size and
  the most recent errors from the session log.

External programs write to real file descriptors, not Python objects,
so each request points the session's streams at fresh temporary files
and reads them back once the line has finished.
"""

from __future__ import annotations

import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from flask import Flask, Response, jsonify, render_template, request

from py_shell.builtins import Outcome
from py_shell.logging import LogLevel
from py_shell.session import Session, Streams
from py_shell.shell import Shell

_HTTP_BAD_REQUEST = 400
_RECENT_ERRORS = 10


@contextmanager
def captured_streams(session: Session) -> Iterator[Streams]:
    """Point *session* at temporary output files for the duration."""
    saved = session.streams
    # Append mode so the shell's writes and its children's never overlap.
    with (
        tempfile.TemporaryDirectory(prefix="py-shell-") as scratch,
        Path(os.devnull).open(encoding="utf-8") as stdin,
        (Path(scratch) / "stdout").open("a+", encoding="utf-8") as stdout,
        (Path(scratch) / "stderr").open("a+", encoding="utf-8") as stderr,
    ):
        session.streams = Streams(stdin=stdin, stdout=stdout, stderr=stderr)
        try:
            yield session.streams
        finally:
            session.streams = saved


def _read_back(stream: Streams) -> str:
    """Return everything written to the captured stdout and stderr."""
    stream.flush()
    parts: list[str] = []
    for handle in (stream.stdout, stream.stderr):
        handle.seek(0)
        parts.append(handle.read())
    return "".join(parts)


def create_app(*, cwd: Path | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        cwd: Starting directory for the shell (process cwd by default).

    Returns:
        A configured Flask application ready to serve.

    """
    shell = Shell(session=Session(cwd=cwd))
    session = shell.session
    # One line at a time: requests share the session and its streams.
    busy = threading.Lock()

    app = Flask(__name__)

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the terminal HTML page."""
        return render_template("index.html", prompt=session.config.prompt)

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run a line and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output`` and ``halted`` fields.

        """
        data = request.get_json(silent=True)
        if data is None or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        command: str = data["command"]
        with busy:
            if not session.running:
                return jsonify({"output": "Shell exited.", "halted": True})
            with captured_streams(session) as streams:
                outcome = shell.execute(command)
                output = _read_back(streams)

        return jsonify({"output": output, "halted": outcome is Outcome.EXIT})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return session status for polling.

        Returns:
            JSON with ``running``, ``cwd``, ``history`` and ``errors``.

        """
        errors = session.logger.recent(_RECENT_ERRORS, min_level=LogLevel.ERROR)
        return jsonify(
            {
                "running": session.running,
                "cwd": str(session.cwd),
                "history": len(session.history),
                "errors": [str(e) for e in errors],
            }
        )

    return app


def main() -> None:
    """Serve the web UI on localhost.

    This is the ``py-shell-web`` console entry point.  Every request
    runs real commands as the current user, so the server only listens
    on the loopback interface.
    """
    app = create_app()
    app.run(host="127.0.0.1", port=8080)
