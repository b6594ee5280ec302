"""py-shell: an interactive command shell with real OS pipelines.

Lines are either builtins run in-process (``cd``, ``export``, ...) or
pipelines of external programs wired together with OS pipes.  Start it
with the ``py-shell`` command, or ``py-shell-web`` for the browser UI.
"""

__version__ = "0.1.0"
