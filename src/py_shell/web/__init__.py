"""Browser-based web UI for py-shell.

This package provides a Flask application that exposes the shell
through a web browser.  It is an **optional** extra, install with::

    pip install py-shell[web]

The ``create_app`` factory in ``app.py`` creates a shell and serves
three endpoints:

- ``GET /``: HTML terminal page.
- ``POST /api/execute``: run one line and return its output as JSON.
- ``GET /api/status``: session status for polling.
"""
