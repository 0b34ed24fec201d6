"""
project: Delve
module: server.py
License: MIT

Server bootstrap.

Builds the Flask app, configures process logging and runs the development
server. Production deployments can point any WSGI server at
``delve:create_app()`` instead.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from flask import Flask

from delve import create_app
from delve.logging_utils import configure as configure_event_log


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the Flask server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    Also configures application logging to a rotating file and console.
    """
    app = create_app()
    _configure_logging(app)
    try:
        print(f"[INFO] Starting dungeon API on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(app: Flask) -> str:
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/delve.log. Retains a few backups to avoid
    growth. Returns the log file path.
    """
    log_dir = app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "delve.log")

    level = logging.DEBUG if str(app.config.get("DELVE_LOG_LEVEL", "info")).lower() == "debug" else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Rotating file handler
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Console handler (for terminals/tasks that show output)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)

    configure_event_log(
        level=app.config.get("DELVE_LOG_LEVEL"),
        json_mode=bool(app.config.get("DELVE_LOG_JSON")),
    )
    return log_path
