"""
project: Delve
module: __init__.py
License: MIT

Flask application factory.

Configuration is sourced from environment variables (a local ``.env`` is
loaded first) with sensible defaults for development. The app only serves the
dungeon generator's JSON API; the generator itself lives in ``delve.dungeon``
and has no Flask dependency beyond reading the metrics flag from app config.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so DELVE_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in TRUTHY


def create_app(config: dict | None = None) -> Flask:
    """Build a Flask app with the dungeon API registered.

    ``config`` entries are applied after the environment defaults so tests can
    override individual keys.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.update(
        DELVE_ENABLE_GENERATION_METRICS=_env_flag("DELVE_ENABLE_GENERATION_METRICS", "1"),
        DELVE_CACHE_SIZE=int(os.getenv("DELVE_CACHE_SIZE", "8")),
        DELVE_LOG_LEVEL=os.getenv("DELVE_LOG_LEVEL", "info"),
        DELVE_LOG_JSON=_env_flag("DELVE_LOG_JSON", "0"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "5000")),
    )
    if config:
        app.config.update(config)

    from delve.routes.dungeon_api import bp_dungeon

    app.register_blueprint(bp_dungeon)
    _register_error_handlers(app)
    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "method not allowed"}), 405

    # In non-debug mode answer with a short JSON body and log the details
    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal server error", "error_id": error_id}), 500


__all__ = ["create_app"]
