"""Minimal structured logging helper.

Emits key=value pairs (or one JSON object per line) with a timestamp and level
so generator and API events are easy to grep and parse.

Usage:
    from delve.logging_utils import get_logger
    get_logger("dungeon").info(event="floor_generated", seed=42, rooms=7)

Non-numeric values are str()'d with spaces replaced. Reserved keys: level, ts.
Level and format come from DELVE_LOG_LEVEL / DELVE_LOG_JSON and can be changed
at runtime with ``configure``.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
TRUTHY = ("1", "true", "TRUE", "yes", "on")
CURRENT_LEVEL = LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0") in TRUTHY


def configure(level: str | None = None, json_mode: bool | None = None) -> None:
    """Override the level and/or output format chosen from the environment."""
    global CURRENT_LEVEL, JSON_MODE
    if level is not None:
        if level.lower() not in LEVELS:
            raise ValueError(f"unknown log level {level!r}; expected one of {', '.join(LEVELS)}")
        CURRENT_LEVEL = LEVELS[level.lower()]
    if json_mode is not None:
        JSON_MODE = bool(json_mode)


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "delve"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("delve")
