"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon generation API routes.

Runs the generator on demand and hands the serialized result to the
presentation layer. Query parameters mirror ``DungeonOptions`` field names.
"""

import threading
from collections import OrderedDict

from flask import Blueprint, Response, current_app, jsonify, request

from delve.dungeon import DungeonOptions, OptionsError, create_dungeon, option_choices
from delve.logging_utils import get_logger

logger = get_logger("dungeon_api")

bp_dungeon = Blueprint("dungeon_api", __name__)

# Seeded results are deterministic, so repeated requests reuse the finished
# (never mutated) dungeon. Guarded by a lock for threaded servers.
_dungeon_cache: "OrderedDict[tuple, object]" = OrderedDict()
_dungeon_cache_lock = threading.Lock()

FORMATS = ("json", "ascii")


def _cache_size() -> int:
    return int(current_app.config.get("DELVE_CACHE_SIZE", 8))


def clear_cache() -> None:
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def get_cached_dungeon(options: DungeonOptions):
    """Return the dungeon for ``options``, generating it on a cache miss.

    Only seeded requests are cached; an unseeded request always generates a
    fresh dungeon from the current time.
    """
    limit = _cache_size()
    if options.seed is None or limit <= 0:
        return create_dungeon(options)
    key = tuple(sorted(options.normalized().to_dict().items()))
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            _dungeon_cache.move_to_end(key)
            return dungeon
    dungeon = create_dungeon(options)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        while len(_dungeon_cache) > limit:
            _dungeon_cache.popitem(last=False)
    return dungeon


@bp_dungeon.route("/api/dungeon/generate")
def generate():
    """Generate a dungeon.

    Query: any DungeonOptions field (seed, n_rows, n_cols, dungeon_layout,
    room_min, room_max, room_layout, corridor_layout, remove_deadends,
    add_stairs, cell_size, floors) plus ``format`` = json (default) | ascii.

    Response: the serialized Dungeon (or MultiFloorDungeon when floors > 1),
    a text/plain map for ``format=ascii``, or 400 ``{"error", "field"}``.
    """
    fmt = request.args.get("format", "json").lower()
    if fmt not in FORMATS:
        return jsonify({"error": f"format must be one of {', '.join(FORMATS)}", "field": "format"}), 400
    try:
        options = DungeonOptions.from_mapping(request.args)
    except OptionsError as exc:
        logger.info(event="dungeon_options_rejected", field=exc.field, reason=exc.message)
        return jsonify({"error": str(exc), "field": exc.field}), 400

    dungeon = get_cached_dungeon(options)
    logger.info(event="dungeon_served", seed=dungeon.seed, floors=options.floors, format=fmt)
    if fmt == "ascii":
        return Response(dungeon.to_ascii() + "\n", mimetype="text/plain")
    return jsonify(dungeon.to_dict())


@bp_dungeon.route("/api/dungeon/options")
def options():
    """Defaults and allowed layout names for building a generate request."""
    return jsonify(option_choices())
