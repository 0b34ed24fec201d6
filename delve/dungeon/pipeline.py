"""Pipeline orchestration for dungeon generation.

``generate_floor`` runs the fixed phase order on one floor:

    mask -> rooms -> doors -> labels -> corridors -> stairs -> connectivity
         -> dead ends -> door fix-up -> block cleanup

``create_dungeon`` is the public entry point. It returns a single ``Dungeon``
or, for ``floors > 1``, a ``MultiFloorDungeon`` whose floors share the stair
coordinates chosen on the first floor.
"""
from __future__ import annotations

import os
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..logging_utils import get_logger
from .config import DungeonOptions
from .connectivity import link_components
from .doors import fix_doors, open_rooms
from .dungeon import Dungeon, MultiFloorDungeon
from .masks import apply_layout_mask
from .pruning import empty_blocks, remove_deadends
from .rooms import label_rooms, place_rooms
from .stairs import emplace_stairs, emplace_stairs_at, floor_stair_kind, refresh_stair_exits
from .state import FloorState
from .tiles import CORRIDOR, STAIR_DOWN
from .tunnels import carve_corridors

logger = get_logger("dungeon")

METRICS_FLAG = "DELVE_ENABLE_GENERATION_METRICS"


def metrics_enabled() -> bool:
    """Metrics are on unless switched off by env var or Flask config (config wins)."""
    enabled = True
    if METRICS_FLAG in os.environ:
        enabled = os.environ.get(METRICS_FLAG, "").lower() not in {"0", "false", "no", ""}
    from flask import current_app, has_app_context

    if has_app_context() and METRICS_FLAG in current_app.config:
        enabled = bool(current_app.config.get(METRICS_FLAG))
    return enabled


def generate_floor(
    options: DungeonOptions,
    floor_number: int = 0,
    stair_positions: Optional[Iterable[Tuple[int, int]]] = None,
    stair_kind: Optional[str] = None,
) -> Dungeon:
    """Generate one floor from already-normalised options.

    With ``stair_positions`` the stairs are placed at exactly those
    coordinates (all of ``stair_kind``) instead of being chosen; without it a
    ``stair_kind`` forces the kind of every chosen stair.
    """
    enable_metrics = metrics_enabled()
    state = FloorState.create(options, floor_number)

    if enable_metrics:
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
            phase_times[label] = int((pe - ps) * 1000)
            return r
    else:
        def _phase(label, fn, *a, **k):
            return fn(*a, **k)

    _phase("mask", apply_layout_mask, state)
    _phase("rooms", place_rooms, state)
    _phase("doors", open_rooms, state)
    _phase("labels", label_rooms, state)
    _phase("corridors", carve_corridors, state)
    if options.add_stairs > 0:
        if stair_positions is not None:
            _phase("stairs", emplace_stairs_at, state, stair_positions, stair_kind or STAIR_DOWN)
        else:
            _phase("stairs", emplace_stairs, state, stair_kind)
    _phase("connectivity", link_components, state)
    _phase("deadends", remove_deadends, state)
    _phase("fix_doors", fix_doors, state)
    _phase("empty_blocks", empty_blocks, state)
    refresh_stair_exits(state)

    metrics: Dict[str, Any] = {}
    if enable_metrics:
        metrics = state.metrics
        metrics["corridor_cells"] = sum(1 for row in state.cells for cell in row if cell.terrain == CORRIDOR)
        metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
        metrics["phase_ms"] = phase_times

    logger.debug(
        event="floor_generated",
        seed=options.seed,
        floor=floor_number,
        rooms=len(state.rooms),
        doors=len(state.doors),
        stairs=len(state.stairs),
        runtime_ms=metrics.get("runtime_ms"),
    )
    return Dungeon(
        seed=options.seed,
        n_rows=state.n_rows,
        n_cols=state.n_cols,
        n_i=state.n_i,
        n_j=state.n_j,
        cells=state.cells,
        rooms=state.rooms,
        doors=state.doors,
        stairs=state.stairs,
        options=options,
        floor_number=floor_number,
        metrics=metrics,
    )


def create_multi_floor(options: DungeonOptions) -> MultiFloorDungeon:
    """Stack ``options.floors`` floors whose stairs share coordinates."""
    first = generate_floor(options, 0, stair_kind=STAIR_DOWN)
    positions = first.stair_positions()
    floors = [first]
    for number in range(1, options.floors):
        floors.append(
            generate_floor(
                options.for_floor(number),
                number,
                stair_positions=positions,
                stair_kind=floor_stair_kind(number, options.floors),
            )
        )
    logger.debug(event="dungeon_generated", seed=options.seed, floors=len(floors), stairs=len(positions))
    return MultiFloorDungeon(floors=floors, stair_positions=positions, seed=options.seed, options=options)


def create_dungeon(options: Optional[DungeonOptions] = None, **overrides) -> Union[Dungeon, MultiFloorDungeon]:
    """Generate a dungeon.

    ``overrides`` replace individual fields of ``options`` (or of the defaults
    when no options object is given). Raises OptionsError for out-of-range or
    unknown values.
    """
    opts = options if options is not None else DungeonOptions()
    if overrides:
        opts = replace(opts, **overrides)
    opts.validate()
    opts = opts.normalized()
    if opts.floors <= 1:
        dungeon = generate_floor(opts, 0)
        logger.debug(event="dungeon_generated", seed=opts.seed, floors=1, rooms=dungeon.n_rooms)
        return dungeon
    return create_multi_floor(opts)


__all__ = ["create_dungeon", "create_multi_floor", "generate_floor", "metrics_enabled"]
