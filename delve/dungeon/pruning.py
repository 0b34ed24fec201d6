"""Pruning passes run once the floor is fully carved.

``remove_deadends`` eats dead-end corridors back to the nearest junction and
``empty_blocks`` resets whatever the layout mask left blocked.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Tuple

from .cells import cell_at, is_open_at, iter_intersections
from .tiles import BLOCKED, EMPTY, ROOM

if TYPE_CHECKING:  # pragma: no cover
    from .state import FloorState

Offsets = List[Tuple[int, int]]

# Per heading: cells that must be closed for (r, c) to be a dead end open only
# toward that heading, and the step that walks back along the corridor.
CLOSE_END_PATTERNS: Dict[str, Dict[str, object]] = {
    "north": {"walled": [(0, -1), (1, -1), (1, 0), (1, 1), (0, 1)], "recurse": (-1, 0)},
    "south": {"walled": [(0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1)], "recurse": (1, 0)},
    "west": {"walled": [(-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0)], "recurse": (0, -1)},
    "east": {"walled": [(-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0)], "recurse": (0, 1)},
}


def remove_deadends(state: "FloorState") -> int:
    """Collapse dead ends with probability ``remove_deadends`` percent.

    Returns the number of cells cleared.
    """
    percent = state.options.remove_deadends
    if percent <= 0:
        return 0
    every = percent >= 100
    cells = state.cells
    removed = 0
    for _, _, r, c in iter_intersections(state.n_i, state.n_j):
        cell = cells[r][c]
        if not cell.is_open or cell.stair is not None:
            continue
        if not every and state.rng.rand_int(100) >= percent:
            continue
        removed += collapse(state, r, c)
    state.metrics["deadends_removed"] += removed
    return removed


def _is_walled(state: "FloorState", r: int, c: int) -> bool:
    # Off-grid counts as wall
    return not is_open_at(state.cells, r, c)


def _dead_end_heading(state: "FloorState", r: int, c: int):
    for pattern in CLOSE_END_PATTERNS.values():
        if all(_is_walled(state, r + dr, c + dc) for dr, dc in pattern["walled"]):
            return pattern["recurse"]
    return None


def collapse(state: "FloorState", r: int, c: int) -> int:
    """Clear the dead end at (r, c) and keep walking back while cells stay dead ends."""
    cleared = 0
    while True:
        cell = cell_at(state.cells, r, c)
        if cell is None or not cell.is_open or cell.terrain == ROOM or cell.stair is not None:
            break
        step = _dead_end_heading(state, r, c)
        if step is None:
            break
        cell.clear()
        cleared += 1
        r, c = r + step[0], c + step[1]
    return cleared


def empty_blocks(state: "FloorState") -> int:
    """Reset every BLOCKED cell to EMPTY; returns how many were reset."""
    reset = 0
    for row in state.cells:
        for cell in row:
            if cell.terrain == BLOCKED:
                cell.terrain = EMPTY
                reset += 1
    return reset


__all__ = ["CLOSE_END_PATTERNS", "remove_deadends", "collapse", "empty_blocks"]
