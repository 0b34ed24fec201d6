"""Global layout masks applied before any room is placed.

Cells outside the mask footprint become BLOCKED; rooms and corridors never
enter them, and the final cleanup pass resets them to empty.
"""
from __future__ import annotations

import math
from typing import Dict, List

from .tiles import BLOCKED, LAYOUT_BOX, LAYOUT_CROSS, LAYOUT_ROUND

LAYOUT_TEMPLATES: Dict[str, List[List[int]]] = {
    LAYOUT_BOX: [[1, 1, 1], [1, 0, 1], [1, 1, 1]],
    LAYOUT_CROSS: [[0, 1, 0], [1, 1, 1], [0, 1, 0]],
}


def apply_layout_mask(state: "FloorState") -> int:
    """Block cells outside the configured layout; returns the blocked count."""
    layout = state.options.dungeon_layout
    if layout in LAYOUT_TEMPLATES:
        return _apply_template(state, LAYOUT_TEMPLATES[layout])
    if layout == LAYOUT_ROUND:
        return _apply_round(state)
    return 0


def _apply_template(state: "FloorState", mask: List[List[int]]) -> int:
    cells = state.cells
    r_scale = len(mask) / (state.n_rows + 1)
    c_scale = len(mask[0]) / (state.n_cols + 1)
    blocked = 0
    for r in range(state.n_rows + 1):
        for c in range(state.n_cols + 1):
            if not mask[int(r * r_scale)][int(c * c_scale)]:
                cells[r][c].terrain = BLOCKED
                blocked += 1
    return blocked


def round_radius(state: "FloorState") -> int:
    return min(state.n_rows // 2, state.n_cols // 2)


def _apply_round(state: "FloorState") -> int:
    cells = state.cells
    center_r = state.n_rows // 2
    center_c = state.n_cols // 2
    radius = round_radius(state)
    blocked = 0
    for r in range(state.n_rows + 1):
        for c in range(state.n_cols + 1):
            if math.hypot(r - center_r, c - center_c) > radius:
                cells[r][c].terrain = BLOCKED
                blocked += 1
    return blocked
