from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .cells import cell_at, is_open_at, iter_intersections
from .rng import shuffle
from .tiles import BLOCKED, CORRIDOR, DIRECTIONS, EMPTY, STAIR_DOWN, STAIR_LABELS, STAIR_UP

if TYPE_CHECKING:  # pragma: no cover
    from .state import FloorState


@dataclass
class Stair:
    row: int
    col: int
    next_row: int
    next_col: int
    key: str = STAIR_DOWN

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def to_dict(self):
        return {
            "row": self.row,
            "col": self.col,
            "next_row": self.next_row,
            "next_col": self.next_col,
            "key": self.key,
        }


def _neighbours(r: int, c: int):
    for dr, dc in DIRECTIONS.values():
        yield r + dr, c + dc


def next_cell(state: "FloorState", r: int, c: int) -> Tuple[int, int]:
    """First open orthogonal neighbour (N, S, W, E), else the cell itself."""
    for nr, nc in _neighbours(r, c):
        if is_open_at(state.cells, nr, nc):
            return nr, nc
    return r, c


def stair_sites(state: "FloorState") -> List[Stair]:
    """Corridor intersections with at least one walled side."""
    sites: List[Stair] = []
    cells = state.cells
    for _, _, r, c in iter_intersections(state.n_i, state.n_j):
        cell = cells[r][c]
        if cell.terrain != CORRIDOR or cell.stair is not None:
            continue
        open_count = sum(1 for nr, nc in _neighbours(r, c) if is_open_at(cells, nr, nc))
        # four-way crossings are never sites
        if open_count < 4:
            sites.append(Stair(r, c, r, c))
    return sites


def _mark_stair(state: "FloorState", stair: Stair) -> None:
    cell = state.cells[stair.row][stair.col]
    cell.stair = stair.key
    if cell.label is None:
        cell.label = STAIR_LABELS[stair.key]
    stair.next_row, stair.next_col = next_cell(state, stair.row, stair.col)
    state.stairs.append(stair)


def emplace_stairs(state: "FloorState", force_kind: Optional[str] = None) -> List[Stair]:
    """Pick up to ``add_stairs`` sites at random.

    Without ``force_kind`` the first stair leads down, the second up and the
    rest are drawn at random.
    """
    wanted = state.options.add_stairs
    if wanted <= 0:
        return []
    placed: List[Stair] = []
    for index, stair in enumerate(shuffle(stair_sites(state), state.rng)[:wanted]):
        if force_kind is not None:
            stair.key = force_kind
        elif index < 2:
            stair.key = STAIR_DOWN if index == 0 else STAIR_UP
        else:
            stair.key = STAIR_DOWN if state.rng.rand_int(2) == 0 else STAIR_UP
        _mark_stair(state, stair)
        placed.append(stair)
    state.metrics["stairs"] = len(state.stairs)
    return placed


def emplace_stairs_at(state: "FloorState", positions: Iterable[Tuple[int, int]], kind: str) -> List[Stair]:
    """Place ``kind`` stairs at fixed coordinates carried over from another floor.

    A position that is blocked or off the grid is skipped. An uncarved
    intersection is opened as a corridor so the stairwell lines up; the
    connectivity pass joins it to the rest of the floor afterwards.
    """
    placed: List[Stair] = []
    cells = state.cells
    for r, c in positions:
        cell = cell_at(cells, r, c)
        if cell is None or cell.terrain == BLOCKED or cell.stair is not None:
            state.metrics["stairs_skipped"] += 1
            continue
        if not cell.is_open:
            if cell.terrain != EMPTY or r % 2 == 0 or c % 2 == 0:
                state.metrics["stairs_skipped"] += 1
                continue
            cell.terrain = CORRIDOR
            cell.entrance = False
        stair = Stair(r, c, r, c, kind)
        _mark_stair(state, stair)
        placed.append(stair)
    state.metrics["stairs"] = len(state.stairs)
    return placed


def refresh_stair_exits(state: "FloorState") -> None:
    """Recompute each stair's exit after later passes reshaped the corridors."""
    for stair in state.stairs:
        stair.next_row, stair.next_col = next_cell(state, stair.row, stair.col)


def floor_stair_kind(floor_number: int, floors: int) -> str:
    """Stair kind for a floor of a multi-floor dungeon.

    The first floor leads down and the last up; floors between alternate by
    index, odd floors up and even floors down.
    """
    if floor_number == 0:
        return STAIR_DOWN
    if floor_number == floors - 1 or floor_number % 2 == 1:
        return STAIR_UP
    return STAIR_DOWN


__all__ = [
    "Stair",
    "next_cell",
    "stair_sites",
    "emplace_stairs",
    "emplace_stairs_at",
    "refresh_stair_exits",
    "floor_stair_kind",
]
