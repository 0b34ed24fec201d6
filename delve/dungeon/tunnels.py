"""Corridor carving.

Every unvisited intersection seeds a depth-first tunnel walk. Walks move two
cells at a time between intersections and may pass through room interiors,
entering and leaving only through opened doors. The walk keeps an explicit
stack of ``(i, j, remaining_directions)`` frames so deep mazes never hit the
interpreter's recursion limit.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Set, Tuple

from .cells import iter_intersections
from .rng import shuffle
from .tiles import BLOCKED, CORRIDOR, CORRIDOR_LAYOUTS, DIRECTIONS, ROOM

if TYPE_CHECKING:  # pragma: no cover
    from .state import FloorState

_DIRECTION_NAMES = tuple(DIRECTIONS)


def carve_corridors(state: "FloorState") -> int:
    """Tunnel from every interior intersection; returns the number of walks."""
    visited: Set[Tuple[int, int]] = set()
    cells = state.cells
    walks = 0
    for i, j, r, c in iter_intersections(state.n_i, state.n_j, start=1):
        if (i, j) in visited or cells[r][c].terrain in (CORRIDOR, BLOCKED):
            continue
        if tunnel(state, i, j, visited):
            walks += 1
    return walks


def tunnel_dirs(state: "FloorState", last_dir: Optional[str]) -> List[str]:
    """Shuffled headings; the previous one is tried first with the layout's bias."""
    dirs = shuffle(_DIRECTION_NAMES, state.rng)
    percent = CORRIDOR_LAYOUTS.get(state.options.corridor_layout, 50)
    if last_dir and percent > 0 and state.rng.rand_int(100) < percent:
        dirs.remove(last_dir)
        dirs.insert(0, last_dir)
    return dirs


def tunnel(state: "FloorState", i: int, j: int, visited: Set[Tuple[int, int]]) -> bool:
    """Walk depth-first from (i, j); returns True when anything was carved."""
    carved = False
    stack: List[Tuple[int, int, Iterator[str]]] = [(i, j, iter(tunnel_dirs(state, None)))]
    while stack:
        ci, cj, dirs = stack[-1]
        for direction in dirs:
            if open_tunnel(state, ci, cj, direction, visited):
                carved = True
                di, dj = DIRECTIONS[direction]
                ni, nj = ci + di, cj + dj
                stack.append((ni, nj, iter(tunnel_dirs(state, direction))))
                break
        else:
            stack.pop()
    return carved


def open_tunnel(state: "FloorState", i: int, j: int, direction: str, visited: Set[Tuple[int, int]]) -> bool:
    di, dj = DIRECTIONS[direction]
    ni, nj = i + di, j + dj
    this_r, this_c = i * 2 + 1, j * 2 + 1
    next_r, next_c = ni * 2 + 1, nj * 2 + 1
    mid_r, mid_c = (this_r + next_r) // 2, (this_c + next_c) // 2
    if not sound_tunnel(state, ni, nj, mid_r, mid_c, next_r, next_c, visited):
        return False
    delve_tunnel(state, this_r, this_c, next_r, next_c)
    visited.add((i, j))
    visited.add((ni, nj))
    return True


def sound_tunnel(
    state: "FloorState",
    ni: int,
    nj: int,
    mid_r: int,
    mid_c: int,
    next_r: int,
    next_c: int,
    visited: Set[Tuple[int, int]],
) -> bool:
    if not (0 <= ni < state.n_i and 0 <= nj < state.n_j):
        return False
    if (ni, nj) in visited:
        return False
    cells = state.cells
    for r in range(min(mid_r, next_r), max(mid_r, next_r) + 1):
        for c in range(min(mid_c, next_c), max(mid_c, next_c) + 1):
            cell = cells[r][c]
            if cell.terrain in (BLOCKED, CORRIDOR) or cell.perimeter:
                return False
    return True


def delve_tunnel(state: "FloorState", this_r: int, this_c: int, next_r: int, next_c: int) -> None:
    cells = state.cells
    for r in range(min(this_r, next_r), max(this_r, next_r) + 1):
        for c in range(min(this_c, next_c), max(this_c, next_c) + 1):
            cell = cells[r][c]
            cell.entrance = False
            if cell.terrain != ROOM:
                cell.terrain = CORRIDOR


__all__ = ["carve_corridors", "tunnel", "tunnel_dirs", "open_tunnel", "sound_tunnel", "delve_tunnel"]
