"""Connectivity consolidation.

Tunnel walks cannot rejoin corridors carved by an earlier walk, so a floor can
end up with pockets no corridor reaches. This pass labels the 4-connected
components of open cells once, then grows a single breadth-first search over
intersections outward from the main (largest) component. Each time the search
touches another component the path back to the joined region is carved and
that component becomes part of the search frontier. Components walled off by
the layout mask are left alone and counted.
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Deque, Dict, List, Optional, Set, Tuple

from .cells import Coord, is_open_at
from .doors import connect_key, roll_door_kind, stamp_door
from .tiles import BLOCKED, CORRIDOR, DIRECTIONS, ROOM

if TYPE_CHECKING:  # pragma: no cover
    from .state import FloorState

_STEPS = tuple(DIRECTIONS.items())


def label_components(state: "FloorState") -> Tuple[Dict[Coord, int], List[List[Coord]]]:
    """Return (cell -> component index, component cell lists) in raster order."""
    cells = state.cells
    owner: Dict[Coord, int] = {}
    components: List[List[Coord]] = []
    for r, row in enumerate(cells):
        for c, cell in enumerate(row):
            if (r, c) in owner or not cell.is_open:
                continue
            index = len(components)
            members = [(r, c)]
            owner[(r, c)] = index
            q = deque(members)
            while q:
                cr, cc = q.popleft()
                for dr, dc in DIRECTIONS.values():
                    nr, nc = cr + dr, cc + dc
                    if (nr, nc) not in owner and is_open_at(cells, nr, nc):
                        owner[(nr, nc)] = index
                        members.append((nr, nc))
                        q.append((nr, nc))
            components.append(members)
    return owner, components


def count_components(state: "FloorState") -> int:
    return len(label_components(state)[1])


def link_components(state: "FloorState") -> int:
    """Join every reachable component to the main one.

    Labels once and searches once, so the pass stays linear in the grid size
    however many links it carves. Returns the number of corridors carved.
    """
    owner, components = label_components(state)
    if len(components) <= 1:
        state.metrics["isolated_components"] = 0
        return 0

    main = max(range(len(components)), key=lambda k: (len(components[k]), -k))
    joined_ids = {main}
    joined: Set[Coord] = set()
    prev: Dict[Coord, Optional[Coord]] = {}
    q: Deque[Coord] = deque()
    _add_sources(components[main], joined, prev, q)

    cells = state.cells
    links = 0
    while q and len(joined_ids) < len(components):
        r, c = q.popleft()
        for _, (dr, dc) in _STEPS:
            mid_r, mid_c = r + dr, c + dc
            nr, nc = r + dr * 2, c + dc * 2
            if not (1 <= nr <= state.max_row and 1 <= nc <= state.max_col):
                continue
            if (nr, nc) in prev:
                continue
            if cells[mid_r][mid_c].terrain == BLOCKED or cells[nr][nc].terrain == BLOCKED:
                continue
            prev[(nr, nc)] = (r, c)
            hit = owner.get((nr, nc))
            if hit is None:
                q.append((nr, nc))
                continue
            path = _trace_back(prev, joined, (nr, nc))
            _carve_link(state, path)
            joined.update(path)
            joined_ids.add(hit)
            # The joined component's intersections (the hit cell included)
            # now extend the search like any other source.
            _add_sources(components[hit], joined, prev, q)
            links += 1

    state.metrics["isolated_components"] = len(components) - len(joined_ids)
    state.metrics["links_carved"] += links
    return links


def _add_sources(members: List[Coord], joined: Set[Coord], prev: Dict[Coord, Optional[Coord]], q: Deque[Coord]) -> None:
    for r, c in sorted(members):
        if r % 2 == 1 and c % 2 == 1:
            joined.add((r, c))
            prev.setdefault((r, c), None)
            q.append((r, c))


def _trace_back(prev: Dict[Coord, Optional[Coord]], joined: Set[Coord], hit: Coord) -> List[Coord]:
    """Path from the nearest already-joined intersection to ``hit``."""
    path = [hit]
    step = prev[hit]
    while step not in joined:
        path.append(step)
        step = prev[step]
    path.append(step)
    path.reverse()
    return path


def _carve_link(state: "FloorState", path: List[Coord]) -> None:
    cells = state.cells
    for (r, c), (nr, nc) in zip(path, path[1:]):
        mid_r, mid_c = (r + nr) // 2, (c + nc) // 2
        mid = cells[mid_r][mid_c]
        if not mid.is_open:
            if mid.perimeter and mid.door is None:
                _breach_wall(state, (r, c), (mid_r, mid_c), (nr, nc))
            mid.terrain = CORRIDOR
            mid.perimeter = False
            mid.entrance = False
        target = cells[nr][nc]
        if not target.is_open:
            target.terrain = CORRIDOR
            target.entrance = False


def _breach_wall(state: "FloorState", here: Coord, mid: Coord, there: Coord) -> None:
    """Register a door where a link crosses a room's perimeter."""
    cells = state.cells
    near = cells[here[0]][here[1]]
    far = cells[there[0]][there[1]]
    if near.terrain == ROOM:
        room_id, sill, other = near.room_id, here, far
    elif far.terrain == ROOM:
        room_id, sill, other = far.room_id, there, near
    else:
        return
    room = state.room(room_id)
    if room is None:
        return
    direction = _direction_between(sill, mid)
    door = stamp_door(state, mid[0], mid[1], roll_door_kind(state.rng))
    if other.terrain == ROOM and other.room_id != room_id:
        door.out_id = other.room_id
        state.connected.add(connect_key(room_id, other.room_id))
    room.doors.setdefault(direction, []).append(door)


def _direction_between(a: Coord, b: Coord) -> str:
    delta = (b[0] - a[0], b[1] - a[1])
    for name, step in _STEPS:
        if step == delta:
            return name
    raise ValueError(f"cells {a} and {b} are not orthogonal neighbours")


__all__ = ["label_components", "count_components", "link_components"]
