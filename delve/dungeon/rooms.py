from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from .cells import in_bounds, iter_intersections
from .tiles import BLOCKED, MAX_ROOMS, ROOM, ROOM_PACKED

if TYPE_CHECKING:  # pragma: no cover
    from .doors import Door
    from .state import FloorState


@dataclass
class Room:
    id: int
    north: int
    south: int
    west: int
    east: int
    doors: Dict[str, List["Door"]] = field(default_factory=dict)

    @property
    def row(self) -> int:
        return self.north

    @property
    def col(self) -> int:
        return self.west

    # Height/width are reported in feet (10 per cell).
    @property
    def height(self) -> int:
        return (self.south - self.north + 1) * 10

    @property
    def width(self) -> int:
        return (self.east - self.west + 1) * 10

    @property
    def area(self) -> int:
        return self.height * self.width

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.north + self.south) // 2, (self.west + self.east) // 2)

    def cells(self) -> Iterator[Tuple[int, int]]:
        for r in range(self.north, self.south + 1):
            for c in range(self.west, self.east + 1):
                yield r, c

    def contains(self, r: int, c: int) -> bool:
        return self.north <= r <= self.south and self.west <= c <= self.east

    def door_list(self) -> List["Door"]:
        return [d for direction in self.doors.values() for d in direction]

    def to_dict(self):
        return {
            "id": self.id,
            "row": self.row,
            "col": self.col,
            "north": self.north,
            "south": self.south,
            "west": self.west,
            "east": self.east,
            "height": self.height,
            "width": self.width,
            "area": self.area,
            "doors": {k: [d.to_dict() for d in v] for k, v in self.doors.items()},
        }


def room_base(state: "FloorState") -> int:
    return (state.options.room_min + 1) // 2


def room_radix(state: "FloorState") -> int:
    return (state.options.room_max - state.options.room_min) // 2 + 1


def place_rooms(state: "FloorState") -> int:
    """Place rooms using the configured layout; returns the number created."""
    before = len(state.rooms)
    if state.options.room_layout == ROOM_PACKED:
        _pack_rooms(state)
    else:
        _scatter_rooms(state)
    placed = len(state.rooms) - before
    state.metrics["rooms"] = len(state.rooms)
    return placed


def _pack_rooms(state: "FloorState") -> None:
    cells = state.cells
    for i, j, r, c in iter_intersections(state.n_i, state.n_j):
        if cells[r][c].terrain == ROOM:
            continue
        if (i == 0 or j == 0) and state.rng.rand_int(2) == 0:
            continue
        emplace_room(state, i=i, j=j)


def allocate_room_count(state: "FloorState") -> int:
    return (state.n_rows * state.n_cols) // (state.options.room_max ** 2)


def _scatter_rooms(state: "FloorState") -> None:
    for _ in range(allocate_room_count(state)):
        emplace_room(state)


def _room_units(state: "FloorState", anchor: Optional[int], span: int) -> int:
    base = room_base(state)
    radix = room_radix(state)
    if anchor is None:
        return state.rng.rand_int(radix) + base
    # Packed placement: shrink the radix so the room fits before the far edge
    room = min(max(span - base - anchor, 0), radix)
    return state.rng.rand_int(room) + base


def emplace_room(
    state: "FloorState",
    i: Optional[int] = None,
    j: Optional[int] = None,
    height: Optional[int] = None,
    width: Optional[int] = None,
) -> Optional[Room]:
    """Try to place one room; returns it, or None when the attempt is abandoned.

    ``i``/``j`` anchor the room on an intersection and ``height``/``width`` are
    in intersection units; any left unset are drawn from the floor's PRNG.
    """
    if len(state.rooms) >= MAX_ROOMS:
        return None
    state.metrics["room_attempts"] += 1

    if height is None:
        height = _room_units(state, i, state.n_i)
    if width is None:
        width = _room_units(state, j, state.n_j)
    if i is None:
        i = state.rng.rand_int(state.n_i - height)
    if j is None:
        j = state.rng.rand_int(state.n_j - width)

    r1 = i * 2 + 1
    c1 = j * 2 + 1
    r2 = (i + height) * 2 - 1
    c2 = (j + width) * 2 - 1
    if r1 < 1 or r2 > state.max_row:
        return None
    if c1 < 1 or c2 > state.max_col:
        return None
    if not _sound_room(state, r1, c1, r2, c2):
        return None

    room = Room(id=len(state.rooms) + 1, north=r1, south=r2, west=c1, east=c2)
    cells = state.cells
    for r, c in room.cells():
        cell = cells[r][c]
        if cell.entrance:
            cell.entrance = False
            cell.door = None
            cell.label = None
        cell.perimeter = False
        cell.terrain = ROOM
        cell.room_id = room.id
    _wall_room(state, room)
    state.rooms.append(room)
    return room


def _sound_room(state: "FloorState", r1: int, c1: int, r2: int, c2: int) -> bool:
    cells = state.cells
    for r in range(r1, r2 + 1):
        for c in range(c1, c2 + 1):
            terrain = cells[r][c].terrain
            if terrain == BLOCKED or terrain == ROOM:
                return False
    return True


def _wall_room(state: "FloorState", room: Room) -> None:
    """Mark the one-cell ring around ``room`` as perimeter."""
    cells = state.cells
    top, bottom = room.north - 1, room.south + 1
    left, right = room.west - 1, room.east + 1
    for r in range(top, bottom + 1):
        for c in range(left, right + 1):
            if top < r < bottom and left < c < right:
                continue
            if not in_bounds(cells, r, c):
                continue
            cell = cells[r][c]
            if cell.terrain == ROOM or cell.entrance:
                continue
            cell.perimeter = True


def label_rooms(state: "FloorState") -> None:
    """Stamp each room's decimal id into the middle of its footprint."""
    cells = state.cells
    for room in state.rooms:
        label = str(room.id)
        label_r = room.center[0]
        label_c = (room.west + room.east - len(label)) // 2 + 1
        for offset, char in enumerate(label):
            c = label_c + offset
            if in_bounds(cells, label_r, c):
                cells[label_r][c].label = char


__all__ = [
    "Room",
    "place_rooms",
    "emplace_room",
    "label_rooms",
    "allocate_room_count",
    "room_base",
    "room_radix",
]
