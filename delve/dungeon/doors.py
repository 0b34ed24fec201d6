"""Door logic: sill discovery, opening rooms, and the final door fix-up.

Functions mutate ``state.cells`` in-place and record door bookkeeping on the
owning rooms. ``fix_doors`` runs last and produces the flat door list.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from .cells import cell_at, in_bounds
from .rng import shuffle
from .tiles import (
    ARCH,
    BLOCKED,
    DIRECTIONS,
    DOOR,
    DOOR_LABELS,
    DOOR_TYPES,
    LOCKED,
    OPPOSITE,
    PORTC,
    ROOM,
    SECRET,
    TRAPPED,
)

if TYPE_CHECKING:  # pragma: no cover
    from .rng import SeededRandom
    from .rooms import Room
    from .state import FloorState


@dataclass
class Door:
    row: int
    col: int
    key: str
    type: str
    out_id: Optional[int] = None

    def to_dict(self):
        data = {"row": self.row, "col": self.col, "key": self.key, "type": self.type}
        if self.out_id is not None:
            data["out_id"] = self.out_id
        return data


@dataclass
class Sill:
    sill_r: int
    sill_c: int
    direction: str
    door_r: int
    door_c: int
    out_id: Optional[int] = None


# Upper bounds (exclusive) over rand_int(110) for each door kind
_DOOR_BANDS: Tuple[Tuple[int, str], ...] = (
    (15, ARCH),
    (60, DOOR),
    (75, LOCKED),
    (90, TRAPPED),
    (100, SECRET),
)


def roll_door_kind(rng: "SeededRandom") -> str:
    roll = rng.rand_int(110)
    for bound, kind in _DOOR_BANDS:
        if roll < bound:
            return kind
    return PORTC


def connect_key(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a < b else (b, a)


def stamp_door(state: "FloorState", r: int, c: int, kind: str) -> Door:
    """Write ``kind`` onto the cell at (r, c) and return an unattached record."""
    cell = state.cells[r][c]
    cell.door = kind
    cell.perimeter = False
    label = DOOR_LABELS.get(kind)
    if label is not None:
        cell.label = label
    return Door(row=r, col=c, key=kind, type=DOOR_TYPES[kind])


def door_sills(state: "FloorState", room: "Room") -> List[Sill]:
    """Candidate openings for ``room`` in wall order, shuffled."""
    sills: List[Sill] = []
    if room.north >= 3:
        for c in range(room.west, room.east + 1, 2):
            _append_sill(state, room, room.north, c, "north", sills)
    if room.south <= state.n_rows - 3:
        for c in range(room.west, room.east + 1, 2):
            _append_sill(state, room, room.south, c, "south", sills)
    if room.west >= 3:
        for r in range(room.north, room.south + 1, 2):
            _append_sill(state, room, r, room.west, "west", sills)
    if room.east <= state.n_cols - 3:
        for r in range(room.north, room.south + 1, 2):
            _append_sill(state, room, r, room.east, "east", sills)
    return shuffle(sills, state.rng)


def _append_sill(state: "FloorState", room: "Room", sill_r: int, sill_c: int, direction: str, out: List[Sill]) -> None:
    sill = check_sill(state, room, sill_r, sill_c, direction)
    if sill is not None:
        out.append(sill)


def check_sill(state: "FloorState", room: "Room", sill_r: int, sill_c: int, direction: str) -> Optional[Sill]:
    dr, dc = DIRECTIONS[direction]
    door_r, door_c = sill_r + dr, sill_c + dc
    if not in_bounds(state.cells, door_r, door_c):
        return None
    door_cell = state.cells[door_r][door_c]
    if not door_cell.perimeter or door_cell.door is not None or door_cell.terrain == BLOCKED:
        return None
    out_r, out_c = door_r + dr, door_c + dc
    if not in_bounds(state.cells, out_r, out_c):
        return None
    out_cell = state.cells[out_r][out_c]
    if out_cell.terrain == BLOCKED:
        return None
    out_id = None
    if out_cell.terrain == ROOM:
        out_id = out_cell.room_id
        if out_id == room.id:
            return None
    return Sill(sill_r, sill_c, direction, door_r, door_c, out_id)


def allocate_opens(state: "FloorState", room: "Room") -> int:
    height_units = (room.south - room.north) // 2 + 1
    width_units = (room.east - room.west) // 2 + 1
    base = int(math.sqrt(width_units * height_units))
    return base + state.rng.rand_int(base)


def open_rooms(state: "FloorState") -> int:
    """Open every room in id order; returns the number of doors created."""
    opened = 0
    for room in state.rooms:
        opened += open_room(state, room)
    return opened


def open_room(state: "FloorState", room: "Room") -> int:
    sills = door_sills(state, room)
    if not sills:
        return 0
    n_opens = allocate_opens(state, room)
    opened = 0
    # Skipped sills still use up one of the room's openings.
    for sill in sills[:n_opens]:
        if state.cells[sill.door_r][sill.door_c].door is not None:
            continue
        if sill.out_id is not None:
            key = connect_key(room.id, sill.out_id)
            if key in state.connected:
                continue
            state.connected.add(key)

        dr, dc = DIRECTIONS[sill.direction]
        for step in range(3):
            cell = state.cells[sill.sill_r + dr * step][sill.sill_c + dc * step]
            cell.perimeter = False
            cell.entrance = True

        door = stamp_door(state, sill.door_r, sill.door_c, roll_door_kind(state.rng))
        door.out_id = sill.out_id
        room.doors.setdefault(sill.direction, []).append(door)
        opened += 1
    return opened


def fix_doors(state: "FloorState") -> List[Door]:
    """Drop doors that lead nowhere and flatten the rest into ``state.doors``.

    A door joining two rooms is listed on the room that opened it and mirrored
    once into the other room's opposite wall; the flat list holds it once.
    """
    fixed = set()
    flat: List[Door] = []
    for room in state.rooms:
        for direction in DIRECTIONS:
            if direction not in room.doors:
                continue
            kept: List[Door] = []
            for door in room.doors[direction]:
                pos = (door.row, door.col)
                if pos in fixed:
                    kept.append(door)
                    continue
                if not state.cells[door.row][door.col].is_open:
                    _seal_door(state, door, direction)
                    continue
                fixed.add(pos)
                if door.out_id is not None:
                    other = state.room(door.out_id)
                    if other is not None:
                        other.doors.setdefault(OPPOSITE[direction], []).append(door)
                kept.append(door)
                flat.append(door)
            if kept:
                room.doors[direction] = kept
            else:
                del room.doors[direction]
    state.doors = flat
    state.metrics["doors"] = len(flat)
    return flat


def _seal_door(state: "FloorState", door: Door, direction: str) -> None:
    """Restore the wall under a door no corridor ever reached."""
    dr, dc = DIRECTIONS[direction]
    cell = state.cells[door.row][door.col]
    cell.door = None
    cell.label = None
    cell.entrance = False
    cell.perimeter = True
    for r, c in ((door.row - dr, door.col - dc), (door.row + dr, door.col + dc)):
        neighbour = cell_at(state.cells, r, c)
        if neighbour is not None:
            neighbour.entrance = False
    state.metrics["doors_dropped"] += 1


__all__ = [
    "Door",
    "Sill",
    "roll_door_kind",
    "connect_key",
    "stamp_door",
    "door_sills",
    "check_sill",
    "allocate_opens",
    "open_rooms",
    "open_room",
    "fix_doors",
]
