"""Finished generation results.

``Dungeon`` is one floor as handed to callers; ``MultiFloorDungeon`` groups the
floors of a stacked dungeon together with their shared stair coordinates.
Neither is touched by the generator once returned.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .cells import Grid, is_open_at
from .config import DungeonOptions
from .doors import Door
from .rooms import Room
from .stairs import Stair
from .tiles import ARCH, DOOR, LOCKED, PORTC, ROOM, SECRET, STAIR_DOWN, STAIR_UP, TRAPPED

DOOR_GLYPHS = {
    ARCH: "'",
    DOOR: "+",
    LOCKED: "x",
    TRAPPED: "t",
    SECRET: "s",
    PORTC: "=",
}
STAIR_GLYPHS = {STAIR_DOWN: ">", STAIR_UP: "<"}
FLOOR_GLYPH = "."
WALL_GLYPH = "#"
EMPTY_GLYPH = " "


@dataclass
class Dungeon:
    seed: int
    n_rows: int
    n_cols: int
    n_i: int
    n_j: int
    cells: Grid
    rooms: List[Room]
    doors: List[Door]
    stairs: List[Stair]
    options: DungeonOptions
    floor_number: int = 0
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_rooms(self) -> int:
        return len(self.rooms)

    def room(self, room_id: int) -> Optional[Room]:
        if 1 <= room_id <= len(self.rooms):
            return self.rooms[room_id - 1]
        return None

    def stair_positions(self) -> List[Tuple[int, int]]:
        return [s.position for s in self.stairs]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "n_rows": self.n_rows,
            "n_cols": self.n_cols,
            "n_i": self.n_i,
            "n_j": self.n_j,
            "floor_number": self.floor_number,
            "options": self.options.to_dict(),
            "cells": [[cell.to_dict() for cell in row] for row in self.cells],
            "rooms": [room.to_dict() for room in self.rooms],
            "doors": [door.to_dict() for door in self.doors],
            "stairs": [stair.to_dict() for stair in self.stairs],
            "metrics": dict(self.metrics),
        }

    def glyph_at(self, r: int, c: int) -> str:
        cell = self.cells[r][c]
        if cell.stair is not None:
            return STAIR_GLYPHS[cell.stair]
        if cell.door is not None:
            return DOOR_GLYPHS[cell.door]
        if cell.terrain == ROOM and cell.label is not None and cell.label.isdigit():
            return cell.label
        if cell.is_open:
            return FLOOR_GLYPH
        if cell.perimeter or self._touches_open(r, c):
            return WALL_GLYPH
        return EMPTY_GLYPH

    def _touches_open(self, r: int, c: int) -> bool:
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if is_open_at(self.cells, r + dr, c + dc):
                    return True
        return False

    def to_ascii(self) -> str:
        """Plain-text map, one character per cell.

        Solid cells next to open space are drawn as walls so corridors read
        clearly; everything else solid is blank.
        """
        return "\n".join(
            "".join(self.glyph_at(r, c) for c in range(self.n_cols + 1))
            for r in range(self.n_rows + 1)
        )


@dataclass
class MultiFloorDungeon:
    floors: List[Dungeon]
    stair_positions: List[Tuple[int, int]]
    seed: int
    options: DungeonOptions

    def floor(self, number: int) -> Dungeon:
        return self.floors[number]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "options": self.options.to_dict(),
            "stair_positions": [{"row": r, "col": c} for r, c in self.stair_positions],
            "floors": [f.to_dict() for f in self.floors],
        }

    def to_ascii(self) -> str:
        blocks = []
        for f in self.floors:
            blocks.append(f"Floor {f.floor_number + 1} (seed {f.seed})\n{f.to_ascii()}")
        return "\n\n".join(blocks)


__all__ = ["Dungeon", "MultiFloorDungeon", "DOOR_GLYPHS", "STAIR_GLYPHS"]
