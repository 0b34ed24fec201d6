"""Mutable working state threaded through the generation phases.

One ``FloorState`` is created per floor by the pipeline and handed to each
phase in order; phases read and mutate ``cells`` and extend exactly one of the
auxiliary collections. Nothing outside the pipeline holds a reference to it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Tuple

from .cells import Grid, make_grid
from .config import DungeonOptions
from .metrics import init_metrics
from .rng import SeededRandom

if TYPE_CHECKING:  # pragma: no cover
    from .doors import Door
    from .rooms import Room
    from .stairs import Stair


@dataclass
class FloorState:
    options: DungeonOptions
    rng: SeededRandom
    n_i: int
    n_j: int
    cells: Grid
    floor_number: int = 0
    rooms: List["Room"] = field(default_factory=list)
    doors: List["Door"] = field(default_factory=list)
    stairs: List["Stair"] = field(default_factory=list)
    # Normalised (min_id, max_id) pairs of rooms already joined by a door
    connected: Set[Tuple[int, int]] = field(default_factory=set)
    metrics: Dict[str, Any] = field(default_factory=init_metrics)

    @classmethod
    def create(cls, options: DungeonOptions, floor_number: int = 0) -> "FloorState":
        """Size the grid from already-normalised options (odd n_rows/n_cols)."""
        n_i = options.n_rows // 2
        n_j = options.n_cols // 2
        return cls(
            options=options,
            rng=SeededRandom(options.seed),
            n_i=n_i,
            n_j=n_j,
            cells=make_grid(n_i * 2, n_j * 2),
            floor_number=floor_number,
        )

    @property
    def n_rows(self) -> int:
        return self.n_i * 2

    @property
    def n_cols(self) -> int:
        return self.n_j * 2

    @property
    def max_row(self) -> int:
        return self.n_rows - 1

    @property
    def max_col(self) -> int:
        return self.n_cols - 1

    def room(self, room_id: int) -> Optional["Room"]:
        if 1 <= room_id <= len(self.rooms):
            return self.rooms[room_id - 1]
        return None


__all__ = ["FloorState"]
