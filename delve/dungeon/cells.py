from typing import Iterator, List, Optional, Tuple

from .tiles import BLOCKED, EMPTY, OPEN_TERRAIN, ROOM


class Cell:
    """Tagged container for a single dungeon grid cell."""

    __slots__ = ("terrain", "perimeter", "entrance", "room_id", "door", "stair", "label")

    def __init__(self, terrain: str = EMPTY):
        self.terrain = terrain
        self.perimeter = False
        self.entrance = False
        self.room_id: Optional[int] = None
        self.door: Optional[str] = None
        self.stair: Optional[str] = None
        self.label: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.terrain in OPEN_TERRAIN

    @property
    def is_blocked(self) -> bool:
        return self.terrain == BLOCKED

    @property
    def is_room(self) -> bool:
        return self.terrain == ROOM

    def clear(self) -> None:
        """Reset to an empty, flagless cell."""
        self.terrain = EMPTY
        self.perimeter = False
        self.entrance = False
        self.room_id = None
        self.door = None
        self.stair = None
        self.label = None

    def to_dict(self):
        data = {"t": self.terrain}
        if self.perimeter:
            data["p"] = 1
        if self.entrance:
            data["e"] = 1
        if self.room_id is not None:
            data["room"] = self.room_id
        if self.door is not None:
            data["door"] = self.door
        if self.stair is not None:
            data["stair"] = self.stair
        if self.label is not None:
            data["label"] = self.label
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Cell({self.to_dict()!r})"


Grid = List[List[Cell]]
Coord = Tuple[int, int]


def make_grid(n_rows: int, n_cols: int) -> Grid:
    """Return a fresh (n_rows + 1) x (n_cols + 1) grid of empty cells."""
    return [[Cell() for _ in range(n_cols + 1)] for _ in range(n_rows + 1)]


def in_bounds(grid: Grid, r: int, c: int) -> bool:
    return 0 <= r < len(grid) and 0 <= c < len(grid[0])


def cell_at(grid: Grid, r: int, c: int) -> Optional[Cell]:
    if in_bounds(grid, r, c):
        return grid[r][c]
    return None


def is_open_at(grid: Grid, r: int, c: int) -> bool:
    cell = cell_at(grid, r, c)
    return cell is not None and cell.is_open


def iter_intersections(n_i: int, n_j: int, start: int = 0) -> Iterator[Tuple[int, int, int, int]]:
    """Yield (i, j, row, col) for every odd grid intersection in raster order."""
    for i in range(start, n_i):
        r = i * 2 + 1
        for j in range(start, n_j):
            yield i, j, r, j * 2 + 1


__all__ = ["Cell", "Grid", "Coord", "make_grid", "in_bounds", "cell_at", "is_open_at", "iter_intersections"]
