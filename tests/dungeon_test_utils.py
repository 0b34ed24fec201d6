from collections import deque

from delve.dungeon import DungeonOptions
from delve.dungeon.state import FloorState
from delve.dungeon.tiles import CORRIDOR


def make_state(**overrides):
    """Blank, normalised floor state for exercising single phases."""
    overrides.setdefault("seed", 1234)
    return FloorState.create(DungeonOptions(**overrides).normalized())


def open_cells(cells):
    return {(r, c) for r, row in enumerate(cells) for c, cell in enumerate(row) if cell.is_open}


def bfs_reachable(cells, start):
    """Return set of (row, col) open cells reachable from start."""
    if start is None:
        return set()
    h = len(cells)
    w = len(cells[0])
    sr, sc = start
    if not (0 <= sr < h and 0 <= sc < w) or not cells[sr][sc].is_open:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        r, c = q.popleft()
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = r + dr, c + dc
            if 0 <= nr < h and 0 <= nc < w and (nr, nc) not in vis and cells[nr][nc].is_open:
                vis.add((nr, nc))
                q.append((nr, nc))
    return vis


def component_count(cells):
    remaining = open_cells(cells)
    count = 0
    while remaining:
        start = min(remaining)
        remaining -= bfs_reachable(cells, start)
        count += 1
    return count


def carve_line(state, r1, c1, r2, c2):
    """Mark a straight horizontal or vertical run of cells as corridor."""
    for r in range(min(r1, r2), max(r1, r2) + 1):
        for c in range(min(c1, c2), max(c1, c2) + 1):
            state.cells[r][c].terrain = CORRIDOR


def iter_doors(dungeon):
    for door in dungeon.doors:
        yield door, dungeon.cells[door.row][door.col]
