import pytest

from delve.dungeon.rng import SeededRandom, shuffle
from delve.dungeon.rooms import emplace_room
from delve.dungeon.tiles import BLOCKED, CORRIDOR, DIRECTIONS, EMPTY, ROOM
from delve.dungeon.tunnels import carve_corridors, open_tunnel, sound_tunnel, tunnel_dirs
from dungeon_test_utils import component_count, make_state


@pytest.mark.parametrize("last_dir", ["north", "south", "west", "east"])
def test_straight_layout_keeps_heading(last_dir):
    state = make_state(corridor_layout="Straight")
    for _ in range(10):
        dirs = tunnel_dirs(state, last_dir)
        assert dirs[0] == last_dir
        assert sorted(dirs) == sorted(DIRECTIONS)


def test_labyrinth_layout_is_plain_shuffle():
    state = make_state(seed=5, corridor_layout="Labyrinth")
    assert tunnel_dirs(state, "north") == shuffle(list(DIRECTIONS), SeededRandom(5))


def test_first_step_has_no_bias_draw():
    a = make_state(seed=8, corridor_layout="Straight")
    b = make_state(seed=8, corridor_layout="Labyrinth")
    assert tunnel_dirs(a, None) == tunnel_dirs(b, None)


def test_empty_floor_becomes_spanning_tree():
    state = make_state(n_rows=21, n_cols=21)
    assert carve_corridors(state) == 1
    for i in range(state.n_i):
        for j in range(state.n_j):
            assert state.cells[i * 2 + 1][j * 2 + 1].terrain == CORRIDOR
    corridor = sum(1 for row in state.cells for cell in row if cell.terrain == CORRIDOR)
    assert corridor == 2 * state.n_i * state.n_j - 1
    assert component_count(state.cells) == 1
    # outer border untouched
    assert all(cell.terrain != CORRIDOR for cell in state.cells[0])
    assert all(row[0].terrain != CORRIDOR for row in state.cells)


def test_sound_tunnel_rejects_blocked_perimeter_and_visited():
    state = make_state(n_rows=21, n_cols=21)
    visited = set()
    assert sound_tunnel(state, 1, 2, 3, 4, 3, 5, visited)
    assert not sound_tunnel(state, 1, 10, 3, 20, 3, 21, visited)
    assert not sound_tunnel(state, 1, 2, 3, 4, 3, 5, {(1, 2)})
    state.cells[3][4].terrain = BLOCKED
    assert not sound_tunnel(state, 1, 2, 3, 4, 3, 5, visited)
    state.cells[3][4].terrain = EMPTY
    state.cells[3][4].perimeter = True
    assert not sound_tunnel(state, 1, 2, 3, 4, 3, 5, visited)


def test_open_tunnel_carves_two_cells():
    state = make_state(n_rows=21, n_cols=21)
    visited = set()
    assert open_tunnel(state, 1, 1, "east", visited)
    assert [state.cells[3][c].terrain for c in (3, 4, 5)] == [CORRIDOR] * 3
    assert visited == {(1, 1), (1, 2)}


@pytest.mark.structure
def test_tunnels_enter_rooms_only_through_doors():
    state = make_state(n_rows=21, n_cols=21)
    room = emplace_room(state, i=2, j=2, height=2, width=2)
    carve_corridors(state)
    for r, c in room.cells():
        assert state.cells[r][c].terrain == ROOM
    for r in range(room.north - 1, room.south + 2):
        for c in range(room.west - 1, room.east + 2):
            if not room.contains(r, c):
                assert state.cells[r][c].terrain != CORRIDOR
