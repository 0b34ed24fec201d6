import pytest

from delve.dungeon import create_dungeon
from delve.dungeon.rooms import allocate_room_count, emplace_room, label_rooms, place_rooms
from delve.dungeon.tiles import BLOCKED, MAX_ROOMS, ROOM
from dungeon_test_utils import make_state


def test_emplace_room_stamps_interior_and_ring():
    state = make_state(n_rows=21, n_cols=21)
    room = emplace_room(state, i=1, j=1, height=2, width=2)
    assert room is not None
    assert (room.north, room.south, room.west, room.east) == (3, 5, 3, 5)
    assert (room.height, room.width) == (30, 30)
    for r, c in room.cells():
        cell = state.cells[r][c]
        assert cell.terrain == ROOM
        assert cell.room_id == 1
        assert not cell.perimeter
    for k in range(2, 7):
        assert state.cells[2][k].perimeter
        assert state.cells[6][k].perimeter
        assert state.cells[k][2].perimeter
        assert state.cells[k][6].perimeter
    assert not state.cells[1][1].perimeter


def test_emplace_room_rejects_overlap_blocked_and_out_of_bounds():
    state = make_state(n_rows=21, n_cols=21)
    assert emplace_room(state, i=1, j=1, height=2, width=2) is not None
    assert emplace_room(state, i=2, j=2, height=1, width=1) is None

    state.cells[9][9].terrain = BLOCKED
    assert emplace_room(state, i=4, j=4, height=1, width=1) is None

    assert emplace_room(state, i=9, j=1, height=2, width=1) is None
    assert emplace_room(state, i=9, j=1, height=1, width=1) is not None
    assert len(state.rooms) == 2


def test_emplace_room_stops_at_cap():
    state = make_state(n_rows=21, n_cols=21)
    state.rooms = [None] * MAX_ROOMS
    attempts = state.metrics["room_attempts"]
    assert emplace_room(state, i=1, j=1, height=1, width=1) is None
    assert state.metrics["room_attempts"] == attempts
    assert state.cells[3][3].terrain != ROOM


def test_allocate_room_count_default_grid():
    state = make_state()
    # 38 * 38 // 9**2
    assert allocate_room_count(state) == 17


def test_label_rooms_centres_id():
    state = make_state(n_rows=21, n_cols=21)
    emplace_room(state, i=1, j=1, height=2, width=2)
    label_rooms(state)
    assert state.cells[4][4].label == "1"


@pytest.mark.structure
@pytest.mark.parametrize("room_layout", ["Scattered", "Packed"])
def test_placed_rooms_are_disjoint_and_in_bounds(room_layout):
    state = make_state(room_layout=room_layout)
    placed = place_rooms(state)
    assert placed == len(state.rooms) > 0
    assert [room.id for room in state.rooms] == list(range(1, len(state.rooms) + 1))
    owner = {}
    for room in state.rooms:
        assert 1 <= room.north <= room.south <= state.max_row
        assert 1 <= room.west <= room.east <= state.max_col
        assert room.north % 2 == 1 and room.west % 2 == 1
        for r, c in room.cells():
            assert (r, c) not in owner
            owner[(r, c)] = room.id
            assert state.cells[r][c].room_id == room.id
    assert state.metrics["rooms"] == len(state.rooms)


@pytest.mark.structure
def test_room_interiors_survive_generation():
    d = create_dungeon(seed=77)
    for room in d.rooms:
        for r, c in room.cells():
            assert d.cells[r][c].terrain == ROOM
            assert d.cells[r][c].room_id == room.id
    assert d.room(1) is d.rooms[0]
    assert d.room(len(d.rooms) + 1) is None
