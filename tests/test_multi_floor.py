import json

import pytest

from delve.dungeon import Dungeon, MultiFloorDungeon, create_dungeon
from delve.dungeon.tiles import STAIR_DOWN, STAIR_UP
from dungeon_test_utils import component_count


def test_three_floors_share_one_stairwell():
    md = create_dungeon(seed=42, floors=3, add_stairs=1)
    assert isinstance(md, MultiFloorDungeon)
    assert len(md.floors) == 3
    assert len(md.stair_positions) == 1
    for floor in md.floors:
        assert floor.stair_positions() == md.stair_positions
    assert [f.stairs[0].key for f in md.floors] == [STAIR_DOWN, STAIR_UP, STAIR_UP]


def test_floor_seeds_step_by_thousand():
    md = create_dungeon(seed=42, floors=3)
    assert [f.seed for f in md.floors] == [42, 1042, 2042]
    assert [f.floor_number for f in md.floors] == [0, 1, 2]
    assert md.floor(1) is md.floors[1]


def test_four_floors_alternate_inner_kinds():
    md = create_dungeon(seed=7, floors=4, add_stairs=1)
    assert [f.stairs[0].key for f in md.floors] == [STAIR_DOWN, STAIR_UP, STAIR_DOWN, STAIR_UP]


def test_first_floor_stairs_all_lead_down():
    md = create_dungeon(seed=19, floors=2, add_stairs=3)
    assert {s.key for s in md.floors[0].stairs} == {STAIR_DOWN}
    assert {s.key for s in md.floors[1].stairs} == {STAIR_UP}
    assert md.floors[1].stair_positions() == md.stair_positions


def test_no_stairs_requested():
    md = create_dungeon(seed=3, floors=2, add_stairs=0)
    assert md.stair_positions == []
    assert all(f.stairs == [] for f in md.floors)


@pytest.mark.structure
@pytest.mark.parametrize("layout", ["None", "Round"])
def test_every_floor_connected(layout):
    md = create_dungeon(seed=101, floors=3, dungeon_layout=layout)
    for floor in md.floors:
        assert isinstance(floor, Dungeon)
        assert component_count(floor.cells) == 1
        for r, c in md.stair_positions:
            assert floor.cells[r][c].is_open


def test_single_floor_returns_plain_dungeon():
    assert isinstance(create_dungeon(seed=1, floors=1), Dungeon)


def test_multi_floor_serialisation():
    md = create_dungeon(seed=5, floors=2, n_rows=15, n_cols=15)
    data = json.loads(json.dumps(md.to_dict()))
    assert len(data["floors"]) == 2
    assert data["stair_positions"][0] == {"row": md.stair_positions[0][0], "col": md.stair_positions[0][1]}
    text = md.to_ascii()
    assert text.startswith("Floor 1 (seed 5)")
    assert "Floor 2 (seed 1005)" in text
