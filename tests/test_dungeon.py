import json

import pytest

from delve import create_app
from delve.dungeon import Dungeon, create_dungeon, generate_floor
from delve.dungeon.config import DungeonOptions
from delve.dungeon.tiles import BLOCKED
from dungeon_test_utils import component_count

SCENARIO = dict(seed=42, n_rows=21, n_cols=21, room_layout="Scattered", corridor_layout="Straight", add_stairs=2, floors=1)


def test_small_straight_scenario():
    d = create_dungeon(**SCENARIO)
    assert isinstance(d, Dungeon)
    assert len(d.stairs) == 2
    assert d.n_rooms >= 1
    assert component_count(d.cells) == 1
    assert (d.n_rows, d.n_cols) == (20, 20)
    assert len(d.cells) == 21 and len(d.cells[0]) == 21


@pytest.fixture()
def no_metrics(monkeypatch):
    # timings differ run to run; everything else in to_dict must not
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "0")


def test_same_seed_same_dungeon(no_metrics):
    assert create_dungeon(**SCENARIO).to_dict() == create_dungeon(**SCENARIO).to_dict()


def test_same_seed_same_multi_floor_dungeon(no_metrics):
    opts = dict(SCENARIO, floors=3, corridor_layout="Bent")
    a = create_dungeon(**opts).to_dict()
    assert len(a["floors"]) == 3
    assert a == create_dungeon(**opts).to_dict()


def test_different_seed_differs():
    a = create_dungeon(seed=1)
    b = create_dungeon(seed=2)
    assert a.to_ascii() != b.to_ascii()


def test_options_object_with_overrides():
    base = DungeonOptions(seed=8, n_rows=25, n_cols=31)
    d = create_dungeon(base, dungeon_layout="Cross")
    assert d.options.dungeon_layout == "Cross"
    assert (d.n_rows, d.n_cols) == (24, 30)
    assert base.dungeon_layout == "None"


def test_even_dimensions_coerced():
    d = create_dungeon(seed=3, n_rows=20, n_cols=30)
    assert d.options.n_rows == 21
    assert d.options.n_cols == 31
    assert (d.n_rows, d.n_cols) == (20, 30)


def test_unseeded_dungeon_records_seed():
    d = create_dungeon(n_rows=15, n_cols=15)
    assert isinstance(d.seed, int)
    assert d.options.seed == d.seed


@pytest.mark.structure
@pytest.mark.parametrize("seed", [1, 6, 42, 1000])
@pytest.mark.parametrize("layout", ["None", "Box", "Cross", "Round"])
@pytest.mark.parametrize("room_layout", ["Scattered", "Packed"])
def test_cell_invariants(seed, layout, room_layout):
    d = create_dungeon(seed=seed, dungeon_layout=layout, room_layout=room_layout)
    for row in d.cells:
        for cell in row:
            assert cell.terrain != BLOCKED
            if cell.is_open:
                assert not cell.perimeter
            if cell.door is not None:
                assert cell.stair is None
            if cell.is_room:
                assert cell.room_id is not None
    assert component_count(d.cells) == 1


def test_ascii_shape_and_glyphs():
    d = create_dungeon(**SCENARIO)
    lines = d.to_ascii().split("\n")
    assert len(lines) == d.n_rows + 1
    assert all(len(line) == d.n_cols + 1 for line in lines)
    text = "\n".join(lines)
    assert ">" in text and "<" in text
    assert "1" in text
    stair = d.stairs[0]
    assert d.glyph_at(stair.row, stair.col) == ">"


def test_to_dict_is_json_ready():
    d = create_dungeon(seed=12)
    data = json.loads(json.dumps(d.to_dict()))
    assert data["seed"] == 12
    assert len(data["cells"]) == d.n_rows + 1
    assert len(data["rooms"]) == d.n_rooms
    assert data["options"]["n_rows"] == 39
    assert {"row", "col", "next_row", "next_col", "key"} <= set(data["stairs"][0])


def test_metrics_recorded_by_default(monkeypatch):
    monkeypatch.delenv("DELVE_ENABLE_GENERATION_METRICS", raising=False)
    d = create_dungeon(seed=42)
    assert d.metrics["rooms"] == d.n_rooms
    assert d.metrics["stairs"] == len(d.stairs)
    assert d.metrics["corridor_cells"] > 0
    assert d.metrics["room_attempts"] >= d.n_rooms
    assert "phase_ms" in d.metrics


def test_metrics_disabled_by_env(monkeypatch):
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "0")
    assert create_dungeon(seed=42).metrics == {}


def test_metrics_disabled_by_app_config(monkeypatch):
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "1")
    app = create_app({"TESTING": True, "DELVE_ENABLE_GENERATION_METRICS": False})
    with app.app_context():
        assert create_dungeon(seed=42).metrics == {}


def test_metrics_do_not_change_layout(monkeypatch):
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "0")
    plain = create_dungeon(seed=42).to_ascii()
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "1")
    assert create_dungeon(seed=42).to_ascii() == plain


def test_generate_floor_direct():
    opts = DungeonOptions(seed=5, n_rows=21, n_cols=21).normalized()
    d = generate_floor(opts, floor_number=2)
    assert d.floor_number == 2
    assert d.seed == 5


def test_pipeline_imports_flask_lazily():
    from delve.dungeon import pipeline

    assert not hasattr(pipeline, "current_app")
    assert not hasattr(pipeline, "has_app_context")
