import json

import pytest

from delve.dungeon.marching import (
    DEFAULT_WALL_TABLE,
    WallPiece,
    corner_code,
    load_wall_table,
    march_squares,
    wall_table_from_mapping,
)
from delve.dungeon.metrics import init_metrics
from delve.dungeon.tiles import DOOR, FLOOR, WALL, TileGrid


def grid_with_walls(width, height, cells):
    g = TileGrid(width, height)
    for x, z in cells:
        g.set(x, z, WALL)
    return g


def test_default_table_covers_every_nonzero_code():
    assert sorted(DEFAULT_WALL_TABLE) == list(range(1, 16))
    assert DEFAULT_WALL_TABLE[15] == WallPiece("solid", 0)
    assert {p.rotation for p in DEFAULT_WALL_TABLE.values()} <= {0, 90, 180, 270}


def test_corner_code_bits():
    g = grid_with_walls(3, 3, [(1, 1)])
    assert corner_code(g, 1, 1) == 1
    assert corner_code(g, 0, 1) == 2
    assert corner_code(g, 0, 0) == 4
    assert corner_code(g, 1, 0) == 8
    assert corner_code(g, 2, 2) == 0


def test_only_wall_state_counts():
    g = TileGrid(2, 2)
    g.set(0, 0, FLOOR)
    g.set(1, 0, DOOR)
    assert corner_code(g, 0, 0) == 0


def test_single_wall_cell_emits_four_outer_corners():
    placements, skipped = march_squares(grid_with_walls(5, 5, [(2, 2)]))
    assert skipped == 0
    assert {p.corner_code for p in placements} == {1, 2, 4, 8}
    assert {p.position for p in placements} == {(2, 2), (1, 2), (1, 1), (2, 1)}
    assert all(p.piece.kind == "outer_corner" for p in placements)


def test_empty_grid_emits_nothing():
    placements, skipped = march_squares(TileGrid(4, 4))
    assert placements == [] and skipped == 0


def test_solid_block_codes():
    placements, _ = march_squares(grid_with_walls(2, 2, [(0, 0), (1, 0), (0, 1), (1, 1)]))
    codes = {p.position: p.corner_code for p in placements}
    assert codes == {(0, 0): 15, (1, 0): 9, (0, 1): 3, (1, 1): 1}


def test_unmapped_codes_are_skipped_and_counted():
    metrics = init_metrics()
    table = {1: WallPiece("post", 0)}
    placements, skipped = march_squares(grid_with_walls(5, 5, [(2, 2)]), table, metrics=metrics)
    assert [p.corner_code for p in placements] == [1]
    assert skipped == 3
    assert metrics["wall_placements"] == 1
    assert metrics["unmapped_codes"] == 3


def test_placement_dict():
    placements, _ = march_squares(grid_with_walls(2, 2, [(0, 0)]))
    assert placements[0].to_dict() == {"position": [0, 0], "code": 1, "kind": "outer_corner", "rotation": 0}


def test_wall_table_from_mapping():
    table = wall_table_from_mapping({"3": {"kind": "straight", "rotation": 90}, "15": {"kind": "pillar"}})
    assert table == {3: WallPiece("straight", 90), 15: WallPiece("pillar", 0)}


@pytest.mark.parametrize("raw", [{"0": {"kind": "x"}}, {"16": {"kind": "x"}}, {"abc": {"kind": "x"}}, {"3": {}}])
def test_wall_table_rejects_bad_entries(raw):
    with pytest.raises(ValueError):
        wall_table_from_mapping(raw)


def test_load_wall_table_from_json(tmp_path):
    path = tmp_path / "walls.json"
    path.write_text(json.dumps({"1": {"kind": "post", "rotation": 180}}), encoding="utf-8")
    assert load_wall_table(str(path)) == {1: WallPiece("post", 180)}


def test_load_wall_table_requires_object(tmp_path):
    path = tmp_path / "walls.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_wall_table(str(path))
