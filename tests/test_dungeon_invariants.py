"""Whole-pipeline structural invariants.

Invariants covered:
1. Leaf rooms tile the bounds.
2. Every final door passes the coverage test.
3. Floor cells sit inside exactly one room, door cells on exactly two room boundaries.
4. The final room graph is connected, or the result is flagged with stranded rooms.
5. Marching squares emits exactly one placement per mapped nonzero window.
"""

from __future__ import annotations

import pytest

from delve.dungeon import Dungeon
from delve.dungeon.checks import analyze, check_tiling, is_clean
from delve.dungeon.connectivity import is_connected
from dungeon_test_utils import make_room


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 12345])
def test_default_layouts_are_clean(seed):
    d = Dungeon(seed=seed)
    report = analyze(d)
    assert is_clean(report), report


@pytest.mark.parametrize("seed", [8, 9])
def test_larger_doors_and_remove_policy_are_clean(seed):
    d = Dungeon(seed=seed, size=(50, 30, 2), door_width=3, unreached_policy="remove")
    assert is_clean(analyze(d))
    assert d.fully_connected


@pytest.mark.parametrize("seed", [0, 7, 31337])
def test_example_scenario_20_by_20(seed):
    d = Dungeon(seed=seed, width=20, height=1, depth=20, max_room_size=12)
    # root is wider than the limit, so it is split along x at least once
    assert d.metrics["splits"] >= 1
    assert any(r.width < 20 for r in d.leaf_rooms)
    assert len(d.leaf_rooms) >= 2
    assert len(d.doors) >= 1
    assert d.fully_connected
    assert is_connected([r.id for r in d.rooms], d.connections)
    assert d.flood.ok
    assert d.reachable == d.grid.walkable_cells()
    assert d.metrics["unreached_cells"] == 0
    assert is_clean(analyze(d))


def test_fully_connected_layout_is_fully_reachable():
    for seed in range(20, 30):
        d = Dungeon(seed=seed)
        if d.fully_connected:
            assert d.reachable == d.grid.walkable_cells()


def test_final_rooms_and_doors_are_subsets():
    d = Dungeon(seed=77)
    leaf_ids = {r.id for r in d.leaf_rooms}
    assert {r.id for r in d.rooms} <= leaf_ids
    assert not ({r.id for r in d.rooms} & set(d.pruned_ids))
    assert set(d.doors) <= set(d.placed_doors)
    assert [tuple(c) for c in d.connections] == [door.id for door in d.doors]


def test_check_tiling_reports_overlap_and_gap():
    overlapping = [make_room(0, 0, 0, 6, 6), make_room(1, 3, 0, 6, 6)]
    problems = check_tiling(overlapping, 9, 6)
    assert any("overlap" in p for p in problems)
    gap = [make_room(0, 0, 0, 4, 6)]
    assert any("area" in p for p in check_tiling(gap, 9, 6))
