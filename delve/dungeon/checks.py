"""Structural invariant checks for generated dungeons.

Each ``check_*`` returns a list of human readable violations (empty when the
property holds). ``analyze`` bundles them for scripts and tests.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from .connectivity import is_connected
from .doors import door_is_valid
from .marching import corner_code
from .rooms import Room
from .tiles import DOOR, FLOOR


def check_tiling(leaf_rooms: Sequence[Room], width: int, depth: int) -> List[str]:
    problems = []
    for r in leaf_rooms:
        if r.x0 < 0 or r.z0 < 0 or r.x1 > width - 1 or r.z1 > depth - 1:
            problems.append(f"room {r.id} leaves the bounds: {r.to_dict()['bounds']}")
    total = sum(r.footprint_area for r in leaf_rooms)
    expected = (width - 1) * (depth - 1)
    if total != expected:
        problems.append(f"footprint area {total} != bounds area {expected}")
    for i, a in enumerate(leaf_rooms):
        for b in leaf_rooms[i + 1:]:
            if max(a.x0, b.x0) < min(a.x1, b.x1) and max(a.z0, b.z0) < min(a.z1, b.z1):
                problems.append(f"rooms {a.id} and {b.id} overlap")
    return problems


def check_doors(dungeon) -> List[str]:
    problems = []
    room_ids = {r.id for r in dungeon.rooms}
    for door in dungeon.doors:
        if not door_is_valid(dungeon.leaf_rooms, door):
            problems.append(f"door {door.id} fails the coverage test")
        if door.id[0] not in room_ids or door.id[1] not in room_ids:
            problems.append(f"door {door.id} references a removed room")
    return problems


def check_rasterization(dungeon) -> List[str]:
    problems = []
    grid = dungeon.grid
    for x, z, state in grid.iter_cells():
        if state == FLOOR:
            owners = sum(1 for r in dungeon.rooms if r.is_interior(x, z))
            if owners != 1:
                problems.append(f"floor cell ({x},{z}) inside {owners} rooms")
        elif state == DOOR:
            owners = sum(1 for r in dungeon.rooms if r.is_perimeter(x, z))
            if owners != 2:
                problems.append(f"door cell ({x},{z}) on {owners} room boundaries")
    return problems


def check_connectivity(dungeon) -> List[str]:
    problems = []
    door_ids = {d.id for d in dungeon.doors}
    for pair in dungeon.connections:
        if tuple(pair) not in door_ids:
            problems.append(f"connection {pair} has no door")
    connected = is_connected([r.id for r in dungeon.rooms], dungeon.connections)
    if dungeon.fully_connected and not connected:
        problems.append("room graph is disconnected but not flagged")
    if not dungeon.fully_connected and not dungeon.stranded_rooms:
        problems.append("flagged as disconnected without stranded rooms")
    return problems


def check_marching(dungeon) -> List[str]:
    problems = []
    grid = dungeon.grid
    emitted = Counter(w.position for w in dungeon.walls)
    for x in range(grid.width):
        for z in range(grid.height):
            code = corner_code(grid, x, z)
            n = emitted.get((x, z), 0)
            if code == 0 and n:
                problems.append(f"placement emitted for empty window ({x},{z})")
            elif code in dungeon.wall_table and n != 1:
                problems.append(f"window ({x},{z}) code {code} emitted {n} placements")
    return problems


def analyze(dungeon) -> Dict[str, List[str]]:
    report = {
        "tiling": check_tiling(dungeon.leaf_rooms, dungeon.width, dungeon.depth),
        "doors": check_doors(dungeon),
        "rasterization": check_rasterization(dungeon),
        "connectivity": check_connectivity(dungeon),
        "marching": check_marching(dungeon),
    }
    return report


def is_clean(report: Dict[str, List[str]]) -> bool:
    return not any(report.values())


__all__ = [
    "analyze",
    "check_connectivity",
    "check_doors",
    "check_marching",
    "check_rasterization",
    "check_tiling",
    "is_clean",
]
