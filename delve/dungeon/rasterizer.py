"""Rasterize final rooms and doors onto a TileGrid."""
from __future__ import annotations

from typing import Optional, Sequence

from .doors import Door
from .rooms import Room
from .tiles import DOOR, FLOOR, WALL, TileGrid


def rasterize(
    width: int,
    depth: int,
    rooms: Sequence[Room],
    doors: Sequence[Door],
    metrics: Optional[dict] = None,
) -> TileGrid:
    grid = TileGrid.for_bounds(width, depth)
    for room in rooms:
        for x, z in room.cells():
            if not grid.in_bounds(x, z):
                continue
            grid.set(x, z, WALL if room.is_perimeter(x, z) else FLOOR)
    skipped = 0
    for door in doors:
        for x, z in door.cells():
            if not grid.in_bounds(x, z):
                continue
            if grid.get(x, z) == WALL:
                grid.set(x, z, DOOR)
            else:
                skipped += 1
    if metrics is not None:
        metrics["door_cells_skipped"] += skipped
        metrics["floor_cells"] = grid.count(FLOOR)
        metrics["door_cells"] = grid.count(DOOR)
        metrics["wall_cells"] = grid.count(WALL)
    return grid


__all__ = ["rasterize"]
