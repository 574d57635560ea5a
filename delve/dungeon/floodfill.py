"""Reachability check over walkable (floor/door) cells."""
from __future__ import annotations

from collections import deque
from typing import Callable, NamedTuple, Optional, Set, Tuple

from ..logging_utils import get_logger
from .tiles import FLOOR, TileGrid

_log = get_logger("dungeon.floodfill")

Cell = Tuple[int, int]
NEIGHBORS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class FloodResult(NamedTuple):
    ok: bool
    start: Optional[Cell]
    visited: Set[Cell]
    reason: Optional[str] = None


def first_floor_cell(grid: TileGrid) -> Optional[Cell]:
    for x, z, _ in grid.iter_cells(FLOOR):
        return (x, z)
    return None


def flood_fill(
    grid: TileGrid,
    start: Optional[Cell] = None,
    *,
    on_step: Optional[Callable[[str, int], None]] = None,
) -> FloodResult:
    """4-connected BFS from ``start`` (default: first floor cell).

    A bad start is reported through the result and a warning, never raised.
    """
    if start is None:
        start = first_floor_cell(grid)
        if start is None:
            _log.warn(event="flood_fill_failed", reason="no_floor")
            return FloodResult(False, None, set(), "no_floor")
    sx, sz = start
    if not grid.in_bounds(sx, sz):
        _log.warn(event="flood_fill_failed", reason="out_of_bounds", x=sx, z=sz)
        return FloodResult(False, start, set(), "out_of_bounds")
    if not grid.is_walkable(sx, sz):
        _log.warn(event="flood_fill_failed", reason="not_walkable", x=sx, z=sz)
        return FloodResult(False, start, set(), "not_walkable")

    visited = {start}
    queue = deque([start])
    steps = 0
    while queue:
        cx, cz = queue.popleft()
        for dx, dz in NEIGHBORS:
            nxt = (cx + dx, cz + dz)
            if nxt not in visited and grid.is_walkable(*nxt):
                visited.add(nxt)
                queue.append(nxt)
        steps += 1
        if on_step:
            on_step("flood_fill", steps)
    return FloodResult(True, start, visited)


__all__ = ["FloodResult", "flood_fill", "first_floor_cell"]
