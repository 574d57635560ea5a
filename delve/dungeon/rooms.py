"""Rooms and BSP space partitioning.

Sizes count grid cells with the perimeter included. A room covering cell
columns ``x0..x1`` has ``width = x1 - x0 + 1`` and its center sits halfway
between the two perimeter columns. Siblings produced by one split share a
single column (or row) of cells: the wall between them.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from ..logging_utils import get_logger
from .rng import SeededRandom

MIN_SPLITTABLE = 7
CUT_MARGIN = 3

_log = get_logger("dungeon.rooms")

StepCallback = Callable[[str, int], None]


@dataclass(frozen=True)
class Room:
    id: int
    center: Tuple[float, float]
    size: Tuple[int, int, int]

    @classmethod
    def from_bounds(cls, room_id: int, x0: int, z0: int, width: int, depth: int, height: int) -> "Room":
        center = (x0 + (width - 1) / 2, z0 + (depth - 1) / 2)
        return cls(room_id, center, (width, depth, height))

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def depth(self) -> int:
        return self.size[1]

    @property
    def height(self) -> int:
        return self.size[2]

    @property
    def x0(self) -> int:
        return int(round(self.center[0] - (self.width - 1) / 2))

    @property
    def x1(self) -> int:
        return self.x0 + self.width - 1

    @property
    def z0(self) -> int:
        return int(round(self.center[1] - (self.depth - 1) / 2))

    @property
    def z1(self) -> int:
        return self.z0 + self.depth - 1

    @property
    def area(self) -> int:
        return self.width * self.depth

    @property
    def footprint_area(self) -> int:
        return (self.width - 1) * (self.depth - 1)

    def contains_point(self, x: float, z: float, eps: float = 1e-6) -> bool:
        """Closed footprint test; points on the perimeter line count."""
        return (self.x0 - eps <= x <= self.x1 + eps) and (self.z0 - eps <= z <= self.z1 + eps)

    def is_perimeter(self, x: int, z: int) -> bool:
        if not (self.x0 <= x <= self.x1 and self.z0 <= z <= self.z1):
            return False
        return x in (self.x0, self.x1) or z in (self.z0, self.z1)

    def is_interior(self, x: int, z: int) -> bool:
        return self.x0 < x < self.x1 and self.z0 < z < self.z1

    def cells(self) -> Iterator[Tuple[int, int]]:
        for ix in range(self.x0, self.x1 + 1):
            for iz in range(self.z0, self.z1 + 1):
                yield ix, iz

    def to_dict(self):
        return {
            "id": self.id,
            "center": list(self.center),
            "size": list(self.size),
            "bounds": [self.x0, self.z0, self.x1, self.z1],
        }


def partition_space(
    width: int,
    depth: int,
    height: int,
    max_room_size: int,
    rng: SeededRandom,
    *,
    on_step: Optional[StepCallback] = None,
    metrics: Optional[dict] = None,
) -> List[Room]:
    """Split the starting bounds into leaf rooms no larger than ``max_room_size``.

    Works off a LIFO stack: the most recently pushed room is split (or
    finalised) next, and the cut position is the only random draw per split.
    Rooms narrower than ``MIN_SPLITTABLE`` are kept even when they exceed the
    limit.
    """
    ids = itertools.count()
    unfinished = [Room.from_bounds(next(ids), 0, 0, width, depth, height)]
    rooms: List[Room] = []
    steps = 0
    while unfinished:
        current = unfinished.pop()
        if current.width > max_room_size and current.width >= MIN_SPLITTABLE:
            cut = rng.randrange(CUT_MARGIN, current.width - CUT_MARGIN)
            left = Room.from_bounds(next(ids), current.x0, current.z0, cut + 1, current.depth, height)
            right = Room.from_bounds(next(ids), current.x0 + cut, current.z0, current.width - cut, current.depth, height)
            unfinished.extend((left, right))
            if metrics is not None:
                metrics["splits"] += 1
        # too narrow to split along x: depth still gets its chance before the room is accepted
        elif current.depth > max_room_size and current.depth >= MIN_SPLITTABLE:
            cut = rng.randrange(CUT_MARGIN, current.depth - CUT_MARGIN)
            lower = Room.from_bounds(next(ids), current.x0, current.z0, current.width, cut + 1, height)
            upper = Room.from_bounds(next(ids), current.x0, current.z0 + cut, current.width, current.depth - cut, height)
            unfinished.extend((lower, upper))
            if metrics is not None:
                metrics["splits"] += 1
        else:
            if current.width > max_room_size or current.depth > max_room_size:
                _log.debug(event="oversized_room_accepted", room=current.id, width=current.width, depth=current.depth)
                if metrics is not None:
                    metrics["oversized_rooms"] += 1
            rooms.append(current)
        steps += 1
        if on_step:
            on_step("partition", steps)
    return rooms


__all__ = ["Room", "partition_space", "MIN_SPLITTABLE", "CUT_MARGIN"]
