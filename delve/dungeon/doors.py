"""Door placement between rooms that share a wall segment.

Every unordered room pair is tested. Rooms that share a wall intersect in a
strip one cell thick; the door is a run of ``door_width`` cells inside that
strip, never touching its two end cells (those are wall corners that may
belong to a third room). A coverage test then confirms the door center and
both points just past its ends lie on exactly two room footprints.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .rng import SeededRandom
from .rooms import Room

COVER_EPSILON = 0.1
OFFSET_MIN_FACTOR = 2.5
COVER_LIMIT = 2

StepCallback = Callable[[str, int], None]


class DoorAxis(Enum):
    ALONG_X = "x"
    ALONG_Z = "z"


def pair_key(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class Door:
    id: Tuple[int, int]
    center: Tuple[float, float]
    size: Tuple[int, int]
    axis: DoorAxis

    @property
    def width(self) -> int:
        """Cells along the slide axis."""
        return self.size[0] if self.axis is DoorAxis.ALONG_X else self.size[1]

    def other(self, room_id: int) -> int:
        a, b = self.id
        if room_id == a:
            return b
        if room_id == b:
            return a
        raise KeyError(f"door {self.id} does not touch room {room_id}")

    def touches(self, room_id: int) -> bool:
        return room_id in self.id

    def cells(self) -> List[Tuple[int, int]]:
        cx, cz = self.center
        n = self.width
        if self.axis is DoorAxis.ALONG_X:
            z = int(round(cz))
            start = int(round(cx - (n - 1) / 2))
            return [(start + i, z) for i in range(n)]
        x = int(round(cx))
        start = int(round(cz - (n - 1) / 2))
        return [(x, start + i) for i in range(n)]

    def probe_points(self, eps: float = COVER_EPSILON) -> List[Tuple[float, float]]:
        """Center plus the two points just beyond each end along the slide axis."""
        cx, cz = self.center
        reach = self.width / 2 + eps
        if self.axis is DoorAxis.ALONG_X:
            return [(cx, cz), (cx - reach, cz), (cx + reach, cz)]
        return [(cx, cz), (cx, cz - reach), (cx, cz + reach)]

    def to_dict(self):
        return {
            "id": list(self.id),
            "center": list(self.center),
            "size": list(self.size),
            "axis": self.axis.value,
        }


def count_cover_at(rooms: Sequence[Room], point: Tuple[float, float], limit: int = COVER_LIMIT) -> int:
    """Number of room footprints containing ``point``; stops counting past ``limit``."""
    x, z = point
    count = 0
    for room in rooms:
        if room.contains_point(x, z):
            count += 1
            if count > limit:
                break
    return count


def door_is_valid(rooms: Sequence[Room], door: Door) -> bool:
    return all(count_cover_at(rooms, p) == 2 for p in door.probe_points())


def intersection(a: Room, b: Room) -> Optional[Tuple[int, int, int, int]]:
    """Shared cell bounds ``(x0, x1, z0, z1)`` of two rooms or None."""
    ix0, ix1 = max(a.x0, b.x0), min(a.x1, b.x1)
    iz0, iz1 = max(a.z0, b.z0), min(a.z1, b.z1)
    if ix0 > ix1 or iz0 > iz1:
        return None
    return ix0, ix1, iz0, iz1


def _build(a: Room, b: Room, start: int, door_width: int, wall_coord: int, wall_extent: int, use_x_wall: bool) -> Door:
    slide_center = start + (door_width - 1) / 2
    if use_x_wall:
        return Door(pair_key(a.id, b.id), (float(wall_coord), slide_center), (wall_extent, door_width), DoorAxis.ALONG_Z)
    return Door(pair_key(a.id, b.id), (slide_center, float(wall_coord)), (door_width, wall_extent), DoorAxis.ALONG_X)


def place_door(
    a: Room,
    b: Room,
    rooms: Sequence[Room],
    door_width: int,
    rng: SeededRandom,
    metrics: Optional[dict] = None,
) -> Optional[Door]:
    shared = intersection(a, b)
    if shared is None:
        return None
    ix0, ix1, iz0, iz1 = shared
    overlap_x = ix1 - ix0 + 1
    overlap_z = iz1 - iz0 + 1
    use_x_wall = overlap_x < overlap_z
    if use_x_wall:
        wall_coord = int(round((ix0 + ix1) / 2))
        wall_extent, lo, hi = overlap_x, iz0, iz1
    else:
        wall_coord = int(round((iz0 + iz1) / 2))
        wall_extent, lo, hi = overlap_z, ix0, ix1
    first, last = lo + 1, hi - door_width
    if last < first:
        return None

    if (hi - lo + 1) >= OFFSET_MIN_FACTOR * door_width:
        near_low = rng.chance(0.5)
        step = rng.randint(0, (last - first) // 2)
        start = first + step if near_low else last - step
        door = _build(a, b, start, door_width, wall_coord, wall_extent, use_x_wall)
        if door_is_valid(rooms, door):
            if metrics is not None:
                metrics["doors_offset"] += 1
            return door

    door = _build(a, b, (first + last) // 2, door_width, wall_coord, wall_extent, use_x_wall)
    if door_is_valid(rooms, door):
        if metrics is not None:
            metrics["doors_centered"] += 1
        return door
    return None


def place_doors(
    rooms: Sequence[Room],
    door_width: int,
    rng: SeededRandom,
    *,
    on_step: Optional[StepCallback] = None,
    metrics: Optional[dict] = None,
) -> List[Door]:
    """Try a door for every unordered pair in room-list order."""
    doors: List[Door] = []
    steps = 0
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            door = place_door(a, b, rooms, door_width, rng, metrics)
            if door is not None:
                doors.append(door)
            elif metrics is not None and intersection(a, b) is not None:
                metrics["door_misses"] += 1
            steps += 1
            if on_step:
                on_step("doors", steps)
    if metrics is not None:
        metrics["door_pairs_checked"] += steps
        metrics["doors_placed"] += len(doors)
    return doors


__all__ = [
    "Door",
    "DoorAxis",
    "count_cover_at",
    "door_is_valid",
    "intersection",
    "pair_key",
    "place_door",
    "place_doors",
    "COVER_EPSILON",
]
