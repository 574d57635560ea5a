"""Room pruning: drop the smallest slivers before connectivity is resolved."""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from .doors import Door
from .rooms import Room

PRUNE_FRACTION = 0.10


class PruneResult(NamedTuple):
    rooms: List[Room]
    doors: List[Door]
    removed_ids: List[int]


def prune_smallest_rooms(
    rooms: Sequence[Room],
    doors: Sequence[Door],
    fraction: float = PRUNE_FRACTION,
    metrics: Optional[dict] = None,
) -> PruneResult:
    """Remove ``floor(fraction * len(rooms))`` smallest rooms and their doors.

    Ties on area are broken by room-list order; survivors keep their order.
    """
    count = int(len(rooms) * fraction)
    if count <= 0:
        return PruneResult(list(rooms), list(doors), [])
    by_area = sorted(rooms, key=lambda r: r.area)
    removed = {r.id for r in by_area[:count]}
    kept_rooms = [r for r in rooms if r.id not in removed]
    kept_doors = [d for d in doors if d.id[0] not in removed and d.id[1] not in removed]
    if metrics is not None:
        metrics["rooms_pruned"] += len(removed)
        metrics["doors_pruned"] += len(doors) - len(kept_doors)
    return PruneResult(kept_rooms, kept_doors, sorted(removed))


__all__ = ["PruneResult", "prune_smallest_rooms", "PRUNE_FRACTION"]
