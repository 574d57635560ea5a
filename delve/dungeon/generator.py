"""Structural generation phases: partition, doors, pruning, connectivity."""
from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional

from .config import DungeonConfig
from .connectivity import Connection, ConnectivityResult, resolve_connectivity
from .doors import Door, place_doors
from .pruning import PruneResult, prune_smallest_rooms
from .rng import SeededRandom
from .rooms import Room, partition_space

StepCallback = Callable[[str, int], None]


class StructuralOutputs(NamedTuple):
    leaf_rooms: List[Room]
    placed_doors: List[Door]
    pruned_ids: List[int]
    rooms: List[Room]
    doors: List[Door]
    connections: List[Connection]
    fully_connected: bool
    stranded: List[int]


class Generator:
    """Runs phases 1-5 against one SeededRandom, in a fixed draw order."""

    def __init__(
        self,
        config: DungeonConfig,
        rng: SeededRandom,
        on_step: Optional[StepCallback] = None,
        metrics: Optional[dict] = None,
    ):
        self.config = config
        self.rng = rng
        self.on_step = on_step
        self.metrics = metrics

    def partition(self) -> List[Room]:
        c = self.config
        rooms = partition_space(
            c.width, c.depth, c.height, c.max_room_size, self.rng, on_step=self.on_step, metrics=self.metrics
        )
        if self.metrics is not None:
            self.metrics["leaf_rooms"] = len(rooms)
        return rooms

    def place_doors(self, rooms: List[Room]) -> List[Door]:
        return place_doors(rooms, self.config.door_width, self.rng, on_step=self.on_step, metrics=self.metrics)

    def prune(self, rooms: List[Room], doors: List[Door]) -> PruneResult:
        return prune_smallest_rooms(rooms, doors, metrics=self.metrics)

    def connect(self, rooms: List[Room], doors: List[Door]) -> ConnectivityResult:
        c = self.config
        return resolve_connectivity(
            rooms,
            doors,
            self.rng,
            c.branch_chance,
            policy=c.unreached_policy,
            strict=c.strict_connectivity,
            seed=self.rng.seed,
            on_step=self.on_step,
            metrics=self.metrics,
        )

    def run(self, phase=None) -> StructuralOutputs:
        """Run every structural phase; ``phase(label, fn, *args)`` wraps each call."""
        if phase is None:
            def phase(label, fn, *a, **k):
                return fn(*a, **k)
        leaves = phase("partition", self.partition)
        placed = phase("doors", self.place_doors, leaves)
        pruned = phase("pruning", self.prune, leaves, placed)
        result = phase("connectivity", self.connect, pruned.rooms, pruned.doors)
        return StructuralOutputs(
            leaf_rooms=leaves,
            placed_doors=placed,
            pruned_ids=pruned.removed_ids,
            rooms=result.rooms,
            doors=result.doors,
            connections=result.connections,
            fully_connected=result.fully_connected,
            stranded=result.stranded,
        )


__all__ = ["Generator", "StructuralOutputs"]
