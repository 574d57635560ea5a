"""Connectivity resolution over the room/door graph.

Traversal happens in waves. A wave is a breadth-first walk from a root
room: every dequeued room accepts its first door (in shuffled order) that
leads somewhere new, and each remaining door is accepted with probability
``branch_chance``. Rooms left over after the first wave are either dropped
(``remove`` policy) or bridged in through an existing door and walked in a
fresh wave (``bridge`` policy) until nothing is left.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from ..logging_utils import get_logger
from .config import POLICY_BRIDGE, POLICY_REMOVE
from .doors import Door
from .errors import DisconnectedDungeonError
from .rng import SeededRandom
from .rooms import Room

_log = get_logger("dungeon.connectivity")

Connection = Tuple[int, int]
StepCallback = Callable[[str, int], None]


class ConnectivityResult(NamedTuple):
    rooms: List[Room]
    doors: List[Door]
    connections: List[Connection]
    fully_connected: bool
    stranded: List[int]
    waves: int


def build_adjacency(rooms: Sequence[Room], doors: Sequence[Door]) -> Dict[int, List[Door]]:
    """Room id -> incident doors, in door-list order. Every room gets a key."""
    adjacency: Dict[int, List[Door]] = {room.id: [] for room in rooms}
    for door in doors:
        a, b = door.id
        if a in adjacency and b in adjacency:
            adjacency[a].append(door)
            adjacency[b].append(door)
    return adjacency


def is_connected(room_ids: Sequence[int], connections: Sequence[Connection]) -> bool:
    """True when every room id is reachable from the first one via connections."""
    ids = list(room_ids)
    if len(ids) <= 1:
        return True
    links: Dict[int, List[int]] = {rid: [] for rid in ids}
    for a, b in connections:
        if a in links and b in links:
            links[a].append(b)
            links[b].append(a)
    seen = {ids[0]}
    queue = deque([ids[0]])
    while queue:
        cur = queue.popleft()
        for nxt in links[cur]:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return len(seen) == len(ids)


class _Walker:
    def __init__(self, adjacency, rng, branch_chance, on_step, metrics):
        self.adjacency = adjacency
        self.rng = rng
        self.branch_chance = branch_chance
        self.on_step = on_step
        self.metrics = metrics
        self.visited: Set[int] = set()
        self.accepted: Set[Connection] = set()
        self.steps = 0
        self.waves = 0

    def accept(self, door: Door) -> None:
        self.accepted.add(door.id)

    def wave(self, root: int) -> None:
        self.waves += 1
        self.visited.add(root)
        queue = deque([root])
        while queue:
            current = queue.popleft()
            guaranteed = False
            for door in self.rng.shuffled(self.adjacency[current]):
                if door.id in self.accepted:
                    continue
                neighbor = door.other(current)
                if not guaranteed and neighbor not in self.visited:
                    guaranteed = True
                elif self.rng.chance(self.branch_chance):
                    if self.metrics is not None:
                        self.metrics["branch_connections"] += 1
                else:
                    continue
                self.accept(door)
                if neighbor not in self.visited:
                    self.visited.add(neighbor)
                    queue.append(neighbor)
            self.steps += 1
            if self.on_step:
                self.on_step("connectivity", self.steps)


def _find_bridge(doors: Sequence[Door], visited: Set[int], pending: Set[int]) -> Optional[Tuple[Door, int]]:
    for door in doors:
        a, b = door.id
        if a in visited and b in pending:
            return door, b
        if b in visited and a in pending:
            return door, a
    return None


def resolve_connectivity(
    rooms: Sequence[Room],
    doors: Sequence[Door],
    rng: SeededRandom,
    branch_chance: float = 0.25,
    *,
    policy: str = POLICY_BRIDGE,
    strict: bool = False,
    seed: Optional[int] = None,
    on_step: Optional[StepCallback] = None,
    metrics: Optional[dict] = None,
) -> ConnectivityResult:
    """Select the doors that make up the final connected layout.

    Raises DisconnectedDungeonError in strict mode when the bridge policy
    cannot reach every room.
    """
    rooms = list(rooms)
    if not rooms:
        return ConnectivityResult([], [], [], True, [], 0)

    adjacency = build_adjacency(rooms, doors)
    walker = _Walker(adjacency, rng, branch_chance, on_step, metrics)
    walker.wave(rng.choice(rooms).id)

    stranded: List[int] = []
    if policy == POLICY_REMOVE:
        dropped = [r.id for r in rooms if r.id not in walker.visited]
        if dropped:
            _log.info(event="rooms_dropped_unreached", count=len(dropped))
            if metrics is not None:
                metrics["rooms_dropped"] += len(dropped)
        rooms = [r for r in rooms if r.id in walker.visited]
    else:
        while len(walker.visited) < len(rooms):
            pending = {r.id for r in rooms if r.id not in walker.visited}
            found = _find_bridge(doors, walker.visited, pending)
            if found is not None:
                door, root = found
                walker.accept(door)
                if metrics is not None:
                    metrics["bridges"] += 1
            else:
                root = next(r.id for r in rooms if r.id in pending)
                stranded.extend(sorted(pending))
                _log.warn(event="bridge_missing", seed=seed, unreached=len(pending), root=root)
            walker.wave(root)

    final_doors = [d for d in doors if d.id in walker.accepted]
    connections = [d.id for d in final_doors]
    stranded = sorted(set(stranded))
    fully_connected = not stranded
    if metrics is not None:
        metrics["connectivity_waves"] += walker.waves
        metrics["connections"] += len(connections)
        metrics["stranded_rooms"] += len(stranded)
    if stranded and strict:
        raise DisconnectedDungeonError(stranded, seed=seed)
    return ConnectivityResult(rooms, final_doors, connections, fully_connected, stranded, walker.waves)


__all__ = [
    "ConnectivityResult",
    "Connection",
    "build_adjacency",
    "is_connected",
    "resolve_connectivity",
]
