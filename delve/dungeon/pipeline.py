"""Pipeline orchestration for dungeon generation.

``Dungeon`` is the public entry point: it validates its configuration, runs
every stage in order against a single seeded random source and keeps the
outputs a renderer or navigation builder needs.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, Mapping, Optional

from ..logging_utils import get_logger
from .config import DungeonConfig
from .events import GENERATION_COMPLETE, STAGE_CONNECTIVITY, STAGE_FLOOD_FILL, GenerationEvents
from .floodfill import flood_fill
from .generator import Generator
from .marching import DEFAULT_WALL_TABLE, WallPiece, load_wall_table, march_squares
from .metrics import init_metrics
from .rasterizer import rasterize
from .rng import SeededRandom, coerce_seed

_log = get_logger("dungeon")

ProgressCallback = Callable[[str, int], None]


class Dungeon:
    def __init__(
        self,
        config: Optional[DungeonConfig] = None,
        *,
        seed=None,
        size=None,
        progress: Optional[ProgressCallback] = None,
        events: Optional[GenerationEvents] = None,
        wall_table: Optional[Mapping[int, WallPiece]] = None,
        **overrides,
    ):
        cfg = config if config is not None else DungeonConfig()
        if size is not None:
            overrides["width"], overrides["depth"], overrides["height"] = size
        if seed is not None:
            overrides["seed"] = seed
        cfg = cfg.replace(**overrides)
        cfg.validate()
        # 0 is a valid deterministic seed; None => generated
        self.seed = coerce_seed(cfg.seed)
        self.config = cfg.replace(seed=self.seed)
        self.progress = progress
        self.events = events if events is not None else GenerationEvents()
        if wall_table is not None:
            self.wall_table = dict(wall_table)
        elif cfg.wall_table:
            self.wall_table = load_wall_table(cfg.wall_table)
        else:
            self.wall_table = DEFAULT_WALL_TABLE
        self.enable_metrics = cfg.enable_metrics
        self.metrics: Dict = init_metrics() if self.enable_metrics else {}
        self._run_pipeline()

    @property
    def size(self):
        return self.config.size

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def depth(self) -> int:
        return self.config.depth

    @property
    def height(self) -> int:
        return self.config.height

    def _run_pipeline(self):
        """Execute ordered generation phases with per-phase timing.

        ``phase_ms`` maps phase name to duration (ms) when metrics are enabled.
        """
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter()
                r = fn(*a, **k)
                phase_times[label] = int((time.perf_counter() - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)
        metrics = self.metrics if self.enable_metrics else None

        self.rng = SeededRandom(self.seed)
        gen = Generator(self.config, self.rng, on_step=self.progress, metrics=metrics)
        outputs = gen.run(phase=_phase)
        self.leaf_rooms = outputs.leaf_rooms
        self.placed_doors = outputs.placed_doors
        self.pruned_ids = outputs.pruned_ids
        self.rooms = outputs.rooms
        self.doors = outputs.doors
        self.connections = outputs.connections
        self.fully_connected = outputs.fully_connected
        self.stranded_rooms = outputs.stranded
        self.events.emit(GENERATION_COMPLETE, stage=STAGE_CONNECTIVITY)

        self.grid = _phase("rasterize", rasterize, self.width, self.depth, self.rooms, self.doors, metrics)
        self.walls, self.wall_skipped = _phase(
            "marching", march_squares, self.grid, self.wall_table, on_step=self.progress, metrics=metrics
        )
        self.flood = _phase("flood_fill", flood_fill, self.grid, on_step=self.progress)
        self.reachable = self.flood.visited
        unreached = len(self.grid.walkable_cells() - self.reachable)
        if unreached and self.flood.ok:
            _log.warn(event="unreached_cells", seed=self.seed, count=unreached)
        self.events.emit(GENERATION_COMPLETE, stage=STAGE_FLOOD_FILL)

        if self.enable_metrics:
            self.metrics["reachable_cells"] = len(self.reachable)
            self.metrics["unreached_cells"] = unreached
            self.metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
            self.metrics["phase_ms"] = phase_times
        _log.info(
            event="dungeon_generated",
            seed=self.seed,
            rooms=len(self.rooms),
            doors=len(self.doors),
            fully_connected=self.fully_connected,
            runtime_ms=self.metrics.get("runtime_ms"),
        )

    def dump_grid(self) -> str:
        return self.grid.dump()

    def to_dict(self, include_metrics: bool = False):
        data = {
            "seed": self.seed,
            "size": list(self.size),
            "rooms": [r.to_dict() for r in self.rooms],
            "doors": [d.to_dict() for d in self.doors],
            "connections": [list(c) for c in self.connections],
            "walls": [w.to_dict() for w in self.walls],
            "grid": self.grid.rows(),
            "reachable": sorted(self.reachable),
            "fully_connected": self.fully_connected,
            "stranded_rooms": list(self.stranded_rooms),
        }
        if include_metrics:
            data["metrics"] = self.metrics
        return data

    def __repr__(self) -> str:
        return f"Dungeon(seed={self.seed}, size={self.size}, rooms={len(self.rooms)}, doors={len(self.doors)})"


__all__ = ["Dungeon"]
