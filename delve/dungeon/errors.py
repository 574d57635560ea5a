"""Error taxonomy for dungeon generation.

Only malformed parameters stop a run outright. Everything else (door misses,
oversized leaves, bad flood fill starts) is reported and recovered from
locally; a stranded component becomes an error only in strict mode.
"""

from __future__ import annotations

from typing import Iterable


class GenerationError(Exception):
    """Base class for generation failures."""


class InvalidParametersError(GenerationError, ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class DisconnectedDungeonError(GenerationError):
    def __init__(self, stranded: Iterable[int], seed: int | None = None):
        self.stranded = sorted(stranded)
        self.seed = seed
        super().__init__(
            f"{len(self.stranded)} room(s) unreachable after bridging (seed={seed}): {self.stranded}"
        )


__all__ = ["GenerationError", "InvalidParametersError", "DisconnectedDungeonError"]
