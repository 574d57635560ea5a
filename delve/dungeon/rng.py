"""Seeded random source threaded through every generation stage.

A run consumes one ``SeededRandom`` in a fixed order: partition cuts, then
door offsets, then the connectivity root, shuffles and branch rolls.
Reproducing a layout therefore only requires the seed and the parameters.
"""
from __future__ import annotations

import hashlib
import random
from typing import List, MutableSequence, Optional, Sequence, TypeVar

T = TypeVar("T")

SEED_MAX = 2**31 - 1
SEED_MODULUS = 9223372036854775807


def generate_seed() -> int:
    return random.randint(1, SEED_MAX)


def coerce_seed(value) -> int:
    """Convert a user supplied seed (int, str or None) into an int.

    Digit strings are parsed, any other non-empty string is hashed so the same
    text always yields the same dungeon. ``None``/blank produce a fresh seed.
    """
    if value is None or isinstance(value, bool):
        return generate_seed()
    if isinstance(value, int):
        return value % SEED_MODULUS
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return generate_seed()
        if s.isdigit():
            return int(s) % SEED_MODULUS
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MODULUS
    raise TypeError(f"unsupported seed type: {type(value).__name__}")


class SeededRandom:
    def __init__(self, seed: Optional[int] = None):
        # 0 is a valid deterministic seed; None => generated
        self.seed = generate_seed() if seed is None else seed
        self._rng = random.Random(self.seed)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self._rng.random()

    def randrange(self, start: int, stop: int) -> int:
        self.draws += 1
        return self._rng.randrange(start, stop)

    def randint(self, a: int, b: int) -> int:
        self.draws += 1
        return self._rng.randint(a, b)

    def chance(self, probability: float) -> bool:
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        self.draws += 1
        return self._rng.choice(seq)

    def shuffle(self, items: MutableSequence[T]) -> None:
        # Fisher-Yates, one draw per swap so the draw count stays meaningful
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def shuffled(self, items: Sequence[T]) -> List[T]:
        out = list(items)
        self.shuffle(out)
        return out

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed}, draws={self.draws})"


__all__ = ["SeededRandom", "coerce_seed", "generate_seed", "SEED_MAX"]
