"""Marching squares over the tile grid to derive wall pieces.

Each 2x2 window anchored at ``(x, z)`` yields a 4-bit corner code::

    bit 3 (8): (x,   z+1)    bit 2 (4): (x+1, z+1)
    bit 0 (1): (x,   z)      bit 1 (2): (x+1, z)

Code 0 produces nothing; any other code is looked up in a wall table and
emitted as a WallPlacement. Codes missing from the table are skipped.
"""
from __future__ import annotations

import json
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .tiles import TileGrid

StepCallback = Callable[[str, int], None]


class WallPiece(NamedTuple):
    kind: str
    rotation: int


class WallPlacement(NamedTuple):
    position: Tuple[int, int]
    corner_code: int
    piece: WallPiece

    def to_dict(self):
        return {
            "position": list(self.position),
            "code": self.corner_code,
            "kind": self.piece.kind,
            "rotation": self.piece.rotation,
        }


DEFAULT_WALL_TABLE: Dict[int, WallPiece] = {
    1: WallPiece("outer_corner", 0),
    2: WallPiece("outer_corner", 90),
    4: WallPiece("outer_corner", 180),
    8: WallPiece("outer_corner", 270),
    3: WallPiece("straight", 0),
    6: WallPiece("straight", 90),
    12: WallPiece("straight", 180),
    9: WallPiece("straight", 270),
    14: WallPiece("inner_corner", 0),
    13: WallPiece("inner_corner", 90),
    11: WallPiece("inner_corner", 180),
    7: WallPiece("inner_corner", 270),
    5: WallPiece("saddle", 0),
    10: WallPiece("saddle", 90),
    15: WallPiece("solid", 0),
}


def corner_code(grid: TileGrid, x: int, z: int) -> int:
    code = 0
    if grid.is_wall(x, z + 1):
        code |= 8
    if grid.is_wall(x + 1, z + 1):
        code |= 4
    if grid.is_wall(x + 1, z):
        code |= 2
    if grid.is_wall(x, z):
        code |= 1
    return code


def march_squares(
    grid: TileGrid,
    table: Optional[Mapping[int, WallPiece]] = None,
    *,
    on_step: Optional[StepCallback] = None,
    metrics: Optional[dict] = None,
) -> Tuple[List[WallPlacement], int]:
    """Return ``(placements, skipped)`` for every nonzero window code."""
    table = DEFAULT_WALL_TABLE if table is None else table
    placements: List[WallPlacement] = []
    skipped = 0
    for x in range(grid.width):
        for z in range(grid.height):
            code = corner_code(grid, x, z)
            if code == 0:
                continue
            piece = table.get(code)
            if piece is None:
                skipped += 1
                continue
            placements.append(WallPlacement((x, z), code, piece))
        if on_step:
            on_step("marching", x + 1)
    if metrics is not None:
        metrics["wall_placements"] += len(placements)
        metrics["unmapped_codes"] += skipped
    return placements, skipped


def wall_table_from_mapping(raw: Mapping) -> Dict[int, WallPiece]:
    """Build a wall table from ``{"<code>": {"kind": str, "rotation": int}}``."""
    table: Dict[int, WallPiece] = {}
    for key, entry in raw.items():
        try:
            code = int(key)
        except (TypeError, ValueError):
            raise ValueError(f"wall table code must be an integer, got {key!r}") from None
        if not 1 <= code <= 15:
            raise ValueError(f"wall table code out of range 1..15: {code}")
        if not isinstance(entry, Mapping) or "kind" not in entry:
            raise ValueError(f"wall table entry for {code} needs a 'kind'")
        table[code] = WallPiece(str(entry["kind"]), int(entry.get("rotation", 0)))
    return table


def load_wall_table(path: str) -> Dict[int, WallPiece]:
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, Mapping):
        raise ValueError("wall table file must contain a JSON object")
    return wall_table_from_mapping(raw)


__all__ = [
    "WallPiece",
    "WallPlacement",
    "DEFAULT_WALL_TABLE",
    "corner_code",
    "march_squares",
    "wall_table_from_mapping",
    "load_wall_table",
]
