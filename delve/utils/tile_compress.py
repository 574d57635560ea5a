"""Compact encoding of grid cell coordinate sets.

Format strategy:
  - Input: iterable of ``(x, z)`` integer cells (unordered)
  - Cells are sorted, x and z delta-encoded separately, prefixed with 'D:'.
  - If the compressed payload is not shorter than the raw form, the raw
    ``x,z;x,z`` string is returned instead.

Compressed grammar (simple):
  D:x0,z0|dx1,dz1|dx2,dz2|...
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

Cell = Tuple[int, int]


def raw_cells(cells: Iterable[Cell]) -> str:
    return ";".join(f"{x},{z}" for x, z in sorted(cells))


def compress_cells(cells: Iterable[Cell]) -> str:
    """Return the shorter of the delta (``D:``) and raw encodings of ``cells``."""
    coords = sorted(cells)
    if not coords:
        return ""
    raw = raw_cells(coords)
    pieces = []
    prev_x, prev_z = None, None
    for x, z in coords:
        if prev_x is None:
            pieces.append(f"{x},{z}")
        else:
            pieces.append(f"{x - prev_x},{z - prev_z}")
        prev_x, prev_z = x, z
    compressed = "D:" + "|".join(pieces)
    return compressed if len(compressed) < len(raw) else raw


def decompress_cells(data: str) -> List[Cell]:
    """Inverse of :func:`compress_cells`; accepts either encoding.

    Raises ValueError on malformed input.
    """
    if not data:
        return []
    if not data.startswith("D:"):
        out = []
        for part in data.split(";"):
            if not part:
                continue
            x_s, z_s = part.split(",")
            out.append((int(x_s), int(z_s)))
        return out
    coords = []
    prev_x, prev_z = None, None
    for token in data[2:].split("|"):
        dx_s, dz_s = token.split(",")
        dx, dz = int(dx_s), int(dz_s)
        if prev_x is None:
            x, z = dx, dz
        else:
            x, z = prev_x + dx, prev_z + dz
        coords.append((x, z))
        prev_x, prev_z = x, z
    return coords


__all__ = ["compress_cells", "decompress_cells", "raw_cells"]
