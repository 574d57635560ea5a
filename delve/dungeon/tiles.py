# Tile constants centralized for modular imports
EMPTY = 0
WALL = 1
DOOR = 2
FLOOR = 3

WALKABLE = frozenset({FLOOR, DOOR})

GLYPHS = {EMPTY: " ", WALL: "#", DOOR: ".", FLOOR: "."}
NAMES = {EMPTY: "empty", WALL: "wall", DOOR: "door", FLOOR: "floor"}


class TileGrid:
    """Column-major grid of cell states, indexed ``cells[x][z]``."""

    def __init__(self, width: int, height: int, fill: int = EMPTY):
        self.width = width
        self.height = height
        self.cells = [[fill for _ in range(height)] for _ in range(width)]

    @classmethod
    def for_bounds(cls, width: int, depth: int) -> "TileGrid":
        # One extra column and row past the bounds; they stay empty
        return cls(width + 1, depth + 1)

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.height

    def get(self, x: int, z: int) -> int:
        return self.cells[x][z]

    def set(self, x: int, z: int, state: int) -> None:
        self.cells[x][z] = state

    def is_wall(self, x: int, z: int) -> bool:
        return self.in_bounds(x, z) and self.cells[x][z] == WALL

    def is_walkable(self, x: int, z: int) -> bool:
        return self.in_bounds(x, z) and self.cells[x][z] in WALKABLE

    def iter_cells(self, state=None):
        """Yield ``(x, z, state)`` row by row (z outer, x inner)."""
        for z in range(self.height):
            for x in range(self.width):
                s = self.cells[x][z]
                if state is None or s == state:
                    yield x, z, s

    def count(self, state: int) -> int:
        return sum(col.count(state) for col in self.cells)

    def walkable_cells(self):
        return {(x, z) for x, z, s in self.iter_cells() if s in WALKABLE}

    def rows(self):
        """Rows of states, top row (highest z) first."""
        return [[self.cells[x][z] for x in range(self.width)] for z in range(self.height - 1, -1, -1)]

    def dump(self) -> str:
        return "\n".join("".join(GLYPHS[s] for s in row) for row in self.rows())

    def __eq__(self, other):
        if not isinstance(other, TileGrid):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.cells == other.cells

    def __repr__(self) -> str:
        return f"TileGrid({self.width}x{self.height})"


__all__ = ["EMPTY", "WALL", "DOOR", "FLOOR", "WALKABLE", "GLYPHS", "NAMES", "TileGrid"]
