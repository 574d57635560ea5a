"""Public dungeon package interface."""

from .config import POLICY_BRIDGE, POLICY_REMOVE, DungeonConfig  # noqa: F401
from .doors import Door, DoorAxis  # noqa: F401
from .errors import DisconnectedDungeonError, GenerationError, InvalidParametersError  # noqa: F401
from .events import GENERATION_COMPLETE, GenerationEvents  # noqa: F401
from .marching import DEFAULT_WALL_TABLE, WallPiece, WallPlacement  # noqa: F401
from .pipeline import Dungeon  # noqa: F401
from .rooms import Room  # noqa: F401
from .tiles import DOOR, EMPTY, FLOOR, WALL, TileGrid  # noqa: F401

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "Room",
    "Door",
    "DoorAxis",
    "TileGrid",
    "WallPiece",
    "WallPlacement",
    "DEFAULT_WALL_TABLE",
    "GenerationEvents",
    "GENERATION_COMPLETE",
    "GenerationError",
    "InvalidParametersError",
    "DisconnectedDungeonError",
    "POLICY_BRIDGE",
    "POLICY_REMOVE",
    "EMPTY",
    "WALL",
    "DOOR",
    "FLOOR",
]
