"""Public dungeon package interface.

Generation entry point, result records and the constants callers need to read
a generated grid.
"""

from .cells import Cell  # noqa: F401
from .config import DungeonOptions, OptionsError, option_choices  # noqa: F401
from .doors import Door  # noqa: F401
from .dungeon import Dungeon, MultiFloorDungeon  # noqa: F401
from .pipeline import create_dungeon, generate_floor  # noqa: F401
from .rng import SeededRandom, shuffle  # noqa: F401
from .rooms import Room  # noqa: F401
from .stairs import Stair  # noqa: F401
from .tiles import (  # noqa: F401
    ARCH,
    BLOCKED,
    CORRIDOR,
    DOOR,
    EMPTY,
    LOCKED,
    PORTC,
    ROOM,
    SECRET,
    STAIR_DOWN,
    STAIR_UP,
    TRAPPED,
)

__all__ = [
    "create_dungeon",
    "generate_floor",
    "Dungeon",
    "MultiFloorDungeon",
    "DungeonOptions",
    "OptionsError",
    "option_choices",
    "Cell",
    "Room",
    "Door",
    "Stair",
    "SeededRandom",
    "shuffle",
    "EMPTY",
    "BLOCKED",
    "ROOM",
    "CORRIDOR",
    "ARCH",
    "DOOR",
    "LOCKED",
    "TRAPPED",
    "SECRET",
    "PORTC",
    "STAIR_DOWN",
    "STAIR_UP",
]
