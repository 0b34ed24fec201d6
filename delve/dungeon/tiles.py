# Terrain, door, stair and layout constants centralized for modular imports
EMPTY = " "
BLOCKED = "X"
ROOM = "R"
CORRIDOR = "T"

OPEN_TERRAIN = frozenset({ROOM, CORRIDOR})

# Door kinds (mutually exclusive on a doorspace cell)
ARCH = "arch"
DOOR = "open"
LOCKED = "lock"
TRAPPED = "trap"
SECRET = "secret"
PORTC = "portc"

DOOR_KINDS = (ARCH, DOOR, LOCKED, TRAPPED, SECRET, PORTC)

DOOR_TYPES = {
    ARCH: "Archway",
    DOOR: "Unlocked Door",
    LOCKED: "Locked Door",
    TRAPPED: "Trapped Door",
    SECRET: "Secret Door",
    PORTC: "Portcullis",
}

# Grid label byte stamped with each door kind (archways carry none)
DOOR_LABELS = {
    DOOR: "o",
    LOCKED: "x",
    TRAPPED: "t",
    SECRET: "s",
    PORTC: "#",
}

# Stair kinds
STAIR_DOWN = "down"
STAIR_UP = "up"

STAIR_LABELS = {STAIR_DOWN: "d", STAIR_UP: "u"}

# Option enumerations
LAYOUT_NONE = "None"
LAYOUT_BOX = "Box"
LAYOUT_CROSS = "Cross"
LAYOUT_ROUND = "Round"
DUNGEON_LAYOUTS = (LAYOUT_NONE, LAYOUT_BOX, LAYOUT_CROSS, LAYOUT_ROUND)

ROOM_PACKED = "Packed"
ROOM_SCATTERED = "Scattered"
ROOM_LAYOUTS = (ROOM_PACKED, ROOM_SCATTERED)

# Corridor layout -> percent chance a tunnel keeps its previous heading
CORRIDOR_LAYOUTS = {
    "Labyrinth": 0,
    "Bent": 50,
    "Straight": 100,
}

# (d_row, d_col) per cardinal direction; iteration order matters for determinism
DIRECTIONS = {
    "north": (-1, 0),
    "south": (1, 0),
    "west": (0, -1),
    "east": (0, 1),
}

OPPOSITE = {
    "north": "south",
    "south": "north",
    "west": "east",
    "east": "west",
}

MAX_ROOMS = 999

__all__ = [
    "EMPTY",
    "BLOCKED",
    "ROOM",
    "CORRIDOR",
    "OPEN_TERRAIN",
    "ARCH",
    "DOOR",
    "LOCKED",
    "TRAPPED",
    "SECRET",
    "PORTC",
    "DOOR_KINDS",
    "DOOR_TYPES",
    "DOOR_LABELS",
    "STAIR_DOWN",
    "STAIR_UP",
    "STAIR_LABELS",
    "DUNGEON_LAYOUTS",
    "ROOM_LAYOUTS",
    "CORRIDOR_LAYOUTS",
    "DIRECTIONS",
    "OPPOSITE",
    "MAX_ROOMS",
]
