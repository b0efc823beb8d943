# Tile sprite geometry. A tile is 32x24 pixels split into 12 fragments of 8x8.
FRAGMENT_SIZE = 8
FRAGMENT_COLUMNS = 4
FRAGMENT_ROWS = 3
TILE_WIDTH = FRAGMENT_SIZE * FRAGMENT_COLUMNS
TILE_HEIGHT = FRAGMENT_SIZE * FRAGMENT_ROWS

# Fragment slots are labelled "<row><column>", rows 1-3 and columns 1-4.
FRAGMENT_SLOTS = tuple(
    f"{row}{col}"
    for row in range(1, FRAGMENT_ROWS + 1)
    for col in range(1, FRAGMENT_COLUMNS + 1)
)
# Pixel offset of each slot inside the tile sprite.
FRAGMENT_OFFSETS = {
    slot: ((int(slot[1]) - 1) * FRAGMENT_SIZE, (int(slot[0]) - 1) * FRAGMENT_SIZE)
    for slot in FRAGMENT_SLOTS
}
# Corner slots of the top face; their "up" constraint may be dropped when nothing matches.
UPPER_CORNER_SLOTS = frozenset({"11", "14", "21", "24"})

# Texture identifiers
TEXTURE_SUFFIX = ".png"
FAMILY_SEPARATOR = "_"

# Specificity weights per constraint kind (literal > family > presence > don't care).
# Two presence constraints outweigh a single family constraint.
WEIGHT_ANY = 0
WEIGHT_PRESENCE = 2
WEIGHT_FAMILY = 3
WEIGHT_EXACT = 6
# Subtracted from a rule's score when it was found through the base family.
FAMILY_FALLBACK_PENALTY = 1

# Second-order neighbours refreshed after every edit, on top of the six unit neighbours
# and whatever the registry's compound constraints require.
LEGACY_CASCADE_PATHS = (
    ("up", "up"),
    ("up", "north"),
    ("up", "west"),
    ("down", "down"),
    ("down", "south"),
    ("down", "east"),
)

# Paint order key is s + e + u / PAINT_VERTICAL_DIVISOR.
PAINT_VERTICAL_DIVISOR = 3

# Isometric projection of one grid step, in sprite pixels.
ISO_HALF_WIDTH = 16
ISO_HALF_HEIGHT = 8
ISO_ELEVATION_STEP = 8

# Hexagonal hit area of a tile sprite (x, y pairs).
TILE_HIT_POLYGON = (0, 7, 15, 0, 17, 0, 32, 7, 32, 16, 17, 23, 15, 23, 0, 16)

# Palette offered by the editor control bar.
DEFAULT_TILE_TYPES = (
    "wall",
    "rock",
    "rock_moss",
    "dirt",
    "dirt_grass1",
    "dirt_grass2",
    "dirt_stones",
    "dirt_pile",
    "dirt_bush",
)
DEFAULT_OBJECT_TYPES = (
    "flower",
    "small_pine",
    "large_pine",
    "large-rock",
)
# Types covered by the generated top-face atlas.
DEFAULT_TOP_FACE_TYPES = (
    "dirt",
    "dirt_grass1",
    "dirt_grass2",
    "dirt_stones",
    "dirt_pile",
    "rock",
    "rock_moss",
)
