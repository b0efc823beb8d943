from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Per-tile type assignment, e.g. ``rock`` or ``dirt_grass1``.

    The type never changes after the tile entity is created; the map replaces
    a tile by removing it and adding a new one.
    """
    type_name: str
