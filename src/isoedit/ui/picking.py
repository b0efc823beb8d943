from typing import Optional

from isoedit.components.iso_coordinate import Direction, IsoCoordinate
from isoedit.constants import (
    ISO_ELEVATION_STEP,
    ISO_HALF_HEIGHT,
    ISO_HALF_WIDTH,
    TILE_HIT_POLYGON,
    TILE_WIDTH,
)


def point_in_tile(x: float, y: float) -> bool:
    """Whether (x, y) lies inside the hexagonal outline of a tile sprite."""
    points = list(zip(TILE_HIT_POLYGON[::2], TILE_HIT_POLYGON[1::2]))
    inside = False
    j = len(points) - 1
    for i, (xi, yi) in enumerate(points):
        xj, yj = points[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def side_from_local_coordinates(x: float, y: float) -> Direction:
    """Return which visible face of a tile sprite contains the local point (x, y).

    The top face is bounded below by the edges (0, 7.5)-(16, 15.5) and
    (16, 15.5)-(32, 7.5); under them the left half is the south face and the
    right half the east face. ``y`` grows downwards as in sprite space.
    """
    half = TILE_WIDTH / 2
    if x < half:
        if 7.5 + x / 2 >= y:
            return Direction.UP
        return Direction.SOUTH
    if 23.5 - x / 2 >= y:
        return Direction.UP
    return Direction.EAST


def pick_side(x: float, y: float) -> Optional[Direction]:
    """Like ``side_from_local_coordinates`` but None outside the tile outline."""
    if not point_in_tile(x, y):
        return None
    return side_from_local_coordinates(x, y)


def placement_target(coordinate: IsoCoordinate, side: Direction) -> IsoCoordinate:
    """Cell that a new tile lands in when ``side`` of the tile at ``coordinate`` is clicked."""
    return coordinate.move(side)


def iso_to_screen(coordinate: IsoCoordinate):
    """Top-left sprite position of a tile, relative to the map origin."""
    x = (coordinate.e - coordinate.s) * ISO_HALF_WIDTH
    y = (coordinate.e + coordinate.s) * ISO_HALF_HEIGHT - coordinate.u * ISO_ELEVATION_STEP
    return x, y
