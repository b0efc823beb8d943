from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

_KEY_PART_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


class FormatError(ValueError):
    """Raised when a coordinate key is not three comma-separated integers."""


@dataclass(frozen=True, slots=True)
class IsoCoordinate:
    """Immutable isometric grid coordinate.

    ``s`` grows towards the south, ``e`` towards the east and ``u`` upwards.
    The canonical key ``"s,e,u"`` is what map data is keyed by.
    """

    s: int
    e: int
    u: int

    def add(self, other: IsoCoordinate) -> IsoCoordinate:
        return IsoCoordinate(self.s + other.s, self.e + other.e, self.u + other.u)

    def __add__(self, other: IsoCoordinate) -> IsoCoordinate:
        if not isinstance(other, IsoCoordinate):
            return NotImplemented
        return self.add(other)

    def __neg__(self) -> IsoCoordinate:
        return IsoCoordinate(-self.s, -self.e, -self.u)

    def move(self, direction: Union[Direction, Iterable[Direction]]) -> IsoCoordinate:
        """Step one unit in ``direction``, or along every direction of a path."""
        return self.add(path_offset(direction))

    def to_key(self) -> str:
        return f"{self.s},{self.e},{self.u}"

    @classmethod
    def from_key(cls, key: str) -> IsoCoordinate:
        if not isinstance(key, str):
            raise FormatError(f"Coordinate key must be a string, got {type(key).__name__}")
        parts = key.split(",")
        if len(parts) != 3:
            raise FormatError(f"Coordinate key '{key}' must have exactly three parts")
        # ASCII digits only; int() alone also takes "1_0" and non-ASCII digits.
        if not all(_KEY_PART_RE.fullmatch(part) for part in parts):
            raise FormatError(f"Coordinate key '{key}' contains a non-integer part")
        s, e, u = (int(part) for part in parts)
        return cls(s, e, u)

    def __str__(self) -> str:
        return self.to_key()


ORIGIN = IsoCoordinate(0, 0, 0)


class Direction(Enum):
    UP = "up"
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"
    DOWN = "down"

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def offset(self) -> IsoCoordinate:
        return _OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def from_code(cls, code: str) -> Direction:
        try:
            return _BY_CODE[code]
        except KeyError as exc:
            raise ValueError(f"Unknown direction code '{code}'") from exc


# Canonical constraint order used by texture identifiers.
DIRECTIONS: Tuple[Direction, ...] = (
    Direction.UP,
    Direction.NORTH,
    Direction.EAST,
    Direction.SOUTH,
    Direction.WEST,
    Direction.DOWN,
)

_OFFSETS = {
    Direction.UP: IsoCoordinate(0, 0, 1),
    Direction.DOWN: IsoCoordinate(0, 0, -1),
    Direction.NORTH: IsoCoordinate(-1, 0, 0),
    Direction.SOUTH: IsoCoordinate(1, 0, 0),
    Direction.EAST: IsoCoordinate(0, 1, 0),
    Direction.WEST: IsoCoordinate(0, -1, 0),
}
_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}
_BY_CODE = {direction.code: direction for direction in Direction}

DirectionPath = Tuple[Direction, ...]


def path_offset(path: Union[Direction, Iterable[Direction]]) -> IsoCoordinate:
    """Sum the unit offsets of a direction or a direction path."""
    if isinstance(path, Direction):
        return path.offset
    total = ORIGIN
    for direction in path:
        total = total.add(direction.offset)
    return total


def path_from_names(names: Iterable[str]) -> DirectionPath:
    return tuple(Direction(name) for name in names)
