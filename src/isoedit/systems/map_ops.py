from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple, Union

from esper import World

from isoedit.components.iso_coordinate import (
    DIRECTIONS,
    ORIGIN,
    IsoCoordinate,
    path_from_names,
    path_offset,
)
from isoedit.components.map_grid import MapGrid
from isoedit.components.map_object import MapObject
from isoedit.components.map_position import MapPosition
from isoedit.components.tile import TileType
from isoedit.constants import LEGACY_CASCADE_PATHS, PAINT_VERTICAL_DIVISOR
from isoedit.rules.registry import RuleRegistry

CoordinateLike = Union[IsoCoordinate, Sequence[int]]


def as_coordinate(value: CoordinateLike) -> IsoCoordinate:
    if isinstance(value, IsoCoordinate):
        return value
    try:
        s, e, u = value
        return IsoCoordinate(int(s), int(e), int(u))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected an IsoCoordinate or (s, e, u), got {value!r}") from exc


def get_map_grid(world: World) -> MapGrid:
    for _, grid in world.get_component(MapGrid):
        return grid
    raise RuntimeError("MapGrid singleton not found")


def ensure_map_grid(world: World) -> int:
    existing = list(world.get_component(MapGrid))
    if existing:
        return existing[0][0]
    return world.create_entity(MapGrid())


def tile_entity_at(world: World, coordinate: IsoCoordinate) -> Optional[int]:
    return get_map_grid(world).tiles.get(coordinate.to_key())


def object_entity_at(world: World, coordinate: IsoCoordinate) -> Optional[int]:
    return get_map_grid(world).objects.get(coordinate.to_key())


def tile_type_at(world: World, coordinate: IsoCoordinate) -> Optional[str]:
    entity = tile_entity_at(world, coordinate)
    if entity is None:
        return None
    return world.component_for_entity(entity, TileType).type_name


def object_type_at(world: World, coordinate: IsoCoordinate) -> Optional[str]:
    entity = object_entity_at(world, coordinate)
    if entity is None:
        return None
    return world.component_for_entity(entity, MapObject).type_name


def paint_depth(coordinate: IsoCoordinate) -> float:
    """Back-to-front sort key; larger values are drawn later."""
    return coordinate.s + coordinate.e + coordinate.u / PAINT_VERTICAL_DIVISOR


def sorted_paint_order(world: World, entities: Iterable[int]) -> List[int]:
    keyed: List[Tuple[float, int, int]] = []
    for entity in entities:
        position = world.component_for_entity(entity, MapPosition)
        keyed.append((paint_depth(position.coordinate), position.sequence, entity))
    keyed.sort()
    return [entity for _, _, entity in keyed]


def default_cascade_offsets(registry: RuleRegistry | None = None) -> Tuple[IsoCoordinate, ...]:
    """Cells whose tiles are re-resolved after an edit, relative to the edited cell.

    The six unit neighbours, the fixed second-order set, and every offset a
    registered rule can reach back from.
    """
    offsets = {direction.offset for direction in DIRECTIONS}
    offsets.update(path_offset(path_from_names(names)) for names in LEGACY_CASCADE_PATHS)
    if registry is not None:
        offsets.update(registry.dependency_offsets())
    offsets.discard(ORIGIN)
    return tuple(sorted(offsets, key=lambda offset: (offset.u, offset.s, offset.e)))
