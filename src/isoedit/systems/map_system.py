from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from esper import World

from isoedit.components.iso_coordinate import FormatError, IsoCoordinate
from isoedit.components.map_grid import MapGrid
from isoedit.components.map_object import MapObject
from isoedit.components.map_position import MapPosition
from isoedit.components.tile import TileType
from isoedit.components.tile_fragments import PlacedFragment, TileFragments
from isoedit.events.bus import (
    EVENT_MAP_CLEARED,
    EVENT_MAP_EDIT_REJECTED,
    EVENT_MAP_LOAD_REQUEST,
    EVENT_MAP_LOADED,
    EVENT_OBJECT_ADDED,
    EVENT_OBJECT_PLACE_REQUEST,
    EVENT_OBJECT_REMOVE_REQUEST,
    EVENT_OBJECT_REMOVED,
    EVENT_PAINT_ORDER_CHANGED,
    EVENT_TILE_ADDED,
    EVENT_TILE_FRAGMENTS_CHANGED,
    EVENT_TILE_PLACE_REQUEST,
    EVENT_TILE_REMOVE_REQUEST,
    EVENT_TILE_REMOVED,
    EventBus,
)
from isoedit.rules.registry import RuleRegistry
from isoedit.systems import map_ops
from isoedit.systems.fragment_ops import compose_tile_fragments
from isoedit.systems.map_ops import (
    CoordinateLike,
    as_coordinate,
    default_cascade_offsets,
    ensure_map_grid,
    sorted_paint_order,
)

log = logging.getLogger(__name__)

MapData = Dict[str, Dict[str, str]]


class MapSystem:
    """Sparse isometric map of tiles and decorative objects.

    Every edit runs to completion before returning: the new tile is composed,
    paint order is re-sorted and every tile whose rules can see the edited
    cell is re-resolved. Adding where something already sits, or removing
    where nothing does, is refused with a warning and leaves the map untouched.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        registry: RuleRegistry,
        *,
        cascade_offsets: Optional[Iterable[IsoCoordinate]] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.registry = registry
        self.grid_entity = ensure_map_grid(world)
        if cascade_offsets is None:
            self.cascade_offsets = default_cascade_offsets(registry)
        else:
            self.cascade_offsets = tuple(cascade_offsets)
        self.event_bus.subscribe(EVENT_TILE_PLACE_REQUEST, self.on_tile_place_request)
        self.event_bus.subscribe(EVENT_TILE_REMOVE_REQUEST, self.on_tile_remove_request)
        self.event_bus.subscribe(EVENT_OBJECT_PLACE_REQUEST, self.on_object_place_request)
        self.event_bus.subscribe(EVENT_OBJECT_REMOVE_REQUEST, self.on_object_remove_request)
        self.event_bus.subscribe(EVENT_MAP_LOAD_REQUEST, self.on_map_load_request)

    def _grid(self) -> MapGrid:
        return map_ops.get_map_grid(self.world)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def tile_entity_at(self, coordinate: CoordinateLike) -> Optional[int]:
        return map_ops.tile_entity_at(self.world, as_coordinate(coordinate))

    def object_entity_at(self, coordinate: CoordinateLike) -> Optional[int]:
        return map_ops.object_entity_at(self.world, as_coordinate(coordinate))

    def tile_type_at(self, coordinate: CoordinateLike) -> Optional[str]:
        return map_ops.tile_type_at(self.world, as_coordinate(coordinate))

    def object_type_at(self, coordinate: CoordinateLike) -> Optional[str]:
        return map_ops.object_type_at(self.world, as_coordinate(coordinate))

    def fragments_at(self, coordinate: CoordinateLike) -> Optional[Tuple[PlacedFragment, ...]]:
        entity = self.tile_entity_at(coordinate)
        if entity is None:
            return None
        return self.world.component_for_entity(entity, TileFragments).fragments

    @property
    def tile_count(self) -> int:
        return len(self._grid().tiles)

    @property
    def object_count(self) -> int:
        return len(self._grid().objects)

    def tiles(self) -> Iterator[Tuple[IsoCoordinate, str]]:
        for entity in list(self._grid().tiles.values()):
            position = self.world.component_for_entity(entity, MapPosition)
            yield position.coordinate, self.world.component_for_entity(entity, TileType).type_name

    def objects(self) -> Iterator[Tuple[IsoCoordinate, str]]:
        for entity in list(self._grid().objects.values()):
            position = self.world.component_for_entity(entity, MapPosition)
            yield position.coordinate, self.world.component_for_entity(entity, MapObject).type_name

    def paint_order(self) -> List[int]:
        return list(self._grid().paint_order)

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------
    def add_tile(self, coordinate: CoordinateLike, type_name: str) -> Optional[int]:
        coordinate = as_coordinate(coordinate)
        _require_type_name(type_name)
        grid = self._grid()
        key = coordinate.to_key()
        if key in grid.tiles or key in grid.objects:
            self._reject("tile", coordinate, "occupied")
            return None
        entity = self.world.create_entity(
            MapPosition(coordinate=coordinate, sequence=grid.next_sequence),
            TileType(type_name=type_name),
            TileFragments(),
        )
        grid.next_sequence += 1
        grid.tiles[key] = entity
        self.refresh_tile(entity)
        self._sort_paint_order()
        self.cascade_from(coordinate)
        self.event_bus.emit(EVENT_TILE_ADDED, entity=entity, coordinate=coordinate, type_name=type_name)
        return entity

    def remove_tile_at(self, coordinate: CoordinateLike) -> bool:
        coordinate = as_coordinate(coordinate)
        grid = self._grid()
        entity = grid.tiles.pop(coordinate.to_key(), None)
        if entity is None:
            self._reject("tile", coordinate, "empty")
            return False
        type_name = self.world.component_for_entity(entity, TileType).type_name
        self._discard_entity(entity)
        self.cascade_from(coordinate)
        self.event_bus.emit(EVENT_TILE_REMOVED, entity=entity, coordinate=coordinate, type_name=type_name)
        return True

    def refresh_tile(self, entity: int) -> bool:
        """Re-resolve one tile's fragments; returns True when they changed."""
        position = self.world.component_for_entity(entity, MapPosition)
        tile_type = self.world.component_for_entity(entity, TileType)
        fragments = compose_tile_fragments(
            self.registry,
            tile_type.type_name,
            position.coordinate,
            self.tile_type_at,
        )
        current = self.world.component_for_entity(entity, TileFragments)
        if current.fragments == fragments:
            return False
        current.fragments = fragments
        self.event_bus.emit(
            EVENT_TILE_FRAGMENTS_CHANGED,
            entity=entity,
            coordinate=position.coordinate,
            fragments=fragments,
        )
        return True

    def cascade_from(self, coordinate: CoordinateLike) -> List[int]:
        """Re-resolve every tile that can be affected by a change at ``coordinate``."""
        coordinate = as_coordinate(coordinate)
        tiles = self._grid().tiles
        changed: List[int] = []
        for offset in self.cascade_offsets:
            entity = tiles.get(coordinate.add(offset).to_key())
            if entity is not None and self.refresh_tile(entity):
                changed.append(entity)
        log.debug("Cascade from %s updated %d tile(s)", coordinate, len(changed))
        return changed

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------
    def add_object_at(self, coordinate: CoordinateLike, type_name: str) -> Optional[int]:
        coordinate = as_coordinate(coordinate)
        _require_type_name(type_name)
        grid = self._grid()
        key = coordinate.to_key()
        if key in grid.objects:
            self._reject("object", coordinate, "occupied")
            return None
        entity = self.world.create_entity(
            MapPosition(coordinate=coordinate, sequence=grid.next_sequence),
            MapObject(type_name=type_name),
        )
        grid.next_sequence += 1
        grid.objects[key] = entity
        self._sort_paint_order()
        self.event_bus.emit(EVENT_OBJECT_ADDED, entity=entity, coordinate=coordinate, type_name=type_name)
        return entity

    def remove_object_at(self, coordinate: CoordinateLike) -> bool:
        coordinate = as_coordinate(coordinate)
        entity = self._grid().objects.pop(coordinate.to_key(), None)
        if entity is None:
            self._reject("object", coordinate, "empty")
            return False
        type_name = self.world.component_for_entity(entity, MapObject).type_name
        self._discard_entity(entity)
        self.event_bus.emit(EVENT_OBJECT_REMOVED, entity=entity, coordinate=coordinate, type_name=type_name)
        return True

    # ------------------------------------------------------------------
    # Whole-map operations
    # ------------------------------------------------------------------
    def clear(self) -> None:
        grid = self._grid()
        for entity in list(grid.tiles.values()) + list(grid.objects.values()):
            self.world.delete_entity(entity, immediate=True)
        grid.tiles.clear()
        grid.objects.clear()
        grid.paint_order.clear()
        grid.next_sequence = 0
        self.event_bus.emit(EVENT_MAP_CLEARED)

    def serialize_to_json(self) -> MapData:
        return {
            "tiles": {coordinate.to_key(): type_name for coordinate, type_name in self.tiles()},
            "objects": {coordinate.to_key(): type_name for coordinate, type_name in self.objects()},
        }

    def load_from_json(self, data: Union[Mapping, str, bytes], *, replace: bool = True) -> int:
        """Add every entry of ``data``; returns how many entities were created.

        Tiles go in before objects since a tile cannot be added under an object.
        Entries with a malformed key or a non-string type are skipped.
        """
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        if not isinstance(data, Mapping):
            raise ValueError("Map data must be a mapping with 'tiles' and 'objects'")
        sections = {}
        for section in ("tiles", "objects"):
            entries = data.get(section) or {}
            if not isinstance(entries, Mapping):
                raise ValueError(f"Map data '{section}' must be a mapping")
            sections[section] = entries
        if replace:
            self.clear()
        counts = {"tiles": 0, "objects": 0}
        skipped = 0
        for section, add in (("tiles", self.add_tile), ("objects", self.add_object_at)):
            for key, type_name in sections[section].items():
                if type_name is None or type_name == "":
                    continue
                if not isinstance(type_name, str):
                    log.warning("Skipping %s entry %r: type must be a string, got %r", section, key, type_name)
                    skipped += 1
                    continue
                try:
                    coordinate = IsoCoordinate.from_key(key)
                except FormatError as exc:
                    log.warning("Skipping %s entry: %s", section, exc)
                    skipped += 1
                    continue
                if add(coordinate, type_name) is None:
                    skipped += 1
                else:
                    counts[section] += 1
        self.event_bus.emit(EVENT_MAP_LOADED, tiles=counts["tiles"], objects=counts["objects"], skipped=skipped)
        return counts["tiles"] + counts["objects"]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _sort_paint_order(self) -> None:
        grid = self._grid()
        grid.paint_order = sorted_paint_order(
            self.world, list(grid.tiles.values()) + list(grid.objects.values())
        )
        self.event_bus.emit(EVENT_PAINT_ORDER_CHANGED, order=list(grid.paint_order))

    def _discard_entity(self, entity: int) -> None:
        grid = self._grid()
        if entity in grid.paint_order:
            grid.paint_order.remove(entity)
            self.event_bus.emit(EVENT_PAINT_ORDER_CHANGED, order=list(grid.paint_order))
        self.world.delete_entity(entity, immediate=True)

    def _reject(self, kind: str, coordinate: IsoCoordinate, reason: str) -> None:
        if reason == "occupied":
            log.warning("Cannot add %s at %s: coordinate already occupied", kind, coordinate)
        else:
            log.warning("Cannot remove %s at %s: nothing there", kind, coordinate)
        self.event_bus.emit(EVENT_MAP_EDIT_REJECTED, kind=kind, coordinate=coordinate, reason=reason)

    # Event handlers -----------------------------------------------------

    def on_tile_place_request(self, sender, **kwargs):
        coordinate = kwargs.get('coordinate')
        type_name = kwargs.get('type_name')
        if coordinate is None or not type_name:
            return
        self.add_tile(coordinate, type_name)

    def on_tile_remove_request(self, sender, **kwargs):
        coordinate = kwargs.get('coordinate')
        if coordinate is None:
            return
        self.remove_tile_at(coordinate)

    def on_object_place_request(self, sender, **kwargs):
        coordinate = kwargs.get('coordinate')
        type_name = kwargs.get('type_name')
        if coordinate is None or not type_name:
            return
        self.add_object_at(coordinate, type_name)

    def on_object_remove_request(self, sender, **kwargs):
        coordinate = kwargs.get('coordinate')
        if coordinate is None:
            return
        self.remove_object_at(coordinate)

    def on_map_load_request(self, sender, **kwargs):
        data = kwargs.get('data')
        if data is None:
            return
        self.load_from_json(data, replace=kwargs.get('replace', True))


def _require_type_name(type_name: str) -> None:
    if not isinstance(type_name, str) or not type_name:
        raise ValueError(f"Type name must be a non-empty string, got {type_name!r}")
