from __future__ import annotations

import logging
from typing import Optional

from esper import World

from isoedit.components.brush import Brush, BrushMode
from isoedit.components.iso_coordinate import Direction
from isoedit.events.bus import (
    EVENT_BRUSH_CHANGED,
    EVENT_BRUSH_SELECTED,
    EVENT_TILE_FACE_CLICK,
    EventBus,
)
from isoedit.systems.map_ops import as_coordinate
from isoedit.systems.map_system import MapSystem
from isoedit.ui.picking import pick_side, placement_target

log = logging.getLogger(__name__)


class BrushSystem:
    """Applies the selected brush when a tile face is clicked.

    - TILE brush: add a tile of the brush type next to the clicked face.
    - OBJECT brush: put an object of the brush type on the clicked tile.
    - REMOVE brush: remove the object on the clicked tile, or the tile itself.
    """

    def __init__(self, world: World, event_bus: EventBus, map_system: MapSystem):
        self.world = world
        self.event_bus = event_bus
        self.map_system = map_system
        self._brush_entity = self._ensure_brush_entity()
        self.event_bus.subscribe(EVENT_BRUSH_SELECTED, self.on_brush_selected)
        self.event_bus.subscribe(EVENT_TILE_FACE_CLICK, self.on_tile_face_click)

    def _ensure_brush_entity(self) -> int:
        existing = list(self.world.get_component(Brush))
        if existing:
            return existing[0][0]
        return self.world.create_entity(Brush())

    @property
    def brush(self) -> Brush:
        return self.world.component_for_entity(self._brush_entity, Brush)

    def select(self, mode: BrushMode | str, type_name: Optional[str] = None) -> Brush:
        mode = BrushMode(mode)
        if mode is not BrushMode.REMOVE and not type_name:
            raise ValueError(f"{mode.value} brush needs a type name")
        brush = self.brush
        brush.mode = mode
        brush.type_name = type_name if mode is not BrushMode.REMOVE else None
        self.event_bus.emit(EVENT_BRUSH_CHANGED, mode=brush.mode, type_name=brush.type_name)
        return brush

    def apply(self, coordinate, side: Direction) -> bool:
        """Apply the brush to ``side`` of the tile at ``coordinate``; True if the map changed."""
        coordinate = as_coordinate(coordinate)
        brush = self.brush
        if brush.mode is BrushMode.TILE:
            target = placement_target(coordinate, side)
            return self.map_system.add_tile(target, brush.type_name) is not None
        if brush.mode is BrushMode.OBJECT:
            return self.map_system.add_object_at(coordinate, brush.type_name) is not None
        if self.map_system.object_type_at(coordinate) is not None:
            return self.map_system.remove_object_at(coordinate)
        return self.map_system.remove_tile_at(coordinate)

    # Event handlers -----------------------------------------------------

    def on_brush_selected(self, sender, **kwargs):
        mode = kwargs.get('mode')
        if mode is None:
            return
        try:
            self.select(mode, kwargs.get('type_name'))
        except ValueError as exc:
            log.warning("Ignoring brush selection: %s", exc)

    def on_tile_face_click(self, sender, **kwargs):
        coordinate = kwargs.get('coordinate')
        local_x = kwargs.get('local_x')
        local_y = kwargs.get('local_y')
        if coordinate is None or local_x is None or local_y is None:
            return
        side = pick_side(local_x, local_y)
        if side is None:
            return
        self.apply(coordinate, side)
