from __future__ import annotations

from typing import Iterable, Mapping, Optional

from esper import World

from isoedit.components.brush import Brush
from isoedit.components.iso_coordinate import IsoCoordinate
from isoedit.components.map_grid import MapGrid
from isoedit.events.bus import EventBus
from isoedit.rules.atlas import top_faces_atlas
from isoedit.rules.registry import RuleRegistry, RuleRegistryBuilder
from isoedit.systems.brush_system import BrushSystem
from isoedit.systems.map_system import MapSystem


def build_default_registry(identifiers: Iterable[str] = (), *, atlas: Optional[Mapping] = None) -> RuleRegistry:
    """Registry from the top-face atlas plus any extra texture identifiers."""
    builder = RuleRegistryBuilder()
    builder.add_atlas(atlas if atlas is not None else top_faces_atlas())
    builder.add_all(identifiers)
    return builder.build()


def create_world(
    event_bus: EventBus,
    registry: RuleRegistry | None = None,
    *,
    map_data: Mapping | str | None = None,
    cascade_offsets: Iterable[IsoCoordinate] | None = None,
) -> World:
    """Create the editor world with its map and brush systems attached.

    The systems are reachable as ``world.map_system`` and ``world.brush_system``.
    """
    world = World()
    world.create_entity(MapGrid())
    world.create_entity(Brush())
    if registry is None:
        registry = build_default_registry()
    map_system = MapSystem(world, event_bus, registry, cascade_offsets=cascade_offsets)
    setattr(world, "map_system", map_system)
    setattr(world, "brush_system", BrushSystem(world, event_bus, map_system))
    if map_data is not None:
        map_system.load_from_json(map_data)
    return world
