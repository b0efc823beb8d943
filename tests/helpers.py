from __future__ import annotations

from typing import Iterable, Optional

from esper import World

from isoedit.components.iso_coordinate import IsoCoordinate
from isoedit.events.bus import EventBus
from isoedit.rules.registry import RuleRegistry
from isoedit.systems.map_system import MapSystem

# Small hand-authored catalogue: the top face (row 1) only shows when nothing
# sits on the tile, the side faces (rows 2-3) show on any rock.
ROCK_IDENTIFIERS = (
    "rock-11-u0.png",
    "rock-12-u0,n0.png",
    "rock-12-u0.png",
    "rock-13-u0.png",
    "rock-14-u0.png",
    "rock-21-s0.png",
    "rock-22-s0.png",
    "rock-23-e0.png",
    "rock-24-e0.png",
    "rock-31-d*.png",
    "rock-32-d*.png",
    "rock-33-d*.png",
    "rock-34-d*.png",
    "flower.png",
)


def rock_registry(extra: Iterable[str] = ()) -> RuleRegistry:
    return RuleRegistry.build(list(ROCK_IDENTIFIERS) + list(extra))


def build_map(
    registry: Optional[RuleRegistry] = None,
    *,
    cascade_offsets: Optional[Iterable[IsoCoordinate]] = None,
) -> tuple[World, EventBus, MapSystem]:
    """Fresh world + bus + map system wired to ``registry`` (rock catalogue by default)."""
    world = World()
    bus = EventBus()
    system = MapSystem(world, bus, registry or rock_registry(), cascade_offsets=cascade_offsets)
    return world, bus, system


def slots_of(fragments) -> list[str]:
    return [fragment.slot for fragment in fragments]
