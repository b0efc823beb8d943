from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from isoedit.components.iso_coordinate import ORIGIN, IsoCoordinate
from isoedit.components.tile_fragments import PlacedFragment
from isoedit.constants import FRAGMENT_OFFSETS, FRAGMENT_SLOTS
from isoedit.rules.registry import RuleRegistry
from isoedit.rules.resolution import FragmentQuery, Neighborhood, resolve_fragment_texture

TileTypeAt = Callable[[IsoCoordinate], Optional[str]]


def neighborhood_for(coordinate: IsoCoordinate, tile_type_at: TileTypeAt) -> Neighborhood:
    """Neighbourhood of ``coordinate`` that reads the map on every lookup."""
    return Neighborhood(lambda offset: tile_type_at(coordinate.add(offset)))


def compose_fragments(
    registry: RuleRegistry,
    type_name: str,
    neighborhood: Neighborhood,
    elevation: int,
) -> Tuple[PlacedFragment, ...]:
    """Resolve all twelve slots; slots without a texture are left out."""
    placed: List[PlacedFragment] = []
    for slot in FRAGMENT_SLOTS:
        query = FragmentQuery(type_name=type_name, slot=slot, neighborhood=neighborhood, elevation=elevation)
        resolution = resolve_fragment_texture(registry, query)
        if resolution is None:
            continue
        x, y = FRAGMENT_OFFSETS[slot]
        placed.append(PlacedFragment(slot=slot, texture=resolution.texture, x=x, y=y, score=resolution.score))
    return tuple(placed)


def compose_tile_fragments(
    registry: RuleRegistry,
    type_name: str,
    coordinate: IsoCoordinate,
    tile_type_at: TileTypeAt,
) -> Tuple[PlacedFragment, ...]:
    return compose_fragments(
        registry,
        type_name,
        neighborhood_for(coordinate, tile_type_at),
        coordinate.u,
    )


def compose_preview_fragments(registry: RuleRegistry, type_name: str) -> Tuple[PlacedFragment, ...]:
    """Fragments of a lone tile at the origin, used for palette buttons."""
    return compose_fragments(registry, type_name, Neighborhood.empty(), ORIGIN.u)
