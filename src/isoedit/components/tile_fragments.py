from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class PlacedFragment:
    """A resolved texture positioned inside the tile sprite."""

    slot: str
    texture: str
    x: int
    y: int
    score: int = 0


@dataclass(slots=True)
class TileFragments:
    """Visual composition of a tile: one entry per slot that resolved to a texture.

    The whole tuple is swapped on every re-resolution so readers never see a
    half-updated tile.
    """

    fragments: Tuple[PlacedFragment, ...] = field(default_factory=tuple)

    def by_slot(self) -> Dict[str, PlacedFragment]:
        return {fragment.slot: fragment for fragment in self.fragments}

    def texture_for(self, slot: str) -> Optional[str]:
        for fragment in self.fragments:
            if fragment.slot == slot:
                return fragment.texture
        return None

    def textures(self) -> Tuple[str, ...]:
        return tuple(fragment.texture for fragment in self.fragments)
