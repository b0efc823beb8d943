from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class MapGrid:
    """Singleton component indexing map entities by coordinate key.

    Tiles and objects live in separate indexes so one of each may share a coordinate.
    ``paint_order`` lists every tile and object entity back to front.
    """
    tiles: Dict[str, int] = field(default_factory=dict)
    objects: Dict[str, int] = field(default_factory=dict)
    paint_order: List[int] = field(default_factory=list)
    next_sequence: int = 0
