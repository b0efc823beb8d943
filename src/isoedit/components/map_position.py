from dataclasses import dataclass

from isoedit.components.iso_coordinate import IsoCoordinate


@dataclass(slots=True)
class MapPosition:
    """Where a tile or map object sits on the map.

    ``sequence`` is the insertion counter used to break paint order ties.
    """
    coordinate: IsoCoordinate
    sequence: int = 0
