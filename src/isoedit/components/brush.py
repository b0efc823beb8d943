"""Editing tool currently selected in the control bar."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BrushMode(Enum):
    TILE = "tile"
    OBJECT = "object"
    REMOVE = "remove"


@dataclass
class Brush:
    """Singleton component storing the active brush.

    ``type_name`` is the tile or object type painted by TILE and OBJECT brushes.
    """
    mode: BrushMode = BrushMode.TILE
    type_name: Optional[str] = "rock"
