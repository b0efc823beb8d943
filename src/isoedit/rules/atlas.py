"""Top-face texture atlas.

Describes the sprite sheet holding the top-face fragments of every tile type:
one 32px wide column per type, 16px high bands per neighbour configuration.
The frame names double as texture rules, so feeding the atlas to
``RuleRegistryBuilder.add_atlas`` yields a working registry for those types.
"""
from __future__ import annotations

from typing import Dict, Iterable, Tuple

from isoedit.constants import DEFAULT_TOP_FACE_TYPES, FRAGMENT_SIZE, TEXTURE_SUFFIX

# (slot, constraints, column, row) of the fixed bands, in fragment units.
_ENCLOSED_FRAMES: Tuple[Tuple[str, str, int, int], ...] = (
    ("11", "w:0,u:!,s:0", 0, 0),
    ("12", "w:0,u:!,n:0", 1, 0),
    ("13", "n:0,u:!,w:0", 2, 0),
    ("14", "n:0,u:!,e:0", 3, 0),
    ("21", "s:0,u:!,w:0", 0, 1),
    ("22", "s:0,u:!,e:0", 1, 1),
    ("23", "e:0,u:!,s:0", 2, 1),
    ("24", "e:0,u:!,n:0", 3, 1),
    ("11", "w:0,u:!", 0, 2),
    ("12", "w:0,u:!", 1, 2),
    ("13", "n:0,u:!", 2, 2),
    ("14", "n:0,u:!", 3, 2),
    ("21", "s:!,u:!", 0, 3),
    ("22", "s:!,u:!", 1, 3),
    ("23", "e:!,u:!", 2, 3),
    ("24", "e:!,u:!", 3, 3),
    ("11", "w:1,wu:1,u:!", 0, 4),
    ("12", "w:1,wu:1,u:!", 1, 4),
    ("13", "n:1,nu:1,u:!", 2, 4),
    ("14", "n:1,nu:1,u:!", 3, 4),
)

# Transitions towards a given neighbour type; {n} is replaced by the neighbour.
_NEIGHBOR_FRAMES: Tuple[Tuple[str, str, int, int], ...] = (
    ("11", "w:{n},wu:0,u:!", 0, 0),
    ("12", "w:{n},wu:0,u:!", 1, 0),
    ("13", "n:{n},nu:0,u:!", 2, 0),
    ("14", "n:{n},nu:0,u:!", 3, 0),
    ("21", "s:{n},u:!", 0, 1),
    ("22", "s:{n},u:!", 1, 1),
    ("23", "e:{n},u:!", 2, 1),
    ("24", "e:{n},u:!", 3, 1),
)
_NEIGHBOR_BAND_TOP = 6


def _frame(x: int, y: int) -> Dict[str, Dict[str, int]]:
    return {"frame": {"x": x, "y": y, "w": FRAGMENT_SIZE, "h": FRAGMENT_SIZE}}


def top_face_frame_names(tile_type: str, tile_types: Iterable[str] = DEFAULT_TOP_FACE_TYPES) -> Dict[str, Tuple[int, int]]:
    """Frame name -> (column, row) in fragment units, relative to the type's column."""
    names: Dict[str, Tuple[int, int]] = {}
    for slot, constraints, col, row in _ENCLOSED_FRAMES:
        names[f"{tile_type}-{slot}-{constraints}{TEXTURE_SUFFIX}"] = (col, row)
    for index, neighbor in enumerate(tile_types):
        for slot, constraints, col, row in _NEIGHBOR_FRAMES:
            name = f"{tile_type}-{slot}-{constraints.format(n=neighbor)}{TEXTURE_SUFFIX}"
            names[name] = (col, _NEIGHBOR_BAND_TOP + index * 2 + row)
    return names


def top_faces_atlas(tile_types: Iterable[str] = DEFAULT_TOP_FACE_TYPES) -> dict:
    types = list(tile_types)
    column_width = FRAGMENT_SIZE * 4
    frames: Dict[str, dict] = {}
    for index, tile_type in enumerate(types):
        for name, (col, row) in top_face_frame_names(tile_type, types).items():
            frames[name] = _frame(index * column_width + col * FRAGMENT_SIZE, row * FRAGMENT_SIZE)
    return {
        "frames": frames,
        "meta": {
            "image": "top-faces.png",
            "format": "RGBA8888",
            "size": {"w": column_width * len(types), "h": (3 + len(types)) * FRAGMENT_SIZE * 2},
            "scale": "1",
        },
    }
