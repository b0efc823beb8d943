from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects.

    Delivery is synchronous: every receiver has run when ``emit`` returns.
    """
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems that are not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# EDIT REQUESTS (emitted by the UI collaborator)
# ============================================================================
EVENT_TILE_PLACE_REQUEST = "tile_place_request"      # payload: coordinate=IsoCoordinate, type_name=str
EVENT_TILE_REMOVE_REQUEST = "tile_remove_request"    # payload: coordinate=IsoCoordinate
EVENT_OBJECT_PLACE_REQUEST = "object_place_request"  # payload: coordinate=IsoCoordinate, type_name=str
EVENT_OBJECT_REMOVE_REQUEST = "object_remove_request"  # payload: coordinate=IsoCoordinate
EVENT_MAP_LOAD_REQUEST = "map_load_request"          # payload: data=dict|str, replace=bool


# ============================================================================
# INPUT & BRUSH
# ============================================================================
EVENT_BRUSH_SELECTED = "brush_selected"      # payload: mode=BrushMode|str, type_name=str|None
EVENT_BRUSH_CHANGED = "brush_changed"        # payload: mode=BrushMode, type_name=str|None
EVENT_TILE_FACE_CLICK = "tile_face_click"    # payload: coordinate=IsoCoordinate, local_x=float, local_y=float


# ============================================================================
# MAP CHANGES
# ============================================================================
EVENT_TILE_ADDED = "tile_added"                        # payload: entity=int, coordinate=IsoCoordinate, type_name=str
EVENT_TILE_REMOVED = "tile_removed"                    # payload: entity=int, coordinate=IsoCoordinate, type_name=str
EVENT_OBJECT_ADDED = "object_added"                    # payload: entity=int, coordinate=IsoCoordinate, type_name=str
EVENT_OBJECT_REMOVED = "object_removed"                # payload: entity=int, coordinate=IsoCoordinate, type_name=str
EVENT_TILE_FRAGMENTS_CHANGED = "tile_fragments_changed"  # payload: entity=int, coordinate=IsoCoordinate, fragments=tuple[PlacedFragment]
EVENT_PAINT_ORDER_CHANGED = "paint_order_changed"      # payload: order=list[int]
EVENT_MAP_EDIT_REJECTED = "map_edit_rejected"          # payload: kind=str, coordinate=IsoCoordinate, reason=str
EVENT_MAP_LOADED = "map_loaded"                        # payload: tiles=int, objects=int, skipped=int
EVENT_MAP_CLEARED = "map_cleared"                      # payload: None
