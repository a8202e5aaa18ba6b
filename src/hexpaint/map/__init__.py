"""Map surface abstraction for hexpaint.

Public API:
    - MapViewProtocol: Operations consumed from the host map library.
    - MapEvent: Event payload delivered to layer handlers.
    - StaticMapView: In-memory Web Mercator implementation.
"""

from hexpaint.map.static import StaticMapView
from hexpaint.map.types import (
    MOUSELEAVE,
    MOUSEMOVE,
    MOVE,
    POINTERDOWN,
    POINTERMOVE,
    POINTERUP,
    REMOVE,
    MapEvent,
    MapEventHandler,
    MapViewProtocol,
    Unsubscribe,
)

__all__ = [
    "MOUSELEAVE",
    "MOUSEMOVE",
    "MOVE",
    "POINTERDOWN",
    "POINTERMOVE",
    "POINTERUP",
    "REMOVE",
    "MapEvent",
    "MapEventHandler",
    "MapViewProtocol",
    "StaticMapView",
    "Unsubscribe",
]
