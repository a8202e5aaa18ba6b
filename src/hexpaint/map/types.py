"""Type definitions for the map rendering surface.

hexpaint does not render anything itself. It talks to the host map
library through MapViewProtocol: screen/geographic transforms, GeoJSON
sources, layers and their feature state, panning and cursor control, and
event subscription.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from hexpaint.geometry.primitives import CanvasSize, GeoPoint, ScreenPoint

# Events the layers subscribe to
MOVE = "move"
MOUSEMOVE = "mousemove"
MOUSELEAVE = "mouseleave"
POINTERDOWN = "pointerdown"
POINTERMOVE = "pointermove"
POINTERUP = "pointerup"
REMOVE = "remove"


@dataclass(frozen=True)
class MapEvent:
    """An event delivered by the map.

    Attributes:
        type: Event name, e.g. "move" or "pointerdown".
        point: Pointer position in CSS pixels, for pointer/mouse events.
        layer_id: Layer the event was delivered for, for layer-scoped events.
        feature_id: Display id of the feature under the pointer, if any.
        properties: Properties of the feature under the pointer, if any.
        alt_key: Whether the Alt key was held (camera events).
    """

    type: str
    point: ScreenPoint | None = None
    layer_id: str | None = None
    feature_id: int | None = None
    properties: dict[str, Any] | None = None
    alt_key: bool = False


MapEventHandler = Callable[[MapEvent], None]
Unsubscribe = Callable[[], None]


class MapViewProtocol(Protocol):
    """Protocol defining the map operations hexpaint consumes.

    This protocol allows for dependency injection and testing with
    in-memory implementations.
    """

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        """Convert a CSS pixel position to geographic coordinates."""
        ...

    def get_center(self) -> GeoPoint:
        """Return the geographic point at the center of the camera."""
        ...

    def get_zoom(self) -> float:
        """Return the current camera zoom level."""
        ...

    def get_canvas_size(self) -> CanvasSize:
        """Return the canvas size in device pixels and the pixel ratio."""
        ...

    def add_source(self, source_id: str, data: dict[str, Any]) -> None:
        """Add a GeoJSON source."""
        ...

    def remove_source(self, source_id: str) -> None:
        """Remove a GeoJSON source."""
        ...

    def add_layer(self, layer: dict[str, Any], before_id: str | None = None) -> None:
        """Add a style layer, optionally below before_id."""
        ...

    def remove_layer(self, layer_id: str) -> None:
        """Remove a style layer."""
        ...

    def has_layer(self, layer_id: str) -> bool:
        """Check whether a style layer exists."""
        ...

    def set_layer_data(self, source_id: str, data: dict[str, Any]) -> None:
        """Replace the data of a GeoJSON source."""
        ...

    def set_feature_state(
        self, source_id: str, feature_id: int, state: dict[str, Any]
    ) -> None:
        """Merge state into a feature's renderer state."""
        ...

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None:
        """Set a paint property on a style layer."""
        ...

    def on(
        self,
        event: str,
        handler: MapEventHandler,
        layer_id: str | None = None,
    ) -> Unsubscribe:
        """Subscribe to a map event, optionally scoped to a layer."""
        ...

    def drag_pan_enabled(self) -> bool:
        """Whether dragging the map pans it."""
        ...

    def enable_drag_pan(self) -> None: ...

    def disable_drag_pan(self) -> None: ...

    def get_cursor(self) -> str:
        """Return the canvas cursor style."""
        ...

    def set_cursor(self, cursor: str) -> None:
        """Set the canvas cursor style."""
        ...
