"""In-memory map surface.

StaticMapView implements MapViewProtocol without a browser: a Web
Mercator camera (center, zoom, bearing) over a fixed-size canvas, plus
plain dictionaries standing in for sources, layers and feature state.
It is what the CLI renders into and what the test-suite drives; events
are delivered with emit().
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Self

from hexpaint.geometry.geomath import BBox
from hexpaint.geometry.primitives import CanvasSize, GeoPoint, ScreenPoint
from hexpaint.map.types import MOVE, MapEvent, MapEventHandler, Unsubscribe

# Pixels per world width at zoom 0
TILE_SIZE = 512
# Latitude limit of the Web Mercator square
MAX_MERCATOR_LAT = 85.051129


def _mercator_x(lng: float, world: float) -> float:
    return (lng + 180.0) / 360.0 * world


def _mercator_y(lat: float, world: float) -> float:
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
    phi = math.radians(lat)
    return (1.0 - math.log(math.tan(math.pi / 4 + phi / 2)) / math.pi) / 2.0 * world


def _mercator_lng(x: float, world: float) -> float:
    return x / world * 360.0 - 180.0


def _mercator_lat(y: float, world: float) -> float:
    n = math.pi * (1.0 - 2.0 * y / world)
    lat = math.degrees(math.atan(math.sinh(n)))
    return max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))


class StaticMapView:
    """A Web Mercator map with no renderer attached.

    Bearing rotates the map clockwise, as in browser map clients: a
    camera with bearing 90 has east at the top of the canvas.

    Usage:
        view = StaticMapView(center=GeoPoint(lng=-87.8, lat=41.9), zoom=10)
        layer.add_to(view)
        view.emit(MapEvent(type="pointerdown", point=...))
    """

    def __init__(
        self,
        center: GeoPoint,
        zoom: float,
        canvas: CanvasSize | None = None,
        *,
        bearing: float = 0.0,
    ) -> None:
        self._center = center
        self._zoom = zoom
        self._bearing = bearing
        self._canvas = canvas or CanvasSize(width=1024, height=768)
        self._drag_pan = True
        self._cursor = ""
        self._handlers: dict[str, list[tuple[str | None, MapEventHandler]]] = defaultdict(list)

        self.sources: dict[str, dict[str, Any]] = {}
        self.layers: dict[str, dict[str, Any]] = {}
        self.layer_order: list[str] = []
        self.feature_states: dict[tuple[str, int], dict[str, Any]] = {}

    @classmethod
    def fit_bounds(
        cls,
        bbox: BBox,
        zoom: float,
        device_pixel_ratio: float = 1.0,
    ) -> Self:
        """Create a north-up view whose canvas exactly covers bbox at zoom.

        Args:
            bbox: (west, south, east, north) in degrees.
            zoom: Camera zoom level.
            device_pixel_ratio: Device pixels per CSS pixel.

        Raises:
            ValueError: If the bbox is inverted.
        """
        west, south, east, north = bbox
        if east < west or north < south:
            raise ValueError(f"Invalid bbox {bbox}: expected west<=east and south<=north")
        world = TILE_SIZE * 2.0**zoom
        x0, x1 = _mercator_x(west, world), _mercator_x(east, world)
        y0, y1 = _mercator_y(north, world), _mercator_y(south, world)
        center = GeoPoint(
            lng=_mercator_lng((x0 + x1) / 2, world),
            lat=_mercator_lat((y0 + y1) / 2, world),
        )
        canvas = CanvasSize(
            width=(x1 - x0) * device_pixel_ratio,
            height=(y1 - y0) * device_pixel_ratio,
            device_pixel_ratio=device_pixel_ratio,
        )
        return cls(center=center, zoom=zoom, canvas=canvas)

    # --- Camera ---

    @property
    def center(self) -> GeoPoint:
        return self._center

    @property
    def bearing(self) -> float:
        return self._bearing

    def get_center(self) -> GeoPoint:
        return self._center

    def get_zoom(self) -> float:
        return self._zoom

    def get_canvas_size(self) -> CanvasSize:
        return self._canvas

    def jump_to(
        self,
        center: GeoPoint | None = None,
        zoom: float | None = None,
        bearing: float | None = None,
        *,
        alt_key: bool = False,
    ) -> None:
        """Move the camera and emit a move event."""
        if center is not None:
            self._center = center
        if zoom is not None:
            self._zoom = zoom
        if bearing is not None:
            self._bearing = bearing
        self.emit(MapEvent(type=MOVE, alt_key=alt_key))

    def project(self, point: GeoPoint) -> ScreenPoint:
        """Convert geographic coordinates to a CSS pixel position."""
        world = TILE_SIZE * 2.0**self._zoom
        dx = _mercator_x(point.lng, world) - _mercator_x(self._center.lng, world)
        dy = _mercator_y(point.lat, world) - _mercator_y(self._center.lat, world)
        theta = math.radians(self._bearing)
        sx = dx * math.cos(theta) + dy * math.sin(theta)
        sy = -dx * math.sin(theta) + dy * math.cos(theta)
        return ScreenPoint(
            x=sx + self._canvas.css_width / 2,
            y=sy + self._canvas.css_height / 2,
        )

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        world = TILE_SIZE * 2.0**self._zoom
        sx = point.x - self._canvas.css_width / 2
        sy = point.y - self._canvas.css_height / 2
        theta = math.radians(self._bearing)
        dx = sx * math.cos(theta) - sy * math.sin(theta)
        dy = sx * math.sin(theta) + sy * math.cos(theta)
        x = _mercator_x(self._center.lng, world) + dx
        y = _mercator_y(self._center.lat, world) + dy
        return GeoPoint(lng=_mercator_lng(x, world), lat=_mercator_lat(y, world))

    # --- Sources and layers ---

    def add_source(self, source_id: str, data: dict[str, Any]) -> None:
        if source_id in self.sources:
            raise ValueError(f"Source {source_id!r} already exists")
        self.sources[source_id] = data

    def remove_source(self, source_id: str) -> None:
        self.sources.pop(source_id, None)
        self.feature_states = {
            key: state for key, state in self.feature_states.items() if key[0] != source_id
        }

    def add_layer(self, layer: dict[str, Any], before_id: str | None = None) -> None:
        layer_id = layer["id"]
        if layer_id in self.layers:
            raise ValueError(f"Layer {layer_id!r} already exists")
        if layer.get("source") not in self.sources:
            raise ValueError(f"Layer {layer_id!r} references unknown source")
        self.layers[layer_id] = layer
        if before_id is not None and before_id in self.layer_order:
            self.layer_order.insert(self.layer_order.index(before_id), layer_id)
        else:
            self.layer_order.append(layer_id)

    def remove_layer(self, layer_id: str) -> None:
        self.layers.pop(layer_id, None)
        if layer_id in self.layer_order:
            self.layer_order.remove(layer_id)

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self.layers

    def set_layer_data(self, source_id: str, data: dict[str, Any]) -> None:
        if source_id not in self.sources:
            raise KeyError(f"Unknown source {source_id!r}")
        self.sources[source_id] = data

    def set_feature_state(
        self, source_id: str, feature_id: int, state: dict[str, Any]
    ) -> None:
        self.feature_states.setdefault((source_id, feature_id), {}).update(state)

    def get_feature_state(self, source_id: str, feature_id: int) -> dict[str, Any]:
        return dict(self.feature_states.get((source_id, feature_id), {}))

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None:
        self.layers[layer_id].setdefault("paint", {})[name] = value

    # --- Interaction ---

    def drag_pan_enabled(self) -> bool:
        return self._drag_pan

    def enable_drag_pan(self) -> None:
        self._drag_pan = True

    def disable_drag_pan(self) -> None:
        self._drag_pan = False

    def get_cursor(self) -> str:
        return self._cursor

    def set_cursor(self, cursor: str) -> None:
        self._cursor = cursor

    # --- Events ---

    def on(
        self,
        event: str,
        handler: MapEventHandler,
        layer_id: str | None = None,
    ) -> Unsubscribe:
        entry = (layer_id, handler)
        self._handlers[event].append(entry)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if entry in handlers:
                handlers.remove(entry)

        return unsubscribe

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def emit(self, event: MapEvent) -> None:
        """Deliver an event to its subscribers.

        Handlers subscribed with a layer id only receive events carrying
        the same layer id; unscoped handlers receive every event of the
        type.
        """
        for layer_id, handler in list(self._handlers.get(event.type, [])):
            if layer_id is None or layer_id == event.layer_id:
                handler(event)
