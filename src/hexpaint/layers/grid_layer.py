"""Map layer that draws the H3 grid for the current camera.

The layer owns one GeoJSON source and two style layers (an invisible fill
used for hit-testing and hover, and the cell outlines). It rebuilds the
grid wholesale on camera movement, throttled by MoveThrottle, and keeps a
single hovered cell highlighted through feature state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from hexpaint.camera import CameraPosition, PositionRecorder
from hexpaint.config import settings
from hexpaint.exceptions import ViewportUnavailable
from hexpaint.geometry.geomath import feature_collection
from hexpaint.geometry.primitives import ScreenPoint
from hexpaint.grid.builder import GridEngine, GridResult
from hexpaint.grid.features import IdRegistry
from hexpaint.grid.index import CellId
from hexpaint.grid.viewport import sample_viewport, unproject_point
from hexpaint.layers.throttle import MoveThrottle
from hexpaint.map.types import (
    MOUSELEAVE,
    MOUSEMOVE,
    MOVE,
    REMOVE,
    MapEvent,
    MapViewProtocol,
    Unsubscribe,
)
from hexpaint.scheduling import SchedulerProtocol
from hexpaint.utils.logging import set_correlation_context

logger = logging.getLogger(__name__)

CellEventCallback = Callable[[MapEvent, CellId | None], None]


class H3GridLayer:
    """Draws the cell grid covering the visible map area.

    Usage:
        layer = H3GridLayer(scheduler=AsyncioScheduler())
        layer.add_to(map_view)
        ...
        layer.remove()
    """

    def __init__(
        self,
        engine: GridEngine | None = None,
        *,
        scheduler: SchedulerProtocol,
        registry: IdRegistry | None = None,
        samples_per_side: int | None = None,
        cooldown_ms: float | None = None,
        finish_ms: float | None = None,
        position_recorder: PositionRecorder | None = None,
    ) -> None:
        """Initialize the layer.

        Args:
            engine: Grid engine. Defaults to a new GridEngine.
            scheduler: Timer source for move throttling.
            registry: Layer id registry. Share one registry between layers
                placed on the same map so their source ids do not collide.
            samples_per_side: Viewport samples per canvas edge.
            cooldown_ms: Move throttle cool-down.
            finish_ms: Delay of the trailing redraw after the cool-down.
            position_recorder: Receives the camera position on every map
                move so it can be remembered once the camera settles.
        """
        self.id = (registry or IdRegistry()).next_id()
        self._engine = engine or GridEngine.from_settings()
        self._scheduler = scheduler
        self._samples_per_side = samples_per_side or settings.VIEWPORT_SAMPLES_PER_SIDE
        self._throttle = MoveThrottle(
            scheduler,
            self.redraw,
            cooldown_ms=settings.MOVE_THROTTLE_MS if cooldown_ms is None else cooldown_ms,
            finish_ms=settings.MOVE_FINISH_MS if finish_ms is None else finish_ms,
        )
        self._position_recorder = position_recorder
        self._map: MapViewProtocol | None = None
        self._top_layer_id: str | None = None
        self._hovered_feature_id: int | None = None
        self._subscriptions: list[Unsubscribe] = []
        self._redraws = 0
        self._last_result: GridResult | None = None

    # --- Identifiers ---

    @property
    def source_id(self) -> str:
        return f"h3-grid-{self.id}"

    @property
    def fill_layer_id(self) -> str:
        return f"h3-grid-fill-{self.id}"

    @property
    def lines_layer_id(self) -> str:
        return f"h3-grid-lines-{self.id}"

    @property
    def map(self) -> MapViewProtocol | None:
        return self._map

    @property
    def engine(self) -> GridEngine:
        return self._engine

    @property
    def scheduler(self) -> SchedulerProtocol:
        return self._scheduler

    @property
    def top_layer_id(self) -> str | None:
        return self._top_layer_id

    @property
    def resolution(self) -> int:
        return self._engine.resolution

    @property
    def last_result(self) -> GridResult | None:
        return self._last_result

    @property
    def hovered_feature_id(self) -> int | None:
        return self._hovered_feature_id

    # --- Lifecycle ---

    def add_to(self, map_view: MapViewProtocol, top_layer_id: str | None = None) -> None:
        """Attach the layer to a map and draw the grid once.

        Args:
            map_view: Map to draw on.
            top_layer_id: Existing layer to insert below (e.g. the first
                label layer), or None to add on top.
        """
        self._map = map_view
        self._top_layer_id = top_layer_id

        map_view.add_source(self.source_id, feature_collection())
        map_view.add_layer(
            {
                "id": self.fill_layer_id,
                "type": "fill",
                "source": self.source_id,
                "paint": {"fill-color": "transparent"},
            },
            top_layer_id,
        )
        map_view.add_layer(
            {
                "id": self.lines_layer_id,
                "type": "line",
                "source": self.source_id,
                "paint": {
                    "line-color": ["case", ["has", "crossesAntimeridian"], "red", "#8884"],
                    "line-opacity": 1,
                    "line-width": [
                        "case",
                        ["boolean", ["feature-state", "hovered"], False],
                        2,
                        0.4,
                    ],
                },
                "filter": ["!", ["has", "closeToPole"]],
            },
            top_layer_id,
        )

        self._subscriptions = [
            map_view.on(REMOVE, lambda _event: self.remove()),
            map_view.on(MOVE, self._handle_map_move),
            map_view.on(MOUSEMOVE, self._handle_cell_move, self.fill_layer_id),
            map_view.on(MOUSELEAVE, self._handle_cell_leave, self.fill_layer_id),
        ]

        self.redraw()

    def remove(self) -> None:
        """Detach from the map. Safe to call more than once."""
        map_view = self._map
        if map_view is None:
            return
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []
        self._throttle.cancel()
        if self._position_recorder is not None:
            self._position_recorder.flush()
        map_view.remove_layer(self.lines_layer_id)
        map_view.remove_layer(self.fill_layer_id)
        map_view.remove_source(self.source_id)
        self._map = None
        self._hovered_feature_id = None

    def on(self, event: str, callback: CellEventCallback) -> Unsubscribe | None:
        """Subscribe to an event on the grid's fill layer.

        The callback receives the event and the id of the cell under the
        pointer, if any.

        Returns:
            Unsubscribe function, or None when the layer is not on a map.
        """
        map_view = self._map
        if map_view is None:
            return None

        def handler(event: MapEvent) -> None:
            cell = (event.properties or {}).get("id")
            callback(event, cell)

        return map_view.on(event, handler, self.fill_layer_id)

    # --- Drawing ---

    def redraw(self) -> GridResult | None:
        """Rebuild the grid for the current camera and push it to the map.

        Returns:
            The new grid, or None if nothing was drawn (not attached, or
            the viewport could not be projected; the previous grid stays).
        """
        map_view = self._map
        if map_view is None:
            return None

        self._redraws += 1
        set_correlation_context(layer_id=self.id, redraw=self._redraws)
        try:
            view = sample_viewport(
                map_view.unproject, map_view.get_canvas_size(), self._samples_per_side
            )
        except ViewportUnavailable as e:
            logger.debug("Skipping grid redraw: %s", e)
            return None

        result = self._engine.build(view, map_view.get_zoom())
        map_view.set_layer_data(self.source_id, result.to_geojson())
        self._last_result = result
        logger.debug(
            "Redrew grid with %d cells at resolution %d",
            len(result.cells),
            result.resolution,
        )
        return result

    def cell_from_screen(self, point: ScreenPoint) -> CellId | None:
        """Resolve a canvas position to the cell under it at the drawn resolution."""
        map_view = self._map
        if map_view is None:
            return None
        try:
            geo = unproject_point(map_view.unproject, point)
        except ViewportUnavailable as e:
            logger.debug("No cell under pointer: %s", e)
            return None
        return self._engine.cell_at(geo)

    # --- Event handlers ---

    def _handle_map_move(self, event: MapEvent) -> None:
        self._record_position()
        if event.alt_key:
            return
        self._throttle.move()

    def _record_position(self) -> None:
        map_view = self._map
        if self._position_recorder is None or map_view is None:
            return
        center = map_view.get_center()
        self._position_recorder.record(
            CameraPosition(lng=center.lng, lat=center.lat, zoom=map_view.get_zoom())
        )

    def _handle_cell_move(self, event: MapEvent) -> None:
        map_view = self._map
        if map_view is None:
            return
        feature_id = event.feature_id
        if self._hovered_feature_id is not None and self._hovered_feature_id != feature_id:
            self._set_hovered(self._hovered_feature_id, False)
            self._hovered_feature_id = None
        if self._hovered_feature_id is None and feature_id is not None:
            self._hovered_feature_id = feature_id
            self._set_hovered(feature_id, True)

    def _handle_cell_leave(self, _event: MapEvent) -> None:
        if self._hovered_feature_id is not None:
            self._set_hovered(self._hovered_feature_id, False)
            self._hovered_feature_id = None

    def _set_hovered(self, feature_id: int, hovered: bool) -> None:
        if self._map is not None:
            state: dict[str, Any] = {"hovered": hovered}
            self._map.set_feature_state(self.source_id, feature_id, state)
