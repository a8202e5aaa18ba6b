"""Map layer for painting a selection onto the H3 grid.

H3SelectionLayer wraps an H3GridLayer rather than extending it: the grid
layer draws the cells and resolves pointer positions, the selection layer
feeds pointer events to a GestureController and renders the SelectionSet
as a filled region.
"""

from __future__ import annotations

import logging

from shapely.geometry.base import BaseGeometry

from hexpaint.config import settings
from hexpaint.grid.index import CellId
from hexpaint.layers.grid_layer import H3GridLayer
from hexpaint.map.types import (
    POINTERDOWN,
    POINTERMOVE,
    POINTERUP,
    REMOVE,
    MapEvent,
    MapViewProtocol,
    Unsubscribe,
)
from hexpaint.scheduling import SchedulerProtocol
from hexpaint.selection.gesture import GestureController
from hexpaint.selection.selection_set import SelectionSet
from hexpaint.utils.logging import set_correlation_context

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT = "#08f8"


class H3SelectionLayer:
    """Lets the user paint and erase cells by tapping and long-press dragging.

    Usage:
        layer = H3SelectionLayer(scheduler=scheduler)
        layer.add_to(map_view)
        layer.selection.geometry  # painted region, or None
    """

    def __init__(
        self,
        grid: H3GridLayer | None = None,
        *,
        scheduler: SchedulerProtocol | None = None,
        highlight: str = DEFAULT_HIGHLIGHT,
        long_press_ms: float | None = None,
    ) -> None:
        """Initialize the layer.

        Args:
            grid: Grid layer to compose. Defaults to a new H3GridLayer on
                the given scheduler.
            scheduler: Timer source. Required unless grid is given, in
                which case the grid's scheduler is used.
            highlight: Fill color of the selected region.
            long_press_ms: Hold time before painting starts.

        Raises:
            ValueError: If neither grid nor scheduler is given.
        """
        if grid is None:
            if scheduler is None:
                raise ValueError("H3SelectionLayer needs either a grid layer or a scheduler")
            grid = H3GridLayer(scheduler=scheduler)
        self._grid = grid
        self._scheduler = scheduler or grid.scheduler
        self._highlight = highlight
        self._long_press_ms = settings.LONG_PRESS_MS if long_press_ms is None else long_press_ms
        self._selection = SelectionSet(
            grid.engine.index,
            on_change=self._handle_selection_change,
            disk_vertices=settings.CONTAINS_DISK_VERTICES,
        )
        self._gestures: GestureController | None = None
        self._map: MapViewProtocol | None = None
        self._subscriptions: list[Unsubscribe] = []

    @property
    def id(self) -> int:
        return self._grid.id

    @property
    def source_id(self) -> str:
        return f"h3-selection-{self.id}"

    @property
    def fill_layer_id(self) -> str:
        return f"h3-selection-fill-{self.id}"

    @property
    def grid(self) -> H3GridLayer:
        return self._grid

    @property
    def selection(self) -> SelectionSet:
        return self._selection

    @property
    def gestures(self) -> GestureController | None:
        """Gesture controller, available while the layer is on a map."""
        return self._gestures

    @property
    def highlight(self) -> str:
        return self._highlight

    @highlight.setter
    def highlight(self, value: str) -> None:
        self._highlight = value
        if self._map is not None and self._map.has_layer(self.fill_layer_id):
            self._map.set_paint_property(self.fill_layer_id, "fill-color", value)
            self.redraw()

    def add_to(self, map_view: MapViewProtocol, top_layer_id: str | None = None) -> None:
        """Attach the grid and the selection fill to a map."""
        self._grid.add_to(map_view, top_layer_id)
        self._map = map_view
        self._gestures = GestureController(
            self._selection,
            self._scheduler,
            map_view,
            long_press_ms=self._long_press_ms,
        )

        map_view.add_source(self.source_id, self._selection.to_geojson())
        map_view.add_layer(
            {
                "id": self.fill_layer_id,
                "type": "fill",
                "source": self.source_id,
                "paint": {"fill-color": self._highlight},
            },
            top_layer_id,
        )

        self._subscriptions = [
            map_view.on(REMOVE, lambda _event: self.remove()),
            map_view.on(POINTERDOWN, self._handle_pointer_down),
            map_view.on(POINTERMOVE, self._handle_pointer_move),
            map_view.on(POINTERUP, self._handle_pointer_up),
        ]

    def remove(self) -> None:
        """Detach the selection fill, then the grid layer."""
        map_view = self._map
        if map_view is None:
            return
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []
        if self._gestures is not None:
            self._gestures.cancel()
            self._gestures = None
        map_view.remove_layer(self.fill_layer_id)
        map_view.remove_source(self.source_id)
        self._map = None
        self._grid.remove()

    def redraw(self) -> None:
        """Push the current selection to the map."""
        if self._map is None:
            return
        self._map.set_layer_data(self.source_id, self._selection.to_geojson())

    def _cell_for(self, event: MapEvent) -> CellId | None:
        if event.point is None:
            return None
        return self._grid.cell_from_screen(event.point)

    def _handle_pointer_down(self, event: MapEvent) -> None:
        if self._gestures is None:
            return
        self._gestures.pointer_down(self._cell_for(event))
        gesture = self._gestures.gesture
        if gesture is not None:
            set_correlation_context(layer_id=self.id, gesture=gesture.number)

    def _handle_pointer_move(self, event: MapEvent) -> None:
        if self._gestures is None or self._gestures.gesture is None:
            return
        self._gestures.pointer_move(self._cell_for(event))

    def _handle_pointer_up(self, _event: MapEvent) -> None:
        if self._gestures is not None:
            self._gestures.pointer_up()

    def _handle_selection_change(self, geometry: BaseGeometry | None) -> None:
        logger.debug("Selection changed (empty=%s)", geometry is None)
        self.redraw()
