"""The painted selection as a single polygonal region.

The selection is real-world area, not a set of cell ids: adding a cell
unions its polygon in and removing a cell subtracts it. This keeps the
selection meaningful when the grid resolution changes with zoom, and a
cell painted at one resolution can be partly erased at another.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from shapely.geometry.base import BaseGeometry

from hexpaint.geometry.antimeridian import normalize_polygon
from hexpaint.geometry.geomath import (
    difference,
    feature,
    feature_collection,
    geodesic_disk,
    intersects,
    shift_longitude,
    union,
)
from hexpaint.grid.index import CellId, CellIndexProtocol, H3CellIndex

logger = logging.getLogger(__name__)

SelectionListener = Callable[[BaseGeometry | None], None]


class SelectionSet:
    """Owns the current selection geometry.

    Every mutation replaces the geometry wholesale and then notifies the
    listener with the new value (None when the selection is empty).

    Usage:
        selection = SelectionSet(on_change=redraw)
        selection.add(cell)
        selection.contains(cell)  # True
        selection.remove(cell)    # back to empty
    """

    __slots__ = ("_disk_vertices", "_geometry", "_index", "_on_change")

    def __init__(
        self,
        index: CellIndexProtocol | None = None,
        on_change: SelectionListener | None = None,
        *,
        disk_vertices: int = 64,
    ) -> None:
        """Initialize an empty selection.

        Args:
            index: Spatial index used to turn cell ids into polygons.
            on_change: Called after every mutation with the new geometry.
            disk_vertices: Ring vertices of the membership-test disk.
        """
        self._index = index or H3CellIndex()
        self._on_change = on_change
        self._disk_vertices = disk_vertices
        self._geometry: BaseGeometry | None = None

    @property
    def index(self) -> CellIndexProtocol:
        return self._index

    @property
    def geometry(self) -> BaseGeometry | None:
        """Current selection, a Polygon or MultiPolygon, or None if empty."""
        return self._geometry

    @property
    def is_empty(self) -> bool:
        return self._geometry is None

    def contains(self, cell: CellId) -> bool:
        """Check whether a cell is (at least partly) selected.

        Instead of intersecting the full cell polygon, a small disk at the
        cell's center with a radius of half the average edge length is
        tested. Cells that merely touch the selection along an edge are not
        reported as selected.
        """
        if self._geometry is None:
            return False
        center = self._index.cell_centroid(cell)
        edge_m = self._index.average_edge_length_m(self._index.cell_resolution(cell))
        disk = geodesic_disk(center, edge_m / 2, self._disk_vertices)
        # Cells near +/-180 may be stored in the neighbouring world copy
        return any(
            intersects(self._geometry, shift_longitude(disk, offset))
            for offset in (0.0, 360.0, -360.0)
        )

    def add(self, cell: CellId) -> None:
        """Union a cell's area into the selection."""
        self._geometry = union(self._geometry, self._cell_polygon(cell))
        logger.debug("Added cell %s to selection", cell)
        self._notify()

    def remove(self, cell: CellId) -> None:
        """Subtract a cell's area from the selection."""
        if self._geometry is None:
            logger.debug("Ignoring removal of %s from empty selection", cell)
        else:
            self._geometry = difference(self._geometry, self._cell_polygon(cell))
            logger.debug("Removed cell %s from selection", cell)
        self._notify()

    def clear(self) -> None:
        """Drop the whole selection."""
        self._geometry = None
        self._notify()

    def to_geojson(self) -> dict[str, Any]:
        """Render as a FeatureCollection with zero or one feature."""
        if self._geometry is None:
            return feature_collection()
        return feature_collection([feature(self._geometry)])

    def _cell_polygon(self, cell: CellId) -> BaseGeometry:
        polygon, _ = normalize_polygon(self._index.cell_to_polygon(cell))
        return polygon

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._geometry)
