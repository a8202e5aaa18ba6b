"""Adapter over the H3 hierarchical hexagonal index.

The engine only needs a narrow slice of the index: rasterizing a polygon
to cells, turning a cell back into a ring, and a few per-cell measures.
H3 works in (lat, lng) order while everything else in hexpaint uses the
GeoJSON (lng, lat) order; the swap happens here and nowhere else.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Protocol

import h3
from shapely.geometry import Polygon

from hexpaint.geometry.geomath import Coord, closed_ring

CellId = str


class CellIndexProtocol(Protocol):
    """Protocol defining the spatial index operations the engine consumes.

    This protocol allows for dependency injection and testing with
    alternative index implementations.
    """

    def polygon_to_cells(self, polygon: Polygon, resolution: int) -> list[CellId]:
        """Return the cells whose centers fall inside polygon."""
        ...

    def cell_to_ring(self, cell: CellId) -> list[Coord]:
        """Return the closed (lng, lat) boundary ring of a cell."""
        ...

    def cell_to_polygon(self, cell: CellId) -> Polygon:
        """Return the boundary of a cell as a polygon."""
        ...

    def cell_centroid(self, cell: CellId) -> Coord:
        """Return the (lng, lat) center of a cell."""
        ...

    def average_edge_length_m(self, resolution: int) -> float:
        """Return the average hexagon edge length in metres."""
        ...

    def cell_resolution(self, cell: CellId) -> int:
        """Return the resolution a cell belongs to."""
        ...

    def point_to_cell(self, lng: float, lat: float, resolution: int) -> CellId:
        """Return the cell containing a point at the given resolution."""
        ...


class H3CellIndex:
    """CellIndexProtocol implementation backed by the ``h3`` library."""

    def polygon_to_cells(self, polygon: Polygon, resolution: int) -> list[CellId]:
        """Rasterize a polygon into cells by center containment.

        Args:
            polygon: Polygon with longitudes inside [-180, 180].
            resolution: H3 resolution in [0, 15].

        Returns:
            Cell ids, possibly empty for polygons smaller than a cell.
        """
        if polygon.is_empty:
            return []
        outer = _to_latlng_loop(polygon.exterior.coords)
        holes = [_to_latlng_loop(interior.coords) for interior in polygon.interiors]
        shape = h3.LatLngPoly(outer, *holes)
        return list(h3.polygon_to_cells(shape, resolution))

    def cell_to_ring(self, cell: CellId) -> list[Coord]:
        return closed_ring([(lng, lat) for lat, lng in h3.cell_to_boundary(cell)])

    def cell_to_polygon(self, cell: CellId) -> Polygon:
        return Polygon(self.cell_to_ring(cell))

    def cell_centroid(self, cell: CellId) -> Coord:
        lat, lng = h3.cell_to_latlng(cell)
        return (lng, lat)

    def average_edge_length_m(self, resolution: int) -> float:
        return float(h3.average_hexagon_edge_length(resolution, unit="m"))

    def cell_resolution(self, cell: CellId) -> int:
        return int(h3.get_resolution(cell))

    def point_to_cell(self, lng: float, lat: float, resolution: int) -> CellId:
        """Return the cell containing a point.

        Raises:
            ValueError: If the coordinates are not finite.
        """
        if not (math.isfinite(lng) and math.isfinite(lat)):
            raise ValueError(f"Cannot index non-finite point ({lng}, {lat})")
        return h3.latlng_to_cell(lat, lng, resolution)


def _to_latlng_loop(coords: Iterable[Sequence[float]]) -> list[tuple[float, float]]:
    """Convert a closed shapely ring to an open (lat, lng) loop."""
    loop = [(float(lat), float(lng)) for lng, lat, *_ in coords]
    if len(loop) > 1 and loop[0] == loop[-1]:
        loop.pop()
    return loop
