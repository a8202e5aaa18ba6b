"""Viewport to cell grid construction.

This module implements the grid pipeline run on every redraw:

1. Resolution: derived from the camera zoom (see resolution.py).
2. Chunking: the viewport is split into small squares (see chunker.py).
3. Rasterization: every chunk is buffered outward, split at the
   antimeridian and rasterized by cell-center containment. The buffer is
   at least one chunk side and at least one cell circumradius measured in
   longitude degrees at the chunk's poleward edge, so every cell touching
   the chunk has its center inside the buffer. Cell ids are deduplicated
   across chunks.
4. Annotation: each unique cell whose polygon touches the viewport becomes
   a CellFeature with a fresh display id, a near-pole flag and
   antimeridian-normalized rings. Cells picked up only by the buffer are
   dropped.

The output is rebuilt wholesale on every call; nothing is patched
incrementally.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from hexpaint.config import Settings, settings
from hexpaint.geometry.antimeridian import normalize_rings
from hexpaint.geometry.geomath import (
    Coord,
    buffer_degrees,
    feature_collection,
    shift_longitude,
    split_at_antimeridian,
)
from hexpaint.geometry.poles import DEFAULT_POLE_LATITUDE, is_close_to_pole
from hexpaint.geometry.primitives import GeoPoint
from hexpaint.grid.chunker import DEFAULT_CHUNK_SCALE, chunk_size, chunk_viewport
from hexpaint.grid.features import CellFeature, IdRegistry
from hexpaint.grid.index import CellId, CellIndexProtocol, H3CellIndex
from hexpaint.grid.resolution import ResolutionSelectorProtocol, ZoomResolutionSelector

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111_320.0

# Cells vary in size around the average edge length
CELL_REACH = 1.5

# Latitude cap for the longitude stretch so the buffer stays finite
MAX_STRETCH_LATITUDE = 89.0

# World copies a normalized cell ring may need to be moved into
_WORLD_OFFSETS = (0.0, -360.0, 360.0)


@dataclass(frozen=True)
class GridResult:
    """Result of one grid build.

    Attributes:
        resolution: Resolution the cells were generated at.
        chunk_size: Chunk side in degrees used for rasterization.
        cells: Unique cell features in first-seen order.
    """

    resolution: int
    chunk_size: float
    cells: list[CellFeature] = field(default_factory=list)

    @property
    def cell_ids(self) -> list[CellId]:
        return [cell.cell_id for cell in self.cells]

    def to_geojson(self) -> dict[str, Any]:
        """Render as a GeoJSON FeatureCollection usable as a map source."""
        return feature_collection(cell.to_geojson() for cell in self.cells)


class GridEngine:
    """Builds the cell grid covering a viewport.

    The engine remembers the resolution of its last build, which the
    selection layer uses to resolve pointer positions to cells at the same
    resolution the user sees.

    Example:
        >>> engine = GridEngine()
        >>> result = engine.build(view, zoom=10)
        >>> payload = result.to_geojson()
    """

    __slots__ = (
        "_chunk_scale",
        "_display_ids",
        "_index",
        "_pole_latitude",
        "_resolution",
        "_resolution_selector",
    )

    def __init__(
        self,
        index: CellIndexProtocol | None = None,
        resolution_selector: ResolutionSelectorProtocol | None = None,
        *,
        chunk_scale: float = DEFAULT_CHUNK_SCALE,
        pole_latitude: float = DEFAULT_POLE_LATITUDE,
        display_ids: IdRegistry | None = None,
    ) -> None:
        """Initialize the grid engine.

        Args:
            index: Spatial index. Defaults to H3CellIndex.
            resolution_selector: Zoom to resolution strategy. Defaults to
                ZoomResolutionSelector with the 22 -> 15 scale.
            chunk_scale: Viewport shrink factor used to size chunks.
            pole_latitude: Latitude beyond which cells are flagged.
            display_ids: Registry for feature display ids. Each engine gets
                its own registry unless one is shared explicitly.
        """
        self._index = index or H3CellIndex()
        self._resolution_selector = resolution_selector or ZoomResolutionSelector()
        self._chunk_scale = chunk_scale
        self._pole_latitude = pole_latitude
        self._display_ids = display_ids or IdRegistry()
        self._resolution = 0

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        index: CellIndexProtocol | None = None,
    ) -> GridEngine:
        """Create an engine configured from Settings (defaults to the global settings)."""
        config = config or settings
        return cls(
            index,
            ZoomResolutionSelector(config.MAX_ZOOM, config.MAX_RESOLUTION),
            chunk_scale=config.CHUNK_SCALE,
            pole_latitude=config.CLOSE_TO_POLE_LATITUDE,
        )

    @property
    def index(self) -> CellIndexProtocol:
        return self._index

    @property
    def resolution(self) -> int:
        """Resolution of the most recent build (0 before the first build)."""
        return self._resolution

    def resolution_for_zoom(self, zoom: float) -> int:
        return self._resolution_selector.select_resolution(zoom)

    def build(self, view: BaseGeometry, zoom: float) -> GridResult:
        """Build the grid for a viewport at a zoom level.

        Args:
            view: Viewport polygon in (lng, lat) degrees.
            zoom: Camera zoom level.

        Returns:
            GridResult; empty when the viewport is degenerate.
        """
        self._resolution = self.resolution_for_zoom(zoom)
        side = chunk_size(view, self._chunk_scale)
        chunks = chunk_viewport(view, self._chunk_scale)

        cell_ids = self._rasterize(chunks, side)
        view_pieces = split_at_antimeridian(view)
        cells: list[CellFeature] = []
        for cell_id in cell_ids:
            raw_ring = self._index.cell_to_ring(cell_id)
            rings, crosses = normalize_rings([raw_ring])
            if _touches_any(rings, view_pieces):
                cells.append(self._annotate(cell_id, raw_ring, rings, crosses))

        logger.debug(
            "Built grid: %d of %d cells from %d chunks at resolution %d",
            len(cells),
            len(cell_ids),
            len(chunks),
            self._resolution,
        )
        return GridResult(resolution=self._resolution, chunk_size=side, cells=cells)

    def chunk_margin(self, chunk: BaseGeometry, side: float) -> float:
        """Return the buffer distance in degrees for one chunk.

        A cell touching the chunk has its center within one circumradius
        (the edge length for a hexagon) of it. Away from the equator that
        distance spans more longitude degrees, so the edge is stretched by
        the latitude of the chunk's poleward edge.
        """
        edge_m = self._index.average_edge_length_m(self._resolution)
        edge_deg = CELL_REACH * edge_m / METERS_PER_DEGREE
        _, miny, _, maxy = chunk.bounds
        lat = min(max(abs(miny), abs(maxy)) + edge_deg, MAX_STRETCH_LATITUDE)
        reach = edge_deg / math.cos(math.radians(lat))
        return min(max(side, reach), 180.0)

    def _rasterize(self, chunks: Iterable[BaseGeometry], side: float) -> list[CellId]:
        """Collect unique cell ids over all buffered chunks."""
        seen: dict[CellId, None] = {}
        for chunk in chunks:
            grown = buffer_degrees(chunk, self.chunk_margin(chunk, side))
            for piece in split_at_antimeridian(grown):
                for cell_id in self._index.polygon_to_cells(piece, self._resolution):
                    seen.setdefault(cell_id, None)
        return list(seen)

    def make_feature(self, cell_id: CellId) -> CellFeature:
        """Turn a cell id into an annotated, normalized CellFeature."""
        raw_ring = self._index.cell_to_ring(cell_id)
        rings, crosses = normalize_rings([raw_ring])
        return self._annotate(cell_id, raw_ring, rings, crosses)

    def _annotate(
        self,
        cell_id: CellId,
        raw_ring: list[Coord],
        rings: list[list[Coord]],
        crosses: bool,
    ) -> CellFeature:
        close_to_pole = is_close_to_pole([raw_ring], self._pole_latitude)
        return CellFeature(
            display_id=self._display_ids.next_id(),
            cell_id=cell_id,
            rings=tuple(tuple(ring) for ring in rings),
            close_to_pole=close_to_pole,
            crosses_antimeridian=crosses,
        )

    def cell_at(self, point: GeoPoint) -> CellId | None:
        """Resolve a geographic point to a cell at the current resolution."""
        if not (math.isfinite(point.lng) and math.isfinite(point.lat)):
            return None
        return self._index.point_to_cell(point.lng, point.lat, self._resolution)


def _touches_any(rings: list[list[Coord]], view_pieces: list[Polygon]) -> bool:
    """Check whether a normalized cell touches any piece of the viewport."""
    polygon = Polygon(rings[0], rings[1:])
    return any(
        piece.intersects(shift_longitude(polygon, offset))
        for offset in _WORLD_OFFSETS
        for piece in view_pieces
    )
