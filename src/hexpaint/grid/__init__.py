"""Viewport to cell grid engine.

Public API:
    - GridEngine: Builds the annotated cell grid for a viewport and zoom.
    - GridResult: Cells of one build plus the resolution and chunk size used.
    - CellFeature: One cell with its display id and safety flags.
    - IdRegistry: Per-instance sequential id allocator.
    - H3CellIndex / CellIndexProtocol: Spatial index adapter.
    - ZoomResolutionSelector: Zoom to resolution mapping.
    - sample_viewport, chunk_viewport, chunk_size: pipeline stages.
"""

from hexpaint.grid.builder import GridEngine, GridResult
from hexpaint.grid.chunker import chunk_size, chunk_viewport, make_chunk
from hexpaint.grid.features import MAX_DISPLAY_ID, CellFeature, IdRegistry
from hexpaint.grid.index import CellId, CellIndexProtocol, H3CellIndex
from hexpaint.grid.resolution import (
    MAX_RESOLUTION,
    MAX_ZOOM,
    ResolutionSelectorProtocol,
    ZoomResolutionSelector,
    resolution_for_zoom,
)
from hexpaint.grid.viewport import perimeter_positions, sample_viewport, unproject_point

__all__ = [
    "MAX_DISPLAY_ID",
    "MAX_RESOLUTION",
    "MAX_ZOOM",
    "CellFeature",
    "CellId",
    "CellIndexProtocol",
    "GridEngine",
    "GridResult",
    "H3CellIndex",
    "IdRegistry",
    "ResolutionSelectorProtocol",
    "ZoomResolutionSelector",
    "chunk_size",
    "chunk_viewport",
    "make_chunk",
    "perimeter_positions",
    "resolution_for_zoom",
    "sample_viewport",
    "unproject_point",
]
