"""Splitting of the viewport into small square chunks.

The index's polygon rasterizer misbehaves on polygons that are very large,
wider than 180 degrees of longitude, or that cross +/-180. Rasterizing a
grid of small chunks instead keeps every call within a safe footprint.

Chunk size is derived from the viewport itself: the viewport is shrunk
about its centroid by ``scale`` (1/10 by default) and the shorter side of
the shrunk bounding box is used. This keeps the chunk count roughly
constant at every zoom while ignoring extreme aspect ratios.
"""

from __future__ import annotations

import logging
import math

from shapely.geometry import Polygon, box
from shapely.geometry.base import BaseGeometry

from hexpaint.exceptions import DegenerateChunk
from hexpaint.geometry.geomath import bbox_size, bounding_box, scale_about_centroid

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SCALE = 0.1


def chunk_size(view: BaseGeometry, scale: float = DEFAULT_CHUNK_SCALE) -> float:
    """Return the chunk side length in degrees for a viewport.

    Args:
        view: Viewport polygon.
        scale: Factor the viewport is shrunk by before measuring.

    Returns:
        min(width, height) of the shrunk viewport's bounding box; 0.0 for
        an empty viewport.
    """
    if view.is_empty:
        return 0.0
    width, height = bbox_size(bounding_box(scale_about_centroid(view, scale)))
    return min(width, height)


def make_chunk(minx: float, miny: float, side: float) -> Polygon:
    """Build one square chunk.

    Raises:
        DegenerateChunk: If side is not a positive, finite number.
    """
    if not (math.isfinite(side) and side > 0):
        raise DegenerateChunk("Chunk side must be positive", side=side)
    return box(minx, miny, minx + side, miny + side)


def chunk_viewport(view: BaseGeometry, scale: float = DEFAULT_CHUNK_SCALE) -> list[Polygon]:
    """Cover a viewport with square chunks.

    Squares are laid out over the viewport's bounding box, as many whole
    squares as fit along each axis, with the leftover margin split evenly
    on both sides. Only squares intersecting the viewport are kept.

    Args:
        view: Viewport polygon.
        scale: Chunk scale factor, see chunk_size().

    Returns:
        Chunk polygons in row-major order (west to east, then south to
        north). Empty when the viewport is degenerate.
    """
    side = chunk_size(view, scale)
    try:
        make_chunk(0.0, 0.0, side)
    except DegenerateChunk as e:
        logger.debug("Skipping degenerate viewport: %s", e)
        return []

    minx, miny, maxx, maxy = bounding_box(view)
    width, height = bbox_size((minx, miny, maxx, maxy))
    columns = math.floor(width / side)
    rows = math.floor(height / side)
    offset_x = (width - columns * side) / 2
    offset_y = (height - rows * side) / 2

    chunks: list[Polygon] = []
    for row in range(rows):
        for column in range(columns):
            chunk = make_chunk(
                minx + offset_x + column * side,
                miny + offset_y + row * side,
                side,
            )
            if chunk.intersects(view):
                chunks.append(chunk)

    logger.debug(
        "Chunked viewport into %d chunks (side=%.6f, grid=%dx%d)",
        len(chunks),
        side,
        columns,
        rows,
    )
    return chunks
