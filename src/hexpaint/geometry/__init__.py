"""Geometry module for hexpaint.

This package provides coordinate primitives and the polygon helpers the
grid and selection engines are built on.

Key Components:
    - Primitives: GeoPoint, ScreenPoint, CanvasSize models
    - GeoMath: sign, bounding boxes, buffering, boolean operations,
      antimeridian splitting and geodesic disks
    - Antimeridian: ring normalization across +/-180 longitude
    - Poles: near-pole detection

Example:
    from shapely.geometry import Polygon
    from hexpaint.geometry import normalize_polygon

    cell = Polygon([(179.5, 0), (-179.5, 0), (-179.5, 1), (179.5, 1)])
    fixed, corrected = normalize_polygon(cell)  # corrected is True
"""

from hexpaint.geometry.antimeridian import (
    normalize_polygon,
    normalize_ring,
    normalize_rings,
)
from hexpaint.geometry.geomath import (
    BBox,
    Coord,
    bbox_size,
    bounding_box,
    buffer_degrees,
    closed_ring,
    difference,
    feature,
    feature_collection,
    geodesic_disk,
    intersects,
    is_antimeridian_side,
    iter_polygons,
    polygon_rings,
    round_half_up,
    scale_about_centroid,
    shift_longitude,
    sign,
    split_at_antimeridian,
    union,
)
from hexpaint.geometry.poles import DEFAULT_POLE_LATITUDE, is_close_to_pole
from hexpaint.geometry.primitives import CanvasSize, GeoPoint, ScreenPoint

__all__ = [
    "DEFAULT_POLE_LATITUDE",
    "BBox",
    "CanvasSize",
    "Coord",
    "GeoPoint",
    "ScreenPoint",
    "bbox_size",
    "bounding_box",
    "buffer_degrees",
    "closed_ring",
    "difference",
    "feature",
    "feature_collection",
    "geodesic_disk",
    "intersects",
    "is_antimeridian_side",
    "is_close_to_pole",
    "iter_polygons",
    "normalize_polygon",
    "normalize_ring",
    "normalize_rings",
    "polygon_rings",
    "round_half_up",
    "scale_about_centroid",
    "shift_longitude",
    "sign",
    "split_at_antimeridian",
    "union",
]
