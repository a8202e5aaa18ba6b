"""Geometry primitives for hexpaint.

This module provides immutable Pydantic models for the two coordinate
spaces the engine moves between: geographic (longitude, latitude in
degrees) and screen (CSS pixels, origin top-left). Canvas dimensions are
reported in device pixels together with the device pixel ratio, the same
way a browser canvas reports them.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class GeoPoint(BaseModel, frozen=True):
    """A geographic position in degrees.

    Longitude is deliberately unbounded: rings normalized across the
    antimeridian may carry longitudes beyond +/-180.

    Attributes:
        lng: Longitude in degrees (east positive).
        lat: Latitude in degrees (north positive).
    """

    lng: float = Field(..., description="Longitude in degrees")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (lng, lat) tuple, the GeoJSON axis order."""
        return (self.lng, self.lat)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create GeoPoint from (lng, lat) tuple."""
        return cls(lng=coord[0], lat=coord[1])


class ScreenPoint(BaseModel, frozen=True):
    """A position on the map canvas in CSS pixels.

    Attributes:
        x: Horizontal position (pixels from left edge).
        y: Vertical position (pixels from top edge).
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create ScreenPoint from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])


class CanvasSize(BaseModel, frozen=True):
    """Size of the map canvas.

    Attributes:
        width: Canvas width in device pixels.
        height: Canvas height in device pixels.
        device_pixel_ratio: Device pixels per CSS pixel.
    """

    width: float = Field(..., ge=0, description="Width in device pixels")
    height: float = Field(..., ge=0, description="Height in device pixels")
    device_pixel_ratio: float = Field(default=1.0, gt=0)

    @property
    def css_width(self) -> float:
        """Width in CSS pixels."""
        return self.width / self.device_pixel_ratio

    @property
    def css_height(self) -> float:
        """Height in CSS pixels."""
        return self.height / self.device_pixel_ratio

    def relative_to_screen(self, rx: float, ry: float) -> ScreenPoint:
        """Map a relative (0..1, 0..1) canvas position to CSS pixels."""
        return ScreenPoint(x=rx * self.css_width, y=ry * self.css_height)
