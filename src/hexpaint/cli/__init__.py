"""CLI module for hexpaint.

Provides commands for inspecting the zoom to resolution mapping, building
grids for a bounding box and painting selections from points.
"""

from __future__ import annotations

from hexpaint.cli.main import app

__all__ = ["app"]
