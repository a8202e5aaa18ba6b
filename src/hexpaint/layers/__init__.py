"""Map layers for drawing and painting the H3 grid.

Public API:
    - H3GridLayer: Draws the grid for the current camera with hover highlight.
    - H3SelectionLayer: Grid layer plus tap/long-press painting of a selection.
    - MoveThrottle: Rate limiter for redraws during camera movement.
"""

from hexpaint.layers.grid_layer import CellEventCallback, H3GridLayer
from hexpaint.layers.selection_layer import DEFAULT_HIGHLIGHT, H3SelectionLayer
from hexpaint.layers.throttle import (
    DEFAULT_COOLDOWN_MS,
    DEFAULT_FINISH_MS,
    MoveThrottle,
    ThrottleState,
)

__all__ = [
    "DEFAULT_COOLDOWN_MS",
    "DEFAULT_FINISH_MS",
    "DEFAULT_HIGHLIGHT",
    "CellEventCallback",
    "H3GridLayer",
    "H3SelectionLayer",
    "MoveThrottle",
    "ThrottleState",
]
