"""Cell selection engine.

Public API:
    - SelectionSet: The selection as one polygonal region.
    - GestureController: Pointer gesture state machine driving a selection.
    - GestureState / GestureMode: States and modes of a gesture.
    - PaintSurfaceProtocol: Map controls toggled while painting.
"""

from hexpaint.selection.gesture import (
    DEFAULT_LONG_PRESS_MS,
    PAINT_CURSOR,
    Gesture,
    GestureController,
    GestureMode,
    GestureState,
    PaintSurfaceProtocol,
    SelectionTarget,
)
from hexpaint.selection.selection_set import SelectionListener, SelectionSet

__all__ = [
    "DEFAULT_LONG_PRESS_MS",
    "PAINT_CURSOR",
    "Gesture",
    "GestureController",
    "GestureMode",
    "GestureState",
    "PaintSurfaceProtocol",
    "SelectionListener",
    "SelectionSet",
    "SelectionTarget",
]
