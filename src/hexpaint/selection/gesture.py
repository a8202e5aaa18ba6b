"""Pointer gesture state machine for painting the selection.

A gesture starts at pointer-down on a cell and ends at pointer-up. Its
mode (add or remove) is decided once, at pointer-down: pressing on a
selected cell erases, pressing anywhere else paints. The mode never flips
mid-gesture.

States:
    - IDLE: no pointer is down.
    - PENDING_PRESS: pointer is down, long-press timer running.
    - LONG_PRESS_PAINTING: timer fired; map panning is disabled and every
      new cell the pointer enters gets the gesture's mode applied.
    - DRAGGING_WITHOUT_PAINT: pointer moved before the timer fired; the
      gesture is treated as a map pan and applies nothing.

A tap (pointer-down then pointer-up with no movement and no long press)
applies the mode to the starting cell once.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from hexpaint.grid.index import CellId
from hexpaint.scheduling import SchedulerProtocol, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_LONG_PRESS_MS = 500
PAINT_CURSOR = "crosshair"


class GestureState(Enum):
    """Gesture states."""

    IDLE = "idle"
    PENDING_PRESS = "pending_press"
    LONG_PRESS_PAINTING = "long_press_painting"
    DRAGGING_WITHOUT_PAINT = "dragging_without_paint"


class GestureMode(Enum):
    """What a gesture does to the cells it touches."""

    ADD = "add"
    REMOVE = "remove"


class SelectionTarget(Protocol):
    """The selection operations a gesture needs."""

    def contains(self, cell: CellId) -> bool: ...

    def add(self, cell: CellId) -> None: ...

    def remove(self, cell: CellId) -> None: ...


class PaintSurfaceProtocol(Protocol):
    """Map interaction controls toggled while painting."""

    def drag_pan_enabled(self) -> bool: ...

    def enable_drag_pan(self) -> None: ...

    def disable_drag_pan(self) -> None: ...

    def get_cursor(self) -> str: ...

    def set_cursor(self, cursor: str) -> None: ...


@dataclass
class Gesture:
    """Fixed parameters and progress of one gesture.

    Attributes:
        number: Sequence number of the gesture within its controller.
        starting_cell: Cell under the pointer at pointer-down.
        mode: Add or remove, fixed for the whole gesture.
        initial_drag_pan: Whether map panning was enabled at pointer-down.
        initial_cursor: Cursor at pointer-down, restored after painting.
        moved: Whether any pointer movement happened.
        last_dragged_cell: Last cell the mode was applied to while dragging.
        painted: Cells the mode has been applied to in this gesture.
    """

    number: int
    starting_cell: CellId
    mode: GestureMode
    initial_drag_pan: bool
    initial_cursor: str
    moved: bool = False
    last_dragged_cell: CellId | None = None
    painted: set[CellId] = field(default_factory=set)


class GestureController:
    """Translates pointer events into selection add/remove calls.

    Pointer events are expected to be resolved to cell ids (or None when
    the pointer is not over a resolvable cell) by the caller.

    Usage:
        controller = GestureController(selection, scheduler, surface)
        controller.pointer_down(cell)
        controller.pointer_up()  # tap: toggles cell
    """

    def __init__(
        self,
        selection: SelectionTarget,
        scheduler: SchedulerProtocol,
        surface: PaintSurfaceProtocol,
        *,
        long_press_ms: float = DEFAULT_LONG_PRESS_MS,
    ) -> None:
        self._selection = selection
        self._scheduler = scheduler
        self._surface = surface
        self._long_press_ms = long_press_ms
        self._state = GestureState.IDLE
        self._gesture: Gesture | None = None
        self._timer: TimerHandle | None = None
        self._numbers = itertools.count(1)

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def gesture(self) -> Gesture | None:
        """The gesture in progress, None when idle."""
        return self._gesture

    def pointer_down(self, cell: CellId | None) -> None:
        """Start a gesture on a cell.

        A pointer-down that does not resolve to a cell is ignored. If a
        gesture is already in progress it is finished first.
        """
        if self._state is not GestureState.IDLE:
            self.pointer_up()
        if cell is None:
            return

        mode = GestureMode.REMOVE if self._selection.contains(cell) else GestureMode.ADD
        self._gesture = Gesture(
            number=next(self._numbers),
            starting_cell=cell,
            mode=mode,
            initial_drag_pan=self._surface.drag_pan_enabled(),
            initial_cursor=self._surface.get_cursor(),
        )
        self._timer = self._scheduler.schedule(self._long_press_ms, self._on_long_press)
        self._transition(GestureState.PENDING_PRESS)

    def pointer_move(self, cell: CellId | None) -> None:
        """Handle pointer movement over a cell (or over nothing)."""
        gesture = self._gesture
        if gesture is None:
            return
        gesture.moved = True

        if self._state is GestureState.PENDING_PRESS:
            self._cancel_timer()
            self._transition(GestureState.DRAGGING_WITHOUT_PAINT)
            return

        if self._state is not GestureState.LONG_PRESS_PAINTING or cell is None:
            return
        if cell == gesture.last_dragged_cell or cell in gesture.painted:
            return
        self._apply(cell)
        gesture.last_dragged_cell = cell

    def pointer_up(self) -> None:
        """Finish the gesture in progress."""
        self._cancel_timer()
        gesture = self._gesture
        if gesture is None:
            return

        if self._state is GestureState.LONG_PRESS_PAINTING:
            self._restore_surface(gesture)
        elif not gesture.moved:
            logger.debug("Tap on %s (%s)", gesture.starting_cell, gesture.mode.value)
            self._apply(gesture.starting_cell)

        self._transition(GestureState.IDLE)
        self._gesture = None

    def cancel(self) -> None:
        """Abort the gesture without applying anything further."""
        self._cancel_timer()
        gesture = self._gesture
        if gesture is not None and self._state is GestureState.LONG_PRESS_PAINTING:
            self._restore_surface(gesture)
        self._transition(GestureState.IDLE)
        self._gesture = None

    def _on_long_press(self) -> None:
        self._timer = None
        gesture = self._gesture
        if gesture is None or self._state is not GestureState.PENDING_PRESS:
            return
        logger.debug("Long press on %s (%s)", gesture.starting_cell, gesture.mode.value)
        self._apply(gesture.starting_cell)
        gesture.last_dragged_cell = gesture.starting_cell
        self._surface.disable_drag_pan()
        self._surface.set_cursor(PAINT_CURSOR)
        self._transition(GestureState.LONG_PRESS_PAINTING)

    def _apply(self, cell: CellId) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        if gesture.mode is GestureMode.ADD:
            self._selection.add(cell)
        else:
            self._selection.remove(cell)
        gesture.painted.add(cell)

    def _restore_surface(self, gesture: Gesture) -> None:
        self._surface.set_cursor(gesture.initial_cursor)
        if gesture.initial_drag_pan:
            self._surface.enable_drag_pan()

    def _cancel_timer(self) -> None:
        self._scheduler.cancel(self._timer)
        self._timer = None

    def _transition(self, state: GestureState) -> None:
        if state is not self._state:
            logger.debug(
                "Gesture %s -> %s",
                self._state.value,
                state.value,
                extra={"gesture": self._gesture.number if self._gesture else None},
            )
        self._state = state
