"""Throttling of grid recomputation during continuous camera movement.

Rebuilding the grid on every camera move event is too expensive while the
user pans. The throttle recomputes immediately on the first move, ignores
moves for a cool-down window, then runs exactly one trailing recompute if
moves kept coming during the cool-down, so the final camera position is
always reflected.

States:
    - NO: idle, the next move recomputes immediately.
    - YES: cooling down, moves are only remembered.
    - FINISHING: cool-down over, a trailing recompute is scheduled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from hexpaint.scheduling import SchedulerProtocol, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = 500
DEFAULT_FINISH_MS = 100


class ThrottleState(Enum):
    """Move throttle states."""

    NO = "no"
    YES = "yes"
    FINISHING = "finishing"


class MoveThrottle:
    """Caps how often a callback runs under a stream of move events.

    Usage:
        throttle = MoveThrottle(scheduler, layer.redraw)
        map.on("move", lambda event: throttle.move())
    """

    def __init__(
        self,
        scheduler: SchedulerProtocol,
        callback: Callable[[], None],
        *,
        cooldown_ms: float = DEFAULT_COOLDOWN_MS,
        finish_ms: float = DEFAULT_FINISH_MS,
    ) -> None:
        self._scheduler = scheduler
        self._callback = callback
        self._cooldown_ms = cooldown_ms
        self._finish_ms = finish_ms
        self._state = ThrottleState.NO
        self._moved_during_cooldown = False
        self._cooldown_timer: TimerHandle | None = None
        self._finish_timer: TimerHandle | None = None

    @property
    def state(self) -> ThrottleState:
        return self._state

    def move(self) -> None:
        """Register a camera move."""
        if self._state is ThrottleState.YES:
            self._moved_during_cooldown = True
            return

        if self._state is ThrottleState.FINISHING:
            # A fresh move replaces the pending trailing run
            self._scheduler.cancel(self._finish_timer)
            self._finish_timer = None
            self._state = ThrottleState.NO

        self._state = ThrottleState.YES
        self._moved_during_cooldown = False
        self._cooldown_timer = self._scheduler.schedule(self._cooldown_ms, self._end_cooldown)
        self._callback()

    def cancel(self) -> None:
        """Drop pending timers and return to idle."""
        self._scheduler.cancel(self._cooldown_timer)
        self._scheduler.cancel(self._finish_timer)
        self._cooldown_timer = None
        self._finish_timer = None
        self._moved_during_cooldown = False
        self._state = ThrottleState.NO

    def _end_cooldown(self) -> None:
        self._cooldown_timer = None
        if not self._moved_during_cooldown:
            self._state = ThrottleState.NO
            return
        self._moved_during_cooldown = False
        self._state = ThrottleState.FINISHING
        self._finish_timer = self._scheduler.schedule(self._finish_ms, self._finish)

    def _finish(self) -> None:
        self._finish_timer = None
        logger.debug("Running trailing recompute after camera movement")
        try:
            self._callback()
        finally:
            self._state = ThrottleState.NO
