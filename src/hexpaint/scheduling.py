"""Timer abstraction for deferred callbacks.

Everything in hexpaint runs on a single thread inside event callbacks. The
only deferred work is timer based (long-press detection, move throttling,
position persistence), and it all goes through a scheduler so hosts can
plug in their own event loop and tests can drive time explicitly.

Two implementations are provided:
    - ManualScheduler: a virtual clock advanced by the caller.
    - AsyncioScheduler: timers on an asyncio event loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


Callback = Callable[[], None]


@dataclass(eq=False)
class TimerHandle:
    """Handle to a scheduled callback.

    Attributes:
        due_ms: Time at which the callback is due, in the scheduler's clock.
        callback: Function to call.
    """

    due_ms: float
    callback: Callback
    cancelled: bool = field(default=False, init=False)
    fired: bool = field(default=False, init=False)

    @property
    def active(self) -> bool:
        """True while the callback is still going to run."""
        return not (self.cancelled or self.fired)


class SchedulerProtocol(Protocol):
    """Protocol for timer sources."""

    def schedule(self, delay_ms: float, callback: Callback) -> TimerHandle:
        """Run callback once after delay_ms milliseconds."""
        ...

    def cancel(self, handle: TimerHandle | None) -> None:
        """Prevent a scheduled callback from running.

        Cancelling None, an already cancelled handle or a handle whose
        callback has already run is a no-op.
        """
        ...


class ManualScheduler:
    """Scheduler driven by an explicit virtual clock.

    Callbacks run synchronously inside advance(), in due-time order and,
    for equal due times, in the order they were scheduled. Callbacks may
    schedule further timers; those run within the same advance() call if
    they fall due before its end.

    Usage:
        scheduler = ManualScheduler()
        scheduler.schedule(500, on_long_press)
        scheduler.advance(499)  # nothing runs
        scheduler.advance(1)    # on_long_press runs
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._sequence = itertools.count()
        self._queue: list[tuple[float, int, TimerHandle]] = []

    @property
    def now(self) -> float:
        """Current virtual time in milliseconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers still due to run."""
        return sum(1 for _, _, handle in self._queue if handle.active)

    def schedule(self, delay_ms: float, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        handle = TimerHandle(due_ms=self._now + delay_ms, callback=callback)
        heapq.heappush(self._queue, (handle.due_ms, next(self._sequence), handle))
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None and handle.active:
            handle.cancelled = True

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward, running every callback that falls due.

        Raises:
            ValueError: If delta_ms is negative.
        """
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be non-negative, got {delta_ms}")
        target = self._now + delta_ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            handle.fired = True
            handle.callback()
        self._now = target

    def run_all(self) -> None:
        """Run timers until none remain, advancing the clock as needed."""
        while self._queue:
            due = self._queue[0][0]
            self.advance(max(0.0, due - self._now))


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``.

    The loop is looked up lazily so the scheduler can be created before
    the loop starts running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._timers: dict[int, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: float, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        loop = self._get_loop()
        handle = TimerHandle(due_ms=loop.time() * 1000 + delay_ms, callback=callback)

        def _fire() -> None:
            self._timers.pop(id(handle), None)
            if handle.active:
                handle.fired = True
                callback()

        self._timers[id(handle)] = loop.call_later(delay_ms / 1000, _fire)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None or not handle.active:
            return
        handle.cancelled = True
        timer = self._timers.pop(id(handle), None)
        if timer is not None:
            timer.cancel()
