"""Tests for hexpaint.scheduling module."""

from __future__ import annotations

import asyncio

import pytest

from hexpaint.scheduling import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    def test_runs_callbacks_in_due_order(self, scheduler: ManualScheduler) -> None:
        calls: list[str] = []
        scheduler.schedule(30, lambda: calls.append("late"))
        scheduler.schedule(10, lambda: calls.append("early"))
        scheduler.schedule(10, lambda: calls.append("early-second"))

        scheduler.advance(9)
        assert calls == []
        scheduler.advance(25)
        assert calls == ["early", "early-second", "late"]
        assert scheduler.now == 34

    def test_clock_is_set_to_due_time_during_callback(self, scheduler: ManualScheduler) -> None:
        seen: list[float] = []
        scheduler.schedule(40, lambda: seen.append(scheduler.now))
        scheduler.advance(100)
        assert seen == [40]

    def test_cancel(self, scheduler: ManualScheduler) -> None:
        calls: list[int] = []
        handle = scheduler.schedule(5, lambda: calls.append(1))
        assert scheduler.pending == 1
        scheduler.cancel(handle)
        scheduler.cancel(handle)
        scheduler.cancel(None)
        scheduler.advance(10)
        assert calls == []
        assert scheduler.pending == 0
        assert handle.cancelled
        assert not handle.active

    def test_cancel_after_fire_is_noop(self, scheduler: ManualScheduler) -> None:
        handle = scheduler.schedule(1, lambda: None)
        scheduler.advance(1)
        scheduler.cancel(handle)
        assert handle.fired
        assert not handle.cancelled

    def test_callbacks_can_schedule_more_work(self, scheduler: ManualScheduler) -> None:
        calls: list[float] = []

        def first() -> None:
            calls.append(scheduler.now)
            scheduler.schedule(10, lambda: calls.append(scheduler.now))

        scheduler.schedule(10, first)
        scheduler.advance(25)
        assert calls == [10, 20]

    def test_run_all_drains_queue(self, scheduler: ManualScheduler) -> None:
        calls: list[int] = []
        scheduler.schedule(1000, lambda: calls.append(1))
        scheduler.schedule(5, lambda: scheduler.schedule(2000, lambda: calls.append(2)))
        scheduler.run_all()
        assert calls == [1, 2]
        assert scheduler.now == 2005
        assert scheduler.pending == 0

    def test_negative_delays_are_rejected(self, scheduler: ManualScheduler) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            scheduler.schedule(-1, lambda: None)
        with pytest.raises(ValueError, match="non-negative"):
            scheduler.advance(-1)


class TestAsyncioScheduler:
    def test_fires_after_delay(self) -> None:
        async def scenario() -> list[str]:
            calls: list[str] = []
            scheduler = AsyncioScheduler()
            handle = scheduler.schedule(1, lambda: calls.append("fired"))
            await asyncio.sleep(0.05)
            assert handle.fired
            return calls

        assert asyncio.run(scenario()) == ["fired"]

    def test_cancelled_timer_does_not_fire(self) -> None:
        async def scenario() -> list[str]:
            calls: list[str] = []
            scheduler = AsyncioScheduler()
            handle = scheduler.schedule(10, lambda: calls.append("fired"))
            scheduler.cancel(handle)
            await asyncio.sleep(0.05)
            return calls

        assert asyncio.run(scenario()) == []

    def test_rejects_negative_delay(self) -> None:
        async def scenario() -> None:
            AsyncioScheduler().schedule(-5, lambda: None)

        with pytest.raises(ValueError, match="non-negative"):
            asyncio.run(scenario())
