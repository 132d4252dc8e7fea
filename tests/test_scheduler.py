# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Tests for the ManualScheduler and EventLoopScheduler."""

from __future__ import annotations

import asyncio

import pytest

from gatt_conformance.transcript import EventLoopScheduler, ManualScheduler, Scheduler, SocketChannel


class TestBothSchedulers:
    """Behaviour shared by every scheduler."""

    def test_call_soon_runs_in_order(self, scheduler: Scheduler) -> None:
        """Deferred callbacks run first-in first-out."""
        calls: list[int] = []
        scheduler.call_soon(lambda: calls.append(1))
        scheduler.call_soon(lambda: calls.append(2))
        scheduler.run_until_idle()
        assert calls == [1, 2]

    def test_cancelled_callback_never_runs(self, scheduler: Scheduler) -> None:
        """A cancelled handle is skipped."""
        calls: list[int] = []
        handle = scheduler.call_soon(lambda: calls.append(1))
        handle.cancel()
        scheduler.run_until_idle()
        assert calls == []

    def test_nested_call_soon_runs_before_idle(self, scheduler: Scheduler) -> None:
        """run_until_idle drains callbacks queued by callbacks."""
        calls: list[str] = []

        def first() -> None:
            calls.append("first")
            scheduler.call_soon(lambda: calls.append("second"))

        scheduler.call_soon(first)
        scheduler.run_until_idle()
        assert calls == ["first", "second"]

    def test_reader_dispatch(self, scheduler: Scheduler, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """A readable descriptor invokes its callback."""
        left, right = channel_pair
        received: list[bytes] = []
        scheduler.add_reader(right.fileno(), lambda: received.append(right.recv()))
        left.send(b"\x01")
        scheduler.run_until_idle()
        assert received == [b"\x01"]
        assert scheduler.remove_reader(right.fileno())

    def test_stop_from_callback(self, scheduler: Scheduler) -> None:
        """stop makes run return."""
        calls: list[int] = []

        def tick() -> None:
            calls.append(1)
            scheduler.stop()

        scheduler.call_later(0.01, tick)
        scheduler.run()
        assert calls == [1]


class TestManualScheduler:
    """Deterministic stepping."""

    def test_callbacks_queued_during_step_wait(self, manual_scheduler: ManualScheduler) -> None:
        """A step only runs what was queued before it started."""
        calls: list[str] = []
        manual_scheduler.call_soon(lambda: manual_scheduler.call_soon(lambda: calls.append("later")))
        assert manual_scheduler.step()
        assert calls == []
        assert manual_scheduler.step()
        assert calls == ["later"]
        assert not manual_scheduler.step()

    def test_timers_follow_clock(self) -> None:
        """call_later fires once the clock reaches the deadline."""
        now = [100.0]
        scheduler = ManualScheduler(clock=lambda: now[0])
        calls: list[int] = []
        try:
            scheduler.call_later(5.0, lambda: calls.append(1))
            scheduler.step()
            assert calls == []
            now[0] = 105.0
            scheduler.step()
            assert calls == [1]
        finally:
            scheduler.close()

    def test_run_returns_when_nothing_can_happen(self, manual_scheduler: ManualScheduler) -> None:
        """With no readers, timers or callbacks, run returns."""
        calls: list[int] = []
        manual_scheduler.call_soon(lambda: calls.append(1))
        manual_scheduler.run()
        assert calls == [1]

    def test_remove_unknown_reader(self, manual_scheduler: ManualScheduler) -> None:
        """Removing an unwatched descriptor reports False."""
        assert not manual_scheduler.remove_reader(12345)


class TestEventLoopScheduler:
    """asyncio-backed scheduler specifics."""

    def test_callback_error_propagates(self) -> None:
        """An exception in a callback is re-raised from the run call."""
        scheduler = EventLoopScheduler()
        try:

            def boom() -> None:
                raise ValueError("boom")

            scheduler.call_soon(boom)
            with pytest.raises(ValueError, match="boom"):
                scheduler.run_until_idle()
        finally:
            scheduler.close()

    def test_close_keeps_borrowed_loop_open(self) -> None:
        """A loop passed in is not closed by the scheduler."""
        loop = asyncio.new_event_loop()
        try:
            scheduler = EventLoopScheduler(loop)
            assert scheduler.loop is loop
            scheduler.close()
            assert not loop.is_closed()
        finally:
            loop.close()

    def test_cancel_after_run_keeps_idle_detection(self) -> None:
        """Cancelling a handle that already ran, or twice, does not unbalance the queue count."""
        scheduler = EventLoopScheduler()
        try:
            ran: list[str] = []
            first = scheduler.call_soon(lambda: ran.append("first"))
            scheduler.run_until_idle()
            first.cancel()
            second = scheduler.call_soon(lambda: ran.append("second"))
            second.cancel()
            second.cancel()
            scheduler.call_soon(lambda: ran.append("third"))
            scheduler.run_until_idle()
            assert ran == ["first", "third"]
        finally:
            scheduler.close()
