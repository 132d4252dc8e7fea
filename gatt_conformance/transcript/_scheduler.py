# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Single-threaded cooperative schedulers.

Everything in a scenario (player, engine, driver) shares one scheduler and
runs on one thread.  Two implementations are provided:

* :class:`EventLoopScheduler` wraps a private :mod:`asyncio` event loop and
  is the default.
* :class:`ManualScheduler` is a small selector loop that can be stepped
  one iteration at a time.  Within an iteration, ready readers are
  dispatched before deferred callbacks run, so a callback queued with
  :meth:`~Scheduler.call_soon` always runs after the read that queued it
  has returned.

A callback that raises stops the loop; :meth:`~Scheduler.run` and
:meth:`~Scheduler.run_until_idle` re-raise the exception.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import selectors
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from gatt_conformance._debug import transcript_logger

__all__ = [
    "EventLoopScheduler",
    "Handle",
    "ManualScheduler",
    "Scheduler",
]

Callback = Callable[[], None]


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class Handle(Protocol):
    """A cancellable scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running; no effect once it has run."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Operations the player, driver and engines rely on."""

    def call_soon(self, callback: Callback) -> Handle:
        """Run ``callback`` on a later iteration, after pending reads."""
        ...

    def call_later(self, delay: float, callback: Callback) -> Handle:
        """Run ``callback`` after ``delay`` seconds."""
        ...

    def add_reader(self, fd: int, callback: Callback) -> None:
        """Call ``callback`` whenever ``fd`` is readable."""
        ...

    def remove_reader(self, fd: int) -> bool:
        """Stop watching ``fd``; returns whether it was watched."""
        ...

    def run(self) -> None:
        """Dispatch callbacks until :meth:`stop` is called."""
        ...

    def stop(self) -> None:
        """Make :meth:`run` return after the current iteration."""
        ...

    def run_until_idle(self) -> None:
        """Dispatch callbacks until nothing is ready, without blocking."""
        ...

    def close(self) -> None:
        """Release resources."""
        ...


# ---------------------------------------------------------------------------
# EventLoopScheduler
# ---------------------------------------------------------------------------


class _SoonHandle:
    """Tracks a ``call_soon`` callback so idleness can be detected."""

    __slots__ = ("_handle", "_owner", "done")

    def __init__(self, owner: EventLoopScheduler) -> None:
        self._owner = owner
        self._handle: asyncio.Handle | None = None
        self.done = False

    def cancel(self) -> None:
        """Cancel unless already run."""
        if self.done:
            return
        self.done = True
        self._owner._soon_done()
        if self._handle is not None:
            self._handle.cancel()


class EventLoopScheduler:
    """Scheduler backed by a private asyncio event loop.

    Args:
        loop: Loop to drive.  When omitted a new loop is created and owned
            by the scheduler, and :meth:`close` closes it.

    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize, creating a loop if none is given."""
        self._owns_loop = loop is None
        self._loop = loop if loop is not None else asyncio.new_event_loop()
        self._loop.set_exception_handler(self._on_exception)
        self._pending = 0
        self._readers: set[int] = set()
        self._error: BaseException | None = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The underlying event loop."""
        return self._loop

    def _on_exception(self, loop: asyncio.AbstractEventLoop, context: dict[str, object]) -> None:
        exc = context.get("exception")
        if isinstance(exc, BaseException) and self._error is None:
            self._error = exc
        elif self._error is None:
            self._error = RuntimeError(str(context.get("message", "callback failed")))
        loop.stop()

    def _soon_done(self) -> None:
        """Account for a ``call_soon`` callback that ran or was cancelled."""
        self._pending -= 1

    def _raise_pending_error(self) -> None:
        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def call_soon(self, callback: Callback) -> Handle:
        """Queue ``callback`` for the next loop iteration."""
        tracked = _SoonHandle(self)

        def _run() -> None:
            if tracked.done:
                return
            tracked.done = True
            self._soon_done()
            callback()

        self._pending += 1
        tracked._handle = self._loop.call_soon(_run)
        return tracked

    def call_later(self, delay: float, callback: Callback) -> Handle:
        """Run ``callback`` after ``delay`` seconds."""
        return self._loop.call_later(delay, callback)

    def add_reader(self, fd: int, callback: Callback) -> None:
        """Watch ``fd`` for readability."""
        self._loop.add_reader(fd, callback)
        self._readers.add(fd)

    def remove_reader(self, fd: int) -> bool:
        """Stop watching ``fd``."""
        self._readers.discard(fd)
        return self._loop.remove_reader(fd)

    def run(self) -> None:
        """Run the loop until :meth:`stop`."""
        self._loop.run_forever()
        self._raise_pending_error()

    def stop(self) -> None:
        """Stop :meth:`run` after the current iteration."""
        self._loop.stop()

    def _readable(self) -> bool:
        if not self._readers:
            return False
        with selectors.DefaultSelector() as sel:
            for fd in self._readers:
                sel.register(fd, selectors.EVENT_READ)
            return bool(sel.select(0))

    def run_until_idle(self) -> None:
        """Iterate the loop until no callback is queued and no reader is ready."""
        while True:
            self._loop.call_soon(self._loop.stop)
            self._loop.run_forever()
            self._raise_pending_error()
            if self._pending == 0 and not self._readable():
                return

    def close(self) -> None:
        """Close the loop if the scheduler created it."""
        for fd in list(self._readers):
            self.remove_reader(fd)
        if self._owns_loop and not self._loop.is_closed():
            self._loop.close()


# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------


class _Task:
    """A queued callback that can be cancelled before it runs."""

    __slots__ = ("callback", "cancelled")

    def __init__(self, callback: Callback) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        """Cancel unless already run."""
        self.cancelled = True


class ManualScheduler:
    """Deterministic selector loop that can be stepped.

    Each :meth:`step` polls readers, dispatches the ready ones, fires due
    timers, then runs the deferred callbacks queued so far.  Callbacks
    queued by those deferred callbacks wait for the next step.

    Args:
        clock: Monotonic time source in seconds, used for timers.

    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty loop."""
        self._clock = clock
        self._selector = selectors.DefaultSelector()
        self._soon: deque[_Task] = deque()
        self._timers: list[tuple[float, int, _Task]] = []
        self._seq = itertools.count()
        self._running = False

    def call_soon(self, callback: Callback) -> Handle:
        """Queue ``callback`` for the next step."""
        task = _Task(callback)
        self._soon.append(task)
        return task

    def call_later(self, delay: float, callback: Callback) -> Handle:
        """Run ``callback`` once ``delay`` seconds have elapsed."""
        task = _Task(callback)
        heapq.heappush(self._timers, (self._clock() + delay, next(self._seq), task))
        return task

    def add_reader(self, fd: int, callback: Callback) -> None:
        """Watch ``fd``, replacing any previous callback."""
        try:
            self._selector.modify(fd, selectors.EVENT_READ, callback)
        except KeyError:
            self._selector.register(fd, selectors.EVENT_READ, callback)

    def remove_reader(self, fd: int) -> bool:
        """Stop watching ``fd``."""
        try:
            self._selector.unregister(fd)
        except (KeyError, ValueError):
            return False
        return True

    def _next_timeout(self) -> float | None:
        if self._soon:
            return 0
        while self._timers and self._timers[0][2].cancelled:
            heapq.heappop(self._timers)
        if self._timers:
            return max(0.0, self._timers[0][0] - self._clock())
        return None

    def step(self, timeout: float | None = 0) -> bool:
        """Run one iteration.

        Args:
            timeout: Longest time to wait for a reader, ``None`` to block.

        Returns:
            Whether any callback ran.

        """
        ran = False
        if self._selector.get_map():
            for key, _ in self._selector.select(timeout):
                # an earlier callback in this batch may have unregistered it
                if key.fd in self._selector.get_map():
                    key.data()
                    ran = True
        elif timeout:
            time.sleep(timeout)

        now = self._clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, task = heapq.heappop(self._timers)
            if not task.cancelled:
                task.cancelled = True
                task.callback()
                ran = True

        for _ in range(len(self._soon)):
            task = self._soon.popleft()
            if not task.cancelled:
                task.cancelled = True
                task.callback()
                ran = True
        return ran

    def run(self) -> None:
        """Step until :meth:`stop`, or until nothing could ever run again."""
        self._running = True
        try:
            while self._running:
                timeout = self._next_timeout()
                if timeout is None and not self._selector.get_map():
                    if transcript_logger.isEnabledFor(logging.DEBUG):
                        transcript_logger.debug("ManualScheduler.run: nothing left to wait for")
                    return
                self.step(timeout)
        finally:
            self._running = False

    def stop(self) -> None:
        """Make :meth:`run` return after the current step."""
        self._running = False

    def run_until_idle(self) -> None:
        """Step without blocking until a step does nothing."""
        while self.step(0):
            pass

    def close(self) -> None:
        """Close the selector."""
        self._selector.close()
