"""Cancellable deferred callbacks for click/double-click disambiguation.

The controller never sleeps or starts threads; it asks a Scheduler for a
handle and cancels it when a second click arrives in time. Hosts pick the
implementation: ManualScheduler is advanced explicitly by the host loop (and
by tests), AsyncioScheduler defers onto a running event loop.
"""

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Clock plus deferred-callback source."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle returned by ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by advance()."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + delay, callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire due callbacks in order.

        Returns:
            Number of callbacks that ran.
        """
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self._now = due
            if not timer.cancelled:
                timer.callback()
                fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        """Callbacks still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)
