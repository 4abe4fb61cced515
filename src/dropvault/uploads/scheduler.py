"""Cancellable deferred callbacks on a single cooperative scheduling domain.

``UploadSession`` only needs ``call_later(delay, callback) -> handle`` where the
handle has ``cancel()``. Two implementations:

- ``AsyncioScheduler`` runs callbacks on an asyncio event loop.
- ``ManualScheduler`` keeps a virtual clock that the caller advances. The
  Streamlit page advances it to wall-clock time on each rerun; tests advance
  it explicitly.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class ManualHandle:
    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler. Same-instant callbacks fire in scheduling order."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        if delay < 0:
            delay = 0.0
        handle = ManualHandle(self._now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def run_until(self, when: float) -> int:
        """Fire every callback due at or before *when*; returns how many fired.

        Callbacks scheduled while firing are picked up if they fall due in range.
        """
        fired = 0
        while self._queue and self._queue[0][0] <= when:
            due, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        self._now = max(self._now, when)
        return fired

    def advance(self, seconds: float) -> int:
        return self.run_until(self._now + seconds)
