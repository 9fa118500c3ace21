"""
Virtual-time timer registry.

The engine owns one TimerRegistry and drives it from its own clock, so every
delayed effect (reload, respawn, blink, pickup message, wave spawn) is
scheduled, fired and cancelled in one place. `cancel_all()` is the single
teardown path used on restart and close; it bumps a generation counter so a
handle captured before the reset can never fire afterwards.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TimerHandle:
    due_ms: int
    callback: Callable[[], None]
    name: str
    generation: int
    interval_ms: Optional[int] = None
    cancelled: bool = False

    def cancel(self):
        self.cancelled = True


@dataclass(order=True)
class _Entry:
    due_ms: int
    seq: int
    handle: TimerHandle = field(compare=False)


class TimerRegistry:
    """One-shot and interval timers keyed on integer milliseconds"""

    def __init__(self, now_ms: int = 0):
        self.now_ms = now_ms
        self._queue: List[_Entry] = []
        self._seq = itertools.count()
        self._generation = 0

    def __len__(self) -> int:
        return sum(1 for e in self._queue if self._live(e.handle))

    def _live(self, handle: TimerHandle) -> bool:
        return not handle.cancelled and handle.generation == self._generation

    def _push(self, handle: TimerHandle):
        heapq.heappush(self._queue, _Entry(handle.due_ms, next(self._seq), handle))

    def schedule(self, delay_ms: int, callback: Callable[[], None], name: str = "") -> TimerHandle:
        """Fire `callback` once, `delay_ms` after the current time"""
        handle = TimerHandle(
            due_ms=self.now_ms + max(0, int(delay_ms)),
            callback=callback,
            name=name,
            generation=self._generation,
        )
        self._push(handle)
        return handle

    def schedule_interval(self, period_ms: int, callback: Callable[[], None], name: str = "") -> TimerHandle:
        """Fire `callback` every `period_ms` until cancelled"""
        assert period_ms > 0, "interval period must be positive"
        handle = TimerHandle(
            due_ms=self.now_ms + int(period_ms),
            callback=callback,
            name=name,
            generation=self._generation,
            interval_ms=int(period_ms),
        )
        self._push(handle)
        return handle

    def cancel(self, handle: Optional[TimerHandle]):
        if handle is not None:
            handle.cancel()

    def cancel_all(self):
        """Drop every pending timer, including ones held by callers"""
        dropped = len(self)
        for entry in self._queue:
            entry.handle.cancel()
        self._queue.clear()
        self._generation += 1
        if dropped:
            logger.debug("Cancelled %d pending timers", dropped)

    def advance(self, now_ms: int) -> int:
        """
        Move the clock to `now_ms` and fire everything due, in due order.

        Callbacks may schedule further timers; any that fall due at or before
        `now_ms` fire within the same call. Returns the number fired.
        """
        fired = 0
        while self._queue and self._queue[0].due_ms <= now_ms:
            entry = heapq.heappop(self._queue)
            handle = entry.handle
            if not self._live(handle):
                continue
            # Callbacks observe the time they were due at
            self.now_ms = entry.due_ms
            if handle.interval_ms is not None:
                handle.due_ms = entry.due_ms + handle.interval_ms
                self._push(handle)
            handle.callback()
            fired += 1
        self.now_ms = max(self.now_ms, now_ms)
        return fired
