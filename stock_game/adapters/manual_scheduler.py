from __future__ import annotations

import heapq
from typing import Callable, List, Tuple

from stock_game.ports.scheduler import ScheduledCall, Scheduler


class _ManualCall(ScheduledCall):
    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self._callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def fire(self) -> None:
        if not self._active:
            return
        self._active = False
        self._callback()


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by an explicit virtual clock.

    Used for headless runs and tests: nothing fires until advance() or
    run_next() is called.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._seq = 0
        self._queue: List[Tuple[int, int, _ManualCall]] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.now_ms + max(0, int(delay_ms)), callback)
        self._seq += 1
        heapq.heappush(self._queue, (call.due_ms, self._seq, call))
        return call

    @property
    def pending(self) -> int:
        return sum(1 for _, _, c in self._queue if c.active)

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing everything that comes due. Returns the number fired."""
        target = self.now_ms + max(0, int(ms))
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            if not call.active:
                continue
            self.now_ms = due
            call.fire()
            fired += 1
        self.now_ms = target
        return fired

    def run_next(self) -> bool:
        """Jump to and fire the earliest active call. Returns False when none is pending."""
        while self._queue:
            due, _, call = heapq.heappop(self._queue)
            if not call.active:
                continue
            self.now_ms = max(self.now_ms, due)
            call.fire()
            return True
        return False

    def run_until_idle(self, max_calls: int = 100_000) -> int:
        fired = 0
        while fired < max_calls and self.run_next():
            fired += 1
        return fired
