from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable

Callback = Callable[[], None]


class CancelToken:
    """Shared cancellation flag for every timer tied to one board."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    callback: Callback = field(compare=False)
    token: CancelToken | None = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)

    @property
    def live(self) -> bool:
        if self.cancelled:
            return False
        return self.token is None or not self.token.cancelled


class TimerHandle:
    def __init__(self, entry: _Entry) -> None:
        self._entry = entry
        self.fired = False

    @property
    def due(self) -> float:
        return self._entry.due

    @property
    def active(self) -> bool:
        return not self.fired and self._entry.live

    def cancel(self) -> None:
        self._entry.cancelled = True


class Scheduler:
    """Tick-driven queue of (due time, callback) entries on one logical timeline.

    Nothing runs on its own: `advance(dt)` moves the clock forward and fires,
    in (due, insertion) order, every live entry that falls inside the window.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_Entry] = []
        self._handles: dict[int, TimerHandle] = {}
        self._seq = 0

    def call_later(self, delay: float, callback: Callback, token: CancelToken | None = None) -> TimerHandle:
        entry = _Entry(due=self.now + max(0.0, delay), seq=self._seq, callback=callback, token=token)
        self._seq += 1
        heapq.heappush(self._queue, entry)
        handle = TimerHandle(entry)
        self._handles[entry.seq] = handle
        return handle

    def advance(self, dt: float) -> int:
        target = self.now + max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            handle = self._handles.pop(entry.seq)
            if not entry.live:
                continue
            self.now = max(self.now, entry.due)
            handle.fired = True
            entry.callback()
            fired += 1
        self.now = target
        return fired

    def pending(self) -> int:
        return sum(1 for e in self._queue if e.live)
