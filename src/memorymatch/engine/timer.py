from __future__ import annotations

from typing import Callable

from .events import SessionEvents
from .scheduler import CancelToken, Scheduler, TimerHandle
from .types import TERMINAL_PHASES, TimerPhase


def format_clock(seconds: float) -> str:
    seconds = max(0.0, seconds)
    return f"{int(seconds // 60):02d}:{int(seconds % 60):02d}"


class SessionTimer:
    """idle -> preview -> playing -> complete | failed

    Elapsed time only accrues while playing. The preview end is a scheduled
    callback on the shared timeline; the per-tick expiry check is driven by
    the owning session.
    """

    def __init__(self, scheduler: Scheduler, events: SessionEvents, token: CancelToken | None = None) -> None:
        self.scheduler = scheduler
        self.events = events
        self.token = token
        self.phase: TimerPhase = "idle"
        self.elapsed = 0.0
        self.time_limit = 0.0
        self.has_limit = False
        self.running = False
        self._preview: TimerHandle | None = None
        self._on_preview_end: Callable[[], None] | None = None
        self._on_expired: list[Callable[[], None]] = []

    @property
    def remaining(self) -> float:
        return max(0.0, self.time_limit - self.elapsed)

    @property
    def terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def on_expired(self, callback: Callable[[], None]) -> None:
        self._on_expired.append(callback)

    def start_preview(
        self,
        duration: float,
        time_limit: float = 0.0,
        has_limit: bool = False,
        on_end: Callable[[], None] | None = None,
    ) -> bool:
        if self.phase != "idle":
            return False
        self.time_limit = time_limit
        self.has_limit = has_limit
        self.running = False
        self.phase = "preview"
        self._on_preview_end = on_end
        self.events.preview_start.emit()
        self._preview = self.scheduler.call_later(duration, self._end_preview, token=self.token)
        return True

    def _end_preview(self) -> None:
        self._preview = None
        if self.phase != "preview":
            return
        if self._on_preview_end is not None:
            self._on_preview_end()
        self.phase = "playing"
        self.running = True
        self.events.preview_end.emit()

    def start_playing(self, time_limit: float = 0.0, has_limit: bool = False) -> bool:
        if self.phase != "idle":
            return False
        self.elapsed = 0.0
        self.time_limit = time_limit
        self.has_limit = has_limit
        self.phase = "playing"
        self.running = True
        return True

    def tick(self, dt: float) -> bool:
        """Advance elapsed time. Returns True when this tick expired the timer."""
        if self.phase != "playing" or not self.running:
            return False
        self.elapsed += dt
        # Expiry is decided before anything else happens this tick.
        if self.has_limit and self.elapsed >= self.time_limit:
            self._expire()
            return True
        self.events.timer_tick.emit(self.remaining)
        return False

    def _expire(self) -> None:
        self.phase = "failed"
        self.running = False
        self.events.timer_expired.emit()
        for cb in list(self._on_expired):
            cb()

    def complete(self) -> bool:
        if self.phase != "playing":
            return False
        self.phase = "complete"
        self.running = False
        return True

    def stop(self) -> None:
        self.running = False

    def reset(self) -> None:
        if self._preview is not None:
            self._preview.cancel()
            self._preview = None
        self.elapsed = 0.0
        self.running = False
        self.phase = "idle"
        self.events.timer_tick.emit(self.remaining)

    def formatted(self, show_remaining: bool = True) -> str:
        return format_clock(self.remaining if show_remaining else self.elapsed)
