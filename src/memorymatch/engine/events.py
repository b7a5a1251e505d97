from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

Event = dict[str, object]
Listener = Callable[..., None]


class Signal:
    """One notification kind with an ordered subscriber list.

    Every emission is recorded in the shared log before subscribers run, so the
    log order is the order in which the underlying state changed.
    """

    def __init__(self, name: str, log: list[Event] | None = None) -> None:
        self.name = name
        self._log = log
        self._listeners: list[Listener] = []

    def connect(self, listener: Listener) -> Listener:
        self._listeners.append(listener)
        return listener

    def disconnect(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args: object) -> None:
        if self._log is not None:
            self._log.append({"type": self.name, "args": list(args)})
        for listener in list(self._listeners):
            listener(*args)


@dataclass
class SessionEvents:
    log: list[Event] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.score_changed = Signal("SCORE_CHANGED", self.log)
        self.combo_changed = Signal("COMBO_CHANGED", self.log)
        self.target_score_set = Signal("TARGET_SCORE_SET", self.log)
        self.timer_tick = Signal("TIMER_TICK", self.log)
        self.level_complete = Signal("LEVEL_COMPLETE", self.log)
        self.timer_expired = Signal("TIMER_EXPIRED", self.log)
        self.preview_start = Signal("PREVIEW_START", self.log)
        self.preview_end = Signal("PREVIEW_END", self.log)

    def of_type(self, name: str) -> list[Event]:
        return [e for e in self.log if e.get("type") == name]
