from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .ports import Audio, NullPresentation, Presentation, SilentAudio
from .scheduler import CancelToken, Scheduler, TimerHandle
from .types import TileState


@dataclass(eq=False)
class Tile:
    """One board cell and its flip lifecycle.

    face_down -> flipping -> face_up -> flipping -> face_down   (mismatch path)
    face_up -> matched                                       (terminal)

    Invalid requests are rejected by returning False; they come from input
    racing an animation and are expected.
    """

    index: int
    pair_id: int
    scheduler: Scheduler
    token: CancelToken
    flip_duration: float = 0.3
    presentation: Presentation = field(default_factory=NullPresentation)
    audio: Audio = field(default_factory=SilentAudio)
    on_revealed: Callable[[Tile], None] | None = None
    state: TileState = "face_down"
    locked: bool = False
    _flip: TimerHandle | None = field(default=None, repr=False)
    _flip_target: TileState | None = field(default=None, repr=False)

    @property
    def matched(self) -> bool:
        return self.state == "matched"

    @property
    def revealing(self) -> bool:
        """True while flipping towards face up."""
        return self.state == "flipping" and self._flip_target == "face_up"

    @property
    def interactable(self) -> bool:
        return self.state == "face_down" and not self.locked

    def reveal(self) -> bool:
        if self.state != "face_down" or self.locked:
            return False
        self._start_flip("face_up")
        self.presentation.on_tile_reveal_started(self)
        return True

    def hide(self) -> bool:
        if self.state != "face_up":
            return False
        self._start_flip("face_down")
        self.presentation.on_tile_hide_started(self)
        return True

    def set_matched(self) -> None:
        if self.matched:
            return
        self.cancel_flip()
        self.state = "matched"
        self.locked = False
        self.presentation.on_tile_matched(self)

    def set_locked(self, locked: bool) -> None:
        self.locked = locked

    def show_instant(self, face_up: bool) -> None:
        """Jump straight to face up/down without a flip (preview)."""
        if self.matched:
            return
        self.cancel_flip()
        self.state = "face_up" if face_up else "face_down"

    def cancel_flip(self) -> None:
        if self._flip is not None:
            self._flip.cancel()
        self._flip = None
        self._flip_target = None

    def reset(self) -> None:
        self.cancel_flip()
        self.state = "face_down"
        self.locked = False

    def _start_flip(self, target: TileState) -> None:
        # One pending flip per tile
        self.cancel_flip()
        self.state = "flipping"
        self._flip_target = target
        self._flip = self.scheduler.call_later(self.flip_duration, self._finish_flip, token=self.token)

    def _finish_flip(self) -> None:
        target = self._flip_target
        self._flip = None
        self._flip_target = None
        if self.state != "flipping" or target is None:
            return
        self.state = target
        self.audio.on_flip()
        self.presentation.on_tile_flip_completed(self)
        if target == "face_up" and self.on_revealed is not None:
            self.on_revealed(self)
