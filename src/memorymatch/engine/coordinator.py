from __future__ import annotations

from typing import Callable

from .board import Board
from .ports import Audio, SilentAudio
from .scheduler import Scheduler
from .scoring import ScoringEngine
from .tile import Tile
from .timer import SessionTimer
from .types import Phase

SETTLE_DELAY = 0.3
MAX_TILES_IN_PLAY = 2


class MatchCoordinator:
    """Turns single tile reveals into evaluated pairs.

    At most two tiles are ever in play (flipping up, waiting for a partner, or
    locked in resolution), and only one pair resolves at a time.
    """

    def __init__(
        self,
        board: Board,
        scoring: ScoringEngine,
        timer: SessionTimer,
        scheduler: Scheduler,
        *,
        mismatch_delay: float = 0.6,
        settle_delay: float = SETTLE_DELAY,
        audio: Audio | None = None,
        on_board_cleared: Callable[[], None] | None = None,
    ) -> None:
        self.board = board
        self.scoring = scoring
        self.timer = timer
        self.scheduler = scheduler
        self.mismatch_delay = mismatch_delay
        self.settle_delay = settle_delay
        self.audio = audio or SilentAudio()
        self.on_board_cleared = on_board_cleared

        self.waiting: list[Tile] = []
        self.in_resolution: set[Tile] = set()
        self.resolutions = 0
        self._completed = False

        for tile in board.tiles:
            tile.on_revealed = self.on_revealed

    @property
    def phase(self) -> Phase:
        if self.timer.phase != "playing":
            return self.timer.phase
        if self.in_resolution:
            return "resolving"
        return "playing"

    @property
    def accepting(self) -> bool:
        return self.phase in ("playing", "resolving")

    def tiles_in_play(self) -> int:
        flipping_up = sum(1 for t in self.board.tiles if t.revealing)
        return len(self.in_resolution) + len(self.waiting) + flipping_up

    def can_reveal(self, tile: Tile) -> bool:
        if not self.accepting:
            return False
        if tile not in self.board:
            return False
        if tile in self.in_resolution:
            return False
        if tile.state != "face_down" or tile.locked:
            return False
        return self.tiles_in_play() < MAX_TILES_IN_PLAY

    def request_reveal(self, tile: Tile) -> bool:
        if not self.can_reveal(tile):
            return False
        return tile.reveal()

    def on_revealed(self, tile: Tile) -> None:
        if not self.accepting:
            return
        if tile not in self.board or tile in self.in_resolution:
            return
        if tile.state != "face_up" or tile in self.waiting:
            return
        if self.in_resolution:
            # Only one pair resolves at a time; a stray third tile goes back down.
            if self.waiting:
                tile.hide()
                return
            self.waiting.append(tile)
            return

        self.waiting.append(tile)
        if len(self.waiting) < 2:
            return
        a, b = self.waiting
        self.waiting.clear()
        self._begin_resolution(a, b)

    def _begin_resolution(self, a: Tile, b: Tile) -> None:
        self.in_resolution.update((a, b))
        a.set_locked(True)
        b.set_locked(True)
        self.resolutions += 1
        self.scheduler.call_later(self.settle_delay, lambda: self._resolve(a, b), token=self.board.token)

    def _resolve(self, a: Tile, b: Tile) -> None:
        if a.pair_id == b.pair_id:
            a.set_matched()
            b.set_matched()
            self.scoring.add_score(True)
            self.audio.on_match()
            self._release(a, b)
            self.check_complete()
            return

        self.scoring.add_score(False)
        self.audio.on_mismatch()
        self.scheduler.call_later(self.mismatch_delay, lambda: self._hide_pair(a, b), token=self.board.token)

    def _hide_pair(self, a: Tile, b: Tile) -> None:
        for t in (a, b):
            if t.state == "face_up":
                t.hide()
        hide_time = max(a.flip_duration, b.flip_duration)
        self.scheduler.call_later(hide_time, lambda: self._release(a, b), token=self.board.token)

    def _release(self, a: Tile, b: Tile) -> None:
        for t in (a, b):
            if not t.matched:
                t.set_locked(False)
            self.in_resolution.discard(t)
        # A tile left waiting across the resolution keeps its slot only while face up.
        self.waiting = [t for t in self.waiting if t.state == "face_up"]

    def check_complete(self) -> bool:
        """Hand off level completion exactly once, and only from a live session."""
        if self._completed or not self.board.all_matched():
            return False
        if not self.timer.complete():
            return False
        self._completed = True
        if self.on_board_cleared is not None:
            self.on_board_cleared()
        return True
