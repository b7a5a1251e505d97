from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .board import Board, new_board
from .coordinator import MatchCoordinator
from .events import Event, SessionEvents
from .ports import Audio, Presentation, SilentAudio
from .scheduler import Scheduler
from .scoring import ScoringEngine
from .tile import Tile
from .timer import SessionTimer
from .types import LevelConfig, Phase

SessionHook = Callable[["GameSession"], None]


@dataclass(frozen=True)
class TickInput:
    dt: float
    reveals: tuple[int, ...] = ()


class GameSession:
    """One playthrough of one level.

    Owns the board, coordinator, scoring engine and timer; nothing is looked up
    globally. All time passes through `tick()`.
    """

    def __init__(
        self,
        config: LevelConfig,
        seed: int,
        *,
        scheduler: Scheduler | None = None,
        presentation: Presentation | None = None,
        audio: Audio | None = None,
        on_complete: SessionHook | None = None,
        on_failed: SessionHook | None = None,
    ) -> None:
        # Nothing is built for a config that cannot be played.
        config.validate()

        self.config = config
        self.seed = seed
        self.rng = random.Random(seed)
        self.scheduler = scheduler or Scheduler()
        self.audio = audio or SilentAudio()
        self.on_complete = on_complete
        self.on_failed = on_failed
        self.events = SessionEvents()
        self.time_bonus: int | None = None
        self._inputs: list[int] = []
        self._closed = False

        self.board: Board = new_board(
            config.rows,
            config.cols,
            self.rng,
            self.scheduler,
            flip_duration=config.flip_duration,
            presentation=presentation,
            audio=self.audio,
        )
        self.scoring = ScoringEngine(events=self.events)
        self.scoring.set_level_scoring(config.match_bonus, config.mismatch_penalty)
        self.scoring.set_target_score(config.target_score)
        self.timer = SessionTimer(self.scheduler, self.events, token=self.board.token)
        self.timer.on_expired(self._handle_expired)
        self.coordinator = MatchCoordinator(
            self.board,
            self.scoring,
            self.timer,
            self.scheduler,
            mismatch_delay=config.mismatch_hide_delay,
            audio=self.audio,
            on_board_cleared=self._handle_board_cleared,
        )

    @property
    def phase(self) -> Phase:
        return self.coordinator.phase

    @property
    def event_log(self) -> list[Event]:
        return self.events.log

    @property
    def score(self) -> int:
        return self.scoring.score

    @property
    def elapsed(self) -> float:
        return self.timer.elapsed

    @property
    def remaining(self) -> float:
        return self.timer.remaining

    @property
    def closed(self) -> bool:
        return self._closed

    def tile(self, index: int) -> Tile:
        return self.board.tiles[index]

    def start(self) -> None:
        cfg = self.config
        if cfg.use_preview:
            for t in self.board.tiles:
                t.show_instant(True)
            self.timer.start_preview(
                cfg.preview_duration,
                cfg.time_limit_seconds,
                cfg.use_time_limit,
                on_end=self._end_preview,
            )
        else:
            self.timer.start_playing(cfg.time_limit_seconds, cfg.use_time_limit)

    def _end_preview(self) -> None:
        for t in self.board.face_up_tiles():
            t.hide()

    def can_reveal(self, index: int) -> bool:
        if not 0 <= index < len(self.board):
            return False
        return self.coordinator.can_reveal(self.board.tiles[index])

    def reveal(self, index: int) -> bool:
        if self._closed or not 0 <= index < len(self.board):
            return False
        return self.coordinator.request_reveal(self.board.tiles[index])

    def queue_reveal(self, index: int) -> None:
        if not self._closed:
            self._inputs.append(index)

    def tick(self, dt: float) -> None:
        if self._closed:
            return
        # Expiry first, so input arriving on the expiring tick is refused.
        self.timer.tick(dt)
        inputs, self._inputs = self._inputs, []
        for index in inputs:
            self.reveal(index)
        self.scheduler.advance(dt)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._inputs.clear()
        self.timer.stop()
        self.board.discard()

    def _handle_board_cleared(self) -> None:
        elapsed = self.timer.elapsed
        self.events.level_complete.emit(elapsed)
        self.time_bonus = self.scoring.add_time_bonus(elapsed, self.config.max_time_bonus)
        self.audio.on_level_won()
        if self.on_complete is not None:
            self.on_complete(self)

    def _handle_expired(self) -> None:
        self.audio.on_level_lost()
        if self.on_failed is not None:
            self.on_failed(self)


def replay(config: LevelConfig, seed: int, inputs: Iterable[TickInput | tuple[float, Sequence[int]]]) -> GameSession:
    session = GameSession(config, seed)
    session.start()
    for step in inputs:
        if not isinstance(step, TickInput):
            dt, reveals = step
            step = TickInput(dt=dt, reveals=tuple(reveals))
        for index in step.reveals:
            session.queue_reveal(index)
        session.tick(step.dt)
    return session
