from __future__ import annotations

import random
from typing import Sequence

from .ports import Audio, EventSink, Presentation, ProgressStore
from .scheduler import Scheduler, TimerHandle
from .session import GameSession
from .types import ConfigurationError, LevelConfig, ProgressError, ProgressRecord

# Pause on the win screen before the next level loads.
AUTO_ADVANCE_DELAY = 3.0


class LevelSequencer:
    """Walks the configured levels in order and records results.

    Level indexes are 0-based; level numbers (what the player sees and what
    is persisted) are 1-based.
    """

    def __init__(
        self,
        levels: Sequence[LevelConfig],
        *,
        progress: ProgressStore | None = None,
        presentation: Presentation | None = None,
        audio: Audio | None = None,
        telemetry: EventSink | None = None,
        scheduler: Scheduler | None = None,
        seed: int | None = None,
        auto_advance_delay: float | None = None,
    ) -> None:
        if not levels:
            raise ConfigurationError("No levels configured.")
        self.levels = tuple(levels)
        self.progress = progress
        self.presentation = presentation
        self.audio = audio
        self.telemetry = telemetry
        self.scheduler = scheduler or Scheduler()
        self.auto_advance_delay = auto_advance_delay
        self.index = 0
        self.session: GameSession | None = None
        self._rng = random.Random(seed)
        self._advance: TimerHandle | None = None

    @property
    def current_level(self) -> LevelConfig:
        return self.levels[self.index]

    @property
    def current_level_number(self) -> int:
        return self.index + 1

    @property
    def total_levels(self) -> int:
        return len(self.levels)

    def load_level(self, index: int) -> GameSession:
        if index < 0 or index >= len(self.levels):
            raise ConfigurationError(f"Invalid level index: {index}")
        level = self.levels[index]
        # Validate before the old board is torn down.
        level.validate()

        self._cancel_auto_advance()
        if self.session is not None:
            self.session.close()

        self.index = index
        session = GameSession(
            level,
            seed=self._rng.randrange(1, 2**31 - 1),
            scheduler=self.scheduler,
            presentation=self.presentation,
            audio=self.audio,
            on_complete=self._on_level_complete,
            on_failed=self._on_level_failed,
        )
        self.session = session
        session.start()
        self._log(
            "level_loaded",
            {
                "level": level.level_number,
                "grid": f"{level.rows}x{level.cols}",
                "preview": level.preview_duration if level.use_preview else None,
                "time_limit": level.time_limit_seconds if level.use_time_limit else None,
            },
        )
        return session

    def has_next(self) -> bool:
        return self.index < len(self.levels) - 1

    def load_next(self) -> GameSession | None:
        if not self.has_next():
            return None
        return self.load_level(self.index + 1)

    def restart(self) -> GameSession:
        return self.load_level(self.index)

    def tick(self, dt: float) -> None:
        if self.session is not None and not self.session.closed:
            self.session.tick(dt)
        else:
            self.scheduler.advance(dt)

    # -------- Progress --------
    def load_record(self) -> ProgressRecord:
        record = self.progress.load_progress() if self.progress is not None else None
        return record if record is not None else ProgressRecord()

    def is_unlocked(self, level_number: int) -> bool:
        return self.load_record().is_unlocked(level_number)

    def best_score(self, level_number: int) -> int:
        lp = self.load_record().get(level_number)
        return lp.best_score if lp is not None else 0

    def resume(self) -> GameSession:
        record = self.load_record()
        index = min(max(record.current_level, 1), len(self.levels)) - 1
        return self.load_level(index)

    def select_level(self, index: int) -> GameSession | None:
        if index < 0 or index >= len(self.levels):
            raise ConfigurationError(f"Invalid level index: {index}")
        record = self.load_record()
        if not record.is_unlocked(index + 1):
            return None
        session = self.load_level(index)
        if self.progress is not None:
            record.current_level = index + 1
            self.progress.save_progress(record)
        return session

    def _on_level_complete(self, session: GameSession) -> None:
        level = session.config
        self._log(
            "level_completed",
            {
                "level": level.level_number,
                "score": session.score,
                "elapsed": round(session.elapsed, 3),
                "time_bonus": session.time_bonus,
            },
        )
        if self.progress is not None:
            try:
                record = self.progress.save_level_result(self.current_level_number, session.score, True)
                record.current_level = self.current_level_number + 1 if self.has_next() else self.current_level_number
                record.score = session.score
                self.progress.save_progress(record)
            except ProgressError as e:
                # The level stays won; only the save is lost.
                self._log("progress_save_failed", {"level": self.current_level_number, "error": str(e)})
            else:
                self._log("progress_saved", {"level": self.current_level_number, "unlocked": record.highest_unlocked_level})

        if self.auto_advance_delay is not None and self.has_next():
            self._advance = self.scheduler.call_later(self.auto_advance_delay, lambda: self._auto_advance(session))

    def _on_level_failed(self, session: GameSession) -> None:
        self._log(
            "level_failed",
            {"level": session.config.level_number, "score": session.score, "elapsed": round(session.elapsed, 3)},
        )

    def _auto_advance(self, session: GameSession) -> None:
        self._advance = None
        # The player may already have moved on.
        if self.session is not session:
            return
        self.load_next()

    def _cancel_auto_advance(self) -> None:
        if self._advance is not None:
            self._advance.cancel()
            self._advance = None

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)
