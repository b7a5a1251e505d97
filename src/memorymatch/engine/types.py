from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TileState = Literal["face_down", "flipping", "face_up", "matched"]
TimerPhase = Literal["idle", "preview", "playing", "complete", "failed"]
Phase = Literal["idle", "preview", "playing", "resolving", "complete", "failed"]

TERMINAL_PHASES: frozenset[str] = frozenset({"complete", "failed"})


class ConfigurationError(ValueError):
    pass


class ProgressError(RuntimeError):
    """The save file could not be read."""


@dataclass(frozen=True)
class ThemeRef:
    """Asset references for one level. Opaque to the engine."""

    back: str
    fronts: tuple[str, ...]

    def front_for(self, pair_id: int) -> str:
        return self.fronts[pair_id % len(self.fronts)]


@dataclass(frozen=True)
class LevelConfig:
    level_number: int
    name: str
    rows: int
    cols: int
    theme: ThemeRef
    use_preview: bool = True
    preview_duration: float = 2.0
    use_time_limit: bool = True
    time_limit_seconds: float = 180.0
    time_bonus_multiplier: int = 10
    flip_duration: float = 0.3
    mismatch_hide_delay: float = 0.6
    match_bonus: int = 100
    mismatch_penalty: int = 10
    target_score: int = 1000

    @property
    def total_tiles(self) -> int:
        return self.rows * self.cols

    @property
    def max_time_bonus(self) -> int:
        return self.time_bonus_multiplier * 100

    def formatted_time_limit(self) -> str:
        minutes = int(self.time_limit_seconds // 60)
        seconds = int(self.time_limit_seconds % 60)
        return f"{minutes:02d}:{seconds:02d}"

    def validate(self) -> None:
        where = f"Level {self.level_number}"
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"{where}: rows and cols must be positive.")
        if self.total_tiles % 2 != 0:
            raise ConfigurationError(f"{where}: total tiles must be even (got {self.rows}x{self.cols}).")
        if not self.theme.fronts:
            raise ConfigurationError(f"{where}: need at least one tile face in the theme.")
        for name in ("preview_duration", "time_limit_seconds", "flip_duration", "mismatch_hide_delay"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{where}: {name} must not be negative.")


@dataclass
class LevelProgress:
    level_number: int
    best_score: int = 0
    completed: bool = False


@dataclass
class ProgressRecord:
    """Persisted player progress. Level numbers are 1-based."""

    current_level: int = 1
    score: int = 0
    highest_unlocked_level: int = 1
    level_scores: list[LevelProgress] = field(default_factory=list)

    def get(self, level_number: int) -> LevelProgress | None:
        for lp in self.level_scores:
            if lp.level_number == level_number:
                return lp
        return None

    def is_unlocked(self, level_number: int) -> bool:
        return level_number <= max(1, self.highest_unlocked_level)

    def merge_level_result(self, level_number: int, score: int, completed: bool) -> None:
        # Only the touched level's entry changes; other levels are kept as-is.
        progress = self.get(level_number)
        if progress is None:
            progress = LevelProgress(level_number=level_number)
            self.level_scores.append(progress)
        progress.best_score = max(progress.best_score, score)
        progress.completed = progress.completed or completed
        if completed:
            self.highest_unlocked_level = max(self.highest_unlocked_level, level_number + 1)
