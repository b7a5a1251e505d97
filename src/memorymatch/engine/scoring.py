from __future__ import annotations

from dataclasses import dataclass, field

from .events import SessionEvents

DEFAULT_MATCH_SCORE = 100
DEFAULT_MISMATCH_PENALTY = 10
DEFAULT_MAX_TIME_BONUS = 500


@dataclass
class ScoringEngine:
    events: SessionEvents = field(default_factory=SessionEvents)
    match_score: int = DEFAULT_MATCH_SCORE
    mismatch_penalty: int = DEFAULT_MISMATCH_PENALTY
    score: int = 0
    combo: int = 0
    multiplier: int = 1
    target_score: int = 0
    _scored: bool = field(default=False, repr=False)

    def add_score(self, matched: bool) -> int:
        """Apply one pair outcome and return the score delta actually applied."""
        self._scored = True
        before = self.score
        if matched:
            self.combo += 1
            self.multiplier = self.combo
            self.score += self.match_score * self.multiplier
        else:
            self.combo = 0
            self.multiplier = 1
            self.score = max(0, self.score - self.mismatch_penalty)
        self.events.combo_changed.emit(self.combo, self.multiplier)
        self.events.score_changed.emit(self.score)
        return self.score - before

    def add_time_bonus(self, elapsed_seconds: float, max_bonus: int = DEFAULT_MAX_TIME_BONUS) -> int:
        # A one-minute clear earns the full bonus; anything faster is capped there.
        bonus = round(max_bonus / max(1.0, elapsed_seconds / 60.0))
        self.score += bonus
        self.events.score_changed.emit(self.score)
        return bonus

    def set_level_scoring(self, match_bonus: int, mismatch_penalty: int) -> None:
        if self._scored:
            raise RuntimeError("Level scoring must be set before the first pair is scored.")
        self.match_score = match_bonus
        self.mismatch_penalty = mismatch_penalty

    def set_target_score(self, target: int) -> None:
        self.target_score = target
        self.events.target_score_set.emit(self.score, self.target_score)

    def set_score(self, score: int) -> None:
        self.score = max(0, score)
        self.events.score_changed.emit(self.score)

    def has_reached_target(self) -> bool:
        return self.score >= self.target_score

    def progress(self) -> float:
        if self.target_score <= 0:
            return 0.0
        return min(1.0, max(0.0, self.score / self.target_score))

    def reset(self) -> None:
        self.score = 0
        self.combo = 0
        self.multiplier = 1
        self._scored = False
        self.events.score_changed.emit(self.score)
        self.events.combo_changed.emit(self.combo, self.multiplier)
