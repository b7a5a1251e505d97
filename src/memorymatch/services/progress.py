from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from memorymatch.engine.types import LevelProgress, ProgressError, ProgressRecord


def _int_or(value: object, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def level_progress_from_dict(d: Mapping[str, object]) -> LevelProgress | None:
    number = d.get("level_number")
    if not isinstance(number, int) or number < 1:
        return None
    return LevelProgress(
        level_number=number,
        best_score=max(0, _int_or(d.get("best_score"), 0)),
        completed=bool(d.get("completed", False)),
    )


def progress_from_dict(d: Mapping[str, object]) -> ProgressRecord:
    scores_raw = d.get("level_scores", [])
    scores: list[LevelProgress] = []
    if isinstance(scores_raw, list):
        for item in scores_raw:
            if isinstance(item, dict):
                lp = level_progress_from_dict(item)
                if lp is not None:
                    scores.append(lp)
    return ProgressRecord(
        current_level=max(1, _int_or(d.get("current_level"), 1)),
        score=max(0, _int_or(d.get("score"), 0)),
        highest_unlocked_level=max(1, _int_or(d.get("highest_unlocked_level"), 1)),
        level_scores=scores,
    )


def progress_to_dict(record: ProgressRecord) -> dict[str, object]:
    return {
        "current_level": record.current_level,
        "score": record.score,
        "highest_unlocked_level": record.highest_unlocked_level,
        "level_scores": [
            {"level_number": lp.level_number, "best_score": lp.best_score, "completed": lp.completed}
            for lp in sorted(record.level_scores, key=lambda lp: lp.level_number)
        ],
    }


class ProgressService:
    """JSON save file. A missing file means a fresh player (level 1 only)."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_progress(self) -> ProgressRecord | None:
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ProgressError(f"Corrupt save file {self._path}: {e}") from e
        if not isinstance(raw, dict):
            return None
        return progress_from_dict(raw)

    def save_progress(self, record: ProgressRecord) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(progress_to_dict(record), indent=2), encoding="utf-8")

    def save_level_result(self, level_number: int, score: int, completed: bool) -> ProgressRecord:
        # Read-modify-write: other levels' records are carried over untouched.
        record = self.load_progress() or ProgressRecord()
        record.merge_level_result(level_number, score, completed)
        self.save_progress(record)
        return record
