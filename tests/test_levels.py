from __future__ import annotations

from pathlib import Path

import pytest

from memorymatch.engine.levels import AUTO_ADVANCE_DELAY, LevelSequencer
from memorymatch.engine.session import GameSession
from memorymatch.engine.types import ConfigurationError, LevelConfig, ProgressRecord, ThemeRef
from memorymatch.services.progress import ProgressService


class ListSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def log(self, event_type: str, payload: dict[str, object]) -> None:
        self.events.append((event_type, dict(payload)))

    def types(self) -> list[str]:
        return [t for t, _ in self.events]


def _level(number: int, rows: int = 2, cols: int = 2) -> LevelConfig:
    return LevelConfig(
        level_number=number,
        name=f"L{number}",
        rows=rows,
        cols=cols,
        theme=ThemeRef(back="back.png", fronts=("a.png", "b.png")),
        use_preview=False,
        use_time_limit=False,
    )


def _sequencer(tmp_path: Path, count: int = 3, **kwargs: object) -> tuple[LevelSequencer, ProgressService, ListSink]:
    progress = ProgressService(tmp_path / "progress.json")
    sink = ListSink()
    seq = LevelSequencer(
        [_level(i + 1) for i in range(count)],
        progress=progress,
        telemetry=sink,
        seed=5,
        **kwargs,  # type: ignore[arg-type]
    )
    return seq, progress, sink


def _clear(seq: LevelSequencer, session: GameSession) -> None:
    pairs: dict[int, list[int]] = {}
    for i, pid in enumerate(session.board.pair_ids()):
        pairs.setdefault(pid, []).append(i)
    for a, b in pairs.values():
        session.reveal(a)
        session.reveal(b)
        seq.tick(1.0)


def test_requires_levels() -> None:
    with pytest.raises(ConfigurationError):
        LevelSequencer([])


def test_invalid_index_raises(tmp_path: Path) -> None:
    seq, _, _ = _sequencer(tmp_path)
    with pytest.raises(ConfigurationError):
        seq.load_level(3)
    with pytest.raises(ConfigurationError):
        seq.load_level(-1)


def test_bad_level_is_rejected_before_teardown(tmp_path: Path) -> None:
    seq = LevelSequencer([_level(1), _level(2, rows=3, cols=3)], seed=1)
    first = seq.load_level(0)
    with pytest.raises(ConfigurationError):
        seq.load_level(1)
    assert seq.session is first
    assert not first.closed
    assert seq.index == 0


def test_load_next_stops_at_last_level(tmp_path: Path) -> None:
    seq, _, _ = _sequencer(tmp_path, count=2)
    first = seq.load_level(0)
    second = seq.load_next()
    assert second is not None
    assert first.closed
    assert seq.current_level_number == 2
    assert not seq.has_next()
    assert seq.load_next() is None
    assert seq.session is second


def test_completion_records_progress(tmp_path: Path) -> None:
    seq, progress, sink = _sequencer(tmp_path)
    session = seq.load_level(0)
    _clear(seq, session)
    assert session.phase == "complete"

    record = progress.load_progress()
    assert record is not None
    lp = record.get(1)
    assert lp is not None
    assert lp.completed
    assert lp.best_score == session.score
    assert record.highest_unlocked_level == 2
    assert record.current_level == 2
    assert record.score == session.score
    assert sink.types() == ["level_loaded", "level_completed", "progress_saved"]


def test_failure_is_logged_and_not_saved(tmp_path: Path) -> None:
    progress = ProgressService(tmp_path / "progress.json")
    sink = ListSink()
    timed = LevelConfig(
        level_number=1,
        name="Timed",
        rows=2,
        cols=2,
        theme=ThemeRef(back="b", fronts=("a",)),
        use_preview=False,
        use_time_limit=True,
        time_limit_seconds=1.0,
    )
    seq = LevelSequencer([timed], progress=progress, telemetry=sink)
    session = seq.load_level(0)
    seq.tick(2.0)
    assert session.phase == "failed"
    assert sink.types() == ["level_loaded", "level_failed"]
    assert progress.load_progress() is None


def test_select_level_respects_unlocks(tmp_path: Path) -> None:
    seq, progress, _ = _sequencer(tmp_path)
    assert seq.select_level(1) is None
    assert not seq.is_unlocked(2)

    session = seq.select_level(0)
    assert session is not None
    _clear(seq, session)
    assert seq.is_unlocked(2)
    assert seq.best_score(1) == session.score
    assert seq.best_score(3) == 0

    second = seq.select_level(1)
    assert second is not None
    assert seq.current_level_number == 2
    record = progress.load_progress()
    assert record is not None
    assert record.current_level == 2

    with pytest.raises(ConfigurationError):
        seq.select_level(7)


def test_resume_loads_saved_checkpoint(tmp_path: Path) -> None:
    seq, progress, _ = _sequencer(tmp_path)
    assert seq.resume().config.level_number == 1

    progress.save_progress(ProgressRecord(current_level=3, highest_unlocked_level=3))
    assert seq.resume().config.level_number == 3

    # Checkpoints beyond the catalogue clamp to the last level.
    progress.save_progress(ProgressRecord(current_level=9, highest_unlocked_level=9))
    assert seq.resume().config.level_number == 3


def test_restart_builds_a_fresh_session(tmp_path: Path) -> None:
    seq, _, _ = _sequencer(tmp_path)
    first = seq.load_level(1)
    first.reveal(0)
    again = seq.restart()
    assert again is not first
    assert first.closed
    assert seq.index == 1
    assert all(t.state == "face_down" for t in again.board)


def test_auto_advance_after_delay(tmp_path: Path) -> None:
    seq, _, sink = _sequencer(tmp_path, auto_advance_delay=3.0)
    session = seq.load_level(0)
    _clear(seq, session)
    assert seq.session is session

    seq.tick(1.0)
    assert seq.session is session
    seq.tick(2.5)
    assert seq.session is not session
    assert seq.current_level_number == 2
    assert sink.types().count("level_loaded") == 2


def test_auto_advance_is_dropped_when_player_moves_on(tmp_path: Path) -> None:
    seq, _, _ = _sequencer(tmp_path, auto_advance_delay=3.0)
    session = seq.load_level(0)
    _clear(seq, session)
    replayed = seq.restart()
    seq.tick(5.0)
    assert seq.session is replayed
    assert seq.index == 0


def test_merge_keeps_best_and_never_relocks() -> None:
    record = ProgressRecord()
    record.merge_level_result(1, 500, True)
    record.merge_level_result(1, 200, False)
    lp = record.get(1)
    assert lp is not None
    assert lp.best_score == 500
    assert lp.completed
    assert record.highest_unlocked_level == 2

    record.merge_level_result(3, 50, False)
    assert record.highest_unlocked_level == 2
    assert record.is_unlocked(2)
    assert not record.is_unlocked(3)


def test_unreadable_save_does_not_end_the_run(tmp_path: Path) -> None:
    seq, progress, sink = _sequencer(tmp_path, auto_advance_delay=AUTO_ADVANCE_DELAY)
    session = seq.load_level(0)
    progress.path.write_text("{not json", encoding="utf-8")

    _clear(seq, session)
    assert session.phase == "complete"
    assert sink.types() == ["level_loaded", "level_completed", "progress_save_failed"]
    _, payload = sink.events[-1]
    assert payload["level"] == 1
    assert "Corrupt save file" in str(payload["error"])
    # The broken file is left for the player to inspect.
    assert progress.path.read_text(encoding="utf-8") == "{not json"

    seq.tick(AUTO_ADVANCE_DELAY)
    assert seq.current_level_number == 2
    assert seq.session is not session
