from __future__ import annotations

from pathlib import Path

from memorymatch.engine.session import GameSession
from memorymatch.engine.types import LevelConfig, ThemeRef
from memorymatch.services.telemetry import TelemetryService


def test_log_appends_json_lines(tmp_path: Path) -> None:
    tel = TelemetryService(tmp_path / "logs" / "telemetry.jsonl")
    tel.log("boot", {"ok": True})
    tel.log("level_loaded", {"level": 1})

    records = tel.read_all()
    assert [r["type"] for r in records] == ["boot", "level_loaded"]
    assert records[1]["payload"] == {"level": 1}
    assert all("ts" in r for r in records)
    assert len(tel.path.read_text(encoding="utf-8").splitlines()) == 2


def test_disabled_writes_nothing(tmp_path: Path) -> None:
    tel = TelemetryService(tmp_path / "telemetry.jsonl", enabled=False)
    tel.log("boot", {"ok": True})
    assert not tel.path.exists()
    assert tel.read_all() == []


def test_attach_follows_session_signals(tmp_path: Path) -> None:
    tel = TelemetryService(tmp_path / "telemetry.jsonl")
    config = LevelConfig(
        level_number=4,
        name="Timed",
        rows=2,
        cols=2,
        theme=ThemeRef(back="b", fronts=("a",)),
        use_preview=True,
        preview_duration=0.5,
        use_time_limit=True,
        time_limit_seconds=1.0,
    )
    session = GameSession(config, seed=3)
    tel.attach(session)
    session.start()
    session.tick(0.5)
    session.tick(2.0)

    records = tel.read_all()
    assert [r["type"] for r in records] == ["preview_start", "preview_end", "timer_expired"]
    assert all(r["payload"]["level"] == 4 for r in records)
