from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from memorymatch.engine.session import GameSession


@dataclass
class TelemetryService:
    """Append-only JSON-lines event log."""

    path: Path
    enabled: bool = True

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if not self.enabled:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def attach(self, session: GameSession) -> None:
        level = session.config.level_number
        ev = session.events
        ev.preview_start.connect(lambda: self.log("preview_start", {"level": level}))
        ev.preview_end.connect(lambda: self.log("preview_end", {"level": level}))
        ev.timer_expired.connect(lambda: self.log("timer_expired", {"level": level, "score": session.score}))
        ev.level_complete.connect(
            lambda elapsed: self.log("level_complete", {"level": level, "elapsed": round(elapsed, 3), "score": session.score})
        )

    def read_all(self) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        out: list[dict[str, object]] = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                out.append(json.loads(line))
        return out
