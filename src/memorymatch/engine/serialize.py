from __future__ import annotations

from .session import GameSession
from .tile import Tile


def _tile_to_dict(t: Tile) -> dict[str, object]:
    return {"index": t.index, "pair_id": t.pair_id, "state": t.state, "locked": t.locked}


def snapshot(session: GameSession) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current session state."""
    coordinator = session.coordinator
    return {
        "seed": session.seed,
        "level": session.config.level_number,
        "phase": session.phase,
        "elapsed": round(session.elapsed, 6),
        "score": session.scoring.score,
        "combo": session.scoring.combo,
        "multiplier": session.scoring.multiplier,
        "tiles": [_tile_to_dict(t) for t in session.board.tiles],
        "waiting": [t.index for t in coordinator.waiting],
        "in_resolution": sorted(t.index for t in coordinator.in_resolution),
        "event_log": list(session.event_log),
    }
