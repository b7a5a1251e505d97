from __future__ import annotations

from dataclasses import dataclass, field

from memorymatch.engine.tile import Tile

MATCH_SCALE = 1.2
MATCH_PULSE_DURATION = 0.3


def ease_in_out(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


@dataclass
class _Flip:
    start: float
    duration: float
    to_front: bool


@dataclass
class TileView:
    show_front: bool
    scale_x: float = 1.0
    scale: float = 1.0


@dataclass
class TileAnimator:
    """Presentation for the pygame client.

    The engine only says when a flip starts, ends, or a tile matches; this
    turns those notifications into per-frame scale values.
    """

    time: float = 0.0
    _flips: dict[int, _Flip] = field(default_factory=dict)
    _pulses: dict[int, float] = field(default_factory=dict)

    def update(self, dt: float) -> None:
        self.time += dt
        done = [i for i, start in self._pulses.items() if self.time - start >= MATCH_PULSE_DURATION]
        for i in done:
            del self._pulses[i]

    def reset(self) -> None:
        self._flips.clear()
        self._pulses.clear()

    def on_tile_reveal_started(self, tile: Tile) -> None:
        self._flips[tile.index] = _Flip(self.time, tile.flip_duration, to_front=True)

    def on_tile_hide_started(self, tile: Tile) -> None:
        self._flips[tile.index] = _Flip(self.time, tile.flip_duration, to_front=False)

    def on_tile_flip_completed(self, tile: Tile) -> None:
        self._flips.pop(tile.index, None)

    def on_tile_matched(self, tile: Tile) -> None:
        self._flips.pop(tile.index, None)
        self._pulses[tile.index] = self.time

    def view(self, tile: Tile) -> TileView:
        flip = self._flips.get(tile.index)
        if flip is not None and tile.state == "flipping":
            t = ease_in_out((self.time - flip.start) / max(0.0001, flip.duration))
            # First half closes the old face, second half opens the new one.
            if t < 0.5:
                return TileView(show_front=not flip.to_front, scale_x=1.0 - t * 2.0)
            return TileView(show_front=flip.to_front, scale_x=(t - 0.5) * 2.0)

        view = TileView(show_front=tile.state in ("face_up", "matched"))
        start = self._pulses.get(tile.index)
        if start is not None:
            t = (self.time - start) / MATCH_PULSE_DURATION
            rise = t * 2.0 if t < 0.5 else (1.0 - t) * 2.0
            view.scale = 1.0 + (MATCH_SCALE - 1.0) * max(0.0, rise)
        return view
