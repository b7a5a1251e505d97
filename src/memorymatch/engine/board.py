from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterator

from .ports import Audio, NullPresentation, Presentation, SilentAudio
from .scheduler import CancelToken, Scheduler
from .tile import Tile
from .types import ConfigurationError


def generate_pair_ids(rows: int, cols: int, rng: random.Random) -> list[int]:
    """Return rows*cols pair ids, each of 0..n/2-1 exactly twice, uniformly shuffled."""
    if rows <= 0 or cols <= 0:
        raise ConfigurationError("rows and cols must be positive.")
    total = rows * cols
    if total % 2 != 0:
        raise ConfigurationError(f"Board of {rows}x{cols} has an odd number of tiles.")

    ids = [i // 2 for i in range(total)]
    # Fisher-Yates, j drawn from [0, i] inclusive
    for i in range(total - 1, 0, -1):
        j = rng.randint(0, i)
        ids[i], ids[j] = ids[j], ids[i]
    return ids


@dataclass
class Board:
    rows: int
    cols: int
    tiles: list[Tile]
    token: CancelToken = field(default_factory=CancelToken)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __contains__(self, tile: object) -> bool:
        if not isinstance(tile, Tile):
            return False
        return 0 <= tile.index < len(self.tiles) and self.tiles[tile.index] is tile

    def at(self, row: int, col: int) -> Tile:
        return self.tiles[row * self.cols + col]

    def all_matched(self) -> bool:
        return all(t.matched for t in self.tiles)

    def matched_pairs(self) -> int:
        return sum(1 for t in self.tiles if t.matched) // 2

    def face_up_tiles(self) -> list[Tile]:
        return [t for t in self.tiles if t.state == "face_up"]

    def pair_ids(self) -> list[int]:
        return [t.pair_id for t in self.tiles]

    def discard(self) -> None:
        """Cancel every timer tied to this board before it is thrown away."""
        self.token.cancel()
        for t in self.tiles:
            t.cancel_flip()
            t.on_revealed = None


def new_board(
    rows: int,
    cols: int,
    rng: random.Random,
    scheduler: Scheduler,
    *,
    flip_duration: float = 0.3,
    presentation: Presentation | None = None,
    audio: Audio | None = None,
) -> Board:
    ids = generate_pair_ids(rows, cols, rng)
    token = CancelToken()
    pres = presentation or NullPresentation()
    sfx = audio or SilentAudio()
    tiles = [
        Tile(
            index=i,
            pair_id=pid,
            scheduler=scheduler,
            token=token,
            flip_duration=flip_duration,
            presentation=pres,
            audio=sfx,
        )
        for i, pid in enumerate(ids)
    ]
    return Board(rows=rows, cols=cols, tiles=tiles, token=token)
