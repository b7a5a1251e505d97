from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Protocol

from .types import ProgressRecord

if TYPE_CHECKING:
    from .tile import Tile


class Presentation(Protocol):
    """Cosmetic tile feedback. Calls must return immediately."""

    def on_tile_reveal_started(self, tile: Tile) -> None: ...

    def on_tile_hide_started(self, tile: Tile) -> None: ...

    def on_tile_flip_completed(self, tile: Tile) -> None: ...

    def on_tile_matched(self, tile: Tile) -> None: ...


class Audio(Protocol):
    def on_flip(self) -> None: ...

    def on_match(self) -> None: ...

    def on_mismatch(self) -> None: ...

    def on_level_won(self) -> None: ...

    def on_level_lost(self) -> None: ...


class ProgressStore(Protocol):
    def load_progress(self) -> ProgressRecord | None: ...

    def save_progress(self, record: ProgressRecord) -> None: ...

    def save_level_result(self, level_number: int, score: int, completed: bool) -> ProgressRecord: ...


class EventSink(Protocol):
    def log(self, event_type: str, payload: Mapping[str, object]) -> None: ...


class NullPresentation:
    """Headless presentation: tiles change state with nothing drawn."""

    def on_tile_reveal_started(self, tile: Tile) -> None:
        return None

    def on_tile_hide_started(self, tile: Tile) -> None:
        return None

    def on_tile_flip_completed(self, tile: Tile) -> None:
        return None

    def on_tile_matched(self, tile: Tile) -> None:
        return None


class SilentAudio:
    def on_flip(self) -> None:
        return None

    def on_match(self) -> None:
        return None

    def on_mismatch(self) -> None:
        return None

    def on_level_won(self) -> None:
        return None

    def on_level_lost(self) -> None:
        return None
