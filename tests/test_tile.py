from __future__ import annotations

from memorymatch.engine.scheduler import CancelToken, Scheduler
from memorymatch.engine.tile import Tile


class RecordingPresentation:
    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def on_tile_reveal_started(self, tile: Tile) -> None:
        self.calls.append(("reveal", tile.index))

    def on_tile_hide_started(self, tile: Tile) -> None:
        self.calls.append(("hide", tile.index))

    def on_tile_flip_completed(self, tile: Tile) -> None:
        self.calls.append(("done", tile.index))

    def on_tile_matched(self, tile: Tile) -> None:
        self.calls.append(("matched", tile.index))


def _tile(presentation: RecordingPresentation | None = None) -> tuple[Tile, Scheduler]:
    scheduler = Scheduler()
    tile = Tile(index=0, pair_id=3, scheduler=scheduler, token=CancelToken())
    if presentation is not None:
        tile.presentation = presentation
    return tile, scheduler


def test_reveal_flips_then_lands_face_up() -> None:
    pres = RecordingPresentation()
    tile, scheduler = _tile(pres)
    revealed: list[Tile] = []
    tile.on_revealed = revealed.append

    assert tile.reveal()
    assert tile.state == "flipping"
    assert tile.revealing
    assert not tile.interactable

    scheduler.advance(0.2)
    assert tile.state == "flipping"
    scheduler.advance(0.1)
    assert tile.state == "face_up"
    assert revealed == [tile]
    assert pres.calls == [("reveal", 0), ("done", 0)]


def test_reveal_rejected_unless_face_down_and_unlocked() -> None:
    tile, scheduler = _tile()
    tile.set_locked(True)
    assert not tile.reveal()
    tile.set_locked(False)

    assert tile.reveal()
    # Already flipping.
    assert not tile.reveal()
    scheduler.advance(1.0)
    # Already face up.
    assert not tile.reveal()


def test_hide_only_from_face_up() -> None:
    pres = RecordingPresentation()
    tile, scheduler = _tile(pres)
    assert not tile.hide()

    tile.reveal()
    scheduler.advance(1.0)
    assert tile.hide()
    assert tile.state == "flipping"
    assert not tile.revealing
    scheduler.advance(1.0)
    assert tile.state == "face_down"
    assert ("hide", 0) in pres.calls


def test_hide_does_not_call_on_revealed() -> None:
    tile, scheduler = _tile()
    revealed: list[Tile] = []
    tile.show_instant(True)
    tile.on_revealed = revealed.append
    tile.hide()
    scheduler.advance(1.0)
    assert revealed == []


def test_set_matched_is_terminal() -> None:
    pres = RecordingPresentation()
    tile, scheduler = _tile(pres)
    tile.reveal()
    tile.set_locked(True)
    tile.set_matched()

    assert tile.matched
    assert not tile.locked
    scheduler.advance(1.0)
    assert tile.state == "matched"
    assert not tile.reveal()
    assert not tile.hide()
    tile.show_instant(False)
    assert tile.state == "matched"
    assert pres.calls.count(("matched", 0)) == 1


def test_cancelled_token_stops_flip() -> None:
    token = CancelToken()
    scheduler = Scheduler()
    tile = Tile(index=1, pair_id=0, scheduler=scheduler, token=token, flip_duration=0.5)
    tile.reveal()
    token.cancel()
    scheduler.advance(1.0)
    assert tile.state == "flipping"


def test_reset_returns_to_face_down() -> None:
    tile, scheduler = _tile()
    tile.reveal()
    tile.set_locked(True)
    tile.reset()
    scheduler.advance(1.0)
    assert tile.state == "face_down"
    assert tile.interactable
