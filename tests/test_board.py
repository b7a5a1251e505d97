from __future__ import annotations

import random
from collections import Counter

import pytest

from memorymatch.engine.board import generate_pair_ids, new_board
from memorymatch.engine.scheduler import Scheduler
from memorymatch.engine.types import ConfigurationError


def test_every_pair_id_appears_exactly_twice() -> None:
    ids = generate_pair_ids(4, 5, random.Random(7))
    assert len(ids) == 20
    counts = Counter(ids)
    assert sorted(counts) == list(range(10))
    assert all(c == 2 for c in counts.values())


@pytest.mark.parametrize("rows,cols", [(3, 3), (1, 5), (0, 4), (4, -2)])
def test_rejects_unplayable_dimensions(rows: int, cols: int) -> None:
    with pytest.raises(ConfigurationError):
        generate_pair_ids(rows, cols, random.Random(1))


def test_same_seed_same_layout() -> None:
    a = generate_pair_ids(6, 6, random.Random(1234))
    b = generate_pair_ids(6, 6, random.Random(1234))
    assert a == b

    layouts = {tuple(generate_pair_ids(6, 6, random.Random(seed))) for seed in range(5)}
    assert len(layouts) > 1


def test_shuffle_is_uniform_over_small_board() -> None:
    # A 2x2 board has 4!/(2!*2!) = 6 distinct layouts.
    rng = random.Random(99)
    trials = 6000
    counts = Counter(tuple(generate_pair_ids(2, 2, rng)) for _ in range(trials))
    assert len(counts) == 6
    expected = trials / 6
    for layout, n in counts.items():
        assert abs(n - expected) < 200, (layout, n)


def test_new_board_wires_tiles_to_one_token() -> None:
    scheduler = Scheduler()
    board = new_board(2, 3, random.Random(5), scheduler, flip_duration=0.4)
    assert len(board) == 6
    assert [t.index for t in board] == list(range(6))
    assert all(t.token is board.token for t in board)
    assert all(t.flip_duration == 0.4 for t in board)
    assert board.at(1, 2) is board.tiles[5]
    assert board.pair_ids() == [t.pair_id for t in board.tiles]


def test_membership_is_by_identity() -> None:
    scheduler = Scheduler()
    a = new_board(2, 2, random.Random(1), scheduler)
    b = new_board(2, 2, random.Random(1), scheduler)
    assert a.tiles[0] in a
    assert b.tiles[0] not in a
    assert "tile" not in a


def test_discard_cancels_pending_flips() -> None:
    scheduler = Scheduler()
    board = new_board(2, 2, random.Random(3), scheduler)
    revealed: list[int] = []
    for t in board:
        t.on_revealed = lambda tile: revealed.append(tile.index)

    assert board.tiles[0].reveal()
    board.discard()
    scheduler.advance(1.0)

    assert revealed == []
    assert board.tiles[0].state != "face_up"
    assert scheduler.pending() == 0
    assert board.tiles[0].on_revealed is None
