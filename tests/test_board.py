"""Tests for the Board model: claiming, growth and tile labels."""

import numpy as np
import pytest

from board import Board
from models import Ownership, Side, Tile, TileState
from tests.conftest import make_board


@pytest.fixture
def board():
    return make_board(size=4, cost=5)


@pytest.fixture
def side():
    return Side(index=0, id='p1', units=15)


@pytest.fixture
def other():
    return Side(index=1, id='p2', units=15)


class TestBounds:
    def test_within_bounds(self, board):
        assert board.within_bounds(0, 0)
        assert board.within_bounds(3, 3)
        assert not board.within_bounds(-1, 0)
        assert not board.within_bounds(0, 4)
        assert not board.within_bounds(4, 0)

    def test_total_tiles(self, board):
        assert board.total_tiles == 16

    def test_rejects_mismatched_rice_grid(self):
        tiles = [[Tile() for _ in range(3)] for _ in range(3)]
        with pytest.raises(ValueError):
            Board(tiles, np.ones((2, 2)))

    def test_rejects_non_square_grid(self):
        tiles = [[Tile() for _ in range(3)] for _ in range(2)]
        with pytest.raises(ValueError):
            Board(tiles)


class TestClaim:
    def test_claim_success(self, board, side):
        assert board.claim(1, 1, side) is True
        assert board.tile_at(1, 1).occupied
        assert board.tile_at(1, 1).owner == side.index
        assert board.is_controlled_by(1, 1, side)
        assert side.units == 10

    def test_claim_with_exact_units(self, board, side):
        side.units = 5
        assert board.claim(1, 1, side) is True
        assert side.units == 0

    def test_claim_insufficient_units_does_not_mutate(self, board, side):
        side.units = 4
        assert board.claim(1, 1, side) is False
        assert side.units == 4
        tile = board.tile_at(1, 1)
        assert not tile.occupied
        assert tile.owner is None

    def test_claim_occupied_tile_fails(self, board, side, other):
        board.claim(1, 1, other)
        assert board.claim(1, 1, side) is False
        assert side.units == 15
        assert board.tile_at(1, 1).owner == other.index

    def test_set_start_tile_is_free(self, board, side):
        board.set_start_tile(3, 3, side)
        assert board.is_controlled_by(3, 3, side)
        assert side.units == 15

    def test_tiles_controlled_by_in_order(self, board, side, other):
        board.claim(2, 0, side)
        board.claim(0, 3, side)
        board.claim(1, 1, other)
        assert list(board.tiles_controlled_by(side)) == [(0, 3), (2, 0)]
        assert board.count_controlled(other) == 1


class TestGrowRice:
    def test_unwatered_grows_by_one_capped_at_two(self, board, side):
        board.claim(0, 0, side)
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 2
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 2

    def test_watered_grows_by_two_capped_at_three(self, board, side):
        board.claim(0, 0, side)
        board.water(0, 0)
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 3
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 3

    def test_watered_from_negative_level(self, board, side):
        board.claim(0, 0, side)
        board.water(0, 0)
        board.set_rice_at(0, 0, -1)
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 1

    def test_only_owned_tiles_grow(self, board, side, other):
        board.claim(0, 0, side)
        board.claim(3, 3, other)
        board.grow_rice(side)
        assert board.rice_at(0, 0) == 2
        assert board.rice_at(3, 3) == 1
        assert board.rice_at(1, 1) == 1

    def test_caps_hold_over_many_days(self, board, side):
        board.claim(0, 0, side)
        board.claim(0, 1, side)
        board.water(0, 1)
        for _ in range(10):
            board.grow_rice(side)
            assert board.rice_at(0, 0) <= 2
            assert board.rice_at(0, 1) <= 3


class TestStateLabel:
    def test_empty(self, board, side):
        assert board.state_label(0, 0, side) == (TileState.EMPTY, None)
        assert board.state_key(0, 0, side) == "EMPTY"

    def test_own_rice(self, board, side):
        board.claim(0, 0, side)
        assert board.state_label(0, 0, side) == (TileState.RICE, Ownership.SELF)
        assert board.state_key(0, 0, side) == "RICE1"

    def test_other_watered_house(self, board, side, other):
        board.claim(0, 0, other)
        board.water(0, 0)
        board.build_house(0, 0)
        assert board.state_label(0, 0, side) == (TileState.HOUSE_WATERED, Ownership.OTHER)
        assert board.state_key(0, 0, side) == "HOUSEWATER2"

    def test_labels_for_each_state(self, board, side):
        board.claim(0, 0, side)
        board.claim(0, 1, side)
        board.claim(0, 2, side)
        board.water(0, 1)
        board.build_house(0, 2)
        assert board.state_key(0, 1, side) == "RICEWATER1"
        assert board.state_key(0, 2, side) == "HOUSE1"

    def test_label_does_not_mutate(self, board, side):
        board.claim(0, 0, side)
        before = board.rice_levels.copy()
        board.state_label(0, 0, side)
        assert np.array_equal(before, board.rice_levels)
