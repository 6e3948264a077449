"""
Tests for board layout and movement.
"""

import pytest

from cashflow.exceptions import BoardError
from cashflow.game.board import Board
from cashflow.game.spaces import Space, SpaceType


def test_standard_board_layout():
    board = Board()

    assert len(board) == 20
    assert board.get_space(0).space_type == SpaceType.PAYDAY
    assert board.get_positions(SpaceType.EXIT) == [19]
    assert board.get_positions(SpaceType.CHARITY) == [9]
    assert board.get_positions(SpaceType.BABY) == [5, 14]


@pytest.mark.parametrize("start,roll,expected", [(18, 5, 3), (15, 5, 0), (0, 6, 6), (19, 1, 0)])
def test_movement_is_modular(start, roll, expected):
    assert Board().advance(start, roll) == expected


def test_positions_stay_on_board():
    board = Board()
    position = 0
    for roll in [6, 6, 6, 5, 4, 3, 2, 1, 6, 6, 6, 6]:
        position = board.advance(position, roll)
        assert 0 <= position < len(board)


def test_rejects_gaps_in_positions():
    spaces = [Space(0, "Payday", SpaceType.PAYDAY, 0), Space(1, "Exit", SpaceType.EXIT, 2)]
    with pytest.raises(BoardError):
        Board(spaces)


def test_requires_exactly_one_exit():
    spaces = [Space(0, "Payday", SpaceType.PAYDAY, 0), Space(1, "Market", SpaceType.MARKET, 1)]
    with pytest.raises(BoardError):
        Board(spaces)
