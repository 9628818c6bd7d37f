"""Shared fixtures for the hex tests."""

import random

import pytest

from bot import RandomBot
from game import BLUE, RED, HexBoard, Move, Player


@pytest.fixture
def place():
    """Put `color` stones on (row, col) pairs without touching the turn."""

    def _place(board: HexBoard, color: int, *cells) -> HexBoard:
        for r, c in cells:
            board.apply_move(Move(r, c), color)
        return board

    return _place


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_board(rng):
    """Board with random players registered; blue moves first."""

    def _make(size: int = 3) -> HexBoard:
        board = HexBoard(size)
        blue = Player("blue-random", BLUE, RandomBot(random.Random(rng.getrandbits(32))))
        red = Player("red-random", RED, RandomBot(random.Random(rng.getrandbits(32))))
        board.add_players(blue, red)
        return board

    return _make
