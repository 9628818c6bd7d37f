# match.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from game import HexBoard, Move, Player, COLOR_NAMES, RED, BLUE

logger = logging.getLogger(__name__)

OnMove = Callable[[HexBoard, Player, Move], None]


def play_game(board: HexBoard, on_move: Optional[OnMove] = None) -> Player:
    """Run the turn loop until one side connects its edges; return the winner.

    Moves a source proposes that `play` rejects are asked for again, the way
    a human retypes a bad cell.
    """
    while not board.is_over():
        player = board.active_player
        mv = player.select_move(board)
        if mv is None or not board.play(mv):
            if not player.is_human:
                logger.warning("%s proposed invalid move %s, retrying", player.name, mv)
            continue

        logger.info("move %d: %s plays %s", board.moves_played, player.name, mv)
        if on_move is not None:
            on_move(board, player, mv)

    color = RED if board.check_win(RED) else BLUE
    winner = next(p for p in board.players if p is not None and p.color == color)
    logger.info("%s (%s) wins after %d moves", winner.name, COLOR_NAMES[winner.color], board.moves_played)
    return winner
