# bot.py
from __future__ import annotations

import logging
import random
import time
from multiprocessing import Pool
from typing import Callable, Dict, List, Optional, Protocol

from game import HexBoard, HexGraph, Move, EMPTY, other

logger = logging.getLogger(__name__)

TRIALS = 1000


class MoveSource(Protocol):
    is_human: bool

    def select_move(self, board: HexBoard) -> Optional[Move]:
        ...


def make_rng(seed: Optional[int] = None) -> random.Random:
    if seed is None:
        seed = time.time_ns()
    return random.Random(seed)


class HumanInput:
    """Move source fed by an external input channel (window clicks, stdin...)."""

    is_human = True

    def __init__(self, read_move: Callable[[HexBoard], Optional[Move]]):
        self.read_move = read_move

    def select_move(self, board: HexBoard) -> Optional[Move]:
        return self.read_move(board)


class RandomBot:
    is_human = False

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else make_rng(seed)

    def select_move(self, board: HexBoard) -> Move:
        n = board.size
        while True:
            mv = Move(self.rng.randint(0, n - 1), self.rng.randint(0, n - 1))
            if board.is_valid_move(mv):
                return mv


# ---------------- playouts ----------------
def fill_randomly(graph: HexGraph, first: int, rng: random.Random) -> None:
    """Fill every empty cell, alternating colours starting with `first`.

    Shuffling the empty cells and dealing colours in turn gives the same
    distribution as picking a uniformly random empty cell for each move.
    """
    nodes = graph.nodes
    empty = [i for i, v in enumerate(nodes) if v == EMPTY]
    rng.shuffle(empty)
    second = other(first)
    for k, i in enumerate(empty):
        nodes[i] = first if k % 2 == 0 else second


def count_wins(board: HexBoard, mv: Move, color: int, trials: int, rng: random.Random) -> int:
    wins = 0
    for _ in range(trials):
        sim = board.clone()
        sim.apply_move(mv, color)
        fill_randomly(sim.graph, other(color), rng)
        if sim.check_win(color):
            wins += 1
    return wins


def _count_wins_task(size: int, nodes: List[int], r: int, c: int,
                     color: int, trials: int, seed: int) -> int:
    # runs in a worker process: rebuild a bare board from the grid values
    board = HexBoard(size)
    board.graph.nodes = list(nodes)
    return count_wins(board, Move(r, c), color, trials, random.Random(seed))


class MonteCarloBot:
    """Flat Monte Carlo: rate each empty cell by random playouts.

    For every empty cell, `trials` copies of the board get the mover's stone
    on that cell and are then filled at random to the last cell. The cell
    whose copies most often end in a win for the mover is played.
    """

    is_human = False

    def __init__(
        self,
        trials: int = TRIALS,
        workers: int = 1,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        if trials <= 0:
            raise ValueError(f"trials must be positive, got {trials}")
        if workers <= 0:
            raise ValueError(f"workers must be positive, got {workers}")
        self.trials = trials
        self.workers = workers
        self.rng = rng if rng is not None else make_rng(seed)

    def win_probability(self, board: HexBoard, mv: Move, color: Optional[int] = None) -> float:
        if color is None:
            color = board.active_color
        return count_wins(board, mv, color, self.trials, self.rng) / self.trials

    def evaluate(self, board: HexBoard, color: Optional[int] = None) -> Dict[Move, float]:
        """Win probability of every empty cell, in row-major order."""
        if color is None:
            color = board.active_color
        cands = board.empty_cells()

        if self.workers > 1 and len(cands) > 1:
            nodes = board.graph.nodes
            args = [
                (board.size, nodes, mv.r, mv.c, color, self.trials, self.rng.getrandbits(64))
                for mv in cands
            ]
            logger.debug("evaluating %d cells on %d processes", len(cands), self.workers)
            with Pool(processes=self.workers) as pool:
                wins = pool.starmap(_count_wins_task, args)
        else:
            wins = [count_wins(board, mv, color, self.trials, self.rng) for mv in cands]

        return {mv: w / self.trials for mv, w in zip(cands, wins)}

    def select_move(self, board: HexBoard) -> Move:
        t0 = time.perf_counter()
        probs = self.evaluate(board)
        if not probs:
            raise ValueError("no empty cell left to play")

        # strict improvement keeps the first scanned cell on ties; all-zero -> first cell
        best_move = next(iter(probs))
        best_p = probs[best_move]
        for mv, p in probs.items():
            if p > best_p:
                best_move, best_p = mv, p

        logger.debug(
            "monte carlo picked %s (p=%.3f) from %d cells in %.2fs",
            best_move, best_p, len(probs), time.perf_counter() - t0,
        )
        return best_move
