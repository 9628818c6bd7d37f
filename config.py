# config.py
from __future__ import annotations

import os
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Callable, Optional, Tuple

from game import HexBoard, Move, Player, RED, BLUE
from bot import HumanInput, MonteCarloBot, RandomBot, TRIALS, make_rng

BOARD_MIN_SIZE = 3
BOARD_MAX_SIZE = 21
DEFAULT_SIZE = 11


class Mode(IntEnum):
    HUMAN_VS_HUMAN = 1
    HUMAN_VS_RANDOM = 2
    HUMAN_VS_MC = 3
    RANDOM_VS_RANDOM = 4
    RANDOM_VS_MC = 5
    MC_VS_MC = 6

    @property
    def label(self) -> str:
        return MODE_LABELS[self]

    @property
    def has_human(self) -> bool:
        return self in (Mode.HUMAN_VS_HUMAN, Mode.HUMAN_VS_RANDOM, Mode.HUMAN_VS_MC)


MODE_LABELS = {
    Mode.HUMAN_VS_HUMAN: "player vs player",
    Mode.HUMAN_VS_RANDOM: "player vs computer (random)",
    Mode.HUMAN_VS_MC: "player vs computer (monte carlo)",
    Mode.RANDOM_VS_RANDOM: "computer (random) vs computer (random)",
    Mode.RANDOM_VS_MC: "computer (random) vs computer (monte carlo)",
    Mode.MC_VS_MC: "computer (monte carlo) vs computer (monte carlo)",
}


@dataclass(frozen=True)
class GameConfig:
    size: int = DEFAULT_SIZE
    mode: Mode = Mode.HUMAN_VS_MC
    human_color: int = RED
    trials: int = TRIALS
    workers: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "mode", Mode(self.mode))
        except ValueError:
            raise ValueError(f"unknown mode {self.mode!r}, expected 1-6") from None

    def validate(self) -> "GameConfig":
        if not BOARD_MIN_SIZE <= self.size <= BOARD_MAX_SIZE:
            raise ValueError(
                f"board size must be between {BOARD_MIN_SIZE} and {BOARD_MAX_SIZE}, got {self.size}"
            )
        if self.human_color not in (RED, BLUE):
            raise ValueError(f"human color must be red or blue, got {self.human_color!r}")
        if self.trials <= 0:
            raise ValueError(f"trials must be positive, got {self.trials}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")
        return self

    @classmethod
    def from_env(cls, base: Optional["GameConfig"] = None) -> "GameConfig":
        """Apply HEX_SIZE / HEX_TRIALS / HEX_WORKERS / HEX_SEED overrides."""
        cfg = base if base is not None else cls()
        overrides = {}
        for key, field in (("HEX_SIZE", "size"), ("HEX_TRIALS", "trials"),
                           ("HEX_WORKERS", "workers"), ("HEX_SEED", "seed")):
            raw = os.environ.get(key)
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[field] = int(raw)
            except ValueError:
                raise ValueError(f"{key} must be an integer, got {raw!r}") from None
        return replace(cfg, **overrides)

    def new_board(self) -> HexBoard:
        return HexBoard(self.size)


def make_players(
    config: GameConfig,
    read_move: Optional[Callable[[HexBoard], Optional[Move]]] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Player, Player]:
    """Build (first, second) players for the configured mode. Blue moves first.

    Every bot gets its own generator seeded from `rng`, so one seed
    reproduces a whole computer game.
    """
    if rng is None:
        rng = make_rng(config.seed)

    def human(color: int) -> Player:
        if read_move is None:
            raise ValueError(f"mode {config.mode.label!r} needs a human input channel")
        return Player(_name(color), color, HumanInput(read_move))

    def rand(color: int) -> Player:
        return Player(f"{_name(color)}-random", color, RandomBot(random.Random(rng.getrandbits(64))))

    def mc(color: int) -> Player:
        bot = MonteCarloBot(config.trials, config.workers, random.Random(rng.getrandbits(64)))
        return Player(f"{_name(color)}-MC", color, bot)

    mode = config.mode
    hc = config.human_color
    if mode == Mode.HUMAN_VS_HUMAN:
        red, blue = human(RED), human(BLUE)
    elif mode == Mode.HUMAN_VS_RANDOM:
        red, blue = (human(RED), rand(BLUE)) if hc == RED else (rand(RED), human(BLUE))
    elif mode == Mode.HUMAN_VS_MC:
        red, blue = (human(RED), mc(BLUE)) if hc == RED else (mc(RED), human(BLUE))
    elif mode == Mode.RANDOM_VS_RANDOM:
        red, blue = rand(RED), rand(BLUE)
    elif mode == Mode.RANDOM_VS_MC:
        # coin flip for which side plays random
        if rng.randint(0, 1):
            red, blue = rand(RED), mc(BLUE)
        else:
            red, blue = mc(RED), rand(BLUE)
    else:
        red, blue = mc(RED), mc(BLUE)
    return blue, red


def _name(color: int) -> str:
    return "red" if color == RED else "blue"


def new_game(
    config: GameConfig,
    read_move: Optional[Callable[[HexBoard], Optional[Move]]] = None,
    rng: Optional[random.Random] = None,
) -> HexBoard:
    board = config.validate().new_board()
    board.add_players(*make_players(config, read_move, rng))
    return board
