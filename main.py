# main.py
import argparse
import logging
import sys
from dataclasses import replace

import pygame

from config import BOARD_MAX_SIZE, BOARD_MIN_SIZE, GameConfig, Mode, new_game
from game import BLUE, RED, HexBoard, parse_move
from match import play_game
from ui import AppUI

logger = logging.getLogger(__name__)

TITLE = r"""
     .__
     |  |__   ____ ___  ___
     |  |  \_/ __ \\  \/  /
     |   Y  \  ___/ >    <
     |___|  /\___  >__/\_ \
          \/     \/      \/
"""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hex", description="Play Hex against a person or the computer.")
    p.add_argument("--size", type=int, help=f"board size ({BOARD_MIN_SIZE}-{BOARD_MAX_SIZE})")
    p.add_argument("--mode", type=int, choices=[int(m) for m in Mode],
                   help="; ".join(f"{int(m)} = {m.label}" for m in Mode))
    p.add_argument("--color", choices=["red", "blue"], help="your color in player vs computer modes")
    p.add_argument("--trials", type=int, help="monte carlo playouts per candidate cell")
    p.add_argument("--workers", type=int, help="processes used by the monte carlo player")
    p.add_argument("--seed", type=int, help="seed for the computer players")
    p.add_argument("--console", action="store_true", help="play in the terminal instead of a window")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def config_from_args(args: argparse.Namespace) -> GameConfig:
    cfg = GameConfig.from_env()
    overrides = {
        "size": args.size,
        "mode": args.mode,
        "trials": args.trials,
        "workers": args.workers,
        "seed": args.seed,
    }
    if args.color is not None:
        overrides["human_color"] = RED if args.color == "red" else BLUE
    fields = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **fields).validate()


def read_console_move(board: HexBoard):
    player = board.active_player
    text = input(f"{player.name} - enter move (like a1): ")
    mv = parse_move(text)
    if mv is None or not board.is_valid_move(mv):
        print("invalid move, try again")
        return None
    return mv


def run_console(config: GameConfig) -> int:
    print(TITLE)
    board = new_game(config, read_move=read_console_move)
    print(f"{config.mode.label}, blue goes first\n")
    print(board)

    def show(b, player, mv):
        if not player.is_human:
            print(f"{player.name}: {mv}")
        print(b)

    try:
        winner = play_game(board, on_move=show)
    except (EOFError, KeyboardInterrupt):
        logger.info("console game aborted after %d moves", board.moves_played)
        print("\ngame aborted")
        return 1
    print(f"{winner.name} WINS!")
    return 0


def create_icon(size: int = 64):
    """White H on the window background colour."""
    icon = pygame.Surface((size, size), pygame.SRCALPHA)
    icon.fill((30, 30, 35, 255))

    font = pygame.font.Font(None, size - 12)
    text_surface = font.render("H", True, (255, 255, 255))
    text_rect = text_surface.get_rect()
    text_rect.center = (size // 2, size // 2)
    icon.blit(text_surface, text_rect)
    return icon


def run_window(config: GameConfig) -> int:
    pygame.init()
    screen = pygame.display.set_mode((900, 720))
    pygame.display.set_caption("Hex")
    pygame.display.set_icon(create_icon())

    AppUI(screen, config).run()
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    logger.debug("starting with %s", config)
    if args.console:
        return run_console(config)
    return run_window(config)


if __name__ == "__main__":
    sys.exit(main())
