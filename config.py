# config.py
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import List, Optional

from board import RED, BLUE, other
from bot import N_TRIALS

log = logging.getLogger(__name__)

PLAYERS = {"red": RED, "blue": BLUE, "1": RED, "2": BLUE}
INTERFACES = ("gui", "text")
MAX_BOT_SIZE = 7  # дальше бот думает слишком долго


@dataclass
class GameConfig:
    size: int = 7
    first: int = RED
    vs_bot: bool = True
    human: int = RED
    swap_rule: bool = True
    trials: int = N_TRIALS
    workers: Optional[int] = None
    seed: Optional[int] = None
    interface: str = "gui"
    log_level: str = "WARNING"

    @property
    def bot_player(self) -> Optional[int]:
        return other(self.human) if self.vs_bot else None

    def validate(self) -> "GameConfig":
        if self.size <= 2:
            raise ValueError(f"board size must be greater than 2, got {self.size}")
        if self.first not in (RED, BLUE):
            raise ValueError(f"unknown first player {self.first!r}")
        if self.human not in (RED, BLUE):
            raise ValueError(f"unknown human player {self.human!r}")
        if self.trials < 1:
            raise ValueError(f"trials must be positive, got {self.trials}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.interface not in INTERFACES:
            raise ValueError(f"unknown interface {self.interface!r}")
        return self

    def check_latency(self) -> bool:
        """Предупреждает, если бот на такой доске будет думать слишком долго."""
        if self.vs_bot and self.size > MAX_BOT_SIZE:
            log.warning("board %dx%d with the bot enabled: expect slow moves", self.size, self.size)
            return False
        return True


def _player(value: str) -> int:
    try:
        return PLAYERS[value.lower()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"expected red/blue or 1/2, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hex", description="Hex with a Monte Carlo opponent")
    parser.add_argument("--size", type=int, default=GameConfig.size, help="Board side length (> 2)")
    parser.add_argument("--first", type=_player, default=RED, help="Who moves first: red or blue")
    parser.add_argument("--human", type=_player, default=RED, help="Side played by the human against the bot")
    parser.add_argument("--no-bot", dest="vs_bot", action="store_false", help="Two human players")
    parser.add_argument("--no-swap", dest="swap_rule", action="store_false", help="Disable the swap rule")
    parser.add_argument("--trials", type=int, default=N_TRIALS, help="Rollouts per candidate move")
    parser.add_argument("--workers", type=int, default=None, help="Rollout processes (default: CPU count)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the bot's random source")
    parser.add_argument("--text", dest="interface", action="store_const", const="text", default="gui",
                        help="Play in the terminal instead of the window")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> GameConfig:
    ns = build_parser().parse_args(argv)
    cfg = GameConfig(**vars(ns))
    try:
        return cfg.validate()
    except ValueError as e:
        build_parser().error(str(e))
