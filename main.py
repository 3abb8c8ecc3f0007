# main.py
from __future__ import annotations

import logging
import math
import sys
from typing import List, Optional

import pygame
from PIL import Image, ImageDraw

from bot import MonteCarloBot
from config import GameConfig, parse_args
from console import ConsoleUI
from game import HexGame
from ui import AppUI


def icon_image(size: int = 64) -> Image.Image:
    """Иконка: красно-синий гекс на тёмном фоне"""
    img = Image.new("RGBA", (size, size), (30, 30, 35, 255))
    draw = ImageDraw.Draw(img)
    c = size / 2
    rad = size / 2 - 4
    pts = [
        (c + rad * math.cos(math.radians(60 * i - 30)), c + rad * math.sin(math.radians(60 * i - 30)))
        for i in range(6)
    ]
    # верх/низ красные, бока синие, как стороны доски
    draw.polygon(pts, fill=(210, 210, 210, 255))
    for i in range(6):
        col = (220, 70, 70, 255) if i in (0, 2, 3, 5) else (70, 120, 220, 255)
        draw.line([pts[i - 1], pts[i]], fill=col, width=4)
    return img


def create_icon(size: int = 64) -> pygame.Surface:
    img = icon_image(size)
    return pygame.image.fromstring(img.tobytes(), img.size, img.mode)


def run_gui(cfg: GameConfig):
    pygame.init()
    screen = pygame.display.set_mode((800, 600))
    pygame.display.set_caption("Hex")
    pygame.display.set_icon(create_icon())

    AppUI(screen, cfg).run()


def run_text(cfg: GameConfig) -> int:
    game = HexGame(cfg.size, first=cfg.first, swap_rule=cfg.swap_rule, bot_player=cfg.bot_player)
    bot = None
    if cfg.vs_bot:
        bot = MonteCarloBot(trials=cfg.trials, workers=cfg.workers, seed=cfg.seed)
    try:
        ConsoleUI(game, bot).run()
    except (EOFError, KeyboardInterrupt):
        print("\nGame aborted.")
        return 1
    finally:
        if bot is not None:
            bot.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg.check_latency()
    if cfg.interface == "text":
        return run_text(cfg)
    run_gui(cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
