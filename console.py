# console.py
from __future__ import annotations

from typing import Callable, Optional

from board import Move, Swap, RED, SYMBOLS, format_board
from bot import MonteCarloBot
from game import HexGame, AWAITING_SWAP, FINISHED

YES = {"y", "yes"}


def pname(p: int) -> str:
    side = "north-south" if p == RED else "west-east"
    return f"Player {SYMBOLS[p]} ({side})"


def parse_cell(text: str, size: int) -> Optional[Move]:
    """'row col' or 'row,col' -> Move, None if it isn't a cell of the board."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        r, c = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= r < size and 0 <= c < size):
        return None
    return Move(r, c)


def is_yes(text: str) -> bool:
    # anything but an explicit yes means no
    return text.strip().lower() in YES


class ConsoleUI:
    def __init__(
        self,
        game: HexGame,
        bot: Optional[MonteCarloBot] = None,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        if game.bot_player is not None and bot is None:
            raise ValueError("a bot player needs a MonteCarloBot")
        self.game = game
        self.bot = bot
        self.read = read
        self.write = write

    def run(self) -> int:
        g = self.game
        self.write(format_board(g.board))
        while g.state != FINISHED:
            if g.state == AWAITING_SWAP:
                self._ask_swap()
            elif g.is_bot_turn():
                self._bot_move()
            else:
                self._human_move()
            self.write(format_board(g.board))
        self.write(f"{pname(g.winner)} wins!")
        return g.winner

    def _ask_swap(self):
        g = self.game
        mv = g.first_move()
        answer = self.read(f"{pname(g.current)}, take over ({mv.r}, {mv.c}) with a swap? (y/n) ")
        if is_yes(answer):
            self.write(f">> {pname(g.current)} is using SWAP.")
            g.swap()
        else:
            g.decline_swap()
            self.write(f">> {pname(g.current)} is NOT using SWAP.")

    def _bot_move(self):
        g = self.game
        self.write(f"{pname(g.current)} is thinking...")
        action = self.bot.choose(g)
        player = g.current
        g.apply(action)
        if isinstance(action, Swap):
            self.write(f">> {pname(player)} is using SWAP.")
        else:
            self.write(f">> {pname(player)} plays ({action.r}, {action.c}).")

    def _human_move(self):
        g = self.game
        n = g.size
        while True:
            text = self.read(f"{pname(g.current)}, enter row and column (0-{n - 1}): ")
            mv = parse_cell(text, n)
            if mv is None:
                self.write("-- Invalid input! Enter two numbers within the board.")
                continue
            if not g.play(mv):
                self.write(f"  >> Cell ({mv.r}, {mv.c}) is taken, choose another one.")
                continue
            return
