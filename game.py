# game.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from board import Board, Move, Swap, EMPTY, RED, BLUE, other, has_won

log = logging.getLogger(__name__)

AWAITING_MOVE, AWAITING_SWAP, FINISHED = "awaiting_move", "awaiting_swap", "finished"

Action = Union[Move, Swap]


class HexGame:
    def __init__(self, size: int = 11, first: int = RED, swap_rule: bool = False,
                 bot_player: Optional[int] = None):
        if first not in (RED, BLUE):
            raise ValueError(f"first player must be RED or BLUE, got {first!r}")
        self.size = size
        self.first = first
        self.swap_rule = swap_rule
        self.bot_player = bot_player
        self.reset()

    def reset(self):
        self.board = Board(self.size)
        self.current = self.first
        self.state = AWAITING_MOVE
        self.winner: int = EMPTY
        self.last_move: Optional[Move] = None
        self.moves_played: int = 0
        self.moves: Dict[int, List[Move]] = {RED: [], BLUE: []}
        self.swapped = False
        self.swap_declined = False

    @property
    def move_number(self) -> int:
        """Number of the move about to be made, starting at 1. A swap counts as a move."""
        return self.moves_played + 1

    def is_human(self, player: int) -> bool:
        return player != self.bot_player

    def is_bot_turn(self) -> bool:
        return self.state == AWAITING_MOVE and self.current == self.bot_player

    def in_bounds(self, r: int, c: int) -> bool:
        return self.board.in_bounds(r, c)

    def legal_moves(self) -> List[Move]:
        if self.state == FINISHED:
            return []
        return [Move(r, c) for r, c in self.board.empty_cells()]

    def first_move(self) -> Optional[Move]:
        """The opponent's stone that a swap would take over."""
        if self.moves_played != 1:
            return None
        return self.moves[other(self.current)][0]

    def can_swap(self) -> bool:
        return (
            self.swap_rule
            and self.state != FINISHED
            and self.moves_played == 1
            and not self.swapped
            and not self.swap_declined
        )

    def play(self, mv: Move) -> bool:
        if self.state != AWAITING_MOVE:
            return False
        if not self.in_bounds(mv.r, mv.c):
            return False
        if self.board.get_tag(mv.r, mv.c) != EMPTY:
            return False

        p = self.current
        self.board.set_tag(mv.r, mv.c, p)
        self.moves[p].append(mv)
        self.last_move = mv
        self.moves_played += 1
        log.info("move %d: player %d plays (%d, %d)", self.moves_played, p, mv.r, mv.c)

        if self.has_won(p):
            self.winner = p
            self.state = FINISHED
            log.info("player %d wins after %d moves", p, self.moves_played)
            return True

        self.current = other(p)
        if self.moves_played == 1 and self.swap_rule and self.is_human(self.current):
            self.state = AWAITING_SWAP
        return True

    def swap(self) -> bool:
        if not self.can_swap():
            return False

        p = self.current
        opp = other(p)
        mv = self.moves[opp][0]
        self.board.set_tag(mv.r, mv.c, p)
        self.moves[opp].clear()
        self.moves[p].append(mv)
        self.last_move = mv
        self.moves_played += 1
        self.swapped = True
        self.current = opp
        self.state = AWAITING_MOVE
        log.info("move %d: player %d swaps (%d, %d)", self.moves_played, p, mv.r, mv.c)
        return True

    def decline_swap(self) -> bool:
        if self.state != AWAITING_SWAP:
            return False
        self.swap_declined = True
        self.state = AWAITING_MOVE
        log.info("player %d declines the swap", self.current)
        return True

    def apply(self, action: Action) -> bool:
        if isinstance(action, Swap):
            return self.swap()
        return self.play(action)

    def has_won(self, player: int) -> bool:
        return has_won(self.board, player)

    def clone(self) -> "HexGame":
        g = HexGame(self.size, self.first, self.swap_rule, self.bot_player)
        g.board = self.board.clone()
        g.current = self.current
        g.state = self.state
        g.winner = self.winner
        g.last_move = self.last_move
        g.moves_played = self.moves_played
        g.moves = {p: ms[:] for p, ms in self.moves.items()}
        g.swapped = self.swapped
        g.swap_declined = self.swap_declined
        return g
