# bot.py
from __future__ import annotations

import logging
import os
import random
import threading
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence

from board import Board, Move, Swap, SWAP, EMPTY, RED, BLUE, Coord, other, has_won
from game import Action, HexGame

log = logging.getLogger(__name__)

N_TRIALS = 750            # симуляций на каждый вариант хода
SWAP_PROBABILITY = 0.5    # шанс, что в плей-ауте второй игрок берёт обмен


class RolloutError(RuntimeError):
    """Плей-аут закончился в невозможном состоянии (не полная доска, не ровно один победитель)."""


class EvaluationCancelled(Exception):
    pass


def playout(
    board: Board,
    action: Action,
    player: int,
    swap_rule: bool = False,
    move_number: int = 1,
    rng: Optional[random.Random] = None,
    first_move: Optional[Move] = None,
    order: Optional[Sequence[Coord]] = None,
    swap_probability: float = SWAP_PROBABILITY,
) -> Board:
    """Доигрывает партию случайно до заполнения доски и возвращает заполненную копию.

    action -- вынужденный первый ход игрока player (клетка или SWAP),
    move_number -- номер этого хода в реальной партии,
    first_move -- камень соперника, который забирает SWAP,
    order -- готовая перестановка оставшихся пустых клеток (иначе перемешиваем rng).
    Исходная доска не меняется.
    """
    if rng is None:
        rng = random.Random()
    b = board.clone()
    tags = b.tags

    if isinstance(action, Swap):
        if first_move is None:
            raise ValueError("SWAP rollout needs the opponent's first move")
        first = b.index(first_move.r, first_move.c)
        if tags[first] != other(player):
            raise ValueError(f"cell ({first_move.r}, {first_move.c}) is not the opponent's stone")
        swapped = True
    else:
        first = b.index(action.r, action.c)
        if tags[first] != EMPTY:
            raise ValueError(f"cell ({action.r}, {action.c}) is occupied")
        swapped = False
    tags[first] = player

    rest = [i for i, t in enumerate(tags) if t == EMPTY]
    if order is None:
        rng.shuffle(rest)
    else:
        fixed = [b.index(r, c) for r, c in order]
        if sorted(fixed) != rest:
            raise ValueError("order must be a permutation of the remaining empty cells")
        rest = fixed

    to_move = other(player)
    number = move_number + 1
    k = 0
    while k < len(rest):
        # обмен тратит ход, но не клетку: курсор перестановки стоит на месте
        if swap_rule and number == 2 and not swapped and rng.random() < swap_probability:
            tags[first] = to_move
            swapped = True
        else:
            tags[rest[k]] = to_move
            k += 1
        to_move = other(to_move)
        number += 1

    if EMPTY in tags:
        raise RolloutError("rollout finished with empty cells left")
    return b


def rollout(
    board: Board,
    action: Action,
    player: int,
    swap_rule: bool = False,
    move_number: int = 1,
    rng: Optional[random.Random] = None,
    first_move: Optional[Move] = None,
    order: Optional[Sequence[Coord]] = None,
    swap_probability: float = SWAP_PROBABILITY,
    verify: bool = False,
) -> int:
    """Победитель одного плей-аута. На полной доске хватает проверки одного цвета."""
    b = playout(board, action, player, swap_rule, move_number, rng, first_move, order, swap_probability)
    red = has_won(b, RED)
    if verify and red == has_won(b, BLUE):
        raise RolloutError("rollout must end with exactly one winner")
    return RED if red else BLUE


def evaluate_option(
    board: Board,
    action: Action,
    player: int,
    swap_rule: bool,
    move_number: int,
    first_move: Optional[Move],
    trials: int,
    seed: int,
    swap_probability: float = SWAP_PROBABILITY,
) -> int:
    """Число побед player в trials независимых плей-аутах. Вызывается и в отдельных процессах."""
    rng = random.Random(seed)
    wins = 0
    for _ in range(trials):
        w = rollout(board, action, player, swap_rule, move_number, rng,
                    first_move=first_move, swap_probability=swap_probability)
        if w == player:
            wins += 1
    return wins


@dataclass
class MoveStatistic:
    action: Action
    wins: int
    trials: int

    @property
    def win_rate(self) -> float:
        return self.wins / self.trials if self.trials else 0.0


class MonteCarloBot:
    def __init__(
        self,
        trials: int = N_TRIALS,
        workers: Optional[int] = 1,
        seed: Optional[int] = None,
        swap_probability: float = SWAP_PROBABILITY,
    ):
        if trials < 1:
            raise ValueError(f"trials must be positive, got {trials}")
        self.trials = trials
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.swap_probability = swap_probability
        self.rng = random.Random(seed)
        self.last_stats: List[MoveStatistic] = []
        self._pool: Optional[ProcessPoolExecutor] = None

    def close(self):
        """Останавливает пул процессов, если он был запущен."""
        if self._pool is not None:
            self._pool.shutdown(wait=False, cancel_futures=True)
            self._pool = None

    def choose(self, game: HexGame, cancel: Optional[threading.Event] = None) -> Action:
        swap_move = game.first_move() if game.can_swap() else None
        return self.choose_move(
            game.board,
            game.current,
            game.legal_moves(),
            swap_move=swap_move,
            swap_rule=game.swap_rule,
            move_number=game.move_number,
            cancel=cancel,
        )

    def choose_move(
        self,
        board: Board,
        player: int,
        legal_cells: Sequence[Move],
        swap_move: Optional[Move] = None,
        swap_rule: bool = False,
        move_number: int = 1,
        cancel: Optional[threading.Event] = None,
    ) -> Action:
        """Оценивает каждую клетку (и обмен, если swap_move задан) плей-аутами и берёт лучшую.

        При равенстве побеждает вариант, перечисленный раньше.
        """
        if not legal_cells:
            raise ValueError("no legal cells to choose from")

        options: List[Action] = list(legal_cells)
        if swap_move is not None:
            options.append(SWAP)

        # сиды заранее, чтобы результат не зависел от порядка выполнения в пуле
        jobs = [
            (board, opt, player, swap_rule, move_number, swap_move, self.trials,
             self.rng.getrandbits(64), self.swap_probability)
            for opt in options
        ]

        if self.workers <= 1 or len(jobs) == 1:
            wins = self._run_serial(jobs, cancel)
        else:
            wins = self._run_pool(jobs, cancel)

        stats = [MoveStatistic(opt, w, self.trials) for opt, w in zip(options, wins)]
        best = stats[0]
        for st in stats:
            log.debug("option %s: %.3f", st.action, st.win_rate)
            if st.win_rate > best.win_rate:
                best = st
        self.last_stats = stats

        log.info("player %d picks %s (win rate %.3f over %d options)",
                 player, best.action, best.win_rate, len(stats))
        return best.action

    def _run_serial(self, jobs, cancel) -> List[int]:
        wins = []
        for job in jobs:
            if cancel is not None and cancel.is_set():
                raise EvaluationCancelled()
            wins.append(evaluate_option(*job))
        return wins

    def _run_pool(self, jobs, cancel) -> List[int]:
        # один пул на всю сессию, процессы живут между ходами
        if self._pool is None:
            self._pool = ProcessPoolExecutor(max_workers=self.workers)
        wins = [0] * len(jobs)
        futures = {self._pool.submit(evaluate_option, *job): k for k, job in enumerate(jobs)}
        for fut in as_completed(futures):
            if cancel is not None and cancel.is_set():
                for f in futures:
                    f.cancel()
                raise EvaluationCancelled()
            wins[futures[fut]] = fut.result()
        return wins
