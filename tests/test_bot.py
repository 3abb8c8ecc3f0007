"""Monte Carlo move selection."""

import threading

import pytest

from board import Board, Move, SWAP, RED, BLUE
from bot import MonteCarloBot, MoveStatistic, EvaluationCancelled
from game import HexGame


def legal(board):
    return [Move(r, c) for r, c in board.empty_cells()]


def test_choice_is_always_legal():
    b = Board(3)
    b.set_tag(1, 1, RED)
    bot = MonteCarloBot(trials=20, seed=1)
    for _ in range(3):
        action = bot.choose_move(b, BLUE, legal(b))
        assert action in legal(b)


def test_swap_is_one_more_option():
    b = Board(3)
    b.set_tag(1, 1, RED)
    bot = MonteCarloBot(trials=20, seed=2)
    action = bot.choose_move(b, BLUE, legal(b), swap_move=Move(1, 1), swap_rule=True, move_number=2)
    assert action in legal(b) + [SWAP]
    assert [st.action for st in bot.last_stats] == legal(b) + [SWAP]
    assert all(st.trials == 20 for st in bot.last_stats)
    assert all(0 <= st.wins <= 20 for st in bot.last_stats)


def test_ties_go_to_the_first_option():
    # red already connects north to south, so every rollout is lost for blue
    b = Board(3)
    for r in range(3):
        b.set_tag(r, 0, RED)
    cells = legal(b)
    bot = MonteCarloBot(trials=10, seed=3)
    assert bot.choose_move(b, BLUE, cells) == cells[0]
    assert all(st.win_rate == 0.0 for st in bot.last_stats)
    assert bot.choose_move(b, BLUE, cells[::-1]) == cells[-1]


def test_same_seed_same_statistics():
    b = Board(3)
    b.set_tag(0, 1, RED)
    one = MonteCarloBot(trials=30, seed=42)
    two = MonteCarloBot(trials=30, seed=42)
    assert one.choose_move(b, BLUE, legal(b)) == two.choose_move(b, BLUE, legal(b))
    assert [st.wins for st in one.last_stats] == [st.wins for st in two.last_stats]


def test_process_pool_matches_serial():
    b = Board(3)
    b.set_tag(1, 1, RED)
    serial = MonteCarloBot(trials=15, workers=1, seed=5)
    pooled = MonteCarloBot(trials=15, workers=2, seed=5)
    assert serial.choose_move(b, BLUE, legal(b)) == pooled.choose_move(b, BLUE, legal(b))
    assert [st.wins for st in serial.last_stats] == [st.wins for st in pooled.last_stats]
    pooled.close()


def test_empty_legal_cells_is_an_error():
    with pytest.raises(ValueError):
        MonteCarloBot(trials=5).choose_move(Board(3), RED, [])
    with pytest.raises(ValueError):
        MonteCarloBot(trials=0)


def test_cancel_before_evaluation():
    cancel = threading.Event()
    cancel.set()
    bot = MonteCarloBot(trials=5, seed=0)
    with pytest.raises(EvaluationCancelled):
        bot.choose_move(Board(3), RED, legal(Board(3)), cancel=cancel)


def test_choose_from_game_with_swap():
    game = HexGame(3, first=RED, swap_rule=True, bot_player=BLUE)
    assert game.play(Move(1, 1))
    bot = MonteCarloBot(trials=10, seed=9)
    action = bot.choose(game)
    assert bot.last_stats[-1].action == SWAP
    assert game.apply(action)
    assert game.current == RED


def test_move_statistic_rate():
    assert MoveStatistic(Move(0, 0), 3, 4).win_rate == 0.75
    assert MoveStatistic(SWAP, 0, 0).win_rate == 0.0


def test_pool_is_reused_between_moves():
    b = Board(3)
    bot = MonteCarloBot(trials=5, workers=2, seed=6)
    bot.choose_move(b, RED, legal(b))
    pool = bot._pool
    assert pool is not None
    b.set_tag(1, 1, RED)
    bot.choose_move(b, BLUE, legal(b))
    assert bot._pool is pool
    bot.close()
    assert bot._pool is None
    bot.close()


def test_cancel_with_process_pool():
    cancel = threading.Event()
    cancel.set()
    bot = MonteCarloBot(trials=5, workers=2, seed=0)
    try:
        with pytest.raises(EvaluationCancelled):
            bot.choose_move(Board(3), RED, legal(Board(3)), cancel=cancel)
    finally:
        bot.close()


def test_cancel_between_options(monkeypatch):
    cancel = threading.Event()
    calls = []

    def evaluate(*job):
        calls.append(job[1])
        cancel.set()
        return 0

    monkeypatch.setattr("bot.evaluate_option", evaluate)
    b = Board(3)
    bot = MonteCarloBot(trials=5, seed=0)
    with pytest.raises(EvaluationCancelled):
        bot.choose_move(b, RED, legal(b), cancel=cancel)
    assert calls == [Move(0, 0)]
    assert bot.last_stats == []
