"""Bot thread outcomes as seen by the window."""

import threading

from board import Move, BLUE
from bot import EvaluationCancelled, RolloutError
from game import HexGame
from ui import AppUI


class StubBot:
    def __init__(self, result):
        self.result = result

    def choose(self, game, cancel=None):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def thinking_ui(result):
    app = AppUI.__new__(AppUI)
    app.bot = StubBot(result)
    app.game = HexGame(3, first=BLUE, bot_player=BLUE)
    app.bot_cancel = threading.Event()
    app.bot_gen = 0
    app.bot_move = None
    app.bot_thinking = True
    app.bot_error = None
    return app


def test_move_is_handed_back():
    app = thinking_ui(Move(1, 1))
    app._think(app.game.clone(), threading.Event(), 0)
    assert app.bot_move == Move(1, 1)
    assert not app.bot_thinking


def test_failure_stops_thinking(caplog):
    app = thinking_ui(RolloutError("rollout finished with empty cells left"))
    app._think(app.game.clone(), threading.Event(), 0)
    assert not app.bot_thinking
    assert app.bot_move is None
    assert app.bot_error == "rollout finished with empty cells left"
    assert any(rec.exc_info for rec in caplog.records)


def test_stale_failure_is_ignored():
    app = thinking_ui(RolloutError("late"))
    app.bot_gen = 1
    app.bot_thinking = False
    app._think(app.game.clone(), threading.Event(), 0)
    assert app.bot_error is None
    assert not app.bot_thinking


def test_cancelled_evaluation_sets_no_move():
    app = thinking_ui(EvaluationCancelled())
    app._think(app.game.clone(), threading.Event(), 0)
    assert app.bot_move is None
    assert app.bot_error is None


def test_stale_move_is_dropped():
    app = thinking_ui(Move(0, 0))
    app.bot_gen = 2
    app.bot_thinking = False
    app._think(app.game.clone(), threading.Event(), 1)
    assert app.bot_move is None
    assert app.game.current == BLUE


def test_failed_bot_is_not_restarted():
    app = thinking_ui(RolloutError("boom"))
    app.bot_thinking = False
    app.bot_error = "boom"
    app._start_bot_if_needed()
    assert not app.bot_thinking
    app._stop_bot()
    assert app.bot_error is None
