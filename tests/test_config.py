import logging

import pytest

from board import RED, BLUE
from bot import N_TRIALS
from config import GameConfig, parse_args


def test_defaults_are_valid():
    cfg = GameConfig().validate()
    assert cfg.trials == N_TRIALS
    assert cfg.bot_player == BLUE


@pytest.mark.parametrize("kwargs", [
    {"size": 2},
    {"first": 0},
    {"human": 3},
    {"trials": 0},
    {"workers": 0},
    {"interface": "web"},
])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs).validate()


def test_parse_args():
    cfg = parse_args(["--size", "5", "--no-swap", "--first", "blue", "--human", "2",
                      "--trials", "40", "--seed", "3", "--text"])
    assert cfg.size == 5
    assert not cfg.swap_rule
    assert cfg.first == BLUE
    assert cfg.human == BLUE
    assert cfg.bot_player == RED
    assert cfg.trials == 40
    assert cfg.seed == 3
    assert cfg.interface == "text"


def test_parse_args_two_humans():
    cfg = parse_args(["--no-bot"])
    assert cfg.bot_player is None
    assert cfg.interface == "gui"


@pytest.mark.parametrize("argv", [["--size", "2"], ["--first", "green"], ["--workers", "0"]])
def test_parse_args_rejects_bad_values(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_validate_does_not_log(caplog):
    with caplog.at_level(logging.WARNING, logger="config"):
        GameConfig(size=9).validate()
    assert caplog.records == []


@pytest.mark.parametrize("kwargs, fast", [
    ({"size": 7}, True),
    ({"size": 9}, False),
    ({"size": 9, "vs_bot": False}, True),
])
def test_check_latency(caplog, kwargs, fast):
    with caplog.at_level(logging.WARNING, logger="config"):
        assert GameConfig(**kwargs).check_latency() is fast
    assert bool(caplog.records) is not fast
