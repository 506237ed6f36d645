import pytest

from tetris_engine.game.engine import GameStatus
from tetris_engine.scheduler import GravityTimer
from tests.conftest import fill_row


def test_not_started_does_nothing(engine):
    timer = GravityTimer(engine, 1000)
    assert timer.update(5000) == 0
    assert engine.status is GameStatus.READY


def test_ticks_once_per_interval(engine):
    timer = GravityTimer(engine, 1000)
    timer.start(0)

    assert timer.update(999) == 0
    assert timer.update(1000) == 1
    assert engine.status is GameStatus.PLAYING
    assert engine.active.y == 0

    assert timer.update(3500) == 2
    assert engine.active.y == 2
    assert timer.update(3999) == 0
    assert timer.update(4000) == 1


def test_stops_on_game_over(engine):
    fill_row(engine.board.grid, 0, except_cols=[0])
    timer = GravityTimer(engine, 1000)
    timer.start(0)

    assert timer.update(3000) == 1
    assert engine.game_over
    assert not timer.running
    assert timer.update(10_000) == 0


def test_stop(engine):
    timer = GravityTimer(engine, 500)
    timer.start(0)
    timer.stop()
    assert timer.update(2000) == 0


def test_rejects_non_positive_interval(engine):
    with pytest.raises(ValueError):
        GravityTimer(engine, 0)
