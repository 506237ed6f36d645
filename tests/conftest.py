import random

import numpy as np
import pytest

from tetris_engine.game.engine import GameEngine
from tetris_engine.storage import MemoryHighScoreStore


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def engine(store):
    return GameEngine(store=store, rng=random.Random(1234))


def fill_row(grid: np.ndarray, row: int, *, except_cols=()) -> None:
    grid[row, :] = True
    for col in except_cols:
        grid[row, col] = False
