"""Game logic: board, shape catalog, and engine state machine."""

from tetris_engine.game.pieces import SHAPES, rotate_clockwise
from tetris_engine.game.board import Board
from tetris_engine.game.engine import (
    SCORE_TABLE,
    Action,
    GameEngine,
    GameState,
    GameStatus,
    Piece,
)

__all__ = [
    "SHAPES",
    "rotate_clockwise",
    "Board",
    "SCORE_TABLE",
    "Action",
    "GameEngine",
    "GameState",
    "GameStatus",
    "Piece",
]
