"""
Game engine: spawn, movement, rotation, locking, line clears, and scoring.

This module ties the Board and the shape catalog together into a complete
game state machine. It has no timers and performs no drawing; a scheduler
drives gravity through tick(), an input handler calls step(), and a renderer
reads get_state() after each call.

States:
  READY     no active piece yet (before the first spawn or after reset)
  PLAYING   an active piece is falling and controllable
  GAME_OVER terminal; every mutating operation becomes a no-op
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import random
from typing import Iterator

import numpy as np

from tetris_engine.game.board import Board
from tetris_engine.game.pieces import Shape, random_shape, rotate_clockwise, shape_name
from tetris_engine.storage import HighScoreStore, MemoryHighScoreStore

logger = logging.getLogger(__name__)


class GameStatus(enum.Enum):
    """Lifecycle state of a GameEngine."""
    READY = "ready"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class Action(enum.IntEnum):
    """Discrete player inputs."""
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    ROTATE = 3


# Points per clear event, keyed by the number of rows cleared at once.
SCORE_TABLE: dict[int, int] = {
    1: 100,
    2: 300,
    3: 500,
    4: 800,
}


@dataclasses.dataclass
class Piece:
    """A shape positioned on the board.

    Attributes:
        shape: Boolean shape matrix.
        x: Column of the shape's top-left corner.
        y: Row of the shape's top-left corner (may be negative).
    """
    shape: Shape
    x: int = 0
    y: int = 0

    @property
    def width(self) -> int:
        return self.shape.shape[1]

    @property
    def height(self) -> int:
        return self.shape.shape[0]

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield (board_x, board_y) for each occupied cell of the piece."""
        rows, cols = self.shape.shape
        for r in range(rows):
            for c in range(cols):
                if self.shape[r, c]:
                    yield self.x + c, self.y + r


@dataclasses.dataclass(frozen=True)
class GameState:
    """Read-only snapshot of everything a renderer needs.

    Attributes:
        board: Read-only copy of the occupancy grid (height x width, bool).
        active: Copy of the active piece, or None.
        preview: Copy of the next piece to be spawned.
        score: Current score.
        high_score: Best score known, including this game.
        game_over: Whether the game has ended.
        status: Lifecycle state.
    """
    board: np.ndarray
    active: Piece | None
    preview: Piece
    score: int
    high_score: int
    game_over: bool
    status: GameStatus


class GameEngine:
    """Single-player falling-block game state machine.

    Attributes:
        board: The game board.
        active: Currently falling piece, or None.
        preview: Next piece to be spawned.
        score: Current score.
        high_score: Highest score seen, loaded from and saved to the store.
        final_score: Score captured on entering GAME_OVER, else None.
        status: Current GameStatus.
    """

    def __init__(
        self,
        board_width: int = 10,
        board_height: int = 20,
        store: HighScoreStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize a new game in the READY state.

        Args:
            board_width: Board width in columns.
            board_height: Board height in rows.
            store: High-score persistence hook. Defaults to an in-memory store.
            rng: Random source for piece selection. Defaults to a fresh
                unseeded random.Random.
        """
        self.board = Board(board_width, board_height)
        self.store: HighScoreStore = store if store is not None else MemoryHighScoreStore()
        self.rng = rng or random.Random()
        self.score: int = 0
        self.high_score: int = self._load_high_score()
        self.final_score: int | None = None
        self.status = GameStatus.READY
        self.active: Piece | None = None
        self.preview: Piece = self._generate_random_piece()

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Piece | None:
        """Spawn the first piece. Only valid from READY."""
        if self.status is not GameStatus.READY:
            return self.active
        return self.spawn_piece()

    def reset(self) -> None:
        """Start over with an empty board and zero score.

        The high score survives a reset; the engine returns to READY with a
        fresh preview piece.
        """
        self.board.reset()
        self.score = 0
        self.final_score = None
        self.active = None
        self.status = GameStatus.READY
        self.preview = self._generate_random_piece()
        logger.debug("Game reset (high score %d)", self.high_score)

    def tick(self) -> bool:
        """Advance one gravity step.

        Spawns the first piece when READY. Otherwise moves the active piece
        down one row, locking it if it cannot move.

        Returns:
            True while the game is still running.
        """
        if self.game_over:
            return False
        if self.status is GameStatus.READY:
            self.spawn_piece()
        elif not self.move_piece(0, 1):
            self.lock_piece()
        return not self.game_over

    def step(self, action: Action) -> bool:
        """Apply one player input.

        Args:
            action: An Action value.

        Returns:
            True if the input changed the active piece, False otherwise.
        """
        if action == Action.LEFT:
            return self.move_piece(-1, 0)
        if action == Action.RIGHT:
            return self.move_piece(1, 0)
        if action == Action.DOWN:
            return self.move_piece(0, 1)
        if action == Action.ROTATE:
            return self.rotate_piece()
        return False

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def spawn_piece(self) -> Piece | None:
        """Promote the preview piece to the active piece.

        The piece is centered horizontally at row 0. If it collides there the
        game ends and the preview is left as is.

        Returns:
            The new active piece, or None if the spawn ended the game.
        """
        if self.game_over:
            return None

        shape = self.preview.shape
        x = self.board.width // 2 - shape.shape[1] // 2
        self.active = Piece(shape, x, 0)
        self.status = GameStatus.PLAYING

        if self.check_collision(x, 0, shape):
            logger.info("Spawn blocked at column %d", x)
            self._handle_game_over()
            return None

        self.preview = self._generate_random_piece()
        logger.debug("Spawned %s at (%d, 0)", shape_name(shape), x)
        return self.active

    def check_collision(self, x: int, y: int, shape: Shape) -> bool:
        """Return True if `shape` placed at (x, y) collides. No side effects."""
        return self.board.check_collision(x, y, shape)

    def move_piece(self, dx: int, dy: int) -> bool:
        """Try to move the active piece by (dx, dy).

        Args:
            dx: Column offset (positive = right).
            dy: Row offset (positive = down).

        Returns:
            True if the move succeeded, False if blocked or not playing.
        """
        if self.game_over or self.active is None:
            return False
        new_x = self.active.x + dx
        new_y = self.active.y + dy
        if self.check_collision(new_x, new_y, self.active.shape):
            return False
        self.active.x = new_x
        self.active.y = new_y
        return True

    def rotate_piece(self) -> bool:
        """Rotate the active piece 90 degrees clockwise in place.

        There are no wall kicks: if the rotated shape collides at the current
        position the rotation is rejected and the shape is unchanged.

        Returns:
            True if the rotation was applied.
        """
        if self.game_over or self.active is None:
            return False
        rotated = rotate_clockwise(self.active.shape)
        if self.check_collision(self.active.x, self.active.y, rotated):
            return False
        self.active.shape = rotated
        return True

    def lock_piece(self) -> bool:
        """Merge the active piece into the board, clear lines, and respawn.

        If any block of the piece is above row 0 the game ends. Blocks that
        were inside the board stay written in that case.

        Returns:
            True if play continues, False if the game is (or already was) over.
        """
        if self.game_over or self.active is None:
            return False

        piece = self.active
        overflow = self.board.place_shape(piece.x, piece.y, piece.shape)
        logger.debug("Locked %s at (%d, %d)", shape_name(piece.shape), piece.x, piece.y)

        if overflow:
            logger.info("Piece locked above the board at row %d", piece.y)
            self._handle_game_over()
            return False

        self.clear_lines()
        self.spawn_piece()
        return True

    def clear_lines(self) -> int:
        """Remove complete rows and score them as one clear event.

        Returns:
            Number of rows cleared.
        """
        if self.game_over:
            return 0
        lines_cleared = self.board.clear_lines()
        if lines_cleared > 0:
            self.add_score(lines_cleared)
        return lines_cleared

    def add_score(self, lines_cleared: int) -> int:
        """Add the points for one clear event and update the high score.

        Args:
            lines_cleared: Rows cleared in a single event (1-4 score).

        Returns:
            Points added.
        """
        if self.game_over:
            return 0
        points = SCORE_TABLE.get(lines_cleared, 0)
        self.score += points
        if points:
            logger.info("Cleared %d line(s) for %d points, score %d", lines_cleared, points, self.score)
        self._update_high_score()
        return points

    def get_state(self) -> GameState:
        """Return a snapshot of the observable game state."""
        active = dataclasses.replace(self.active) if self.active is not None else None
        return GameState(
            board=self.board.get_grid(),
            active=active,
            preview=dataclasses.replace(self.preview),
            score=self.score,
            high_score=self.high_score,
            game_over=self.game_over,
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _generate_random_piece(self) -> Piece:
        return Piece(random_shape(self.rng), 0, 0)

    def _handle_game_over(self) -> None:
        self.status = GameStatus.GAME_OVER
        self.active = None
        self.final_score = self.score
        self._update_high_score()
        logger.info("Game over, final score %d (high score %d)", self.score, self.high_score)

    def _update_high_score(self) -> None:
        if self.score <= self.high_score:
            return
        self.high_score = self.score
        try:
            self.store.save(self.high_score)
        except Exception as e:
            logger.warning("Could not save high score %d: %s", self.high_score, e)

    def _load_high_score(self) -> int:
        try:
            value = self.store.load()
        except Exception as e:
            logger.warning("Could not load high score: %s", e)
            return 0
        if value is None:
            return 0
        try:
            return max(0, int(float(value)))
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring unparseable high score %r", value)
            return 0
