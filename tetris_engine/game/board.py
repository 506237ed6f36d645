"""
Board logic for a fixed-size falling-block grid.

The board is a 2D numpy array (height x width) of bool values:
  - False = empty cell
  - True  = cell occupied by a locked block

Row 0 is the top of the visible board. Pieces may hang above it (negative
rows) while they are still entering the board; those cells are never stored.
"""

from __future__ import annotations

import numpy as np

from tetris_engine.game.pieces import Shape


class Board:
    """Occupancy grid with collision detection, locking, and line clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype bool.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        """Initialize an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=bool)

    def check_collision(self, x: int, y: int, shape: Shape) -> bool:
        """Check whether a shape placed at (x, y) collides.

        A filled cell of the shape collides if it:
          - Falls outside the horizontal bounds (col < 0 or col >= width).
          - Falls below the floor (row >= height).
          - Lands on an occupied board cell. Rows above the board (row < 0)
            are exempt from this check only.

        Args:
            x: Column offset of the shape's top-left corner.
            y: Row offset of the shape's top-left corner.
            shape: Boolean shape matrix.

        Returns:
            True if the placement collides, False if it fits.
        """
        rows, cols = shape.shape
        for r in range(rows):
            for c in range(cols):
                if not shape[r, c]:
                    continue
                board_row = y + r
                board_col = x + c
                if board_col < 0 or board_col >= self.width or board_row >= self.height:
                    return True
                if board_row >= 0 and self.grid[board_row, board_col]:
                    return True
        return False

    def place_shape(self, x: int, y: int, shape: Shape) -> bool:
        """Mark every in-range filled cell of the shape as occupied.

        Does NOT check for collisions first; the caller locks a piece only at
        a position it already validated. Cells above the board are skipped,
        but their presence is reported.

        Args:
            x: Column offset of the shape's top-left corner.
            y: Row offset of the shape's top-left corner.
            shape: Boolean shape matrix.

        Returns:
            True if any filled cell was above row 0 (overflow), else False.
        """
        overflow = False
        rows, cols = shape.shape
        for r in range(rows):
            for c in range(cols):
                if not shape[r, c]:
                    continue
                board_row = y + r
                if board_row < 0:
                    overflow = True
                elif board_row < self.height:
                    self.grid[board_row, x + c] = True
        return overflow

    def clear_lines(self) -> int:
        """Remove all fully occupied rows, shifting everything above down.

        Scans from the bottom row upward. When a row is complete it is
        removed, an empty row is inserted at the top, and the same row index
        is examined again since new content has shifted into it.

        Returns:
            The number of lines cleared.
        """
        lines_cleared = 0
        row = self.height - 1
        while row >= 0:
            if self.grid[row].all():
                remaining = np.delete(self.grid, row, axis=0)
                empty_row = np.zeros((1, self.width), dtype=bool)
                self.grid = np.vstack([empty_row, remaining])
                lines_cleared += 1
            else:
                row -= 1
        return lines_cleared

    def occupied_count(self) -> int:
        """Total number of occupied cells."""
        return int(self.grid.sum())

    def get_grid(self) -> np.ndarray:
        """Return a read-only copy of the board grid.

        Returns:
            A numpy array of shape (height, width), dtype bool.
        """
        grid = self.grid.copy()
        grid.setflags(write=False)
        return grid

    def reset(self) -> None:
        """Clear the entire board."""
        self.grid = np.zeros((self.height, self.width), dtype=bool)
