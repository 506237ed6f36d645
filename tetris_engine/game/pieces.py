"""
Tetromino catalog and the rotation transform.

Each shape is stored once, in its spawn orientation, as the smallest boolean
matrix that bounds it. Shapes are read-only numpy arrays: rotation never
mutates a shape, it builds a new one.

Coordinate convention:
  - Row 0 is the top of the shape's bounding box, rows grow downward.
  - Column 0 is the left edge, columns grow rightward.
"""

from __future__ import annotations

import random

import numpy as np

Shape = np.ndarray


def make_shape(rows: list[list[int]]) -> Shape:
    """Build an immutable boolean shape matrix from nested 0/1 lists."""
    shape = np.array(rows, dtype=bool)
    shape.setflags(write=False)
    return shape


# =============================================================================
# Tetromino Definitions
# =============================================================================

I_SHAPE = make_shape([
    [1, 1, 1, 1],
])

T_SHAPE = make_shape([
    [1, 1, 1],
    [0, 1, 0],
])

L_SHAPE = make_shape([
    [1, 1, 1],
    [1, 0, 0],
])

J_SHAPE = make_shape([
    [1, 1, 1],
    [0, 0, 1],
])

O_SHAPE = make_shape([
    [1, 1],
    [1, 1],
])

S_SHAPE = make_shape([
    [1, 1, 0],
    [0, 1, 1],
])

Z_SHAPE = make_shape([
    [0, 1, 1],
    [1, 1, 0],
])

# Ordered list of all shapes; spawn draws uniformly from it.
SHAPES: tuple[Shape, ...] = (
    I_SHAPE, T_SHAPE, L_SHAPE, J_SHAPE, O_SHAPE, S_SHAPE, Z_SHAPE,
)

SHAPE_NAMES: tuple[str, ...] = ("I", "T", "L", "J", "O", "S", "Z")


def rotate_clockwise(shape: Shape) -> Shape:
    """Return a new shape rotated 90 degrees clockwise.

    Transposes the matrix and reverses each resulting row. Four successive
    rotations give back a matrix equal to the original.

    Args:
        shape: Shape matrix of size (rows, cols).

    Returns:
        A new read-only matrix of size (cols, rows).
    """
    rotated = shape.T[:, ::-1].copy()
    rotated.setflags(write=False)
    return rotated


def random_shape(rng: random.Random) -> Shape:
    """Pick one of the catalog shapes with uniform probability."""
    return rng.choice(SHAPES)


def shape_name(shape: Shape) -> str:
    """Name of the catalog shape equal to `shape`, or '?' for a rotated matrix."""
    for name, candidate in zip(SHAPE_NAMES, SHAPES):
        if np.array_equal(candidate, shape):
            return name
    return "?"
