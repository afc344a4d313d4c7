"""
Ternary Geometry
================
Pure functions converting between barycentric (A, B, C) fractions and the 2-D
Cartesian plane of a ternary plot, plus the grid, triangulation, tick and grid
line generators used to draw it.

The plot triangle has unit side length, its base on y = 0 and is centred on
x = 0:

    (-1/2, 0) ---- (1/2, 0)
            \\      /
           (0, sqrt(3)/2)

Classes:
    Direction: Orientation of the A/B/C axes around the triangle.
    SimplexGrid: Regular (A, B) parameter mesh with its validity mask.
    AxisTicks: Tick anchors and labels along one triangle edge.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

SIN60: float = float(np.sqrt(3.0) / 2.0)
COT60: float = float(1.0 / np.sqrt(3.0))

# Nodes with A + B within this distance above 1 still count as inside the simplex
SIMPLEX_TOL: float = 1e-9

# Distance between a triangle edge and its tick labels
TICK_OFFSET: float = 0.03


class Direction(Enum):
    """Orientation of the ternary axes."""
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"


@dataclass(frozen=True)
class SimplexGrid:
    """
    An (N+1) x (N+1) mesh over the barycentric simplex.

    Rows follow B, columns follow A, so a row-major ``ravel()`` of any matrix
    matches the vertex numbering produced by ``triangulate``.
    """
    a: npt.NDArray[np.float64]
    b: npt.NDArray[np.float64]
    c: npt.NDArray[np.float64]
    valid: npt.NDArray[np.bool_]

    @property
    def size(self) -> int:
        return self.a.shape[0]


@dataclass(frozen=True)
class AxisTicks:
    """Tick label anchors along one edge of the triangle."""
    positions: npt.NDArray[np.float64]  # (K, 2)
    labels: tuple[str, ...]
    rotation: float  # degrees


def to_cartesian(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    c: npt.ArrayLike,
    direction: Direction
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Convert barycentric fractions to plot coordinates.

    Args:
        a, b, c: Fractions of equal shape. Only two of them are used for a given
            direction; the third is implied by A + B + C = 1.
        direction: Axis orientation.

    Returns:
        (x, y) arrays with the shape of the inputs.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)

    if direction is Direction.CLOCKWISE:
        y = c * SIN60
        x = a + y * COT60 - 0.5
    else:
        y = b * SIN60
        x = 1.0 - a - y * COT60 - 0.5

    return x, y


def to_barycentric(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    direction: Direction
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Inverse of ``to_cartesian``. The returned fractions always sum to 1.

    Args:
        x, y: Plot coordinates of equal shape.
        direction: Axis orientation used when the points were produced.

    Returns:
        (a, b, c) arrays with the shape of the inputs.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    if direction is Direction.CLOCKWISE:
        c = y / SIN60
        a = x - y * COT60 + 0.5
        b = 1.0 - a - c
    else:
        b = y / SIN60
        a = 0.5 - x - y * COT60
        c = 1.0 - a - b

    return a, b, c


def sample_grid(
    data_a: npt.ArrayLike,
    data_b: npt.ArrayLike,
    resolution: int
) -> SimplexGrid:
    """
    Build the (resolution + 1)^2 parameter mesh spanning the observed A and B ranges.

    A column whose values are all equal collapses to a constant axis; this is
    not an error.

    Args:
        data_a: Observed A fractions (at least one value).
        data_b: Observed B fractions (same length as ``data_a``).
        resolution: Number of grid intervals per axis (>= 1).

    Returns:
        The mesh with C = 1 - A - B and nodes with A + B > 1 flagged invalid.

    Raises:
        ValueError: If there are no samples or the resolution is below 1.
    """
    data_a = np.asarray(data_a, dtype=np.float64).ravel()
    data_b = np.asarray(data_b, dtype=np.float64).ravel()

    if data_a.size == 0 or data_b.size == 0:
        raise ValueError("At least one sample is required to span the grid.")
    if resolution < 1:
        raise ValueError(f"Resolution must be >= 1, got {resolution}.")

    n = resolution + 1
    a_range = np.linspace(data_a.min(), data_a.max(), n)
    b_range = np.linspace(data_b.min(), data_b.max(), n)

    a_grid, b_grid = np.meshgrid(a_range, b_range)
    c_grid = 1.0 - (a_grid + b_grid)
    valid = (a_grid + b_grid) <= 1.0 + SIMPLEX_TOL

    return SimplexGrid(a=a_grid, b=b_grid, c=c_grid, valid=valid)


def triangulate(n: int) -> npt.NDArray[np.int_]:
    """
    Split every cell of an n x n point grid into two triangles.

    Vertices are numbered row-major (``row * n + col``). For the cell whose
    lower-left corner is ``bl`` the triangles are (tl, bl, br) and (tl, tr, br).

    Returns:
        (2 * (n - 1)^2, 3) array of vertex indices.
    """
    if n < 1:
        raise ValueError(f"Grid size must be >= 1, got {n}.")

    rows, cols = np.meshgrid(np.arange(n - 1), np.arange(n - 1), indexing="ij")
    bottom_left = (rows * n + cols).ravel()
    bottom_right = bottom_left + 1
    top_left = bottom_left + n
    top_right = top_left + 1

    upper = np.column_stack((top_left, bottom_left, bottom_right))
    lower = np.column_stack((top_left, top_right, bottom_right))
    return np.vstack((upper, lower)).astype(np.int_)


def tick_positions(
    resolution: int,
    tick_rate: int,
    direction: Direction
) -> tuple[AxisTicks, AxisTicks, AxisTicks]:
    """
    Anchor points and labels for the ticks on the bottom, left and right edges.

    Tick k sits at fraction t = k / resolution for k = 0, tick_rate, 2 * tick_rate, ...
    below ``resolution``; the corner value t = 1 is left to the neighbouring edge.
    The bottom edge reads A, the left edge B and the right edge C, matching
    ``to_cartesian``. Counterclockwise plots run each edge the other way round.

    Returns:
        (bottom, left, right) ticks. Labels are t rounded to two decimals.
    """
    t = np.arange(0, resolution, tick_rate, dtype=np.float64) / resolution
    labels = tuple(f"{round(float(v), 2):g}" for v in t)
    below = np.full_like(t, -TICK_OFFSET)

    if direction is Direction.CLOCKWISE:
        bottom = np.column_stack((-0.5 + t, below))
        left = np.column_stack((-0.5 * t - TICK_OFFSET, SIN60 * (1.0 - t)))
        right = np.column_stack((0.5 - 0.5 * t + TICK_OFFSET, SIN60 * t))
    else:
        bottom = np.column_stack((0.5 - t, below))
        left = np.column_stack((-0.5 + 0.5 * t - TICK_OFFSET, SIN60 * t))
        right = np.column_stack((0.5 * t + TICK_OFFSET, SIN60 * (1.0 - t)))

    return (
        AxisTicks(positions=bottom, labels=labels, rotation=0.0),
        AxisTicks(positions=left, labels=labels, rotation=60.0),
        AxisTicks(positions=right, labels=labels, rotation=-60.0),
    )


def grid_lines(resolution: int) -> npt.NDArray[np.float64]:
    """
    Interior grid lines parallel to the three triangle edges.

    Returns:
        (9 * (resolution - 1), 2) array: each line is two points followed by
        a NaN row separating it from the next.
    """
    t = np.arange(1, resolution, dtype=np.float64) / resolution
    if t.size == 0:
        return np.empty((0, 2), dtype=np.float64)

    gap = np.full_like(t, np.nan)
    zeros = np.zeros_like(t)

    # Parallel to the right edge, to the left edge, and to the base
    families = (
        ((0.5 - t, zeros), (-0.5 * t, SIN60 * (1.0 - t))),
        ((0.5 - t, zeros), (0.5 - 0.5 * t, SIN60 * t)),
        ((-0.5 + 0.5 * t, SIN60 * t), (0.5 - 0.5 * t, SIN60 * t)),
    )

    x_parts = []
    y_parts = []
    for (x0, y0), (x1, y1) in families:
        x_parts.append(np.column_stack((x0, x1, gap)).ravel())
        y_parts.append(np.column_stack((y0, y1, gap)).ravel())

    return np.column_stack((np.concatenate(x_parts), np.concatenate(y_parts)))


def simplex_outline() -> npt.NDArray[np.float64]:
    """Closed outline of the plot triangle."""
    return np.array([
        [-0.5, 0.0],
        [0.5, 0.0],
        [0.0, SIN60],
        [-0.5, 0.0],
    ])
