"""
Surface Reconstruction
======================
Resamples scattered (x, y, z) samples onto the triangulated ternary grid.

Why is this file needed?
------------------------
Ternary data is measured at arbitrary compositions, but the chart draws a
regular triangulated height field. This module turns the former into the latter
with one of several scattered-data interpolation policies, and guarantees that
degenerate input (duplicates, collinear or too few points) degrades to
"no value" (NaN) nodes instead of raising.

Functions:
    normalize_fractions: Scale raw (A, B, C) rows so each sums to 1.
    reconstruct_surface: Interpolate samples onto grid nodes.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

import numpy as np
from scipy.interpolate import griddata
from scipy.spatial import Delaunay, QhullError, cKDTree
from scipy.spatial.distance import cdist

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Grid nodes closer than this to a sample take its value in the degenerate case
HIT_TOL: float = 1e-9

# Raster cells per side used by the discrete natural-neighbour scheme
NATURAL_RASTER_SIZE: int = 128


class InterpolationMethod(Enum):
    """Scattered-data interpolation policy for the ternary surface."""
    LINEAR = "linear"
    NEAREST = "nearest"
    NATURAL = "natural"
    CUBIC = "cubic"
    BIHARMONIC = "biharmonic"

    @classmethod
    def _missing_(cls, value: object) -> InterpolationMethod | None:
        # "v4" is the traditional name of the biharmonic spline method
        if value == "v4":
            return cls.BIHARMONIC
        return None


def normalize_fractions(abc: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Divide each (A, B, C) row by its sum.

    Rows need not sum to 1 on input. A row of zeros has no composition and
    becomes NaN.

    Args:
        abc: (N, 3) array of non-negative components.

    Returns:
        (N, 3) array of fractions.
    """
    abc = np.asarray(abc, dtype=np.float64).reshape(-1, 3)
    totals = abc.sum(axis=1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        fractions = abc / totals
    fractions[~np.isfinite(fractions).all(axis=1)] = np.nan
    return fractions


def reconstruct_surface(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike,
    grid_x: npt.NDArray[np.float64],
    grid_y: npt.NDArray[np.float64],
    valid: npt.NDArray[np.bool_],
    method: InterpolationMethod
) -> npt.NDArray[np.float64]:
    """
    Interpolate scattered samples onto the grid nodes.

    Args:
        x, y, z: Sample coordinates and values. Non-finite samples are ignored.
        grid_x, grid_y: Cartesian coordinates of the grid nodes.
        valid: Mask of nodes inside the simplex; all others are NaN on output.
        method: Interpolation policy.

    Returns:
        Array shaped like ``grid_x`` with NaN where there is no value.
    """
    grid_x = np.asarray(grid_x, dtype=np.float64)
    grid_y = np.asarray(grid_y, dtype=np.float64)
    valid = np.asarray(valid, dtype=bool)

    result = np.full(grid_x.shape, np.nan)
    if not valid.any():
        return result

    points, values = _prepare_samples(x, y, z)
    query = np.column_stack((grid_x[valid], grid_y[valid]))

    if points.shape[0] == 0:
        return result

    if _is_degenerate(points):
        logger.warning(
            f"Cannot interpolate {points.shape[0]} distinct sample(s) that do not span an area; "
            f"surface left empty except at the samples."
        )
        result[valid] = _exact_hits(points, values, query)
        return result

    interpolator = _INTERPOLATORS[method]
    try:
        result[valid] = interpolator(points, values, query)
    except (QhullError, np.linalg.LinAlgError) as e:
        logger.warning(f"'{method.value}' interpolation failed, surface left empty: {e}")
        result[valid] = _exact_hits(points, values, query)

    return result


# ------------------------------------------------------------------------------
# Sample preparation
# ------------------------------------------------------------------------------

def _prepare_samples(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Drop non-finite samples and average the values of coincident points."""
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    z = np.asarray(z, dtype=np.float64).ravel()

    keep = np.isfinite(x) & np.isfinite(y) & np.isfinite(z)
    points = np.column_stack((x[keep], y[keep]))
    values = z[keep]

    if points.shape[0] < 2:
        return points, values

    unique_points, inverse = np.unique(points, axis=0, return_inverse=True)
    inverse = inverse.ravel()
    if unique_points.shape[0] == points.shape[0]:
        return points, values

    sums = np.bincount(inverse, weights=values, minlength=unique_points.shape[0])
    counts = np.bincount(inverse, minlength=unique_points.shape[0])
    return unique_points, sums / counts


def _is_degenerate(points: npt.NDArray[np.float64]) -> bool:
    """True for fewer than three points or points lying on one line."""
    if points.shape[0] < 3:
        return True
    centred = points - points.mean(axis=0)
    return int(np.linalg.matrix_rank(centred)) < 2


def _exact_hits(
    points: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    query: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """NaN everywhere except at query nodes coinciding with a sample."""
    out = np.full(query.shape[0], np.nan)
    distance, index = cKDTree(points).query(query, distance_upper_bound=HIT_TOL)
    hit = np.isfinite(distance)
    out[hit] = values[index[hit]]
    return out


# ------------------------------------------------------------------------------
# Interpolation policies
# ------------------------------------------------------------------------------

def _griddata(method: str) -> Callable[..., npt.NDArray[np.float64]]:
    def interpolate(points, values, query):
        return griddata(points, values, query, method=method, fill_value=np.nan)
    return interpolate


def _nearest(
    points: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    query: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Nearest sample value, restricted to the convex hull of the samples."""
    out = griddata(points, values, query, method="nearest")
    out[Delaunay(points).find_simplex(query) < 0] = np.nan
    return out


def _natural(
    points: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    query: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Discrete Sibson (natural-neighbour) interpolation.

    The convex hull is rasterized; every raster cell p lies in the Voronoi cell
    of its nearest sample s(p). Inserting a query point q would steal all cells
    p with |p - q| < |p - s(p)|, so the value at q is the mean of f(s(p)) over
    those cells. Queries outside the hull are NaN.
    """
    hull = Delaunay(points)
    out = np.full(query.shape[0], np.nan)
    inside = hull.find_simplex(query) >= 0
    if not inside.any():
        return out

    lo = points.min(axis=0)
    hi = points.max(axis=0)
    step = float(np.max(hi - lo)) / NATURAL_RASTER_SIZE
    rx, ry = np.meshgrid(np.arange(lo[0], hi[0] + step, step), np.arange(lo[1], hi[1] + step, step))
    raster = np.column_stack((rx.ravel(), ry.ravel()))
    raster = raster[hull.find_simplex(raster) >= 0]

    sites = cKDTree(points)
    radius, owner = sites.query(raster)

    targets = query[inside]
    stolen = cKDTree(targets).query_ball_point(raster, radius)
    lengths = np.fromiter((len(s) for s in stolen), dtype=np.int_, count=len(stolen))

    sums = np.zeros(targets.shape[0])
    counts = np.zeros(targets.shape[0])
    if lengths.sum() > 0:
        flat = np.concatenate([np.asarray(s, dtype=np.int_) for s in stolen if s])
        contributions = values[np.repeat(owner, lengths)]
        np.add.at(sums, flat, contributions)
        np.add.at(counts, flat, 1.0)

    estimate = np.empty(targets.shape[0])
    covered = counts > 0
    estimate[covered] = sums[covered] / counts[covered]

    # Queries on a sample (or between raster cells) steal nothing
    if not covered.all():
        _, closest = sites.query(targets[~covered])
        estimate[~covered] = values[closest]

    out[inside] = estimate
    return out


def _biharmonic(
    points: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    query: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Biharmonic spline (Sandwell, 1987) with Green's function r^2 (ln r - 1).

    Unlike the other policies this one extrapolates beyond the convex hull.
    """
    weights = np.linalg.solve(_green(cdist(points, points)), values)
    return _green(cdist(query, points)) @ weights


def _green(r: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    g = np.zeros_like(r)
    nonzero = r > 0
    g[nonzero] = r[nonzero] ** 2 * (np.log(r[nonzero]) - 1.0)
    return g


_INTERPOLATORS: dict[InterpolationMethod, Callable[..., npt.NDArray[np.float64]]] = {
    InterpolationMethod.LINEAR: _griddata("linear"),
    InterpolationMethod.NEAREST: _nearest,
    InterpolationMethod.NATURAL: _natural,
    InterpolationMethod.CUBIC: _griddata("cubic"),
    InterpolationMethod.BIHARMONIC: _biharmonic,
}
