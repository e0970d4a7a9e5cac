"""Cellular (Worley) noise evaluated with numpy.

The spawn-region partitioner needs "cell value" noise: space is cut into a
jittered grid of feature points and every sample takes a pseudo-random value
belonging to its nearest feature point. Samples that share a nearest point
share a value, so bucketing the output yields blob-shaped clusters.

Each grid cell owns one feature point. Its jitter and value come from an
integer hash of the cell coordinates and the seed, so the field is fully
determined by the seed and needs no stored state.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from delve.util.coordinates import DistanceAlgorithm, distance2d

_U32_MASK = 0xFFFFFFFF
_GOLDEN = np.uint32(0x9E3779B3)
# Mixed into the seed so point values are independent of point jitter.
_VALUE_SALT = 0x5BD1E995


def _as_u32(values: ArrayLike) -> np.ndarray:
    return (np.asarray(values, dtype=np.int64) & _U32_MASK).astype(np.uint32)


def _hash2(ix: np.ndarray, iy: np.ndarray, seed: int) -> np.ndarray:
    """Bob Jenkins style 96-bit mix of (ix, iy, seed) -> uint32, element-wise."""
    a = _GOLDEN + _as_u32(ix)
    b = _GOLDEN + _as_u32(iy)
    c = _GOLDEN + _as_u32(np.full(np.shape(ix), seed))
    a = (a - b - c) ^ (c >> np.uint32(13))
    b = (b - c - a) ^ (a << np.uint32(8))
    c = (c - a - b) ^ (b >> np.uint32(13))
    a = (a - b - c) ^ (c >> np.uint32(12))
    b = (b - c - a) ^ (a << np.uint32(16))
    c = (c - a - b) ^ (b >> np.uint32(5))
    a = (a - b - c) ^ (c >> np.uint32(3))
    b = (b - c - a) ^ (a << np.uint32(10))
    c = (c - a - b) ^ (b >> np.uint32(15))
    return c


def cellular_noise(
    xs: ArrayLike,
    ys: ArrayLike,
    seed: int,
    *,
    frequency: float = 0.08,
    jitter: float = 0.45,
    distance: DistanceAlgorithm = DistanceAlgorithm.MANHATTAN,
) -> np.ndarray:
    """
    Sample cell-value noise at the given coordinates.

    Args:
        xs: X coordinates (any shape).
        ys: Y coordinates, same shape as ``xs``.
        seed: Selects the field. Equal seeds give equal output.
        frequency: Feature points per unit; lower values give larger cells.
        jitter: How far (in cells, at most 0.5) a feature point may stray
            from its cell centre.
        distance: Metric used to find the nearest feature point.

    Returns:
        Float array shaped like ``xs`` with values in ``[-1.0, 1.0)``.
    """
    sx = np.asarray(xs, dtype=np.float64) * frequency
    sy = np.asarray(ys, dtype=np.float64) * frequency
    cell_x = np.floor(sx).astype(np.int64)
    cell_y = np.floor(sy).astype(np.int64)

    best_distance = np.full(sx.shape, np.inf)
    best_value = np.zeros(sx.shape)

    with np.errstate(over="ignore"):
        for oy in (-1, 0, 1):
            for ox in (-1, 0, 1):
                tx = cell_x + ox
                ty = cell_y + oy
                h = _hash2(tx, ty, seed)
                rx = ((h & np.uint32(0xFFFF)) / 65535.0 - 0.5) * 2.0 * jitter
                ry = ((h >> np.uint32(16)) / 65535.0 - 0.5) * 2.0 * jitter
                px = tx + 0.5 + rx
                py = ty + 0.5 + ry

                d = distance2d(distance, px - sx, py - sy)
                closer = d < best_distance
                best_distance = np.where(closer, d, best_distance)

                value = _hash2(tx, ty, seed ^ _VALUE_SALT) / 4294967296.0 * 2.0 - 1.0
                best_value = np.where(closer, value, best_value)

    return best_value
