"""Rectangles and distance metrics in tile coordinates."""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import ArrayLike

from delve.types import TileCoord, WorldTilePos


class Rect:
    """Rectangle/bounding box in tile coordinates."""

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @classmethod
    def from_bounds(
        cls, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        width = x2 - x1
        height = y2 - y1
        return cls(x1, y1, width, height)

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    def center(self) -> WorldTilePos:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: Rect) -> bool:
        # Closed intervals: rooms that share an edge still overlap.
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# DISTANCE METRICS
# =============================================================================


class DistanceAlgorithm(Enum):
    """Distance metrics over tile offsets."""

    PYTHAGORAS = "pythagoras"
    # Squared Euclidean: same ordering as PYTHAGORAS without the sqrt.
    PYTHAGORAS_SQUARED = "pythagoras_squared"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"


def distance2d(
    algorithm: DistanceAlgorithm, dx: ArrayLike, dy: ArrayLike
) -> np.ndarray:
    """Distance for the offsets ``(dx, dy)``; works element-wise on arrays."""
    adx = np.abs(np.asarray(dx, dtype=np.float64))
    ady = np.abs(np.asarray(dy, dtype=np.float64))
    match algorithm:
        case DistanceAlgorithm.PYTHAGORAS:
            return np.sqrt(adx * adx + ady * ady)
        case DistanceAlgorithm.PYTHAGORAS_SQUARED:
            return adx * adx + ady * ady
        case DistanceAlgorithm.MANHATTAN:
            return adx + ady
        case DistanceAlgorithm.CHEBYSHEV:
            return np.maximum(adx, ady)
    raise ValueError(f"Unknown distance algorithm: {algorithm}")
