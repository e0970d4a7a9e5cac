"""Voronoi diagram map generation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import DistanceAlgorithm, distance2d

from . import common
from .base import BaseMapGenerator

if TYPE_CHECKING:
    from delve.types import WorldTilePos
    from delve.util.rng import RNG


def nearest_seed_regions(
    width: int,
    height: int,
    seeds: list[WorldTilePos],
    algorithm: DistanceAlgorithm,
) -> np.ndarray:
    """
    Label every tile with the index of its closest seed.

    Ties go to the seed that comes first in ``seeds``.

    Returns:
        An int array of shape ``(height, width)``.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    seed_xs = np.array([x for x, _ in seeds])[:, None, None]
    seed_ys = np.array([y for _, y in seeds])[:, None, None]
    distances = distance2d(algorithm, xs[None] - seed_xs, ys[None] - seed_ys)
    return np.argmin(distances, axis=0)


def count_foreign_neighbors(regions: np.ndarray) -> np.ndarray:
    """Orthogonal neighbours in a different region, for interior tiles only."""
    center = regions[1:-1, 1:-1]
    return (
        (regions[1:-1, 2:] != center).astype(np.uint8)
        + (regions[1:-1, :-2] != center)
        + (regions[2:, 1:-1] != center)
        + (regions[:-2, 1:-1] != center)
    )


class VoronoiCellGenerator(BaseMapGenerator):
    """Carves the cells of a Voronoi diagram, leaving walls along the edges.

    A tile stays Wall only where two or more of its orthogonal neighbours
    belong to another cell, so walls are thin and every cell stays open to
    its neighbours at the corners.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        n_seeds: int = 64,
        distance_algorithm: DistanceAlgorithm = DistanceAlgorithm.PYTHAGORAS_SQUARED,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        candidates = (self.map.width - 3) * (self.map.height - 3)
        if not 1 <= n_seeds <= candidates:
            raise ValueError(
                f"n_seeds must be between 1 and {candidates}, got {n_seeds}"
            )
        self.n_seeds = n_seeds
        self.distance_algorithm = distance_algorithm
        self.seeds: list[WorldTilePos] = []

    @classmethod
    def pythagoras(cls, depth: int, rng: RNG | None = None) -> VoronoiCellGenerator:
        return cls(
            depth,
            rng,
            n_seeds=64,
            distance_algorithm=DistanceAlgorithm.PYTHAGORAS_SQUARED,
        )

    @classmethod
    def manhattan(cls, depth: int, rng: RNG | None = None) -> VoronoiCellGenerator:
        return cls(
            depth, rng, n_seeds=64, distance_algorithm=DistanceAlgorithm.MANHATTAN
        )

    @classmethod
    def chebyshev(cls, depth: int, rng: RNG | None = None) -> VoronoiCellGenerator:
        return cls(
            depth, rng, n_seeds=32, distance_algorithm=DistanceAlgorithm.CHEBYSHEV
        )

    def _pick_seeds(self) -> list[WorldTilePos]:
        seeds: dict[WorldTilePos, None] = {}
        while len(seeds) < self.n_seeds:
            x = self.rng.randint(1, self.map.width - 3) + 1
            y = self.rng.randint(1, self.map.height - 3) + 1
            seeds.setdefault((x, y))
        return list(seeds)

    def _build(self) -> None:
        self.seeds = self._pick_seeds()
        regions = nearest_seed_regions(
            self.map.width, self.map.height, self.seeds, self.distance_algorithm
        )
        carve = count_foreign_neighbors(regions) < 2

        grid = self.map.grid
        for y in range(1, self.map.height - 1):
            row = carve[y - 1]
            grid[y, 1:-1][row] = TileTypeID.FLOOR
            self.take_snapshot()

        start_x, start_y = self.seeds[0]
        if grid[start_y, start_x] != TileTypeID.FLOOR:
            start_x, start_y = common.find_nearest_floor(self.map, start_x, start_y)
        self.starting_position = (start_x, start_y)
        self._finish_level(self.map.xy_idx(start_x, start_y))
