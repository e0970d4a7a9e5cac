"""Cave generation with a cellular automaton."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from delve.environment.tile_types import TileTypeID

from . import common
from .base import BaseMapGenerator

if TYPE_CHECKING:
    from delve.util.rng import RNG


def count_wall_neighbors(grid: np.ndarray) -> np.ndarray:
    """Walls among the 8 neighbours of every interior tile.

    Returns an array shaped like ``grid[1:-1, 1:-1]``.
    """
    walls = (grid == TileTypeID.WALL).astype(np.uint8)
    h, w = walls.shape
    counts = np.zeros((h - 2, w - 2), dtype=np.uint8)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += walls[1 + dy : h - 1 + dy, 1 + dx : w - 1 + dx]
    return counts


class CellularAutomataGenerator(BaseMapGenerator):
    """Random noise smoothed into caves by repeated neighbour-count passes.

    A tile becomes Wall when it has more than 4 walls around it, or none at
    all (which breaks up large open areas); otherwise it becomes Floor. The
    border never changes.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        iterations: int = 15,
        floor_threshold: int = 55,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        self.iterations = iterations
        # A d100 roll above this makes the tile start as Floor.
        self.floor_threshold = floor_threshold

    def _build(self) -> None:
        grid = self.map.grid
        for y in range(1, self.map.height - 1):
            for x in range(1, self.map.width - 1):
                roll = self.rng.randint(1, 100)
                grid[y, x] = (
                    TileTypeID.FLOOR if roll > self.floor_threshold else TileTypeID.WALL
                )
        self.take_snapshot()

        for _ in range(self.iterations):
            neighbors = count_wall_neighbors(grid)
            become_wall = (neighbors > 4) | (neighbors == 0)
            grid[1:-1, 1:-1] = np.where(become_wall, TileTypeID.WALL, TileTypeID.FLOOR)
            self.take_snapshot()

        start_x, start_y = common.walk_left_to_floor(
            self.map, self.map.width // 2, self.map.height // 2
        )
        self.starting_position = (start_x, start_y)
        self._finish_level(self.map.xy_idx(start_x, start_y))
