"""Diffusion-limited aggregation cave generation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

import tcod.los

from delve.environment.tile_types import TileTypeID

from . import common
from .base import BaseMapGenerator
from .common import Symmetry
from .drunkard import stagger

if TYPE_CHECKING:
    from delve.util.rng import RNG


class DLAAlgorithm(Enum):
    WALK_INWARDS = auto()
    WALK_OUTWARDS = auto()
    CENTRAL_ATTRACTOR = auto()


@dataclass(frozen=True)
class DLASettings:
    algorithm: DLAAlgorithm
    brush_size: int
    symmetry: Symmetry
    floor_percent: float = 0.25


WALK_INWARDS = DLASettings(DLAAlgorithm.WALK_INWARDS, 1, Symmetry.VERTICAL)
WALK_OUTWARDS = DLASettings(DLAAlgorithm.WALK_OUTWARDS, 2, Symmetry.NONE)
CENTRAL_ATTRACTOR = DLASettings(DLAAlgorithm.CENTRAL_ATTRACTOR, 2, Symmetry.BOTH)
INSECTOID = DLASettings(DLAAlgorithm.CENTRAL_ATTRACTOR, 2, Symmetry.HORIZONTAL)


class DLAGenerator(BaseMapGenerator):
    """Grows a cave outward from a small seed at the map centre.

    Walkers wander until they bump into the existing structure and then
    paint where they stand, so the cave accretes like frost on glass:
    - walk inwards: start anywhere, stop on touching Floor.
    - walk outwards: start at the centre, stop on reaching Wall.
    - central attractor: march in a straight line toward the centre.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        settings: DLASettings = WALK_INWARDS,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        if not 0.0 < settings.floor_percent < 1.0:
            raise ValueError(
                f"floor_percent must be between 0 and 1, got {settings.floor_percent}"
            )
        if settings.brush_size < 1:
            raise ValueError(f"brush_size must be positive, got {settings.brush_size}")
        self.settings = settings

    @classmethod
    def walk_inwards(cls, depth: int, rng: RNG | None = None) -> DLAGenerator:
        return cls(depth, rng, settings=WALK_INWARDS)

    @classmethod
    def walk_outwards(cls, depth: int, rng: RNG | None = None) -> DLAGenerator:
        return cls(depth, rng, settings=WALK_OUTWARDS)

    @classmethod
    def central_attractor(cls, depth: int, rng: RNG | None = None) -> DLAGenerator:
        return cls(depth, rng, settings=CENTRAL_ATTRACTOR)

    @classmethod
    def insectoid(cls, depth: int, rng: RNG | None = None) -> DLAGenerator:
        return cls(depth, rng, settings=INSECTOID)

    def _paint(self, x: int, y: int) -> int:
        return common.paint(
            self.map, self.settings.symmetry, self.settings.brush_size, x, y
        )

    def _random_interior_point(self) -> tuple[int, int]:
        x = self.rng.randint(1, self.map.width - 3) + 1
        y = self.rng.randint(1, self.map.height - 3) + 1
        return x, y

    def _build(self) -> None:
        grid = self.map.grid
        start_x, start_y = self.map.width // 2, self.map.height // 2
        self.starting_position = (start_x, start_y)
        self.take_snapshot()

        for dx, dy in ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)):
            grid[start_y + dy, start_x + dx] = TileTypeID.FLOOR
        self.take_snapshot()

        floor_tile_count = 5
        desired_floor_tiles = int(self.map.tile_count * self.settings.floor_percent)

        match self.settings.algorithm:
            case DLAAlgorithm.WALK_INWARDS:
                step = self._walk_inwards
            case DLAAlgorithm.WALK_OUTWARDS:
                step = self._walk_outwards
            case DLAAlgorithm.CENTRAL_ATTRACTOR:
                step = self._central_attractor

        while floor_tile_count < desired_floor_tiles:
            floor_tile_count += step()
            self.take_snapshot()

        self._finish_level(self.map.xy_idx(start_x, start_y))

    def _walk_inwards(self) -> int:
        grid = self.map.grid
        drunk_x, drunk_y = self._random_interior_point()
        prev_x, prev_y = drunk_x, drunk_y
        while grid[drunk_y, drunk_x] != TileTypeID.FLOOR:
            prev_x, prev_y = drunk_x, drunk_y
            drunk_x, drunk_y = stagger(
                drunk_x,
                drunk_y,
                self.rng.randint(1, 4),
                self.map.width,
                self.map.height,
            )
        return self._paint(prev_x, prev_y)

    def _walk_outwards(self) -> int:
        grid = self.map.grid
        drunk_x, drunk_y = self.starting_position
        while grid[drunk_y, drunk_x] == TileTypeID.FLOOR:
            drunk_x, drunk_y = stagger(
                drunk_x,
                drunk_y,
                self.rng.randint(1, 4),
                self.map.width,
                self.map.height,
            )
        return self._paint(drunk_x, drunk_y)

    def _central_attractor(self) -> int:
        grid = self.map.grid
        drunk_x, drunk_y = self._random_interior_point()
        prev_x, prev_y = drunk_x, drunk_y
        path = tcod.los.bresenham((drunk_x, drunk_y), self.starting_position)
        for x, y in path.tolist():
            if grid[drunk_y, drunk_x] != TileTypeID.WALL:
                break
            prev_x, prev_y = drunk_x, drunk_y
            drunk_x, drunk_y = x, y
        return self._paint(prev_x, prev_y)
