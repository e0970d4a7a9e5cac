"""Drunkard's walk cave generation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from delve.environment.tile_types import TileTypeID

from . import common
from .base import BaseMapGenerator
from .common import Symmetry

if TYPE_CHECKING:
    from delve.util.rng import RNG


class DrunkSpawnMode(Enum):
    """Where each new drunkard starts walking."""

    STARTING_POINT = auto()
    RANDOM = auto()


@dataclass(frozen=True)
class DrunkardSettings:
    spawn_mode: DrunkSpawnMode
    drunken_lifetime: int
    floor_percent: float
    brush_size: int = 1
    symmetry: Symmetry = Symmetry.NONE


OPEN_AREA = DrunkardSettings(DrunkSpawnMode.STARTING_POINT, 400, 0.5)
OPEN_HALLS = DrunkardSettings(DrunkSpawnMode.RANDOM, 400, 0.5)
WINDING_PASSAGES = DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4)
FAT_PASSAGES = DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4, brush_size=2)
FEARFUL_SYMMETRY = DrunkardSettings(
    DrunkSpawnMode.RANDOM, 100, 0.4, symmetry=Symmetry.BOTH
)


def stagger(
    x: int, y: int, direction: int, width: int, height: int
) -> tuple[int, int]:
    """Move one tile for a d4 roll, refusing to get within 2 tiles of the edge.

    1 is west, 2 east, 3 north and 4 south. A blocked move leaves the
    walker where it is.
    """
    match direction:
        case 1 if x > 2:
            x -= 1
        case 2 if x < width - 2:
            x += 1
        case 3 if y > 2:
            y -= 1
        case 4 if y < height - 2:
            y += 1
    return x, y


class DrunkardsWalkGenerator(BaseMapGenerator):
    """Carves caves by letting random walkers dig until enough floor exists.

    Every drunkard digs for ``drunken_lifetime`` steps. The tiles it walked
    are flagged VISITED_FLOOR while it digs so the snapshot shows its path,
    then flipped back to Floor before the next one starts.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        settings: DrunkardSettings = OPEN_AREA,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        if not 0.0 < settings.floor_percent < 1.0:
            raise ValueError(
                f"floor_percent must be between 0 and 1, got {settings.floor_percent}"
            )
        if settings.drunken_lifetime < 1 or settings.brush_size < 1:
            raise ValueError(f"Invalid drunkard settings: {settings}")
        self.settings = settings

    @classmethod
    def open_area(cls, depth: int, rng: RNG | None = None) -> DrunkardsWalkGenerator:
        return cls(depth, rng, settings=OPEN_AREA)

    @classmethod
    def open_halls(cls, depth: int, rng: RNG | None = None) -> DrunkardsWalkGenerator:
        return cls(depth, rng, settings=OPEN_HALLS)

    @classmethod
    def winding_passages(
        cls, depth: int, rng: RNG | None = None
    ) -> DrunkardsWalkGenerator:
        return cls(depth, rng, settings=WINDING_PASSAGES)

    @classmethod
    def fat_passages(
        cls, depth: int, rng: RNG | None = None
    ) -> DrunkardsWalkGenerator:
        return cls(depth, rng, settings=FAT_PASSAGES)

    @classmethod
    def fearful_symmetry(
        cls, depth: int, rng: RNG | None = None
    ) -> DrunkardsWalkGenerator:
        return cls(depth, rng, settings=FEARFUL_SYMMETRY)

    def _build(self) -> None:
        settings = self.settings
        width, height = self.map.width, self.map.height
        grid = self.map.grid

        start_x, start_y = width // 2, height // 2
        self.starting_position = (start_x, start_y)
        grid[start_y, start_x] = TileTypeID.FLOOR

        desired_floor_tiles = int(settings.floor_percent * self.map.tile_count)
        floor_tile_count = self.map.count(TileTypeID.FLOOR)
        digger_count = 0

        while floor_tile_count < desired_floor_tiles:
            if settings.spawn_mode is DrunkSpawnMode.STARTING_POINT or not digger_count:
                drunk_x, drunk_y = start_x, start_y
            else:
                drunk_x = self.rng.randint(1, width - 3) + 1
                drunk_y = self.rng.randint(1, height - 3) + 1

            did_something = False
            for _ in range(settings.drunken_lifetime):
                if grid[drunk_y, drunk_x] == TileTypeID.WALL:
                    did_something = True
                common.paint(
                    self.map, settings.symmetry, settings.brush_size, drunk_x, drunk_y
                )
                grid[drunk_y, drunk_x] = TileTypeID.VISITED_FLOOR

                drunk_x, drunk_y = stagger(
                    drunk_x, drunk_y, self.rng.randint(1, 4), width, height
                )

            if did_something:
                self.take_snapshot()

            digger_count += 1
            self.map.tiles[self.map.tiles == TileTypeID.VISITED_FLOOR] = (
                TileTypeID.FLOOR
            )
            floor_tile_count = self.map.count(TileTypeID.FLOOR)

        self._finish_level(self.map.xy_idx(start_x, start_y))
