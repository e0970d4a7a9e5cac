"""Wave Function Collapse level generator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from delve import config
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID

from .. import common
from ..base import BaseMapGenerator
from .constraints import (
    MapChunk,
    build_patterns,
    patterns_to_constraints,
    render_chunk_to_map,
    render_pattern_to_map,
)
from .image_loader import load_rex_map
from .solver import Solver, WFCContradiction

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WaveFunctionCollapseGenerator(BaseMapGenerator):
    """Builds a level out of chunks cut from a hand-drawn seed map.

    The seed image and the pattern galleries are recorded as the first
    snapshots so the whole pipeline can be replayed.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        seed_map_path: str | Path = config.WFC_SEED_MAP_PATH,
        chunk_size: int = config.WFC_CHUNK_SIZE,
        include_flipped: bool = True,
        dedup: bool = True,
        max_attempts: int | None = config.WFC_MAX_ATTEMPTS,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        self.seed_map_path = Path(seed_map_path)
        self.chunk_size = chunk_size
        self.include_flipped = include_flipped
        self.dedup = dedup
        self.max_attempts = max_attempts
        self.constraints: list[MapChunk] = []
        self.solver: Solver | None = None
        self.attempts = 0

    def _build(self) -> None:
        seed_map = load_rex_map(
            self.depth, self.seed_map_path, self.map_width, self.map_height
        )
        self.snapshots.take(seed_map)

        patterns = build_patterns(
            seed_map, self.chunk_size, self.include_flipped, self.dedup
        )
        self._render_gallery(patterns, render_pattern_to_map)
        self.constraints = patterns_to_constraints(patterns, self.chunk_size)
        self._render_gallery(self.constraints, render_chunk_to_map)

        self._solve()

        start_x, start_y = self.map.width // 2, self.map.height // 2
        if self.map.grid[start_y, start_x] != TileTypeID.FLOOR:
            start_x, start_y = common.find_nearest_floor(self.map, start_x, start_y)
        self.starting_position = (start_x, start_y)
        self._finish_level(self.map.xy_idx(start_x, start_y))

    def _solve(self) -> None:
        """Run whole solves until one finishes without a contradiction."""
        self.attempts = 0
        while True:
            self.attempts += 1
            self.map = Map.new(self.depth, self.map_width, self.map_height)
            self.solver = Solver(self.constraints, self.chunk_size, self.map)
            try:
                if not self.solver.run(self.map, self.rng, self.take_snapshot):
                    raise WFCContradiction(
                        f"No compatible pattern left on attempt {self.attempts}"
                    )
                return
            except WFCContradiction:
                if self.max_attempts is not None and self.attempts >= self.max_attempts:
                    raise
                logger.warning(
                    f"WFC attempt {self.attempts} hit a contradiction, retrying"
                )

    def _render_gallery(
        self,
        items: list[T],
        render: Callable[[Map, T, int, int, int], None],
    ) -> None:
        """Lay ``items`` out in a grid, one snapshot per full page."""
        size = self.chunk_size
        page = Map.new(0, self.map_width, self.map_height)
        x, y = 1, 1
        for item in items:
            render(page, item, size, x, y)
            x += size + 1
            if x + size >= page.width:
                x = 1
                y += size + 1
                if y + size >= page.height:
                    self.snapshots.take(page)
                    page = Map.new(0, self.map_width, self.map_height)
                    y = 1
        self.snapshots.take(page)
