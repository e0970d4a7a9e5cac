"""Collapse solver for chunk-based Wave Function Collapse.

The output map is divided into a grid of chunk-sized cells. Each step picks
a pending cell at random and assigns it a pattern that agrees with every
already collapsed orthogonal neighbour, checked from both sides of the
shared border. There is no backtracking: when a cell has no allowed
pattern left the whole solve is marked impossible and the caller starts
over with a fresh solver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from ..base import MapGenerationError
from .constraints import EAST, NORTH, SOUTH, WEST, MapChunk

if TYPE_CHECKING:
    from delve.environment.map import Map
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

# (dx, dy, direction from the cell to the neighbour, and from it back)
_NEIGHBOR_OFFSETS = (
    (-1, 0, WEST, EAST),
    (1, 0, EAST, WEST),
    (0, -1, NORTH, SOUTH),
    (0, 1, SOUTH, NORTH),
)


class WFCContradiction(MapGenerationError):
    """Raised when WFC reaches an unsolvable state.

    Within a single solve this means some cell had no pattern compatible
    with all of its collapsed neighbours.
    """

    pass


class Solver:
    """One attempt at filling a map with compatible chunks."""

    def __init__(self, constraints: list[MapChunk], chunk_size: int, game_map: Map):
        if not constraints:
            raise ValueError("Solver needs at least one pattern")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.constraints = constraints
        self.chunk_size = chunk_size
        self.chunks_x = game_map.width // chunk_size
        self.chunks_y = game_map.height // chunk_size
        if self.chunks_x < 1 or self.chunks_y < 1:
            raise ValueError(
                f"A {game_map.width}x{game_map.height} map cannot hold a "
                f"{chunk_size}x{chunk_size} chunk"
            )

        # Set form of every compatible_with list, for membership tests.
        self._compatible = [
            tuple(frozenset(side) for side in chunk.compatible_with)
            for chunk in constraints
        ]
        # Pattern index per cell, None while the cell is pending.
        self.chunks: list[int | None] = [None] * (self.chunks_x * self.chunks_y)
        # (cell index, collapsed neighbour count) for every pending cell.
        self.remaining: list[tuple[int, int]] = [
            (i, 0) for i in range(self.chunks_x * self.chunks_y)
        ]
        self.collapse_order: list[int] = []
        self.possible = True

    def chunk_idx(self, chunk_x: int, chunk_y: int) -> int:
        return chunk_y * self.chunks_x + chunk_x

    def count_neighbors(self, chunk_x: int, chunk_y: int) -> int:
        """Collapsed cells among the orthogonal neighbours of a cell."""
        return len(self._collapsed_neighbors(chunk_x, chunk_y))

    def _collapsed_neighbors(
        self, chunk_x: int, chunk_y: int
    ) -> list[tuple[int, int, int]]:
        """(pattern, toward, facing) for each collapsed neighbour of a cell."""
        found: list[tuple[int, int, int]] = []
        for dx, dy, toward, facing in _NEIGHBOR_OFFSETS:
            nx, ny = chunk_x + dx, chunk_y + dy
            if not (0 <= nx < self.chunks_x and 0 <= ny < self.chunks_y):
                continue
            neighbor = self.chunks[self.chunk_idx(nx, ny)]
            if neighbor is not None:
                found.append((neighbor, toward, facing))
        return found

    def allowed_patterns(self, chunk_x: int, chunk_y: int) -> list[int]:
        """
        Patterns that may go in a cell given its collapsed neighbours.

        The rules are checked both ways: each neighbour must accept the
        pattern on its side facing the cell, and the pattern must accept
        the neighbour on its side facing the neighbour.

        Returns:
            Pattern indices in ascending order. Every pattern when no
            neighbour is collapsed yet.
        """
        neighbors = self._collapsed_neighbors(chunk_x, chunk_y)
        allowed = set(range(len(self.constraints)))
        for neighbor, _, facing in neighbors:
            allowed &= self._compatible[neighbor][facing]
        return [
            candidate
            for candidate in sorted(allowed)
            if all(
                neighbor in self._compatible[candidate][toward]
                for neighbor, toward, _ in neighbors
            )
        ]

    def step(self, game_map: Map, rng: RNG) -> bool:
        """
        Collapse one pending cell and stamp its pattern into ``game_map``.

        Returns:
            True once the solve is over, either because every cell is
            collapsed or because a contradiction set ``possible`` to False.
        """
        if not self.remaining:
            return True

        self.remaining = [
            (cell, self.count_neighbors(cell % self.chunks_x, cell // self.chunks_x))
            for cell, _ in self.remaining
        ]

        pick = rng.randint(1, len(self.remaining)) - 1
        cell, _ = self.remaining.pop(pick)
        chunk_x = cell % self.chunks_x
        chunk_y = cell // self.chunks_x

        allowed = self.allowed_patterns(chunk_x, chunk_y)
        if not allowed:
            logger.debug(
                f"Contradiction at chunk ({chunk_x}, {chunk_y}) after "
                f"{len(self.collapse_order)} collapses"
            )
            self.possible = False
            return True
        pattern_idx = allowed[rng.randint(1, len(allowed)) - 1]

        size = self.chunk_size
        block = np.asarray(self.constraints[pattern_idx].pattern, dtype=np.uint8)
        game_map.grid[
            chunk_y * size : (chunk_y + 1) * size,
            chunk_x * size : (chunk_x + 1) * size,
        ] = block.reshape(size, size)

        self.chunks[cell] = pattern_idx
        self.collapse_order.append(cell)
        return not self.remaining

    def run(
        self,
        game_map: Map,
        rng: RNG,
        on_step: Callable[[], None] | None = None,
    ) -> bool:
        """Step until the solve is over. Returns ``self.possible``."""
        while not self.step(game_map, rng):
            if on_step is not None:
                on_step()
        if on_step is not None:
            on_step()
        return self.possible
