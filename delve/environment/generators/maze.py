"""Maze generation with a randomized depth-first (recursive backtracker) walk."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np

from delve.environment.tile_types import TileTypeID

from .base import BaseMapGenerator

if TYPE_CHECKING:
    from delve.util.rng import RNG

# Bits set in MazeGrid.walls when the wall on that side has been knocked down.
NORTH = 1
SOUTH = 2
WEST = 4
EAST = 8

# Connections carved between snapshots.
CELLS_PER_SNAPSHOT = 20

GridPos: TypeAlias = tuple[int, int]


class MazeGrid:
    """Cells of a perfect maze, each tracking which of its 4 walls are open.

    The grid runs at half the map resolution: cell ``(x, y)`` sits on map
    tile ``(2x + 1, 2y + 1)`` and the tiles between cells are the walls.
    """

    def __init__(self, grid_width: int, grid_height: int) -> None:
        if grid_width < 1 or grid_height < 1:
            raise ValueError(
                f"Maze grid must be at least 1x1, got {grid_width}x{grid_height}"
            )
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.walls = np.zeros(grid_width * grid_height, dtype=np.uint8)
        self.is_visited = np.zeros(grid_width * grid_height, dtype=bool)

    @property
    def cell_count(self) -> int:
        return self.grid_width * self.grid_height

    def in_bounds(self, pos: GridPos) -> bool:
        x, y = pos
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height

    def xy_idx(self, pos: GridPos) -> int:
        if not self.in_bounds(pos):
            raise IndexError(f"Maze cell {pos} is outside the grid")
        return pos[1] * self.grid_width + pos[0]

    def connect(self, from_pos: GridPos, to_pos: GridPos) -> None:
        """Knock down the wall between two orthogonally adjacent cells."""
        from_idx = self.xy_idx(from_pos)
        to_idx = self.xy_idx(to_pos)
        match (to_pos[0] - from_pos[0], to_pos[1] - from_pos[1]):
            case (-1, 0):
                self.walls[from_idx] |= WEST
                self.walls[to_idx] |= EAST
            case (1, 0):
                self.walls[from_idx] |= EAST
                self.walls[to_idx] |= WEST
            case (0, -1):
                self.walls[from_idx] |= NORTH
                self.walls[to_idx] |= SOUTH
            case (0, 1):
                self.walls[from_idx] |= SOUTH
                self.walls[to_idx] |= NORTH
            case _:
                raise ValueError(f"Maze cells {from_pos} and {to_pos} are not adjacent")

    def available_neighbors(self, pos: GridPos) -> list[GridPos]:
        x, y = pos
        return [
            neighbor
            for neighbor in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1))
            if self.in_bounds(neighbor) and not self.is_visited[self.xy_idx(neighbor)]
        ]

    def generate(
        self,
        rng: RNG,
        on_connect: Callable[[GridPos, GridPos], None] | None = None,
    ) -> int:
        """
        Visit every cell from ``(0, 0)`` with an explicit backtracking stack.

        Args:
            rng: Picks which unvisited neighbour to move to.
            on_connect: Called with ``(current, next)`` for every connection.

        Returns:
            The number of connections made (``cell_count - 1``).
        """
        self.walls[:] = 0
        self.is_visited[:] = False

        connections = 0
        stack: list[GridPos] = [(0, 0)]
        while stack:
            current = stack[-1]
            self.is_visited[self.xy_idx(current)] = True
            neighbors = self.available_neighbors(current)
            if not neighbors:
                stack.pop()
                continue

            chosen = neighbors[rng.randint(1, len(neighbors)) - 1]
            self.connect(current, chosen)
            stack.append(chosen)
            connections += 1
            if on_connect is not None:
                on_connect(current, chosen)
        return connections


class MazeGenerator(BaseMapGenerator):
    """Fills the map with a perfect maze: one path between any two cells."""

    def __init__(self, depth: int, rng: RNG | None = None, **kwargs: Any) -> None:
        super().__init__(depth, rng, **kwargs)
        self.maze: MazeGrid | None = None
        self._carved = 0

    def _build(self) -> None:
        self.maze = MazeGrid((self.map.width - 2) // 2, (self.map.height - 2) // 2)
        self._carved = 0
        self.map.grid[1, 1] = TileTypeID.FLOOR
        self.maze.generate(self.rng, self._carve_connection)
        self.take_snapshot()

        self.starting_position = (1, 1)
        self._finish_level(self.map.xy_idx(1, 1))

    def _carve_connection(self, current: GridPos, chosen: GridPos) -> None:
        grid = self.map.grid
        cx, cy = current[0] * 2 + 1, current[1] * 2 + 1
        nx, ny = chosen[0] * 2 + 1, chosen[1] * 2 + 1
        grid[cy, cx] = TileTypeID.FLOOR
        grid[(cy + ny) // 2, (cx + nx) // 2] = TileTypeID.FLOOR
        grid[ny, nx] = TileTypeID.FLOOR

        self._carved += 1
        if self._carved % CELLS_PER_SNAPSHOT == 0:
            self.take_snapshot()
