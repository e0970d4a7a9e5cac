from __future__ import annotations

from collections import deque

import numpy as np

from delve.environment.generators.base import BaseMapGenerator
from delve.environment.generators.wfc.constraints import (
    EAST,
    NORTH,
    SOUTH,
    WEST,
    pattern_exits,
)
from delve.environment.generators.wfc.solver import Solver
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID
from delve.types import TileIndex, WorldTilePos
from delve.util.pathfinding import dijkstra_map


def reachable_tiles(game_map: Map, start: WorldTilePos) -> set[TileIndex]:
    """Every non-wall tile 8-connected to ``start``, with no distance cap."""
    start_idx = game_map.xy_idx(*start)
    seen = {start_idx}
    queue = deque([start_idx])
    while queue:
        idx = queue.popleft()
        for neighbor in game_map.neighbors(idx):
            if neighbor in seen or game_map.tiles[neighbor] == TileTypeID.WALL:
                continue
            seen.add(neighbor)
            queue.append(neighbor)
    return seen


def assert_finished_level(generator: BaseMapGenerator) -> None:
    """Checks every generator must satisfy once ``build_map()`` returns."""
    game_map = generator.get_map()
    count = game_map.width * game_map.height

    # Handing out the map never changes it.
    again = generator.get_map()
    assert again is not game_map
    assert again.tiles.tobytes() == game_map.tiles.tobytes()

    # Buffer shape, for the result and every snapshot.
    for snapshot in [game_map, *generator.get_snapshot_history()]:
        assert snapshot.tiles.shape == (count,)
        assert snapshot.revealed.shape == (count,)
        assert snapshot.visible.shape == (count,)
        assert snapshot.blocked.shape == (count,)

    # Start is on plain Floor, never under the stairs.
    start = generator.get_starting_position()
    assert game_map.tiles[game_map.xy_idx(*start)] == TileTypeID.FLOOR

    # No stray walker marks survive.
    assert game_map.count(TileTypeID.VISITED_FLOOR) == 0

    # Exactly one exit.
    stairs = np.flatnonzero(game_map.tiles == TileTypeID.DOWN_STAIRS)
    assert len(stairs) == 1

    # Connectivity: every Floor tile and the stairs are reachable from start.
    reachable = reachable_tiles(game_map, start)
    walkable = set(np.flatnonzero(game_map.tiles != TileTypeID.WALL).tolist())
    assert walkable <= reachable
    assert int(stairs[0]) in reachable


def assert_stairs_most_distant(generator: BaseMapGenerator) -> None:
    """The stairs sit at the greatest walking distance from the start."""
    game_map = generator.get_map()
    game_map.populate_blocked()
    start = game_map.xy_idx(*generator.get_starting_position())
    distances = dijkstra_map(game_map, [start])

    stairs = int(np.flatnonzero(game_map.tiles == TileTypeID.DOWN_STAIRS)[0])
    open_tiles = game_map.tiles != TileTypeID.WALL
    assert np.isfinite(distances[open_tiles]).all()
    assert distances[stairs] > 0.0
    assert distances[stairs] == distances[open_tiles].max()


def _exits_meet(mine: tuple[bool, ...], theirs: tuple[bool, ...]) -> bool:
    """Both borders are closed, or they share at least one open slot."""
    if not any(mine) and not any(theirs):
        return True
    return any(a and b for a, b in zip(mine, theirs))


def assert_borders_match(solver: Solver) -> None:
    """Every pair of touching collapsed cells agrees on its shared border.

    Exits are read straight from the stamped patterns, so an opening on
    either side of a border must meet an opening on the other side.
    """
    exits: dict[int, tuple[tuple[bool, ...], ...]] = {
        cell: pattern_exits(solver.constraints[idx].pattern, solver.chunk_size)
        for cell, idx in enumerate(solver.chunks)
        if idx is not None
    }
    for cell, sides in exits.items():
        cx, cy = cell % solver.chunks_x, cell // solver.chunks_x
        east = solver.chunk_idx(cx + 1, cy)
        if cx + 1 < solver.chunks_x and east in exits:
            assert _exits_meet(sides[EAST], exits[east][WEST]), (cell, east)
        south = solver.chunk_idx(cx, cy + 1)
        if cy + 1 < solver.chunks_y and south in exits:
            assert _exits_meet(sides[SOUTH], exits[south][NORTH]), (cell, south)
