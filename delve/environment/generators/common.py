"""
Carving toolkit shared by the map generators.

These functions mutate a ``Map`` in place. None of them take snapshots; the
calling generator decides when a change is interesting enough to record.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from delve import config
from delve.environment.tile_types import TileTypeID
from delve.types import SpawnRegions, TileCoord, TileIndex, WorldTilePos
from delve.util.coordinates import DistanceAlgorithm
from delve.util.noise import cellular_noise
from delve.util.pathfinding import dijkstra_map

if TYPE_CHECKING:
    from delve.environment.map import Map
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class Symmetry(Enum):
    """Mirroring applied by ``paint`` about the map centre."""

    NONE = auto()
    HORIZONTAL = auto()
    VERTICAL = auto()
    BOTH = auto()


# =============================================================================
# ROOMS AND TUNNELS
# =============================================================================


def apply_room_to_map(game_map: Map, room: Rect) -> None:
    """Carve Floor strictly inside ``room``; its outline stays as it was."""
    game_map.grid[room.y1 + 1 : room.y2, room.x1 + 1 : room.x2] = TileTypeID.FLOOR


def _carve_line(game_map: Map, coords: list[WorldTilePos]) -> None:
    for x, y in coords:
        if not game_map.in_bounds(x, y):
            continue
        game_map.tiles[y * game_map.width + x] = TileTypeID.FLOOR


def apply_horizontal_tunnel(
    game_map: Map, x1: TileCoord, x2: TileCoord, y: TileCoord
) -> None:
    """Carve Floor along row ``y`` from ``x1`` to ``x2`` inclusive."""
    _carve_line(game_map, [(x, y) for x in range(min(x1, x2), max(x1, x2) + 1)])


def apply_vertical_tunnel(
    game_map: Map, y1: TileCoord, y2: TileCoord, x: TileCoord
) -> None:
    """Carve Floor along column ``x`` from ``y1`` to ``y2`` inclusive."""
    _carve_line(game_map, [(x, y) for y in range(min(y1, y2), max(y1, y2) + 1)])


# =============================================================================
# CONNECTIVITY AND EXITS
# =============================================================================


def cull_unreachables_and_return_most_distant_tile(
    game_map: Map, start_idx: TileIndex
) -> TileIndex:
    """
    Wall off every Floor tile the start cannot reach and find the exit spot.

    Reachability is an 8-connected weighted flood from ``start_idx`` capped
    at ``config.DIJKSTRA_MAX_DEPTH``; Floor beyond the cap counts as
    unreachable too.

    Returns:
        The lowest index among the reachable Floor tiles farthest from the
        start. ``start_idx`` itself when nothing else is reachable.
    """
    game_map.populate_blocked()
    distances = dijkstra_map(game_map, [start_idx])

    floor = game_map.tiles == TileTypeID.FLOOR
    unreachable = floor & np.isinf(distances)
    game_map.tiles[unreachable] = TileTypeID.WALL
    game_map.populate_blocked()

    pruned = int(np.count_nonzero(unreachable))
    if pruned:
        logger.debug(f"Culled {pruned} unreachable floor tiles")

    candidates = np.where(floor & ~unreachable, distances, -1.0)
    if candidates.max() <= 0.0:
        return start_idx
    return int(np.argmax(candidates))


def place_exit(game_map: Map, start_idx: TileIndex) -> TileIndex:
    """Cull, then put the down stairs on the most distant tile.

    Raises:
        ValueError: If no tile other than the start is reachable.
    """
    exit_idx = cull_unreachables_and_return_most_distant_tile(game_map, start_idx)
    if exit_idx == start_idx:
        raise ValueError("Only the start is reachable; no room for the stairs")
    game_map.tiles[exit_idx] = TileTypeID.DOWN_STAIRS
    return exit_idx


def find_nearest_floor(game_map: Map, x: TileCoord, y: TileCoord) -> WorldTilePos:
    """
    Closest Floor tile to ``(x, y)`` by squared distance.

    Ties go to the lowest tile index. Raises ValueError on a map with no
    Floor at all.
    """
    floor_idx = np.flatnonzero(game_map.tiles == TileTypeID.FLOOR)
    if floor_idx.size == 0:
        raise ValueError("Map has no floor tiles")
    fx = floor_idx % game_map.width
    fy = floor_idx // game_map.width
    distances = (fx - x) ** 2 + (fy - y) ** 2
    best = int(floor_idx[np.argmin(distances)])
    return game_map.idx_xy(best)


def walk_left_to_floor(game_map: Map, x: TileCoord, y: TileCoord) -> WorldTilePos:
    """Step left from ``(x, y)`` until a Floor tile; nearest Floor if none."""
    start_x = x
    while x >= 0:
        if game_map.tiles[game_map.xy_idx(x, y)] == TileTypeID.FLOOR:
            return (x, y)
        x -= 1
    return find_nearest_floor(game_map, start_x, y)


# =============================================================================
# SPAWN REGIONS
# =============================================================================


def generate_voronoi_spawn_regions(game_map: Map, rng: RNG) -> SpawnRegions:
    """
    Group interior Floor tiles into blob-shaped spawn regions.

    Tiles are bucketed by the cellular noise value at their position, so
    every region is a set of tiles sharing one noise cell. Border tiles are
    never included.
    """
    seed = rng.randint(1, 65536)
    grid = game_map.grid
    ys, xs = np.nonzero(grid[1:-1, 1:-1] == TileTypeID.FLOOR)
    xs = xs + 1
    ys = ys + 1

    values = cellular_noise(
        xs,
        ys,
        seed,
        frequency=config.SPAWN_NOISE_FREQUENCY,
        distance=DistanceAlgorithm.MANHATTAN,
    )
    # Truncation toward zero, so (-1, 1) both land in bucket 0.
    buckets = (values * config.SPAWN_NOISE_SCALE).astype(np.int64)

    regions: defaultdict[int, list[TileIndex]] = defaultdict(list)
    for x, y, bucket in zip(xs.tolist(), ys.tolist(), buckets.tolist()):
        regions[bucket].append(y * game_map.width + x)
    return dict(regions)


# =============================================================================
# PAINTING
# =============================================================================


def _apply_brush(
    game_map: Map, brush_size: int, x_center: TileCoord, y_center: TileCoord
) -> int:
    half = brush_size // 2
    x0 = max(1, x_center - half)
    x1 = min(game_map.width - 1, x_center - half + brush_size)
    y0 = max(1, y_center - half)
    y1 = min(game_map.height - 1, y_center - half + brush_size)
    if x0 >= x1 or y0 >= y1:
        return 0

    area = game_map.grid[y0:y1, x0:x1]
    walls = area == TileTypeID.WALL
    area[walls] = TileTypeID.FLOOR
    return int(np.count_nonzero(walls))


def paint(
    game_map: Map,
    symmetry: Symmetry,
    brush_size: int,
    x: TileCoord,
    y: TileCoord,
) -> int:
    """
    Turn Wall into Floor under a square brush, mirrored per ``symmetry``.

    The brush covers ``brush_size x brush_size`` tiles starting
    ``brush_size // 2`` up and left of ``(x, y)``. Painting never touches the
    map border.

    Returns:
        How many Wall tiles became Floor.
    """
    center_x = game_map.width // 2
    center_y = game_map.height // 2
    dist_x = abs(x - center_x)
    dist_y = abs(y - center_y)

    match symmetry:
        case Symmetry.NONE:
            spots = [(x, y)]
        case Symmetry.HORIZONTAL:
            spots = [(center_x - dist_x, y), (center_x + dist_x, y)]
        case Symmetry.VERTICAL:
            spots = [(x, center_y - dist_y), (x, center_y + dist_y)]
        case Symmetry.BOTH:
            spots = [
                (center_x - dist_x, y),
                (center_x + dist_x, y),
                (x, center_y - dist_y),
                (x, center_y + dist_y),
            ]
        case _:
            raise ValueError(f"Unknown symmetry: {symmetry}")

    painted = 0
    # A spot on the mirror axis shows up twice; painting it again is a no-op.
    for spot_x, spot_y in dict.fromkeys(spots):
        painted += _apply_brush(game_map, brush_size, spot_x, spot_y)
    return painted
