from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
import tcod.path

from delve import config

if TYPE_CHECKING:
    from delve.environment.map import Map

from delve.types import TileIndex

# tcod's Dijkstra works on integer costs, so step costs are scaled by this
# factor and distances are divided back down afterwards.
_COST_SCALE = 100


def dijkstra_map(
    game_map: Map,
    starts: Iterable[TileIndex],
    max_depth: float = config.DIJKSTRA_MAX_DEPTH,
) -> np.ndarray:
    """
    Computes the weighted distance from the nearest start to every tile.

    Movement is 8-connected over tiles that are not ``blocked``, with the
    orthogonal and diagonal step costs from config. Call
    ``game_map.populate_blocked()`` first if the tiles have changed.

    Args:
        game_map: The map to flood. Only ``blocked`` is consulted.
        starts: Flat indices the flood fill starts from (distance 0).
        max_depth: Tiles farther than this are reported as unreachable.

    Returns:
        A flat float array of length ``width * height`` holding the distance
        of each tile, or ``np.inf`` where the tile was not reached.
    """
    cost = (~game_map.blocked).astype(np.int32).reshape(
        game_map.height, game_map.width
    )
    unreached = np.iinfo(np.int32).max
    distance = np.full(cost.shape, unreached, dtype=np.int32)
    for idx in starts:
        x, y = game_map.idx_xy(idx)
        distance[y, x] = 0

    distance = tcod.path.dijkstra2d(
        distance,
        cost,
        cardinal=round(config.ORTHOGONAL_STEP_COST * _COST_SCALE),
        diagonal=round(config.DIAGONAL_STEP_COST * _COST_SCALE),
        out=distance,
    )

    result = distance.astype(np.float64).ravel() / _COST_SCALE
    result[distance.ravel() == unreached] = np.inf
    result[result > max_depth] = np.inf
    return result
