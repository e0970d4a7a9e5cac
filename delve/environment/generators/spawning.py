"""Spawn hints handed from a finished generator to the game's spawner.

Generators never create entities. When asked to ``spawn_entities`` they push
either room rectangles or groups of floor tile indices into a ``Spawner``
supplied by the game. The helpers here turn those hints into concrete,
distinct spawn tiles so every spawner places entities the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from delve.environment.tile_types import TileTypeID
from delve.types import TileIndex

if TYPE_CHECKING:
    from delve.environment.map import Map
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG

# Baseline for the number of spawns per room or region before depth scaling.
MAX_SPAWNS = 4


class Spawner(Protocol):
    """What a generator needs from the game to hand over spawn hints."""

    def spawn_room(self, room: Rect, depth: int) -> None: ...

    def spawn_region(self, area: list[TileIndex], depth: int) -> None: ...


@dataclass
class RecordingSpawner:
    """A Spawner that only records what it was given."""

    rooms: list[tuple[Rect, int]] = field(default_factory=list)
    regions: list[tuple[list[TileIndex], int]] = field(default_factory=list)

    def spawn_room(self, room: Rect, depth: int) -> None:
        self.rooms.append((room, depth))

    def spawn_region(self, area: list[TileIndex], depth: int) -> None:
        self.regions.append((list(area), depth))


def room_tiles(game_map: Map, room: Rect) -> list[TileIndex]:
    """Floor tile indices strictly inside ``room``."""
    tiles: list[TileIndex] = []
    for y in range(room.y1 + 1, room.y2):
        for x in range(room.x1 + 1, room.x2):
            if not game_map.in_bounds(x, y):
                continue
            idx = game_map.xy_idx(x, y)
            if game_map.tiles[idx] == TileTypeID.FLOOR:
                tiles.append(idx)
    return tiles


def pick_spawn_points(
    area: list[TileIndex],
    depth: int,
    rng: RNG,
    max_spawns: int = MAX_SPAWNS,
) -> list[TileIndex]:
    """
    Choose distinct tiles from ``area`` to place entities on.

    Deeper levels get more spawns: the count is a roll of
    ``1..max_spawns + 3`` shifted by ``depth - 3``, capped by the area size.

    Args:
        area: Candidate tile indices (a room interior or a spawn region).
        depth: Dungeon depth of the level.
        rng: Random stream used for the roll and the sample.
        max_spawns: Baseline upper bound before the depth shift.

    Returns:
        Distinct tile indices, possibly empty.
    """
    if not area:
        return []
    roll = rng.randint(1, max_spawns + 3) + depth - 3
    num_spawns = max(0, min(len(area), roll))
    return rng.sample(area, num_spawns)
