"""Dungeon-style map generation with rooms and corridors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect

from . import common
from .base import BaseMapGenerator, MapGenerationError

if TYPE_CHECKING:
    from delve.environment.generators.spawning import Spawner
    from delve.util.rng import RNG


class RoomsAndCorridorsGenerator(BaseMapGenerator):
    """Generates a map with rooms and connecting corridors."""

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        max_rooms: int = 32,
        min_room_size: int = 6,
        max_room_size: int = 9,
        **kwargs: Any,
    ) -> None:
        super().__init__(depth, rng, **kwargs)
        if min_room_size < 1 or max_room_size < min_room_size:
            raise ValueError(
                f"Invalid room size range {min_room_size}..{max_room_size}"
            )
        self.max_rooms = max_rooms
        self.min_room_size = min_room_size
        self.max_room_size = max_room_size

    def _build(self) -> None:
        rooms = self.map.rooms

        for _ in range(self.max_rooms):
            w = self.rng.randint(self.min_room_size, self.max_room_size)
            h = self.rng.randint(self.min_room_size, self.max_room_size)
            if self.map.width - w - 2 < 0 or self.map.height - h - 2 < 0:
                continue

            x = self.rng.randint(0, self.map.width - w - 2)
            y = self.rng.randint(0, self.map.height - h - 2)

            new_room = Rect(x, y, w, h)

            if any(new_room.intersects(other) for other in rooms):
                continue

            common.apply_room_to_map(self.map, new_room)

            if rooms:
                new_x, new_y = new_room.center()
                prev_x, prev_y = rooms[-1].center()
                if bool(self.rng.getrandbits(1)):
                    common.apply_horizontal_tunnel(self.map, prev_x, new_x, prev_y)
                    common.apply_vertical_tunnel(self.map, prev_y, new_y, new_x)
                else:
                    common.apply_vertical_tunnel(self.map, prev_y, new_y, prev_x)
                    common.apply_horizontal_tunnel(self.map, prev_x, new_x, new_y)

            rooms.append(new_room)
            self.take_snapshot()

        if not rooms:
            raise MapGenerationError(
                f"No room fit on a {self.map.width}x{self.map.height} map"
            )

        self.starting_position = rooms[0].center()
        stairs_x, stairs_y = rooms[-1].center()
        if (stairs_x, stairs_y) == self.starting_position:
            # Lone room: stairs go in its far interior corner instead.
            last = rooms[-1]
            stairs_x, stairs_y = last.x2 - 1, last.y2 - 1
            if (stairs_x, stairs_y) == self.starting_position:
                raise MapGenerationError(
                    f"{last} is too small to hold both the start and the stairs"
                )
        self.map.tiles[self.map.xy_idx(stairs_x, stairs_y)] = TileTypeID.DOWN_STAIRS
        self.take_snapshot()

    def spawn_entities(self, spawner: Spawner) -> None:
        """Every room except the first (where the player starts) gets spawns."""
        for room in self.map.rooms[1:]:
            spawner.spawn_room(room, self.depth)
