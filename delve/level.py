"""One call from a depth and a seed to a finished level."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from delve.environment.generators.selector import choose_generator, random_builder
from delve.environment.generators.spawning import (
    RecordingSpawner,
    pick_spawn_points,
    room_tiles,
)
from delve.environment.map import Map
from delve.types import RandomSeed, TileIndex, WorldTilePos
from delve.util.rng import RNGProvider

logger = logging.getLogger(__name__)


@dataclass
class GeneratedLevel:
    """Everything the game needs to load a freshly generated level.

    Attributes:
        map: The finished map. The caller owns it outright.
        starting_position: Floor tile the player starts on.
        snapshots: Map copies recorded during generation, oldest first.
        generator_name: Class name of the generator that built the level.
        spawner: The room and region hints the generator handed out.
        spawn_points: Tiles chosen for entity spawns from those hints.
    """

    map: Map
    starting_position: WorldTilePos
    snapshots: list[Map]
    generator_name: str
    spawner: RecordingSpawner
    spawn_points: list[TileIndex] = field(default_factory=list)


def generate_level(
    depth: int,
    seed: RandomSeed = None,
    *,
    generator: str | None = None,
) -> GeneratedLevel:
    """
    Pick a generator for ``depth``, build the level and collect spawn hints.

    Generator selection, carving and spawn placement each draw from their
    own stream derived from ``(seed, depth)``, so forcing a ``generator``
    does not change how that generator carves.

    Args:
        depth: Dungeon depth of the level.
        seed: Master seed. None gives a different level every call.
        generator: Name from ``GENERATOR_FACTORIES`` to skip the random pick.
    """
    provider = RNGProvider(seed)
    select_rng = provider.get(f"map.select.{depth}")
    build_rng = provider.get(f"map.build.{depth}")
    spawn_rng = provider.get(f"map.spawn.{depth}")

    name = generator if generator is not None else choose_generator(select_rng)
    builder = random_builder(depth, build_rng, choice=name)
    builder.build_map()

    game_map = builder.get_map()
    spawner = RecordingSpawner()
    builder.spawn_entities(spawner)

    spawn_points: list[TileIndex] = []
    for room, room_depth in spawner.rooms:
        area = room_tiles(game_map, room)
        spawn_points.extend(pick_spawn_points(area, room_depth, spawn_rng))
    for area, region_depth in spawner.regions:
        spawn_points.extend(pick_spawn_points(area, region_depth, spawn_rng))

    logger.info(
        f"Depth {depth} generated by {builder.name}: start "
        f"{builder.get_starting_position()}, {len(spawn_points)} spawn points"
    )
    return GeneratedLevel(
        map=game_map,
        starting_position=builder.get_starting_position(),
        snapshots=builder.get_snapshot_history(),
        generator_name=builder.name,
        spawner=spawner,
        spawn_points=spawn_points,
    )
