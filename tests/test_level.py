"""End-to-end tests for generating a level from a depth and a seed."""

from __future__ import annotations

import numpy as np
import pytest

from delve.environment.generators.selector import choose_generator
from delve.environment.tile_types import TileTypeID
from delve.level import generate_level
from delve.util.rng import RNGProvider
from tests.helpers import reachable_tiles

# The profiles that finish quickly on a full-size map.
FAST_GENERATORS = [
    "rooms_and_corridors",
    "cellular_automata",
    "drunkard_open_area",
    "maze",
    "voronoi_pythagoras",
]


class TestGenerateLevel:
    @pytest.mark.parametrize("name", FAST_GENERATORS)
    def test_level_is_playable(self, name: str) -> None:
        level = generate_level(2, seed="dungeon1", generator=name)
        game_map = level.map
        assert game_map.depth == 2
        assert game_map.count(TileTypeID.DOWN_STAIRS) == 1

        reachable = reachable_tiles(game_map, level.starting_position)
        stairs = int(np.flatnonzero(game_map.tiles == TileTypeID.DOWN_STAIRS)[0])
        assert stairs in reachable

    def test_generator_name_is_class_name(self) -> None:
        level = generate_level(1, seed=1, generator="maze")
        assert level.generator_name == "MazeGenerator"

    def test_same_seed_same_level(self) -> None:
        first = generate_level(3, seed="abc")
        second = generate_level(3, seed="abc")
        assert first.generator_name == second.generator_name
        assert np.array_equal(first.map.tiles, second.map.tiles)
        assert first.starting_position == second.starting_position
        assert first.spawn_points == second.spawn_points

    def test_depth_changes_the_level(self) -> None:
        first = generate_level(1, seed="abc", generator="cellular_automata")
        second = generate_level(2, seed="abc", generator="cellular_automata")
        assert not np.array_equal(first.map.tiles, second.map.tiles)

    def test_forcing_the_rolled_generator_changes_nothing(self) -> None:
        """Selection draws from its own stream, so carving never sees it."""
        name = choose_generator(RNGProvider(77).get("map.select.4"))
        rolled = generate_level(4, seed=77)
        forced = generate_level(4, seed=77, generator=name)
        assert np.array_equal(rolled.map.tiles, forced.map.tiles)
        assert rolled.spawn_points == forced.spawn_points

    def test_rooms_become_spawn_points(self) -> None:
        level = generate_level(5, seed="rooms", generator="rooms_and_corridors")
        assert level.spawner.rooms
        assert level.spawner.regions == []
        for idx in level.spawn_points:
            assert level.map.tiles[idx] == TileTypeID.FLOOR

    def test_regions_become_spawn_points(self) -> None:
        level = generate_level(5, seed="caves", generator="cellular_automata")
        assert level.spawner.regions
        assert level.spawner.rooms == []
        assert len(level.spawn_points) == len(set(level.spawn_points))
        for idx in level.spawn_points:
            assert level.map.tiles[idx] == TileTypeID.FLOOR

    def test_map_is_owned_by_caller(self) -> None:
        level = generate_level(1, seed=5, generator="maze")
        level.map.tiles[:] = TileTypeID.WALL
        again = generate_level(1, seed=5, generator="maze")
        assert again.map.count(TileTypeID.FLOOR) > 0

    def test_unknown_generator(self) -> None:
        with pytest.raises(ValueError):
            generate_level(1, seed=1, generator="nope")
