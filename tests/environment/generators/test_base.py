"""Tests for the generator base class and the snapshot recorder."""

from __future__ import annotations

import random

import numpy as np
import pytest

from delve.environment.generators.base import (
    BaseMapGenerator,
    MapGenerationError,
    SnapshotRecorder,
)
from delve.environment.generators.spawning import RecordingSpawner
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID


class CorridorGenerator(BaseMapGenerator):
    """Carves one straight corridor plus an unreachable pocket."""

    def _build(self) -> None:
        grid = self.map.grid
        grid[2, 1:12] = TileTypeID.FLOOR
        grid[5, 1:3] = TileTypeID.FLOOR
        self.take_snapshot()
        self.starting_position = (1, 2)
        self._finish_level(self.map.xy_idx(1, 2))


def make_generator(**kwargs) -> CorridorGenerator:
    return CorridorGenerator(
        1, random.Random(0), map_width=14, map_height=8, **kwargs
    )


class TestSnapshotRecorder:
    def test_disabled_records_nothing(self) -> None:
        recorder = SnapshotRecorder(enabled=False)
        recorder.take(Map.new(1, 4, 4))
        assert len(recorder) == 0
        assert recorder.history == []

    def test_snapshot_is_revealed_copy(self) -> None:
        recorder = SnapshotRecorder(enabled=True)
        game_map = Map.new(1, 4, 4)
        recorder.take(game_map)
        game_map.tiles[0] = TileTypeID.FLOOR

        (snapshot,) = recorder.history
        assert snapshot is not game_map
        assert snapshot.tiles[0] == TileTypeID.WALL
        assert snapshot.revealed.all()
        assert not game_map.revealed.any()

    def test_snapshot_is_read_only(self) -> None:
        recorder = SnapshotRecorder(enabled=True)
        recorder.take(Map.new(1, 4, 4))
        with pytest.raises(ValueError):
            recorder.history[0].tiles[0] = TileTypeID.FLOOR

    def test_history_is_a_copy(self) -> None:
        recorder = SnapshotRecorder(enabled=True)
        recorder.take(Map.new(1, 4, 4))
        recorder.history.clear()
        assert len(recorder) == 1

    def test_clear(self) -> None:
        recorder = SnapshotRecorder(enabled=True)
        recorder.take(Map.new(1, 4, 4))
        recorder.clear()
        assert len(recorder) == 0


class LoneTileGenerator(BaseMapGenerator):
    """Opens a single Floor tile and starts on it."""

    def _build(self) -> None:
        self.map.grid[3, 3] = TileTypeID.FLOOR
        self.starting_position = (3, 3)
        self._finish_level(self.map.xy_idx(3, 3))


class TestBaseMapGenerator:
    def test_name_is_class_name(self) -> None:
        assert make_generator().name == "CorridorGenerator"

    def test_map_sized_before_build(self) -> None:
        generator = make_generator()
        assert (generator.map.width, generator.map.height) == (14, 8)
        assert generator.get_starting_position() == (0, 0)

    def test_finish_level_culls_and_places_stairs(self) -> None:
        generator = make_generator()
        generator.build_map()
        game_map = generator.get_map()

        assert game_map.grid[5, 1] == TileTypeID.WALL
        assert game_map.grid[2, 11] == TileTypeID.DOWN_STAIRS
        assert game_map.count(TileTypeID.DOWN_STAIRS) == 1
        assert generator.get_starting_position() == (1, 2)

    def test_finish_level_builds_spawn_regions(self) -> None:
        generator = make_generator()
        generator.build_map()
        tiles = sorted(idx for area in generator.noise_areas.values() for idx in area)
        game_map = generator.get_map()
        expected = [game_map.xy_idx(x, 2) for x in range(1, 11)]
        assert tiles == expected

    def test_stairs_never_replace_the_start(self) -> None:
        generator = LoneTileGenerator(1, random.Random(0), map_width=8, map_height=8)
        with pytest.raises(MapGenerationError, match="No floor reachable"):
            generator.build_map()
        assert generator.map.count(TileTypeID.DOWN_STAIRS) == 0

    def test_get_map_is_repeatable(self) -> None:
        generator = make_generator()
        generator.build_map()
        first = generator.get_map()
        second = generator.get_map()
        assert first is not second
        assert np.array_equal(first.tiles, second.tiles)
        assert np.array_equal(first.blocked, second.blocked)
        assert first.tiles.tobytes() == generator.map.tiles.tobytes()

    def test_get_map_returns_copy(self) -> None:
        generator = make_generator()
        generator.build_map()
        copy = generator.get_map()
        copy.tiles[:] = TileTypeID.WALL
        assert generator.map.count(TileTypeID.FLOOR) > 0

    def test_snapshots_follow_setting(self) -> None:
        generator = make_generator(record_snapshots=True)
        generator.build_map()
        # One from _build, then one after culling and one after the stairs.
        assert len(generator.get_snapshot_history()) == 3

        quiet = make_generator(record_snapshots=False)
        quiet.build_map()
        assert quiet.get_snapshot_history() == []

    def test_rebuild_starts_fresh(self) -> None:
        generator = make_generator(record_snapshots=True)
        generator.build_map()
        generator.build_map()
        assert len(generator.get_snapshot_history()) == 3
        assert generator.map.count(TileTypeID.DOWN_STAIRS) == 1

    def test_spawn_entities_hands_regions_in_order(self) -> None:
        generator = make_generator()
        generator.build_map()
        spawner = RecordingSpawner()
        generator.spawn_entities(spawner)

        expected = [generator.noise_areas[k] for k in sorted(generator.noise_areas)]
        assert [area for area, _ in spawner.regions] == expected
        assert all(depth == 1 for _, depth in spawner.regions)
        assert spawner.rooms == []

    def test_default_rng(self) -> None:
        generator = CorridorGenerator(1, map_width=14, map_height=8)
        generator.build_map()
        assert generator.get_map().count(TileTypeID.DOWN_STAIRS) == 1
