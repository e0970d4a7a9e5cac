"""Tests for the Map container: indexing, derived buffers and copies."""

from __future__ import annotations

import numpy as np
import pytest

from delve import config
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect


class TestMapNew:
    def test_defaults_to_configured_size(self) -> None:
        game_map = Map.new(1)
        assert (game_map.width, game_map.height) == (
            config.MAP_WIDTH,
            config.MAP_HEIGHT,
        )
        assert game_map.tile_count == config.MAP_WIDTH * config.MAP_HEIGHT

    def test_starts_as_solid_hidden_wall(self) -> None:
        game_map = Map.new(3, 10, 6)
        assert game_map.depth == 3
        assert game_map.count(TileTypeID.WALL) == 60
        assert not game_map.revealed.any()
        assert not game_map.visible.any()
        assert not game_map.blocked.any()
        assert len(game_map.tile_content) == 60
        assert game_map.rooms == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            Map.new(1, 0, 10)

    def test_rejects_mismatched_buffers(self) -> None:
        with pytest.raises(ValueError, match="revealed"):
            Map(
                width=4,
                height=4,
                depth=1,
                tiles=np.zeros(16, dtype=np.uint8),
                revealed=np.zeros(15, dtype=bool),
                visible=np.zeros(16, dtype=bool),
                blocked=np.zeros(16, dtype=bool),
            )


class TestIndexing:
    def test_xy_idx_round_trips(self) -> None:
        game_map = Map.new(1, 10, 6)
        assert game_map.xy_idx(3, 2) == 23
        assert game_map.idx_xy(23) == (3, 2)

    def test_xy_idx_out_of_bounds(self) -> None:
        game_map = Map.new(1, 10, 6)
        with pytest.raises(IndexError):
            game_map.xy_idx(10, 0)
        with pytest.raises(IndexError):
            game_map.idx_xy(60)

    def test_grid_is_a_writable_view(self) -> None:
        game_map = Map.new(1, 10, 6)
        game_map.grid[2, 3] = TileTypeID.FLOOR
        assert game_map.tiles[23] == TileTypeID.FLOOR

    def test_neighbors_never_wrap_rows(self) -> None:
        """The last tile of a row is not a neighbour of the next row's first."""
        game_map = Map.new(1, 10, 6)
        right_edge = game_map.xy_idx(9, 2)
        neighbors = game_map.neighbors(right_edge)
        assert game_map.xy_idx(0, 3) not in neighbors
        assert len(neighbors) == 5

    def test_corner_has_three_neighbors(self) -> None:
        game_map = Map.new(1, 10, 6)
        assert sorted(game_map.neighbors(0)) == [1, 10, 11]
        assert sorted(game_map.neighbors(0, diagonal=False)) == [1, 10]


class TestDerivedState:
    def test_populate_blocked_follows_walls(self) -> None:
        game_map = Map.new(1, 5, 5)
        game_map.grid[2, 2] = TileTypeID.FLOOR
        game_map.grid[2, 3] = TileTypeID.DOWN_STAIRS
        game_map.populate_blocked()
        assert game_map.blocked.sum() == 23
        assert not game_map.blocked[game_map.xy_idx(2, 2)]
        assert not game_map.blocked[game_map.xy_idx(3, 2)]

    def test_debug_markers_are_open(self) -> None:
        game_map = Map.new(1, 4, 3)
        game_map.set_debug_marker(5, "N")
        game_map.populate_blocked()
        assert not game_map.blocked[5]
        assert game_map.blocked.sum() == 11

    def test_debug_marker_keeps_glyph(self) -> None:
        game_map = Map.new(1, 4, 3)
        game_map.set_debug_marker(5, "N")
        assert game_map.tiles[5] == TileTypeID.DEBUG_MARKER
        assert game_map.to_ascii().splitlines()[1] == "#N##"

    def test_debug_marker_rejects_long_glyph(self) -> None:
        game_map = Map.new(1, 4, 3)
        with pytest.raises(ValueError):
            game_map.set_debug_marker(5, "NS")

    def test_to_ascii(self) -> None:
        game_map = Map.new(1, 4, 3)
        game_map.grid[1, 1:3] = TileTypeID.FLOOR
        game_map.grid[1, 2] = TileTypeID.DOWN_STAIRS
        assert game_map.to_ascii() == "####\n#.>#\n####"


class TestCopy:
    def test_copy_is_independent(self) -> None:
        game_map = Map.new(1, 6, 4)
        game_map.rooms.append(Rect(0, 0, 3, 2))
        game_map.bloodstains.add(3)
        game_map.tile_content[2].append("rat")

        clone = game_map.copy()
        clone.tiles[0] = TileTypeID.FLOOR
        clone.revealed[0] = True
        clone.rooms.append(Rect(1, 1, 1, 1))
        clone.bloodstains.add(4)
        clone.tile_content[2].append("bat")

        assert game_map.tiles[0] == TileTypeID.WALL
        assert not game_map.revealed[0]
        assert game_map.rooms == [Rect(0, 0, 3, 2)]
        assert game_map.bloodstains == {3}
        assert game_map.tile_content[2] == ["rat"]

    def test_copy_matches_source(self) -> None:
        game_map = Map.new(2, 6, 4)
        game_map.grid[1, 1:5] = TileTypeID.FLOOR
        clone = game_map.copy()
        assert clone.depth == 2
        assert np.array_equal(clone.tiles, game_map.tiles)
