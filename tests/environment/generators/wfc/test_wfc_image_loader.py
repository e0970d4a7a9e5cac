"""Tests for decoding REXPaint seed images into maps."""

from __future__ import annotations

from pathlib import Path

import pytest
import tcod.console

from delve import config
from delve.environment.generators.wfc.image_loader import (
    REX_FLOOR,
    REX_WALL,
    SeedImageError,
    load_rex_map,
    rex_layers_to_map,
)
from delve.environment.tile_types import TileTypeID


def make_layer(width: int, height: int, fill: int = REX_WALL) -> tcod.console.Console:
    layer = tcod.console.Console(width, height, order="C")
    layer.ch[:] = fill
    return layer


class TestRexLayersToMap:
    def test_space_is_floor_and_hash_is_wall(self) -> None:
        layer = make_layer(5, 4)
        layer.ch[1:3, 1:4] = REX_FLOOR
        game_map = rex_layers_to_map(2, [layer], width=5, height=4)
        assert game_map.depth == 2
        assert game_map.count(TileTypeID.FLOOR) == 6
        assert game_map.grid[1, 1] == TileTypeID.FLOOR
        assert game_map.grid[0, 0] == TileTypeID.WALL

    def test_other_glyphs_leave_tiles_alone(self) -> None:
        base = make_layer(4, 4, REX_FLOOR)
        overlay = make_layer(4, 4, ord("x"))
        overlay.ch[0, 0] = REX_WALL
        game_map = rex_layers_to_map(1, [base, overlay], width=4, height=4)
        assert game_map.grid[0, 0] == TileTypeID.WALL
        assert game_map.count(TileTypeID.FLOOR) == 15

    def test_later_layers_win(self) -> None:
        base = make_layer(3, 3, REX_FLOOR)
        top = make_layer(3, 3, REX_WALL)
        game_map = rex_layers_to_map(1, [base, top], width=3, height=3)
        assert game_map.count(TileTypeID.FLOOR) == 0

    def test_image_larger_than_map_is_clipped(self) -> None:
        layer = make_layer(10, 10, REX_FLOOR)
        game_map = rex_layers_to_map(1, [layer], width=4, height=3)
        assert game_map.count(TileTypeID.FLOOR) == 12

    def test_image_smaller_than_map_leaves_walls(self) -> None:
        layer = make_layer(2, 2, REX_FLOOR)
        game_map = rex_layers_to_map(1, [layer], width=6, height=5)
        assert game_map.count(TileTypeID.FLOOR) == 4

    def test_rejects_fortran_ordered_layers(self) -> None:
        layer = tcod.console.Console(5, 3, order="F")
        with pytest.raises(ValueError):
            rex_layers_to_map(1, [layer], width=5, height=3)


class TestLoadRexMap:
    def test_bundled_seed_image(self) -> None:
        game_map = load_rex_map(1)
        assert (game_map.width, game_map.height) == (
            config.MAP_WIDTH,
            config.MAP_HEIGHT,
        )
        assert game_map.count(TileTypeID.FLOOR) > 0
        assert (game_map.grid[0, :] == TileTypeID.WALL).all()
        assert (game_map.grid[:, 0] == TileTypeID.WALL).all()

    def test_saved_image_round_trip(self, tmp_path: Path) -> None:
        layer = make_layer(12, 6)
        layer.ch[2, 3:9] = REX_FLOOR
        path = tmp_path / "seed.xp"
        tcod.console.save_xp(path, [layer])

        game_map = load_rex_map(1, path)
        assert game_map.count(TileTypeID.FLOOR) == 6
        assert (game_map.grid[2, 3:9] == TileTypeID.FLOOR).all()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SeedImageError, match="not found"):
            load_rex_map(1, tmp_path / "missing.xp")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.xp"
        path.write_bytes(b"")
        with pytest.raises(SeedImageError, match="empty"):
            load_rex_map(1, path)

    def test_decoded_at_requested_size(self, tmp_path: Path) -> None:
        layer = make_layer(12, 6, REX_FLOOR)
        path = tmp_path / "seed.xp"
        tcod.console.save_xp(path, [layer])

        game_map = load_rex_map(1, path, width=21, height=14)
        assert (game_map.width, game_map.height) == (21, 14)
        assert game_map.count(TileTypeID.FLOOR) == 12 * 6
        assert (game_map.grid[6:, :] == TileTypeID.WALL).all()

    def test_bundled_seed_cropped(self) -> None:
        full = load_rex_map(1)
        cropped = load_rex_map(1, width=35, height=28)
        assert (cropped.width, cropped.height) == (35, 28)
        assert (cropped.grid == full.grid[:28, :35]).all()

    def test_unparseable_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def bad_header(*args, **kwargs):
            raise MemoryError("layer too large")

        path = tmp_path / "garbled.xp"
        path.write_bytes(b"\x1f\x8b garbage")
        monkeypatch.setattr(tcod.console, "load_xp", bad_header)
        with pytest.raises(SeedImageError, match="Could not read") as excinfo:
            load_rex_map(1, path)
        assert isinstance(excinfo.value.__cause__, MemoryError)
