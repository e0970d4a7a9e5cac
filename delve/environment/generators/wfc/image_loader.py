"""Turns hand-drawn REXPaint images into maps.

Only two CP437 codes mean anything: a space is Floor and ``#`` is Wall.
Every other character leaves the tile as it was, and layers are applied in
order so a later layer overrides an earlier one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import tcod.console
from tcod.console import Console

from delve import config
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID

from ..base import MapGenerationError

logger = logging.getLogger(__name__)

REX_FLOOR = 32
REX_WALL = 35


class SeedImageError(MapGenerationError):
    """The seed image is missing, unreadable or empty."""

    pass


def rex_layers_to_map(
    depth: int,
    layers: Iterable[Console],
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
) -> Map:
    """Decode REXPaint layers onto a fresh all-Wall map.

    Layers must be C-ordered consoles (the tcod default), indexed [y, x].
    Cells that fall outside the map are dropped.
    """
    game_map = Map.new(depth, width, height)
    grid = game_map.grid
    for layer in layers:
        if layer.ch.shape != (layer.height, layer.width):
            raise ValueError("Seed image layers must be C-ordered consoles")
        rows = min(height, layer.height)
        cols = min(width, layer.width)
        codes = layer.ch[:rows, :cols]
        target = grid[:rows, :cols]
        target[codes == REX_FLOOR] = TileTypeID.FLOOR
        target[codes == REX_WALL] = TileTypeID.WALL
    return game_map


def load_rex_map(
    depth: int,
    path: str | Path = config.WFC_SEED_MAP_PATH,
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
) -> Map:
    """Load a ``.xp`` file from disk and decode it with ``rex_layers_to_map``.

    The result is ``width`` by ``height`` whatever the size of the image.

    Raises:
        SeedImageError: If the file does not exist, is empty, cannot be
            parsed, or holds no layers.
    """
    path = Path(path)
    if not path.is_file():
        raise SeedImageError(f"Seed image not found: {path}")
    if path.stat().st_size == 0:
        raise SeedImageError(f"Seed image {path} is empty")
    try:
        layers = tcod.console.load_xp(path, order="C")
    except (OSError, RuntimeError, ValueError, EOFError, MemoryError) as exc:
        # A bad layer header can ask for an absurd allocation.
        raise SeedImageError(f"Could not read seed image {path}: {exc}") from exc
    if not layers:
        raise SeedImageError(f"Seed image {path} has no layers")

    logger.debug(
        f"Loaded seed image {path.name}: {len(layers)} layer(s), "
        f"{layers[0].width}x{layers[0].height}"
    )
    return rex_layers_to_map(depth, layers, width, height)
