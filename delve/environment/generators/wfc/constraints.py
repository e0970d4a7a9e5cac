"""Pattern extraction and adjacency rules for Wave Function Collapse.

A seed map is cut into square chunks. Every chunk becomes a pattern, and
two patterns may sit side by side when the Floor tiles on their touching
borders ("exits") line up in at least one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np

from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID

logger = logging.getLogger(__name__)

Pattern: TypeAlias = tuple[int, ...]

# Indices into MapChunk.exits and MapChunk.compatible_with.
NORTH = 0
SOUTH = 1
WEST = 2
EAST = 3

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, WEST: EAST, EAST: WEST}

# Glyphs marking exits when a chunk is drawn into a gallery page.
EXIT_GLYPHS = {NORTH: "N", SOUTH: "S", WEST: "W", EAST: "E"}


@dataclass(frozen=True)
class MapChunk:
    """A pattern together with its exits and the patterns it may touch.

    Attributes:
        pattern: Tile ids in row-major order, ``chunk_size ** 2`` long.
        exits: Per direction, which border slots are Floor.
        has_exits: False when no border tile at all is Floor.
        compatible_with: Per direction, indices of the chunks that may be
            placed on that side of this one.
    """

    pattern: Pattern
    exits: tuple[tuple[bool, ...], ...]
    has_exits: bool
    compatible_with: tuple[tuple[int, ...], ...]


def build_patterns(
    game_map: Map,
    chunk_size: int,
    include_flipped: bool = True,
    dedup: bool = True,
) -> list[Pattern]:
    """
    Slice ``game_map`` into non-overlapping ``chunk_size`` squares.

    Chunks are read column by column (all chunks of the first column of
    chunks, then the next). Tiles past the last whole chunk are ignored.

    Args:
        game_map: The decoded seed image.
        chunk_size: Side length of every pattern.
        include_flipped: Also emit the horizontal, vertical and double flip
            of each chunk, right after the chunk itself.
        dedup: Drop repeated patterns, keeping the first occurrence.

    Returns:
        Flattened patterns, each ``chunk_size ** 2`` tile ids long.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    grid = game_map.grid
    chunks_x = game_map.width // chunk_size
    chunks_y = game_map.height // chunk_size

    patterns: list[Pattern] = []
    for chunk_x in range(chunks_x):
        for chunk_y in range(chunks_y):
            x0, y0 = chunk_x * chunk_size, chunk_y * chunk_size
            chunk = grid[y0 : y0 + chunk_size, x0 : x0 + chunk_size]
            variants = [chunk]
            if include_flipped:
                variants += [chunk[:, ::-1], chunk[::-1, :], chunk[::-1, ::-1]]
            patterns.extend(_as_pattern(v) for v in variants)

    if dedup:
        before = len(patterns)
        patterns = list(dict.fromkeys(patterns))
        logger.debug(f"Pattern de-duplication: {before} -> {len(patterns)} patterns")
    return patterns


def _as_pattern(tiles: np.ndarray) -> Pattern:
    return tuple(int(t) for t in tiles.ravel())


def pattern_exits(pattern: Pattern, chunk_size: int) -> tuple[tuple[bool, ...], ...]:
    """Floor slots along each border, indexed NORTH/SOUTH/WEST/EAST."""
    floor = np.asarray(pattern).reshape(chunk_size, chunk_size) == TileTypeID.FLOOR
    return (
        tuple(bool(v) for v in floor[0, :]),
        tuple(bool(v) for v in floor[-1, :]),
        tuple(bool(v) for v in floor[:, 0]),
        tuple(bool(v) for v in floor[:, -1]),
    )


def patterns_to_constraints(patterns: list[Pattern], chunk_size: int) -> list[MapChunk]:
    """
    Work out which patterns may neighbour which.

    A pattern without a single exit fits next to anything. Otherwise, on
    each side, another pattern fits if this side has no exits or if any
    exit slot lines up with an exit on the other pattern's opposite side.
    """
    all_exits = [pattern_exits(p, chunk_size) for p in patterns]
    all_indices = tuple(range(len(patterns)))

    constraints: list[MapChunk] = []
    for exits, pattern in zip(all_exits, patterns):
        has_exits = any(any(side) for side in exits)
        if not has_exits:
            compatible = (all_indices,) * 4
        else:
            compatible = tuple(
                tuple(
                    j
                    for j, other in enumerate(all_exits)
                    if not any(exits[direction])
                    or any(
                        mine and theirs
                        for mine, theirs in zip(
                            exits[direction], other[OPPOSITE[direction]]
                        )
                    )
                )
                for direction in (NORTH, SOUTH, WEST, EAST)
            )
        constraints.append(
            MapChunk(
                pattern=pattern,
                exits=exits,
                has_exits=has_exits,
                compatible_with=compatible,
            )
        )

    logger.debug(f"Compiled adjacency rules for {len(constraints)} patterns")
    return constraints


def render_pattern_to_map(
    game_map: Map, pattern: Pattern, chunk_size: int, start_x: int, start_y: int
) -> None:
    """Stamp ``pattern`` onto ``game_map`` with its top-left corner at the start."""
    if not (
        game_map.in_bounds(start_x, start_y)
        and game_map.in_bounds(start_x + chunk_size - 1, start_y + chunk_size - 1)
    ):
        raise IndexError(
            f"A {chunk_size}x{chunk_size} chunk at ({start_x}, {start_y}) "
            "does not fit on the map"
        )
    block = np.asarray(pattern, dtype=np.uint8).reshape(chunk_size, chunk_size)
    rows = slice(start_y, start_y + chunk_size)
    cols = slice(start_x, start_x + chunk_size)
    game_map.grid[rows, cols] = block
    game_map.visible.reshape(game_map.height, game_map.width)[rows, cols] = True


def render_chunk_to_map(
    game_map: Map, chunk: MapChunk, chunk_size: int, start_x: int, start_y: int
) -> None:
    """Like ``render_pattern_to_map`` but with every exit marked by a glyph."""
    render_pattern_to_map(game_map, chunk.pattern, chunk_size, start_x, start_y)

    last = chunk_size - 1
    for direction, slots in enumerate(chunk.exits):
        for i, is_exit in enumerate(slots):
            if not is_exit:
                continue
            if direction == NORTH:
                x, y = start_x + i, start_y
            elif direction == SOUTH:
                x, y = start_x + i, start_y + last
            elif direction == WEST:
                x, y = start_x, start_y + i
            else:
                x, y = start_x + last, start_y + i
            game_map.set_debug_marker(game_map.xy_idx(x, y), EXIT_GLYPHS[direction])
