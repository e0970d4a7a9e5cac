"""
Tile type system for generated levels using the flyweight pattern.

This module defines:
- `TileTypeID`: The closed set of tile types a level can contain. `Map`
  stores a flat NumPy array of these IDs (one byte per tile).
- `TileTypeData`: The intrinsic properties of a *type* of tile (walkable,
  transparent, glyph). These are the flyweight objects, stored in a lookup
  table indexed by `TileTypeID`.
- Helper functions to efficiently get maps of specific properties (e.g. a
  boolean map of all walkable tiles) from a `TileTypeID` array. These are what
  the flood fills and the debug renderer consume.

`DEBUG_MARKER` tiles carry a per-tile glyph. The glyph is not part of the
flyweight; `Map` keeps it in `Map.debug_glyphs` keyed by tile index.
"""

from enum import IntEnum

import numpy as np


class TileTypeID(IntEnum):
    """Integer ids stored in a Map's tile buffer."""

    WALL = 0
    FLOOR = 1
    VISITED_FLOOR = 2
    DOWN_STAIRS = 3
    DEBUG_MARKER = 4


# Defines the intrinsic data for a *type* of tile (flyweight).
TileTypeData = np.dtype(
    [
        ("walkable", bool),
        ("transparent", bool),  # FOV/line-of-sight
        ("ch", np.int32),  # Character code used by the ASCII dump (e.g., ord('#'))
        ("display_name", "U32"),  # Human-readable name (max 32 chars)
    ]
)


def make_tile_type_data(
    *,  # Forces keyword arguments - prevents bugs from wrong parameter order
    walkable: bool,
    transparent: bool,
    glyph: str,
    display_name: str,
) -> np.ndarray:  # Returns an instance of TileTypeData
    """
    Helper function to create a TileTypeData instance.

    Args:
        walkable: Can actors walk through this type of tile?
        transparent: Is this tile see-through for FOV?
        glyph: Single character used when dumping a map as text.
        display_name: Human-readable name (e.g., "Wall", "Down Stairs").

    Returns:
        A numpy array structured with the TileTypeData dtype.
    """
    if len(glyph) != 1:
        raise ValueError(f"Tile glyph must be a single character, got {glyph!r}")
    return np.array(
        (walkable, transparent, ord(glyph), display_name), dtype=TileTypeData
    )


# Lookup table indexed by TileTypeID. Order must match the enum values.
_TILE_TYPE_TABLE = np.array(
    [
        make_tile_type_data(
            walkable=False, transparent=False, glyph="#", display_name="Wall"
        ),
        make_tile_type_data(
            walkable=True, transparent=True, glyph=".", display_name="Floor"
        ),
        make_tile_type_data(
            walkable=True, transparent=True, glyph=",", display_name="Visited Floor"
        ),
        make_tile_type_data(
            walkable=True, transparent=True, glyph=">", display_name="Down Stairs"
        ),
        make_tile_type_data(
            walkable=True, transparent=True, glyph="?", display_name="Debug Marker"
        ),
    ],
    dtype=TileTypeData,
)


def get_walkable_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """Boolean array, same shape as the input, True where tiles are walkable."""
    return _TILE_TYPE_TABLE["walkable"][tile_type_ids_map]


def get_glyph(tile_type_id: int) -> str:
    """Character used for ``tile_type_id`` in text dumps."""
    return chr(int(_TILE_TYPE_TABLE["ch"][tile_type_id]))
