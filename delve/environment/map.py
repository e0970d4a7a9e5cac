from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from delve import config
from delve.environment import tile_types
from delve.environment.tile_types import TileTypeID
from delve.types import TileCoord, TileIndex, WorldTilePos
from delve.util.coordinates import Rect

# Offsets for the 8-connected neighbourhood, orthogonals first.
_ORTHOGONAL_OFFSETS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL_OFFSETS: tuple[tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))


@dataclass(eq=False)
class Map:
    """A generated level.

    Tiles live in a flat buffer indexed by ``y * width + x``. The boolean
    buffers ``revealed``, ``visible`` and ``blocked`` run parallel to it.
    Use ``grid`` for a ``(height, width)`` view when vectorising.
    """

    width: TileCoord
    height: TileCoord
    depth: int
    tiles: np.ndarray
    revealed: np.ndarray
    visible: np.ndarray
    blocked: np.ndarray
    # Occupants per tile. Rebuilt by the game's indexing step every turn.
    tile_content: list[list[Any]] = field(default_factory=list)
    bloodstains: set[TileIndex] = field(default_factory=set)
    rooms: list[Rect] = field(default_factory=list)
    # Glyphs for DEBUG_MARKER tiles, keyed by tile index.
    debug_glyphs: dict[TileIndex, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Map dimensions must be positive, got {self.width}x{self.height}"
            )
        count = self.width * self.height
        for name in ("tiles", "revealed", "visible", "blocked"):
            buffer = getattr(self, name)
            if buffer.shape != (count,):
                raise ValueError(
                    f"Map buffer '{name}' has shape {buffer.shape}, expected ({count},)"
                )
        if not self.tile_content:
            self.tile_content = [[] for _ in range(count)]
        elif len(self.tile_content) != count:
            raise ValueError(
                f"tile_content has {len(self.tile_content)} entries, expected {count}"
            )

    @classmethod
    def new(
        cls,
        depth: int,
        width: TileCoord = config.MAP_WIDTH,
        height: TileCoord = config.MAP_HEIGHT,
        fill_tile: TileTypeID = TileTypeID.WALL,
    ) -> Map:
        """Create a map filled with ``fill_tile`` and nothing revealed."""
        count = width * height
        return cls(
            width=width,
            height=height,
            depth=depth,
            tiles=np.full(count, fill_tile, dtype=np.uint8),
            revealed=np.zeros(count, dtype=bool),
            visible=np.zeros(count, dtype=bool),
            blocked=np.zeros(count, dtype=bool),
        )

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    @property
    def grid(self) -> np.ndarray:
        """A ``(height, width)`` view of ``tiles``. Writes go through."""
        return self.tiles.reshape(self.height, self.width)

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def xy_idx(self, x: TileCoord, y: TileCoord) -> TileIndex:
        """Flat index of ``(x, y)``. Raises IndexError off the map."""
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Tile ({x}, {y}) is outside a {self.width}x{self.height} map"
            )
        return y * self.width + x

    def idx_xy(self, idx: TileIndex) -> WorldTilePos:
        if not 0 <= idx < self.tile_count:
            raise IndexError(f"Tile index {idx} is outside a {self.tile_count} map")
        return (idx % self.width, idx // self.width)

    def neighbors(self, idx: TileIndex, diagonal: bool = True) -> list[TileIndex]:
        """In-bounds neighbour indices of ``idx``; never wraps across rows."""
        x, y = self.idx_xy(idx)
        offsets = _ORTHOGONAL_OFFSETS
        if diagonal:
            offsets = _ORTHOGONAL_OFFSETS + _DIAGONAL_OFFSETS
        return [
            (y + dy) * self.width + (x + dx)
            for dx, dy in offsets
            if self.in_bounds(x + dx, y + dy)
        ]

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    def populate_blocked(self) -> None:
        """Mark every non-walkable tile (only Wall) as blocked."""
        self.blocked[:] = ~tile_types.get_walkable_map(self.tiles)

    def count(self, tile_type: TileTypeID) -> int:
        return int(np.count_nonzero(self.tiles == tile_type))

    def set_debug_marker(self, idx: TileIndex, glyph: str) -> None:
        if len(glyph) != 1:
            raise ValueError(f"Debug glyph must be a single character, got {glyph!r}")
        self.tiles[idx] = TileTypeID.DEBUG_MARKER
        self.debug_glyphs[idx] = glyph

    def reveal_all(self) -> None:
        self.revealed[:] = True

    # -------------------------------------------------------------------------
    # Copies and dumps
    # -------------------------------------------------------------------------

    def copy(self) -> Map:
        """Independent deep copy; mutating it never touches this map."""
        return Map(
            width=self.width,
            height=self.height,
            depth=self.depth,
            tiles=self.tiles.copy(),
            revealed=self.revealed.copy(),
            visible=self.visible.copy(),
            blocked=self.blocked.copy(),
            tile_content=[list(content) for content in self.tile_content],
            bloodstains=set(self.bloodstains),
            rooms=[Rect.from_bounds(r.x1, r.y1, r.x2, r.y2) for r in self.rooms],
            debug_glyphs=dict(self.debug_glyphs),
        )

    def to_ascii(self) -> str:
        """Render the tiles as text, one row per line."""
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                idx = y * self.width + x
                tile = int(self.tiles[idx])
                if tile == TileTypeID.DEBUG_MARKER:
                    row.append(self.debug_glyphs.get(idx, tile_types.get_glyph(tile)))
                else:
                    row.append(tile_types.get_glyph(tile))
            rows.append("".join(row))
        return "\n".join(rows)
