from __future__ import annotations

# =============================================================================
# TILE-BASED COORDINATE SYSTEMS (Always integers)
# =============================================================================

TileCoord = int  # Always integer tile position

# Map coordinates - absolute positions on the level grid
WorldTileCoord = TileCoord  # Example: x=5, y=3
WorldTilePos = tuple[WorldTileCoord, WorldTileCoord]  # Example: (5, 3)

# Flat index into a Map's tile buffer: y * width + x
TileIndex = int

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Seeds accepted by random.Random and the RNG provider.
RandomSeed = int | str | None

# Cluster id -> tile indices, produced by the spawn-region partitioner.
SpawnRegions = dict[int, list[TileIndex]]
