"""Base classes for map generation."""

from __future__ import annotations

import abc
import logging
import random
import time
from typing import TYPE_CHECKING

from delve import config
from delve.environment.map import Map
from delve.environment.tile_types import TileTypeID

from . import common

if TYPE_CHECKING:
    from delve.environment.generators.spawning import Spawner
    from delve.types import SpawnRegions, TileCoord, TileIndex, WorldTilePos
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class MapGenerationError(Exception):
    """Raised when a level cannot be generated at all."""

    pass


class SnapshotRecorder:
    """Append-only log of map copies taken while a level is generated.

    Each snapshot is an independent copy with every tile revealed and its
    buffers made read-only, so replaying the history can never alter it.
    """

    def __init__(self, enabled: bool = config.SHOW_MAPGEN_VISUALIZER) -> None:
        self.enabled = enabled
        self._history: list[Map] = []

    def take(self, game_map: Map) -> None:
        if not self.enabled:
            return
        snapshot = game_map.copy()
        snapshot.reveal_all()
        for buffer in (
            snapshot.tiles,
            snapshot.revealed,
            snapshot.visible,
            snapshot.blocked,
        ):
            buffer.flags.writeable = False
        self._history.append(snapshot)

    def clear(self) -> None:
        self._history.clear()

    @property
    def history(self) -> list[Map]:
        return list(self._history)

    def __len__(self) -> int:
        return len(self._history)


class BaseMapGenerator(abc.ABC):
    """Abstract base class for map generation algorithms.

    A generator owns the map it carves. ``build_map()`` runs the algorithm to
    completion; the accessors then hand out copies. Every generator draws
    its randomness from the single ``rng`` it was constructed with.
    """

    def __init__(
        self,
        depth: int,
        rng: RNG | None = None,
        *,
        map_width: TileCoord = config.MAP_WIDTH,
        map_height: TileCoord = config.MAP_HEIGHT,
        record_snapshots: bool = config.SHOW_MAPGEN_VISUALIZER,
    ) -> None:
        self.depth = depth
        self.rng: RNG = rng if rng is not None else random.Random()
        self.map_width = map_width
        self.map_height = map_height
        self.map = Map.new(depth, map_width, map_height)
        self.starting_position: WorldTilePos = (0, 0)
        self.snapshots = SnapshotRecorder(record_snapshots)
        self.noise_areas: SpawnRegions = {}

    @property
    def name(self) -> str:
        return type(self).__name__

    def build_map(self) -> None:
        """Generate the level from scratch, replacing any previous result."""
        self.map = Map.new(self.depth, self.map_width, self.map_height)
        self.starting_position = (0, 0)
        self.snapshots.clear()
        self.noise_areas = {}

        started = time.perf_counter()
        self._build()
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            f"{self.name} built depth {self.depth} in {elapsed_ms:.1f}ms "
            f"({self.map.count(TileTypeID.FLOOR)} floor tiles, "
            f"{len(self.snapshots)} snapshots)"
        )

    @abc.abstractmethod
    def _build(self) -> None:
        """Run the algorithm, mutating ``self.map`` in place."""
        raise NotImplementedError

    def get_map(self) -> Map:
        return self.map.copy()

    def get_starting_position(self) -> WorldTilePos:
        return self.starting_position

    def get_snapshot_history(self) -> list[Map]:
        return self.snapshots.history

    def take_snapshot(self) -> None:
        self.snapshots.take(self.map)

    def spawn_entities(self, spawner: Spawner) -> None:
        """Hand each spawn region to ``spawner``, in cluster id order."""
        for cluster_id in sorted(self.noise_areas):
            spawner.spawn_region(self.noise_areas[cluster_id], self.depth)

    def _finish_level(self, start_idx: TileIndex) -> None:
        """Cull unreachable floor, place the stairs and build spawn regions.

        Raises:
            MapGenerationError: If nothing but the start itself is reachable,
                leaving no tile for the stairs.
        """
        exit_idx = common.cull_unreachables_and_return_most_distant_tile(
            self.map, start_idx
        )
        self.take_snapshot()
        if exit_idx == start_idx:
            x, y = self.map.idx_xy(start_idx)
            raise MapGenerationError(
                f"No floor reachable from the start at ({x}, {y}) to hold the stairs"
            )

        self.map.tiles[exit_idx] = TileTypeID.DOWN_STAIRS
        self.take_snapshot()

        self.noise_areas = common.generate_voronoi_spawn_regions(self.map, self.rng)
