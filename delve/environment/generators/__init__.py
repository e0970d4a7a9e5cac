"""Map generation algorithms for Delve.

Every generator implements the BaseMapGenerator contract:
- RoomsAndCorridorsGenerator: Classic dungeon-style rooms and corridors
- CellularAutomataGenerator: Smoothed random noise caves
- DrunkardsWalkGenerator: Caves dug by random walkers (5 profiles)
- DLAGenerator: Diffusion-limited aggregation (4 profiles)
- MazeGenerator: Recursive backtracker maze
- VoronoiCellGenerator: Voronoi diagram cells (3 distance metrics)
- WaveFunctionCollapseGenerator: Chunks cut from a hand-drawn seed map

Use random_builder() to pick one for a depth.
"""

from .base import BaseMapGenerator, MapGenerationError, SnapshotRecorder
from .cellular_automata import CellularAutomataGenerator
from .common import Symmetry
from .dla import DLAGenerator
from .drunkard import DrunkardsWalkGenerator
from .dungeon import RoomsAndCorridorsGenerator
from .maze import MazeGenerator
from .selector import GENERATOR_FACTORIES, choose_generator, random_builder
from .spawning import RecordingSpawner, Spawner, pick_spawn_points
from .voronoi import VoronoiCellGenerator
from .wfc import SeedImageError, WaveFunctionCollapseGenerator, WFCContradiction

__all__ = [
    "GENERATOR_FACTORIES",
    "BaseMapGenerator",
    "CellularAutomataGenerator",
    "DLAGenerator",
    "DrunkardsWalkGenerator",
    "MapGenerationError",
    "MazeGenerator",
    "RecordingSpawner",
    "RoomsAndCorridorsGenerator",
    "SeedImageError",
    "SnapshotRecorder",
    "Spawner",
    "Symmetry",
    "VoronoiCellGenerator",
    "WFCContradiction",
    "WaveFunctionCollapseGenerator",
    "choose_generator",
    "pick_spawn_points",
    "random_builder",
]
