"""Picks a generator for a level."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from delve.util.rng import RNG

from .base import BaseMapGenerator
from .cellular_automata import CellularAutomataGenerator
from .dla import DLAGenerator
from .drunkard import DrunkardsWalkGenerator
from .dungeon import RoomsAndCorridorsGenerator
from .maze import MazeGenerator
from .voronoi import VoronoiCellGenerator
from .wfc import WaveFunctionCollapseGenerator

GeneratorFactory: TypeAlias = Callable[[int, RNG], BaseMapGenerator]

# Every generator profile by name. Order matters: random_builder rolls an
# index into this table.
GENERATOR_FACTORIES: dict[str, GeneratorFactory] = {
    "rooms_and_corridors": RoomsAndCorridorsGenerator,
    "cellular_automata": CellularAutomataGenerator,
    "drunkard_open_area": DrunkardsWalkGenerator.open_area,
    "drunkard_open_halls": DrunkardsWalkGenerator.open_halls,
    "drunkard_winding_passages": DrunkardsWalkGenerator.winding_passages,
    "drunkard_fat_passages": DrunkardsWalkGenerator.fat_passages,
    "drunkard_fearful_symmetry": DrunkardsWalkGenerator.fearful_symmetry,
    "maze": MazeGenerator,
    "dla_walk_inwards": DLAGenerator.walk_inwards,
    "dla_walk_outwards": DLAGenerator.walk_outwards,
    "dla_central_attractor": DLAGenerator.central_attractor,
    "dla_insectoid": DLAGenerator.insectoid,
    "voronoi_pythagoras": VoronoiCellGenerator.pythagoras,
    "voronoi_manhattan": VoronoiCellGenerator.manhattan,
    "voronoi_chebyshev": VoronoiCellGenerator.chebyshev,
    "wave_function_collapse": WaveFunctionCollapseGenerator,
}


def choose_generator(rng: RNG) -> str:
    """Roll a generator name from ``GENERATOR_FACTORIES``."""
    names = list(GENERATOR_FACTORIES)
    return names[rng.randint(1, len(names)) - 1]


def random_builder(
    depth: int, rng: RNG, *, choice: str | None = None
) -> BaseMapGenerator:
    """
    Create a fresh, unbuilt generator for ``depth``.

    Args:
        depth: Dungeon depth of the level.
        rng: Rolls the generator (unless ``choice`` is given) and is then
            handed to it, so the same stream state gives the same level.
        choice: Name from ``GENERATOR_FACTORIES`` to skip the roll.

    Raises:
        ValueError: If ``choice`` is not a known generator name.
    """
    if choice is None:
        choice = choose_generator(rng)
    elif choice not in GENERATOR_FACTORIES:
        raise ValueError(
            f"Unknown generator {choice!r}; expected one of "
            f"{', '.join(GENERATOR_FACTORIES)}"
        )
    return GENERATOR_FACTORIES[choice](depth, rng)
