"""Wave Function Collapse over chunks cut from a hand-drawn seed map."""

from .builder import WaveFunctionCollapseGenerator
from .constraints import MapChunk, build_patterns, patterns_to_constraints
from .image_loader import SeedImageError, load_rex_map, rex_layers_to_map
from .solver import Solver, WFCContradiction

__all__ = [
    "MapChunk",
    "SeedImageError",
    "Solver",
    "WFCContradiction",
    "WaveFunctionCollapseGenerator",
    "build_patterns",
    "load_rex_map",
    "patterns_to_constraints",
    "rex_layers_to_map",
]
