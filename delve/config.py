"""
Configuration constants.

Centralizes the magic numbers used by level generation. Organized by
functional area for easy maintenance.
"""

import sys
from pathlib import Path

# =============================================================================
# GENERAL
# =============================================================================

PACKAGE_ROOT_PATH = Path(__file__).resolve().parent

# RANDOM_SEED = None
RANDOM_SEED = "dungeon1"

# Test environment detection
IS_TEST_ENVIRONMENT = "pytest" in sys.modules

# =============================================================================
# MAP DIMENSIONS
# =============================================================================

MAP_WIDTH = 80
MAP_HEIGHT = 43

# =============================================================================
# MAP GENERATION
# =============================================================================

# Record a snapshot of the map at each interesting mutation so the caller can
# replay generation step by step. Off under pytest; tests that check the
# history turn it on per generator.
SHOW_MAPGEN_VISUALIZER = not IS_TEST_ENVIRONMENT

# Flood fills stop expanding past this distance (orthogonal step = 1.0).
DIJKSTRA_MAX_DEPTH = 200.0
ORTHOGONAL_STEP_COST = 1.0
DIAGONAL_STEP_COST = 1.45

# Spawn-region noise
SPAWN_NOISE_FREQUENCY = 0.08
SPAWN_NOISE_SCALE = 15.0

# =============================================================================
# WAVE FUNCTION COLLAPSE
# =============================================================================

WFC_CHUNK_SIZE = 7
WFC_SEED_MAP_PATH = PACKAGE_ROOT_PATH / "resources" / "wfc-demo1.xp"

# None retries a contradicting solve forever. An int caps the number of
# whole-solve attempts before WFCContradiction is raised.
WFC_MAX_ATTEMPTS: int | None = None
