"""
Default Configuration Constants for uniform grids

This module is the Single Source of Truth (SSOT) for default values.

IMPORTANT Import Policies:
    1. DO NOT use: from uniform_grid.config.defaults import *
    2. DO use explicit imports:
       from uniform_grid.config.defaults import GRID_FILE_SUFFIX
    3. DO NOT define defaults elsewhere. All defaults must be in this file
       (or in defaults.yaml for values that users tune without code changes).
"""

from uniform_grid.config.enums import RoundingMode

# =============================================================================
# Grid Defaults
# =============================================================================

# Number of dimensions when nothing else is given
DEFAULT_DIMENSION_COUNT = 2

# Nodes per axis. Must be >= 2, the stride divides by (N - 1).
DEFAULT_NODES_PER_DIMENSION = 11

# Domain extent per axis
DEFAULT_LOWER_BOUND = 0.0
DEFAULT_UPPER_BOUND = 1.0

# Smallest node count that gives a non-degenerate axis
MIN_NODES_PER_DIMENSION = 2

# Tie-breaking for nearest-node lookups
DEFAULT_ROUNDING_MODE = RoundingMode.HALF_AWAY_FROM_ZERO

# =============================================================================
# Safety Thresholds (warnings only)
# =============================================================================

# Above this total node count finalize allocates large raster tables and
# node_coordinates() becomes expensive
MAX_SAFE_NODE_COUNT = 50_000_000

# Axes with fewer nodes than this give a very coarse interpolation stencil
MIN_RECOMMENDED_NODES = 3

# =============================================================================
# Persistence
# =============================================================================

# Binary grid file suffix
GRID_FILE_SUFFIX = ".gri"

# Current binary layout version
GRID_FORMAT_VERSION = 1

# Versions read_grid_file() understands
SUPPORTED_FORMAT_VERSIONS = (1,)
