"""Uniform D-dimensional grids

Discretizes a bounded continuous space into a uniform lattice of nodes and
converts between continuous coordinates, per-axis dimension indices and flat
indices.

Key features:
- Mixed-radix flat indexing with axis 0 varying fastest
- Nearest-node and bottom-left (cell) lookups with boundary clamping
- Boundary-aware neighborhood and interpolation-stencil enumeration
- YAML configuration and versioned binary grid files

Version: 1.0
"""

__version__ = "1.0"

from uniform_grid.core.errors import (
    DegenerateAxis,
    GridError,
    GridPersistenceError,
    IndexOutOfRange,
    InvalidConfiguration,
    PointOutOfBounds,
    UnfinalizedGrid,
)
from uniform_grid.core.grid import UniformGrid
from uniform_grid.core.sampling import create_sampler
from uniform_grid.config import GridConfig, RoundingMode, create_grid, load_grid_config
from uniform_grid.io import load_grid, save_grid

__all__ = [
    "__version__",
    # Core
    "UniformGrid",
    "create_sampler",
    # Errors
    "GridError",
    "InvalidConfiguration",
    "DegenerateAxis",
    "IndexOutOfRange",
    "PointOutOfBounds",
    "UnfinalizedGrid",
    "GridPersistenceError",
    # Configuration
    "GridConfig",
    "RoundingMode",
    "create_grid",
    "load_grid_config",
    # Persistence
    "load_grid",
    "save_grid",
]
