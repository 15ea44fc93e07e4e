"""Core data structures: the uniform grid, its errors and its sampler."""

from uniform_grid.core.errors import (
    DegenerateAxis,
    GridError,
    GridPersistenceError,
    IndexOutOfRange,
    InvalidConfiguration,
    PointOutOfBounds,
    UnfinalizedGrid,
)
from uniform_grid.core.sampling import UniformSampler, create_sampler
from uniform_grid.core.grid import DimIndex, Point, UniformGrid

__all__ = [
    "UniformGrid",
    "DimIndex",
    "Point",
    "UniformSampler",
    "create_sampler",
    "GridError",
    "InvalidConfiguration",
    "DegenerateAxis",
    "IndexOutOfRange",
    "PointOutOfBounds",
    "UnfinalizedGrid",
    "GridPersistenceError",
]
