"""Binary save/load of grid configurations.

A grid file stores only the configuration; derived raster data is rebuilt by
finalize() after loading. Layout (little-endian):

    uint32   format version
    uint32   dimension count D
    uint32   nodes per dimension  x D
    float64  lower bound          x D
    float64  upper bound          x D

File names are derived from a user supplied name by cutting the last path
component at its first '.' and appending '.gri', so "run.dat", "run" and
"run.v2.gri" all map to "run.gri".
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from uniform_grid.config.defaults import (
    GRID_FILE_SUFFIX,
    GRID_FORMAT_VERSION,
    MIN_NODES_PER_DIMENSION,
    SUPPORTED_FORMAT_VERSIONS,
)
from uniform_grid.core.errors import GridPersistenceError, UnfinalizedGrid
from uniform_grid.core.grid import UniformGrid
from uniform_grid.core.sampling import UniformSampler

logger = logging.getLogger(__name__)

_UINT = np.dtype("<u4")
_FLOAT = np.dtype("<f8")


@dataclass
class GridRecord:
    """Decoded content of a grid file."""

    version: int
    nodes_per_dimension: tuple[int, ...]
    lower_bound: tuple[float, ...]
    upper_bound: tuple[float, ...]

    @property
    def dimension_count(self) -> int:
        return len(self.nodes_per_dimension)


def grid_file_path(name: Union[str, Path]) -> Path:
    """Map a user supplied name onto the '.gri' file path.

    Raises:
        GridPersistenceError: If nothing is left before the first '.'
    """
    path = Path(name)
    stem = path.name.split(".", 1)[0]
    if not stem:
        raise GridPersistenceError(f"Invalid grid file name: {str(name)!r}")
    return path.with_name(stem + GRID_FILE_SUFFIX)


def encode_grid(record: GridRecord) -> bytes:
    header = np.array(
        [record.version, record.dimension_count, *record.nodes_per_dimension], dtype=_UINT
    )
    bounds = np.array([*record.lower_bound, *record.upper_bound], dtype=_FLOAT)
    return header.tobytes() + bounds.tobytes()


def decode_grid(payload: bytes) -> GridRecord:
    """Decode a grid file payload.

    Raises:
        GridPersistenceError: On truncated or trailing data, an unknown version,
            or contents that do not describe a valid grid
    """
    if len(payload) < 2 * _UINT.itemsize:
        raise GridPersistenceError("Grid file is truncated: missing header")
    version, dimension_count = (int(v) for v in np.frombuffer(payload, _UINT, count=2))
    if version not in SUPPORTED_FORMAT_VERSIONS:
        raise GridPersistenceError(
            f"Unsupported grid file version {version} (supported: {SUPPORTED_FORMAT_VERSIONS})"
        )
    if dimension_count < 1:
        raise GridPersistenceError(f"Grid file declares {dimension_count} dimensions")

    header_size = (2 + dimension_count) * _UINT.itemsize
    expected = header_size + 2 * dimension_count * _FLOAT.itemsize
    if len(payload) != expected:
        raise GridPersistenceError(
            f"Grid file has {len(payload)} bytes, expected {expected} "
            f"for {dimension_count} dimensions"
        )

    nodes = np.frombuffer(payload, _UINT, count=dimension_count, offset=2 * _UINT.itemsize)
    bounds = np.frombuffer(payload, _FLOAT, count=2 * dimension_count, offset=header_size)
    record = GridRecord(
        version=version,
        nodes_per_dimension=tuple(int(n) for n in nodes),
        lower_bound=tuple(float(v) for v in bounds[:dimension_count]),
        upper_bound=tuple(float(v) for v in bounds[dimension_count:]),
    )
    _check_record(record)
    return record


def _check_record(record: GridRecord) -> None:
    axes = zip(record.nodes_per_dimension, record.lower_bound, record.upper_bound)
    for d, (n, lo, hi) in enumerate(axes):
        if n < MIN_NODES_PER_DIMENSION:
            raise GridPersistenceError(
                f"Grid file axis {d} has {n} nodes, at least {MIN_NODES_PER_DIMENSION} required"
            )
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise GridPersistenceError(f"Grid file axis {d} has non-finite bounds [{lo}, {hi}]")
        if not hi > lo:
            raise GridPersistenceError(
                f"Grid file axis {d} upper bound {hi} does not exceed lower bound {lo}"
            )


def write_grid_file(path: Union[str, Path], record: GridRecord) -> Path:
    path = Path(path)
    try:
        path.write_bytes(encode_grid(record))
    except OSError as e:
        raise GridPersistenceError(f"Could not write grid file {path}: {e}") from e
    logger.info(f"Saved grid to {path}")
    return path


def read_grid_file(path: Union[str, Path]) -> GridRecord:
    path = Path(path)
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise GridPersistenceError(f"Could not open grid file {path}: {e}") from e
    record = decode_grid(payload)
    logger.info(f"Loaded {record.dimension_count}-D grid from {path}")
    return record


def save_grid(grid: UniformGrid, name: Union[str, Path]) -> Path:
    """Save a finalized grid's configuration.

    Returns:
        Path of the written '.gri' file
    """
    if not grid.is_finalized:
        raise UnfinalizedGrid("Only finalized grids can be saved; call finalize() first")
    record = GridRecord(
        version=GRID_FORMAT_VERSION,
        nodes_per_dimension=grid.nodes_per_dimension,
        lower_bound=grid.lower_bound,
        upper_bound=grid.upper_bound,
    )
    return write_grid_file(grid_file_path(name), record)


def load_grid(name: Union[str, Path], sampler: Optional[UniformSampler] = None) -> UniformGrid:
    """Load a grid file and return a new finalized grid."""
    record = read_grid_file(grid_file_path(name))
    return UniformGrid.create(
        record.nodes_per_dimension,
        record.lower_bound,
        record.upper_bound,
        dimension_count=record.dimension_count,
        sampler=sampler,
    )
