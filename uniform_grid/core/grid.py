"""Uniform D-dimensional grid over a bounded continuous space.

Grid nodes are evenly distributed along each axis so that the first node sits
on the lower bound and the last node on the upper bound. Configure the grid,
then call finalize() before using it in any way:

    grid = UniformGrid()
    grid.set_dimension_count(3)
    grid.set_nodes_per_dimension([101, 201, 301])
    grid.set_lower_bound([x_min, y_min, z_min])
    grid.set_upper_bound([x_max, y_max, z_max])
    grid.finalize()

Nodes are then addressed either by a dimension index (one integer per axis)
or by a flat index in [0, total_node_count) that enumerates all nodes with
axis 0 varying fastest:

    for n in range(grid.total_node_count):
        idx = grid.flat_to_dim_index(n)
        assert grid.coordinates_of(n) == grid.coordinates_of(idx)

Points are tuples of floats, dimension indices are tuples of ints, flat
indices are ints. Every query returns a fresh value, so results can be kept
and a finalized grid can be queried from several threads at once.
Configuration and finalize() allocate the raster tables and must not run
concurrently with queries or inside time critical loops.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Union

import numpy as np

from uniform_grid.config.defaults import DEFAULT_ROUNDING_MODE, MIN_NODES_PER_DIMENSION
from uniform_grid.config.enums import RoundingMode
from uniform_grid.core.errors import (
    DegenerateAxis,
    IndexOutOfRange,
    InvalidConfiguration,
    PointOutOfBounds,
    UnfinalizedGrid,
)
from uniform_grid.core.sampling import UniformSampler, create_sampler

logger = logging.getLogger(__name__)

DimIndex = tuple[int, ...]
Point = tuple[float, ...]
NodeRef = Union[int, Sequence[int]]


def _round_half_away_from_zero(value: float) -> int:
    if value < 0.0:
        return -_round_half_away_from_zero(-value)
    lower = math.floor(value)
    return lower + 1 if value - lower >= 0.5 else lower


def _round_half_even(value: float) -> int:
    return int(round(value))


_ROUNDING = {
    RoundingMode.HALF_AWAY_FROM_ZERO: _round_half_away_from_zero,
    RoundingMode.HALF_EVEN: _round_half_even,
}


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _is_flat_index(node: NodeRef) -> bool:
    return isinstance(node, (int, np.integer)) and not isinstance(node, bool)


def _check_radius(radius: int) -> int:
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    return int(radius)


class UniformGrid:
    """Uniform lattice of nodes spanning [lower_bound, upper_bound] on every axis.

    Attributes:
        rounding_mode: Tie-breaking rule used by nearest-node lookups
    """

    def __init__(
        self,
        rounding_mode: Union[RoundingMode, str] = DEFAULT_ROUNDING_MODE,
        sampler: Optional[UniformSampler] = None,
    ):
        """Create an empty grid (dimension count 0).

        Args:
            rounding_mode: Tie-breaking rule for nearest_node_index()
            sampler: Source of uniform draws for uniform_sample().
                Defaults to a freshly seeded numpy Generator.
        """
        self.rounding_mode = RoundingMode(rounding_mode)
        self._sampler = sampler if sampler is not None else create_sampler()

        self._dimension_count = 0
        self._nodes_setting: Union[int, tuple[int, ...], None] = None
        self._lower_setting: Union[float, tuple[float, ...], None] = None
        self._upper_setting: Union[float, tuple[float, ...], None] = None

        self._finalized = False
        self._nodes: tuple[int, ...] = ()
        self._lower: tuple[float, ...] = ()
        self._upper: tuple[float, ...] = ()
        self._stride: tuple[float, ...] = ()
        self._inverse_stride: tuple[float, ...] = ()
        self._axis_coordinates: tuple[np.ndarray, ...] = ()
        self._index_stride: tuple[int, ...] = ()
        self._total_node_count = 0

    @classmethod
    def create(
        cls,
        nodes_per_dimension: Union[int, Sequence[int]],
        lower_bound: Union[float, Sequence[float]],
        upper_bound: Union[float, Sequence[float]],
        dimension_count: Optional[int] = None,
        rounding_mode: Union[RoundingMode, str] = DEFAULT_ROUNDING_MODE,
        sampler: Optional[UniformSampler] = None,
    ) -> "UniformGrid":
        """Build and finalize a grid in one call.

        Example:
            >>> grid = UniformGrid.create([3, 3], [0.0, 0.0], [2.0, 2.0])
            >>> grid.dim_index_to_flat((1, 1))
            4
        """
        grid = cls(rounding_mode=rounding_mode, sampler=sampler)
        grid.configure(nodes_per_dimension, lower_bound, upper_bound, dimension_count)
        return grid

    @classmethod
    def from_config(cls, config, sampler: Optional[UniformSampler] = None) -> "UniformGrid":
        """Build and finalize a grid from a GridConfig.

        Args:
            config: uniform_grid.config.GridConfig instance
            sampler: Overrides the sampler seeded from config.seed

        Raises:
            InvalidConfiguration: If the config fails validation
        """
        from uniform_grid.config.validation import validate_config

        validate_config(config)
        if sampler is None:
            sampler = create_sampler(config.seed)
        return cls.create(
            config.nodes_per_dimension,
            config.lower_bound,
            config.upper_bound,
            dimension_count=config.dimension_count,
            rounding_mode=config.rounding_mode,
            sampler=sampler,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_dimension_count(self, dimension_count: int) -> None:
        """Set D, the number of axes. Per-axis settings must have D entries."""
        if (
            isinstance(dimension_count, bool)
            or not isinstance(dimension_count, (int, np.integer))
            or dimension_count < 1
        ):
            raise InvalidConfiguration(
                f"dimension_count must be a positive integer, got {dimension_count!r}"
            )
        self._dimension_count = int(dimension_count)
        self._mark_dirty()

    def set_nodes_per_dimension(self, nodes_per_dimension: Union[int, Sequence[int]]) -> None:
        """Set the node count per axis. A single int applies to every axis."""
        if np.isscalar(nodes_per_dimension):
            self._nodes_setting = self._as_node_count(nodes_per_dimension)
        else:
            values = tuple(self._as_node_count(n) for n in nodes_per_dimension)
            self._check_length("nodes_per_dimension", values)
            self._nodes_setting = values
        self._mark_dirty()

    def set_lower_bound(self, lower_bound: Union[float, Sequence[float]]) -> None:
        """Set the minimum coordinate per axis. A single float applies to every axis."""
        self._lower_setting = self._as_bounds("lower_bound", lower_bound)
        self._mark_dirty()

    def set_upper_bound(self, upper_bound: Union[float, Sequence[float]]) -> None:
        """Set the maximum coordinate per axis. A single float applies to every axis."""
        self._upper_setting = self._as_bounds("upper_bound", upper_bound)
        self._mark_dirty()

    def configure(
        self,
        nodes_per_dimension: Union[int, Sequence[int]],
        lower_bound: Union[float, Sequence[float]],
        upper_bound: Union[float, Sequence[float]],
        dimension_count: Optional[int] = None,
    ) -> None:
        """Apply all settings and finalize.

        When dimension_count is omitted it is taken from the first sequence
        argument, and must be given explicitly if all three are scalars.
        """
        if dimension_count is None:
            for setting in (nodes_per_dimension, lower_bound, upper_bound):
                if not np.isscalar(setting):
                    dimension_count = len(setting)
                    break
            else:
                raise InvalidConfiguration(
                    "dimension_count is required when all settings are scalars"
                )
        self.set_dimension_count(dimension_count)
        self.set_nodes_per_dimension(nodes_per_dimension)
        self.set_lower_bound(lower_bound)
        self.set_upper_bound(upper_bound)
        self.finalize()

    def _mark_dirty(self) -> None:
        self._finalized = False

    def _check_length(self, name: str, values: tuple) -> None:
        if self._dimension_count and len(values) != self._dimension_count:
            raise InvalidConfiguration(
                f"{name} has {len(values)} entries, expected {self._dimension_count}"
            )

    @staticmethod
    def _as_node_count(value) -> int:
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
            raise InvalidConfiguration(f"node counts must be integers, got {value!r}")
        return int(value)

    def _as_bounds(self, name: str, bounds) -> Union[float, tuple[float, ...]]:
        if np.isscalar(bounds):
            values = (float(bounds),)
        else:
            values = tuple(float(b) for b in bounds)
            self._check_length(name, values)
        if not all(math.isfinite(v) for v in values):
            raise InvalidConfiguration(f"{name} must be finite, got {bounds!r}")
        return values[0] if np.isscalar(bounds) else values

    def _resolve(self, name: str, setting) -> tuple:
        if setting is None:
            raise InvalidConfiguration(f"{name} must be set before finalize")
        if not isinstance(setting, tuple):
            return (setting,) * self._dimension_count
        if len(setting) != self._dimension_count:
            raise InvalidConfiguration(
                f"{name} has {len(setting)} entries, expected {self._dimension_count}"
            )
        return setting

    # ------------------------------------------------------------------
    # Finalize (rasterize)
    # ------------------------------------------------------------------

    def finalize(self) -> None:
        """Compute strides, coordinate tables and index strides.

        Must be called after configuration and again after any setter call.
        This allocates O(sum of node counts) memory; keep it out of real time
        loops.

        Raises:
            InvalidConfiguration: If a setting is missing or has the wrong length
            DegenerateAxis: If an axis has fewer than 2 nodes or
                upper_bound <= lower_bound
        """
        if self._dimension_count < 1:
            raise InvalidConfiguration("dimension count must be set before finalize")
        nodes = self._resolve("nodes_per_dimension", self._nodes_setting)
        lower = self._resolve("lower_bound", self._lower_setting)
        upper = self._resolve("upper_bound", self._upper_setting)

        for d, (n, lo, hi) in enumerate(zip(nodes, lower, upper)):
            if n < MIN_NODES_PER_DIMENSION:
                raise DegenerateAxis(
                    d, f"{n} nodes, at least {MIN_NODES_PER_DIMENSION} required"
                )
            if not hi > lo:
                raise DegenerateAxis(d, f"upper bound {hi} must exceed lower bound {lo}")

        # Mixed-radix multipliers: axis 0 varies fastest.
        index_stride = [1] * len(nodes)
        for d in range(1, len(nodes)):
            index_stride[d] = index_stride[d - 1] * nodes[d - 1]

        stride = tuple((hi - lo) / (n - 1) for n, lo, hi in zip(nodes, lower, upper))
        axis_coordinates = []
        for n, lo, hi in zip(nodes, lower, upper):
            # linspace pins both ends to the bounds exactly
            coords = np.linspace(lo, hi, n)
            coords.setflags(write=False)
            axis_coordinates.append(coords)

        self._nodes = nodes
        self._lower = lower
        self._upper = upper
        self._stride = stride
        self._inverse_stride = tuple(1.0 / s for s in stride)
        self._axis_coordinates = tuple(axis_coordinates)
        self._index_stride = tuple(index_stride)
        self._total_node_count = math.prod(nodes)
        self._finalized = True

        logger.debug(
            "Finalized %d-D grid: nodes=%s total=%d stride=%s",
            len(nodes), nodes, self._total_node_count, stride,
        )

    rasterize = finalize

    def _require_finalized(self) -> None:
        if not self._finalized:
            raise UnfinalizedGrid(
                "Grid is not finalized; call finalize() after configuring it"
            )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_finalized(self) -> bool:
        """True when the derived raster matches the current configuration."""
        return self._finalized

    @property
    def dimension_count(self) -> int:
        """Number of axes (0 until set)."""
        return self._dimension_count

    @property
    def nodes_per_dimension(self) -> tuple[int, ...]:
        return self._resolve("nodes_per_dimension", self._nodes_setting)

    @property
    def lower_bound(self) -> tuple[float, ...]:
        return self._resolve("lower_bound", self._lower_setting)

    @property
    def upper_bound(self) -> tuple[float, ...]:
        return self._resolve("upper_bound", self._upper_setting)

    @property
    def stride(self) -> tuple[float, ...]:
        """Cell size per axis."""
        self._require_finalized()
        return self._stride

    @property
    def inverse_stride(self) -> tuple[float, ...]:
        self._require_finalized()
        return self._inverse_stride

    @property
    def axis_coordinates(self) -> tuple[np.ndarray, ...]:
        """Read-only node coordinates per axis."""
        self._require_finalized()
        return self._axis_coordinates

    @property
    def index_stride(self) -> tuple[int, ...]:
        """Flat-index multiplier per axis."""
        self._require_finalized()
        return self._index_stride

    @property
    def total_node_count(self) -> int:
        self._require_finalized()
        return self._total_node_count

    # ------------------------------------------------------------------
    # Index/coordinate conversion
    # ------------------------------------------------------------------

    def dim_index_to_flat(self, idx: Sequence[int]) -> int:
        """Convert a dimension index to a flat index. No bounds checking."""
        self._require_finalized()
        return int(sum(i * s for i, s in zip(idx, self._index_stride)))

    def dim_index_to_flat_checked(self, idx: Sequence[int]) -> int:
        """Like dim_index_to_flat() but raises IndexOutOfRange for invalid indices."""
        self._require_finalized()
        if len(idx) != len(self._nodes):
            raise IndexOutOfRange(
                f"dimension index {tuple(idx)} has {len(idx)} entries, "
                f"grid has {len(self._nodes)} dimensions"
            )
        for d, (i, n) in enumerate(zip(idx, self._nodes)):
            if not 0 <= i < n:
                raise IndexOutOfRange(f"index {i} on axis {d} outside [0, {n - 1}]")
        return self.dim_index_to_flat(idx)

    def flat_to_dim_index(self, flat: int) -> DimIndex:
        """Convert a flat index to a dimension index. No bounds checking."""
        self._require_finalized()
        rest = int(flat)
        idx = []
        for n in self._nodes:
            rest, i = divmod(rest, n)
            idx.append(i)
        return tuple(idx)

    def flat_to_dim_index_checked(self, flat: int) -> DimIndex:
        """Like flat_to_dim_index() but raises IndexOutOfRange outside [0, total_node_count)."""
        self._require_finalized()
        if not 0 <= flat < self._total_node_count:
            raise IndexOutOfRange(
                f"flat index {flat} outside [0, {self._total_node_count - 1}]"
            )
        return self.flat_to_dim_index(flat)

    def coordinates_of(self, node: NodeRef) -> Point:
        """Coordinates of a node given by flat index or dimension index."""
        if _is_flat_index(node):
            node = self.flat_to_dim_index(node)
        else:
            self._require_finalized()
        return tuple(float(coords[i]) for coords, i in zip(self._axis_coordinates, node))

    def nearest_node_index(self, x: Sequence[float]) -> DimIndex:
        """Dimension index of the node closest to x.

        Points outside the grid are clamped to the closest boundary node.
        Ties at cell midpoints follow self.rounding_mode.
        """
        self._require_finalized()
        self._check_dimensions(x)
        rnd = _ROUNDING[self.rounding_mode]
        return tuple(
            rnd(_clamp((v - lo) * inv, 0.0, n - 1))
            for v, lo, inv, n in zip(x, self._lower, self._inverse_stride, self._nodes)
        )

    def bottom_left_node_index(self, x: Sequence[float]) -> DimIndex:
        """Dimension index of the lowest corner of the cell containing x.

        Clamped to [0, N - 2] per axis so that idx + 1 is always a valid node.
        Points outside the grid are clamped, not rejected.
        """
        self._require_finalized()
        self._check_dimensions(x)
        return tuple(
            math.floor(_clamp((v - lo) * inv, 0.0, n - 2))
            for v, lo, inv, n in zip(x, self._lower, self._inverse_stride, self._nodes)
        )

    def nearest_node_flat_index(self, x: Sequence[float]) -> int:
        return self.dim_index_to_flat(self.nearest_node_index(x))

    def bottom_left_node_flat_index(self, x: Sequence[float]) -> int:
        return self.dim_index_to_flat(self.bottom_left_node_index(x))

    def _check_dimensions(self, x: Sequence[float]) -> None:
        if len(x) != len(self._nodes):
            raise PointOutOfBounds(
                f"point {tuple(x)} has {len(x)} coordinates, "
                f"grid has {len(self._nodes)} dimensions"
            )

    def _check_point(self, x: Sequence[float]) -> None:
        self._check_dimensions(x)
        if not self.contains_point(x):
            raise PointOutOfBounds(f"point {tuple(x)} lies outside the grid bounds")

    def nearest_node_index_checked(self, x: Sequence[float]) -> DimIndex:
        """Like nearest_node_index() but raises PointOutOfBounds instead of clamping."""
        self._require_finalized()
        self._check_point(x)
        return self.nearest_node_index(x)

    def bottom_left_node_index_checked(self, x: Sequence[float]) -> DimIndex:
        """Like bottom_left_node_index() but raises PointOutOfBounds instead of clamping."""
        self._require_finalized()
        self._check_point(x)
        return self.bottom_left_node_index(x)

    def nearest_node_flat_index_checked(self, x: Sequence[float]) -> int:
        return self.dim_index_to_flat(self.nearest_node_index_checked(x))

    def bottom_left_node_flat_index_checked(self, x: Sequence[float]) -> int:
        return self.dim_index_to_flat(self.bottom_left_node_index_checked(x))

    # ------------------------------------------------------------------
    # Neighborhoods and stencils
    # ------------------------------------------------------------------

    def _enumerate_box(self, lo: Sequence[int], hi: Sequence[int]) -> np.ndarray:
        """Flat indices of every node in the box [lo, hi], axis 0 fastest."""
        flat = np.zeros(1, dtype=np.int64)
        for a, b, s in zip(lo, hi, self._index_stride):
            offsets = np.arange(a, b + 1, dtype=np.int64) * s
            flat = (offsets[:, np.newaxis] + flat[np.newaxis, :]).ravel()
        return flat

    def neighborhood(self, center: NodeRef, radius: int) -> np.ndarray:
        """Flat indices of the nodes around center, excluding center itself.

        The neighborhood is the box of nodes within `radius` index steps of
        center on every axis independently (Chebyshev distance), clipped to
        the grid. radius=0 gives an empty array.

        Args:
            center: Flat index or dimension index of the center node
            radius: Non-negative box half-width in index space

        Returns:
            New int64 array in flat order (axis 0 fastest)

        Raises:
            IndexOutOfRange: If center is not a node of the grid
        """
        self._require_finalized()
        radius = _check_radius(radius)
        if _is_flat_index(center):
            center = self.flat_to_dim_index_checked(center)
        center_flat = self.dim_index_to_flat_checked(center)
        lo = [max(0, c - radius) for c in center]
        hi = [min(n - 1, c + radius) for c, n in zip(center, self._nodes)]
        box = self._enumerate_box(lo, hi)
        return box[box != center_flat]

    def enveloping_nodes(self, x: Sequence[float], radius: int = 0) -> np.ndarray:
        """Flat indices of the interpolation stencil around point x.

        Starts from the cell containing x (its 2**D corner nodes) and grows it
        by `radius` extra layers on every side, clipped to the grid. All nodes
        in the box are returned.

        Returns:
            New int64 array in flat order (axis 0 fastest)
        """
        self._require_finalized()
        radius = _check_radius(radius)
        idx = self.bottom_left_node_index(x)
        lo = [max(0, i - radius) for i in idx]
        hi = [min(n - 1, i + radius + 1) for i, n in zip(idx, self._nodes)]
        return self._enumerate_box(lo, hi)

    # ------------------------------------------------------------------
    # Containment and sampling
    # ------------------------------------------------------------------

    def contains_point(self, x: Sequence[float]) -> bool:
        """True if lower_bound <= x <= upper_bound on every axis.

        A point with the wrong number of coordinates is never contained.
        """
        self._require_finalized()
        if len(x) != len(self._nodes):
            return False
        return all(lo <= v <= hi for v, lo, hi in zip(x, self._lower, self._upper))

    def uniform_sample(self) -> Point:
        """Draw a point uniformly from the grid domain, one independent draw per axis."""
        self._require_finalized()
        return tuple(
            float(self._sampler.uniform(lo, hi)) for lo, hi in zip(self._lower, self._upper)
        )

    # ------------------------------------------------------------------
    # Batch queries
    # ------------------------------------------------------------------

    def node_coordinates(self) -> np.ndarray:
        """Coordinates of all nodes, shape (total_node_count, D), row k = flat index k."""
        self._require_finalized()
        mesh = np.meshgrid(*self._axis_coordinates, indexing="ij")
        return np.stack([m.ravel(order="F") for m in mesh], axis=-1)

    def _as_points(self, points) -> np.ndarray:
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        if points.ndim != 2 or points.shape[1] != len(self._nodes):
            raise ValueError(
                f"points must have shape (M, {len(self._nodes)}), got {points.shape}"
            )
        return points

    def nearest_node_flat_indices(self, points) -> np.ndarray:
        """Vectorized nearest_node_flat_index() for an (M, D) array of points."""
        self._require_finalized()
        points = self._as_points(points)
        nodes = np.asarray(self._nodes, dtype=np.float64)
        scaled = np.clip(
            (points - np.asarray(self._lower)) * np.asarray(self._inverse_stride),
            0.0,
            nodes - 1,
        )
        if self.rounding_mode is RoundingMode.HALF_EVEN:
            idx = np.rint(scaled)
        else:
            lower = np.floor(scaled)
            idx = lower + (scaled - lower >= 0.5)
        return idx.astype(np.int64) @ np.asarray(self._index_stride, dtype=np.int64)

    def contains_points(self, points) -> np.ndarray:
        """Vectorized contains_point() for an (M, D) array of points."""
        self._require_finalized()
        points = self._as_points(points)
        inside = (points >= np.asarray(self._lower)) & (points <= np.asarray(self._upper))
        return np.all(inside, axis=1)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, name: str):
        """Write the grid configuration to `<stem>.gri`. Returns the path written."""
        from uniform_grid.io.persistence import save_grid

        return save_grid(self, name)

    def load(self, name: str):
        """Replace the configuration with the one stored in `<stem>.gri` and finalize.

        The grid is left untouched when loading fails.

        Raises:
            GridPersistenceError: If the file is missing, unreadable or corrupt
        """
        from uniform_grid.io.persistence import grid_file_path, read_grid_file

        path = grid_file_path(name)
        record = read_grid_file(path)
        staged = type(self).create(
            record.nodes_per_dimension,
            record.lower_bound,
            record.upper_bound,
            dimension_count=record.dimension_count,
            rounding_mode=self.rounding_mode,
            sampler=self._sampler,
        )
        # Only a fully finalized grid replaces the current state.
        vars(self).update(vars(staged))
        return path

    def __repr__(self) -> str:
        if self._finalized:
            return (
                f"UniformGrid(dimension_count={len(self._nodes)}, "
                f"nodes_per_dimension={self._nodes}, lower_bound={self._lower}, "
                f"upper_bound={self._upper})"
            )
        return f"UniformGrid(dimension_count={self._dimension_count}, finalized=False)"


__all__ = [
    "UniformGrid",
    "DimIndex",
    "Point",
]
