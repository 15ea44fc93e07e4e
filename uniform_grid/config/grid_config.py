"""Grid configuration dataclass and YAML file round-tripping.

Import Policy:
    from uniform_grid.config.grid_config import GridConfig, load_grid_config

DO NOT use: from uniform_grid.config.grid_config import *
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from uniform_grid.config.defaults import (
    DEFAULT_DIMENSION_COUNT,
    DEFAULT_LOWER_BOUND,
    DEFAULT_NODES_PER_DIMENSION,
    DEFAULT_ROUNDING_MODE,
    DEFAULT_UPPER_BOUND,
    MIN_NODES_PER_DIMENSION,
)
from uniform_grid.config.enums import RoundingMode
from uniform_grid.config.yaml_loader import get_default


def _broadcast(value, count: int) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value] * count


@dataclass
class GridConfig:
    """Everything needed to build a finalized UniformGrid.

    Scalar node counts or bounds are broadcast to every axis in
    __post_init__, so after construction all per-axis fields are lists.

    Attributes:
        dimension_count: Number of axes D
        nodes_per_dimension: Node count per axis (each >= 2)
        lower_bound, upper_bound: Domain extent per axis
        rounding_mode: Tie-breaking for nearest-node lookups
        seed: Seed of the default sampler (None for OS entropy)
    """

    dimension_count: int = DEFAULT_DIMENSION_COUNT
    nodes_per_dimension: Union[int, list[int]] = DEFAULT_NODES_PER_DIMENSION
    lower_bound: Union[float, list[float]] = DEFAULT_LOWER_BOUND
    upper_bound: Union[float, list[float]] = DEFAULT_UPPER_BOUND
    rounding_mode: RoundingMode = DEFAULT_ROUNDING_MODE
    seed: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.nodes_per_dimension = _broadcast(self.nodes_per_dimension, self.dimension_count)
        self.lower_bound = _broadcast(self.lower_bound, self.dimension_count)
        self.upper_bound = _broadcast(self.upper_bound, self.dimension_count)
        if isinstance(self.rounding_mode, str):
            self.rounding_mode = RoundingMode(self.rounding_mode)

    @property
    def total_node_count(self) -> int:
        return math.prod(self.nodes_per_dimension)

    def validate(self) -> list[str]:
        """Validate grid configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not isinstance(self.dimension_count, int) or self.dimension_count < 1:
            errors.append(f"dimension_count must be a positive integer, got {self.dimension_count}")
            return errors

        for name in ("nodes_per_dimension", "lower_bound", "upper_bound"):
            values = getattr(self, name)
            if len(values) != self.dimension_count:
                errors.append(
                    f"{name} has {len(values)} entries, expected {self.dimension_count}"
                )
        if errors:
            return errors

        for d, n in enumerate(self.nodes_per_dimension):
            if not isinstance(n, int) or isinstance(n, bool):
                errors.append(f"nodes_per_dimension[{d}] must be an integer, got {n!r}")
            elif n < MIN_NODES_PER_DIMENSION:
                errors.append(
                    f"nodes_per_dimension[{d}] must be >= {MIN_NODES_PER_DIMENSION}, got {n}"
                )

        for d, (lo, hi) in enumerate(zip(self.lower_bound, self.upper_bound)):
            if not (math.isfinite(lo) and math.isfinite(hi)):
                errors.append(f"bounds on axis {d} must be finite, got [{lo}, {hi}]")
            elif hi <= lo:
                errors.append(f"upper_bound[{d}] ({hi}) must be > lower_bound[{d}] ({lo})")

        if self.seed is not None and (not isinstance(self.seed, int) or self.seed < 0):
            errors.append(f"seed must be a non-negative integer or None, got {self.seed!r}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Plain-type dictionary, suitable for YAML."""
        return {
            "dimension_count": self.dimension_count,
            "nodes_per_dimension": list(self.nodes_per_dimension),
            "lower_bound": [float(v) for v in self.lower_bound],
            "upper_bound": [float(v) for v in self.upper_bound],
            "rounding_mode": self.rounding_mode.value,
            "seed": self.seed,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GridConfig":
        """Create a GridConfig from a dictionary, filling gaps from defaults.yaml.

        The dimension count is inferred from the first per-axis list when the
        dictionary does not give it.
        """
        unknown = set(data) - {
            "dimension_count", "nodes_per_dimension", "lower_bound",
            "upper_bound", "rounding_mode", "seed", "metadata",
        }
        if unknown:
            raise ValueError(f"Unknown grid configuration keys: {sorted(unknown)}")

        dimension_count = data.get("dimension_count")
        if dimension_count is None:
            for key in ("nodes_per_dimension", "lower_bound", "upper_bound"):
                if isinstance(data.get(key), (list, tuple)):
                    dimension_count = len(data[key])
                    break
            else:
                dimension_count = get_default("grid.dimension_count", DEFAULT_DIMENSION_COUNT)

        return cls(
            dimension_count=dimension_count,
            nodes_per_dimension=data.get(
                "nodes_per_dimension",
                get_default("grid.nodes_per_dimension", DEFAULT_NODES_PER_DIMENSION),
            ),
            lower_bound=data.get(
                "lower_bound", get_default("grid.lower_bound", DEFAULT_LOWER_BOUND)
            ),
            upper_bound=data.get(
                "upper_bound", get_default("grid.upper_bound", DEFAULT_UPPER_BOUND)
            ),
            rounding_mode=data.get(
                "rounding_mode",
                get_default("grid.rounding_mode", DEFAULT_ROUNDING_MODE.value),
            ),
            seed=data.get("seed", get_default("sampling.seed")),
            metadata=dict(data.get("metadata") or {}),
        )

    @classmethod
    def from_defaults(cls) -> "GridConfig":
        """GridConfig built entirely from defaults.yaml."""
        return cls.from_dict({})


def load_grid_config(path: Union[str, Path]) -> GridConfig:
    """Load a GridConfig from a YAML file.

    The file holds the GridConfig fields either at top level or under a
    ``grid:`` key.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not contain a mapping
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Grid configuration in {path} must be a mapping")
    if "grid" in data and isinstance(data["grid"], dict):
        data = data["grid"]
    return GridConfig.from_dict(data)


def save_grid_config(config: GridConfig, path: Union[str, Path]) -> Path:
    """Write a GridConfig to a YAML file under a ``grid:`` key."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"grid": config.to_dict()}, f, sort_keys=False)
    return path


def create_grid(config: GridConfig, sampler=None):
    """Build a finalized UniformGrid from config (validated first)."""
    from uniform_grid.core.grid import UniformGrid

    return UniformGrid.from_config(config, sampler=sampler)
