"""Configuration for uniform grids.

Default Configuration (loaded from defaults.yaml):
    from uniform_grid.config import get_default
    nodes = get_default('grid.nodes_per_dimension')

Recommended Usage:
    from uniform_grid.config import GridConfig, create_grid

    config = GridConfig(
        dimension_count=2,
        nodes_per_dimension=[101, 51],
        lower_bound=[0.0, -1.0],
        upper_bound=[10.0, 1.0],
    )
    grid = create_grid(config)  # validated and finalized

    # Or from a YAML file
    config = load_grid_config("grid.yaml")

Import Policy:
    DO NOT use: from uniform_grid.config import *
"""

from uniform_grid.config.enums import RoundingMode
from uniform_grid.config.grid_config import (
    GridConfig,
    create_grid,
    load_grid_config,
    save_grid_config,
)
from uniform_grid.config.validation import (
    ConfigurationWarning,
    validate_config,
    warn_if_unsafe,
)
from uniform_grid.config.yaml_loader import get_default, get_defaults, reload_defaults

__all__ = [
    "RoundingMode",
    "GridConfig",
    "create_grid",
    "load_grid_config",
    "save_grid_config",
    "ConfigurationWarning",
    "validate_config",
    "warn_if_unsafe",
    "get_default",
    "get_defaults",
    "reload_defaults",
]
