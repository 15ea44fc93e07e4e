"""
Configuration Validation Utilities

Import Policy:
    from uniform_grid.config.validation import validate_config, warn_if_unsafe

DO NOT use: from uniform_grid.config.validation import *
"""

import warnings
from typing import List, Tuple

from uniform_grid.config.defaults import MAX_SAFE_NODE_COUNT, MIN_RECOMMENDED_NODES
from uniform_grid.config.grid_config import GridConfig
from uniform_grid.config.yaml_loader import get_default
from uniform_grid.core.errors import InvalidConfiguration


class ConfigurationWarning(Warning):
    """Warning for potentially unsafe configuration choices."""

    pass


def validate_config(config: GridConfig, raise_on_error: bool = True) -> Tuple[bool, List[str]]:
    """Validate a grid configuration.

    Args:
        config: GridConfig to validate
        raise_on_error: If True, raise InvalidConfiguration on validation failure

    Returns:
        Tuple of (is_valid, error_messages)

    Raises:
        InvalidConfiguration: If validation fails and raise_on_error=True
    """
    errors = config.validate()

    if errors:
        if raise_on_error:
            raise InvalidConfiguration(
                f"Configuration validation failed with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )
        return False, errors

    return True, []


def warn_if_unsafe(config: GridConfig) -> List[str]:
    """Check for configuration choices that are valid but likely unintended.

    Warnings are issued via Python's warnings module.

    Returns:
        List of warning messages (empty if no warnings)
    """
    warnings_list = []

    max_nodes = get_default("limits.max_safe_node_count", MAX_SAFE_NODE_COUNT)
    total = config.total_node_count
    if total > max_nodes:
        warnings_list.append(
            f"Grid has {total} nodes (limit {max_nodes}). "
            "node_coordinates() and large neighborhoods will use a lot of memory."
        )

    min_nodes = get_default("limits.min_recommended_nodes", MIN_RECOMMENDED_NODES)
    for d, n in enumerate(config.nodes_per_dimension):
        if n < min_nodes:
            warnings_list.append(
                f"Axis {d} has only {n} nodes. Enveloping stencils will cover the whole axis."
            )

    for msg in warnings_list:
        warnings.warn(msg, ConfigurationWarning, stacklevel=2)

    return warnings_list
