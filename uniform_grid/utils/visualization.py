"""Node plots and text dumps for uniform grids.

Only public coordinate queries of UniformGrid are used here.
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from uniform_grid.core.grid import UniformGrid

logger = logging.getLogger(__name__)


def plot_grid_nodes(
    grid: UniformGrid,
    sample_factor: int = 1,
    ax: Optional[plt.Axes] = None,
    marker_size: float = 4.0,
    title: str = 'Grid Nodes',
    save_path: str = None,
):
    """Scatter the node positions of axes 0 and 1.

    Args:
        grid: Finalized grid with at least 2 dimensions
        sample_factor: Draw every n-th node per axis (values below 1 act as 1)
        ax: Axes to draw into; a new figure is created when None
        marker_size: Marker size in points
        title: Plot title
        save_path: If provided, save the figure to this file

    Returns:
        The Axes drawn into, or None for grids with fewer than 2 dimensions
    """
    if grid.dimension_count < 2:
        return None

    sample_factor = max(int(sample_factor), 1)
    x_nodes = grid.axis_coordinates[0][::sample_factor]
    y_nodes = grid.axis_coordinates[1][::sample_factor]

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    xx, yy = np.meshgrid(x_nodes, y_nodes)
    ax.scatter(xx.ravel(), yy.ravel(), s=marker_size ** 2, color='tab:blue')

    lower = grid.lower_bound
    upper = grid.upper_bound
    ax.set_xlim(lower[0], upper[0])
    ax.set_ylim(lower[1], upper[1])
    ax.set_xlabel('x0')
    ax.set_ylabel('x1')
    ax.set_title(title)
    ax.set_aspect('equal', adjustable='box')

    if save_path:
        ax.figure.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Saved: {save_path}")

    return ax


def format_grid_nodes(grid: UniformGrid) -> str:
    """Text table of the node coordinates per axis, one "d n coord" row per node."""
    lines = ["d n coord"]
    for d, coords in enumerate(grid.axis_coordinates):
        lines.append("-----------")
        for n, value in enumerate(coords):
            lines.append(f"{d} {n} {value:g}")
    return "\n".join(lines)


def log_grid_nodes(grid: UniformGrid, log: Optional[logging.Logger] = None) -> None:
    """Write format_grid_nodes() output to a logger at INFO level."""
    log = log or logger
    for line in format_grid_nodes(grid).splitlines():
        log.info(line)
