"""Helpers around UniformGrid that are not part of the core."""

from uniform_grid.utils.visualization import format_grid_nodes, log_grid_nodes, plot_grid_nodes

__all__ = ["format_grid_nodes", "log_grid_nodes", "plot_grid_nodes"]
