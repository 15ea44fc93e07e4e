"""Pytest configuration and shared fixtures for uniform_grid tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from uniform_grid.core.grid import UniformGrid
from uniform_grid.core.sampling import create_sampler


@pytest.fixture
def grid_3x3():
    """2D grid with 3 nodes per axis on [0, 2] x [0, 2] (unit stride)."""
    return UniformGrid.create([3, 3], [0.0, 0.0], [2.0, 2.0])


@pytest.fixture
def grid_3d():
    """3D grid with a different node count on every axis."""
    return UniformGrid.create(
        [4, 3, 5], [-1.0, 0.0, 10.0], [1.0, 3.0, 12.0], sampler=create_sampler(7)
    )


@pytest.fixture
def grid_1d():
    """1D grid with 11 nodes on [0, 1]."""
    return UniformGrid.create(11, 0.0, 1.0, dimension_count=1)
