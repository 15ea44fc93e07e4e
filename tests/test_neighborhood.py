"""Tests for neighborhood and enveloping-node enumeration."""

import itertools

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from uniform_grid.core.errors import IndexOutOfRange
from uniform_grid.core.grid import UniformGrid


def _box_flats(grid, lo, hi):
    """Reference enumeration of a box, axis 0 fastest."""
    ranges = [range(a, b + 1) for a, b in zip(lo, hi)]
    return [
        grid.dim_index_to_flat(tuple(reversed(idx)))
        for idx in itertools.product(*reversed(ranges))
    ]


class TestNeighborhood:
    """Tests for UniformGrid.neighborhood."""

    def test_radius_zero_is_empty(self, grid_3x3):
        for flat in range(grid_3x3.total_node_count):
            assert grid_3x3.neighborhood(flat, 0).size == 0

    def test_corner_clipped(self, grid_3x3):
        """Out-of-grid neighbors of a corner node are dropped."""
        result = grid_3x3.neighborhood((0, 0), 1)

        expected = [grid_3x3.dim_index_to_flat(i) for i in [(1, 0), (0, 1), (1, 1)]]
        assert_array_equal(result, expected)
        assert_array_equal(result, [1, 3, 4])

    def test_center_node(self, grid_3x3):
        """The interior node of a 3x3 grid has all 8 other nodes as neighbors."""
        assert_array_equal(grid_3x3.neighborhood(4, 1), [0, 1, 2, 3, 5, 6, 7, 8])

    def test_flat_and_dim_center_agree(self, grid_3d):
        for flat in range(grid_3d.total_node_count):
            idx = grid_3d.flat_to_dim_index(flat)
            assert_array_equal(grid_3d.neighborhood(flat, 1), grid_3d.neighborhood(idx, 1))

    def test_never_contains_center(self, grid_3d):
        for flat in range(grid_3d.total_node_count):
            for radius in (1, 2, 5):
                assert flat not in grid_3d.neighborhood(flat, radius)

    def test_box_not_manhattan_ball(self):
        """Diagonal nodes are included: the box is a Chebyshev ball."""
        grid = UniformGrid.create([5, 5], [0.0, 0.0], [4.0, 4.0])

        result = grid.neighborhood((2, 2), 1)

        assert result.size == 8
        assert grid.dim_index_to_flat((1, 1)) in result
        assert grid.dim_index_to_flat((3, 3)) in result

    def test_matches_reference_enumeration(self, grid_3d):
        """Order is axis 0 fastest, the same as an odometer traversal."""
        center = (1, 1, 3)
        radius = 2
        lo = [max(0, c - radius) for c in center]
        hi = [min(n - 1, c + radius) for c, n in zip(center, grid_3d.nodes_per_dimension)]
        expected = [f for f in _box_flats(grid_3d, lo, hi) if f != grid_3d.dim_index_to_flat(center)]

        assert_array_equal(grid_3d.neighborhood(center, radius), expected)

    def test_large_radius_covers_grid(self, grid_3d):
        result = grid_3d.neighborhood(0, 100)

        assert_array_equal(result, np.arange(1, grid_3d.total_node_count))

    def test_result_is_owned(self, grid_3x3):
        """Each call returns an independent array."""
        first = grid_3x3.neighborhood(0, 1)
        first[:] = -1
        second = grid_3x3.neighborhood(0, 1)

        assert_array_equal(second, [1, 3, 4])

    def test_negative_radius(self, grid_3x3):
        with pytest.raises(ValueError, match="non-negative"):
            grid_3x3.neighborhood(0, -1)

    @pytest.mark.parametrize("center", [9, -1, (3, 0), (0, -1), (1, 1, 1)])
    def test_invalid_center(self, grid_3x3, center):
        """Centers outside the grid are rejected instead of wrapping around."""
        with pytest.raises(IndexOutOfRange):
            grid_3x3.neighborhood(center, 1)


class TestEnvelopingNodes:
    """Tests for UniformGrid.enveloping_nodes."""

    def test_cell_corners(self, grid_3x3):
        """With radius 0 the stencil is the 2**D corners of the containing cell."""
        assert grid_3x3.bottom_left_node_index((0.5, 0.5)) == (0, 0)
        assert_array_equal(grid_3x3.enveloping_nodes((0.5, 0.5), 0), [0, 1, 3, 4])

    def test_default_radius_zero(self, grid_3x3):
        assert_array_equal(grid_3x3.enveloping_nodes((1.5, 0.5)), [1, 2, 4, 5])

    def test_upper_boundary_uses_last_cell(self, grid_3x3):
        assert_array_equal(grid_3x3.enveloping_nodes((2.0, 2.0)), [4, 5, 7, 8])

    def test_outside_point_is_clamped(self, grid_3x3):
        assert_array_equal(grid_3x3.enveloping_nodes((-3.0, 9.0)), [3, 4, 6, 7])

    def test_radius_grows_and_clips(self, grid_3x3):
        assert_array_equal(grid_3x3.enveloping_nodes((0.5, 0.5), 1), np.arange(9))

    def test_3d_stencil_size(self, grid_3d):
        x = grid_3d.uniform_sample()

        assert grid_3d.enveloping_nodes(x).size == 8

    def test_matches_reference_enumeration(self):
        grid = UniformGrid.create([6, 7], [0.0, 0.0], [5.0, 6.0])
        x = (2.3, 4.7)
        radius = 1
        idx = grid.bottom_left_node_index(x)
        lo = [max(0, i - radius) for i in idx]
        hi = [min(n - 1, i + radius + 1) for i, n in zip(idx, grid.nodes_per_dimension)]

        result = grid.enveloping_nodes(x, radius)

        assert idx == (2, 4)
        assert result.size == 4 * 4
        assert_array_equal(result, _box_flats(grid, lo, hi))

    def test_contains_nearest_node(self, grid_3d):
        for _ in range(20):
            x = grid_3d.uniform_sample()
            assert grid_3d.nearest_node_flat_index(x) in grid_3d.enveloping_nodes(x)

    def test_negative_radius(self, grid_3x3):
        with pytest.raises(ValueError):
            grid_3x3.enveloping_nodes((0.5, 0.5), -2)
