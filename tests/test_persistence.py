"""Tests for binary grid files."""

from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from uniform_grid.config.enums import RoundingMode
from uniform_grid.core.errors import GridPersistenceError, UnfinalizedGrid
from uniform_grid.core.grid import UniformGrid
from uniform_grid.io.persistence import (
    GridRecord,
    decode_grid,
    encode_grid,
    grid_file_path,
    load_grid,
    read_grid_file,
    save_grid,
)


class TestGridFilePath:
    """Tests for the '.gri' file name rule."""

    @pytest.mark.parametrize("name", ["run", "run.dat", "run.v2.gri", "run.gri"])
    def test_truncates_at_first_dot(self, name):
        assert grid_file_path(name) == Path("run.gri")

    def test_keeps_directory(self):
        assert grid_file_path("results/v1.0/run.dat") == Path("results/v1.0/run.gri")

    @pytest.mark.parametrize("name", [".hidden", "out/.gri"])
    def test_empty_stem(self, name):
        with pytest.raises(GridPersistenceError, match="Invalid grid file name"):
            grid_file_path(name)


class TestEncoding:
    """Tests for the binary layout."""

    def test_layout(self):
        record = GridRecord(
            version=1,
            nodes_per_dimension=(3, 5),
            lower_bound=(0.0, -1.0),
            upper_bound=(2.0, 1.0),
        )

        payload = encode_grid(record)

        assert len(payload) == 4 * 4 + 4 * 8
        assert_array_equal(np.frombuffer(payload[:16], dtype="<u4"), [1, 2, 3, 5])
        assert_array_equal(np.frombuffer(payload[16:], dtype="<f8"), [0.0, -1.0, 2.0, 1.0])
        assert decode_grid(payload) == record

    def test_truncated_header(self):
        with pytest.raises(GridPersistenceError, match="truncated"):
            decode_grid(b"\x01\x00")

    def test_truncated_body(self):
        record = GridRecord(1, (3, 3), (0.0, 0.0), (1.0, 1.0))

        with pytest.raises(GridPersistenceError, match="expected 48"):
            decode_grid(encode_grid(record)[:-8])

    def test_unknown_version(self):
        record = GridRecord(99, (3,), (0.0,), (1.0,))

        with pytest.raises(GridPersistenceError, match="Unsupported grid file version 99"):
            decode_grid(encode_grid(record))

    def test_zero_dimensions(self):
        payload = np.array([1, 0], dtype="<u4").tobytes()

        with pytest.raises(GridPersistenceError, match="0 dimensions"):
            decode_grid(payload)

    @pytest.mark.parametrize(
        "record, message",
        [
            (GridRecord(1, (1, 3), (0.0, 0.0), (1.0, 1.0)), "axis 0 has 1 nodes"),
            (GridRecord(1, (3, 3), (0.0, 1.0), (1.0, 1.0)), "axis 1 upper bound"),
            (GridRecord(1, (3,), (2.0,), (1.0,)), "does not exceed"),
            (GridRecord(1, (3,), (0.0,), (float("inf"),)), "non-finite"),
        ],
    )
    def test_invalid_contents(self, record, message):
        with pytest.raises(GridPersistenceError, match=message):
            decode_grid(encode_grid(record))


class TestSaveLoad:
    """Tests for saving and loading whole grids."""

    def test_round_trip(self, tmp_path, grid_3d):
        path = save_grid(grid_3d, tmp_path / "grid.bin")

        assert path == tmp_path / "grid.gri"
        loaded = load_grid(tmp_path / "grid")

        assert loaded.is_finalized
        assert loaded.nodes_per_dimension == grid_3d.nodes_per_dimension
        assert loaded.lower_bound == grid_3d.lower_bound
        assert loaded.upper_bound == grid_3d.upper_bound
        assert loaded.stride == grid_3d.stride
        for a, b in zip(loaded.axis_coordinates, grid_3d.axis_coordinates):
            assert_array_equal(a, b)

    def test_methods_round_trip(self, tmp_path, grid_3x3):
        grid_3x3.save(str(tmp_path / "example.txt"))

        grid = UniformGrid()
        path = grid.load(str(tmp_path / "example"))

        assert path == tmp_path / "example.gri"
        assert grid.is_finalized
        assert grid.dimension_count == 2
        assert grid.dim_index_to_flat((1, 1)) == 4

    def test_load_replaces_configuration(self, tmp_path, grid_3x3, grid_1d):
        grid_1d.save(tmp_path / "line")

        grid_3x3.load(tmp_path / "line")

        assert grid_3x3.dimension_count == 1
        assert grid_3x3.total_node_count == 11

    def test_read_grid_file(self, tmp_path, grid_1d):
        path = grid_1d.save(tmp_path / "line")
        record = read_grid_file(path)

        assert record.version == 1
        assert record.dimension_count == 1
        assert record.nodes_per_dimension == (11,)

    def test_missing_file(self, tmp_path):
        with pytest.raises(GridPersistenceError, match="Could not open"):
            load_grid(tmp_path / "missing")

    def test_missing_file_is_os_error(self, tmp_path):
        grid = UniformGrid()

        with pytest.raises(OSError):
            grid.load(tmp_path / "missing")
        assert not grid.is_finalized

    def test_failed_load_keeps_grid(self, tmp_path, grid_3x3):
        """A file describing a degenerate grid leaves the loading grid as it was."""
        bad = GridRecord(1, (1, 3), (0.0, 0.0), (1.0, 1.0))
        (tmp_path / "bad.gri").write_bytes(encode_grid(bad))

        with pytest.raises(OSError):
            grid_3x3.load(tmp_path / "bad")

        assert grid_3x3.is_finalized
        assert grid_3x3.nodes_per_dimension == (3, 3)
        assert grid_3x3.upper_bound == (2.0, 2.0)
        assert grid_3x3.dim_index_to_flat((1, 1)) == 4

    def test_load_keeps_sampler_and_rounding(self, tmp_path, grid_1d):
        grid_1d.save(tmp_path / "line")
        sampler = object()
        grid = UniformGrid(rounding_mode="half_even", sampler=sampler)

        grid.load(tmp_path / "line")

        assert grid.rounding_mode is RoundingMode.HALF_EVEN
        assert grid._sampler is sampler

    def test_unwritable_location(self, tmp_path, grid_3x3):
        with pytest.raises(GridPersistenceError, match="Could not write"):
            save_grid(grid_3x3, tmp_path / "no_such_dir" / "grid")

    def test_save_unfinalized(self, tmp_path, grid_3x3):
        grid_3x3.set_lower_bound([1.0, 1.0])

        with pytest.raises(UnfinalizedGrid):
            grid_3x3.save(tmp_path / "grid")
