"""Grid file persistence."""

from uniform_grid.io.persistence import (
    GridRecord,
    decode_grid,
    encode_grid,
    grid_file_path,
    load_grid,
    read_grid_file,
    save_grid,
    write_grid_file,
)

__all__ = [
    "GridRecord",
    "decode_grid",
    "encode_grid",
    "grid_file_path",
    "load_grid",
    "read_grid_file",
    "save_grid",
    "write_grid_file",
]
