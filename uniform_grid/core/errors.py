"""Exception hierarchy for uniform grid construction and queries.

Every error derives from :class:`GridError` and from the closest builtin
exception, so callers catching ``ValueError`` or ``IndexError`` keep working.
"""


class GridError(Exception):
    """Base class for all grid errors."""

    pass


class InvalidConfiguration(GridError, ValueError):
    """Raised when per-axis settings are missing or do not match the dimension count."""

    pass


class DegenerateAxis(GridError, ValueError):
    """Raised by finalize when an axis has fewer than 2 nodes or an empty extent."""

    def __init__(self, axis: int, reason: str):
        self.axis = axis
        super().__init__(f"Axis {axis} is degenerate: {reason}")


class IndexOutOfRange(GridError, IndexError):
    """Raised by the checked conversion variants for indices outside the grid."""

    pass


class PointOutOfBounds(IndexOutOfRange):
    """Raised by the checked continuous lookups for points outside the grid bounds."""

    pass


class UnfinalizedGrid(GridError, RuntimeError):
    """Raised when a query runs before finalize or after the configuration changed."""

    pass


class GridPersistenceError(GridError, OSError):
    """Raised when a grid file cannot be written, opened or decoded."""

    pass


__all__ = [
    "GridError",
    "InvalidConfiguration",
    "DegenerateAxis",
    "IndexOutOfRange",
    "PointOutOfBounds",
    "UnfinalizedGrid",
    "GridPersistenceError",
]
