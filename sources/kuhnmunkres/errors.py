from __future__ import annotations

__all__ = ["DimensionError", "UnsolvableError"]


class DimensionError(ValueError):
    """
    Raised when a cost matrix is not a non-empty, rectangular, two-dimensional grid.
    """


class UnsolvableError(ValueError):
    """
    Raised when every complete assignment would use a disallowed (infinite) cost.
    """
