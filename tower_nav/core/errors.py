"""Exceptions raised by the navigation core."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Raised when a caller breaks a grid or search precondition.

    Examples are ragged grid input, negative obstruction counts and search
    endpoints outside the grid. An unreachable target is *not* an error and
    never raises this.
    """


__all__ = ["InvalidInput"]
