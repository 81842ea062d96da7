"""Line-of-sight helpers."""

from __future__ import annotations

from typing import Any, Iterator

from ...core.nav_grid import Coord, NavGrid, as_coord


def line_cells(a: Any, b: Any) -> Iterator[Coord]:
    """Yield the Bresenham walk from ``a`` towards ``b``.

    The walk includes ``a`` and stops before ``b``. Steps may move along
    both axes at once.
    """

    x0, y0 = as_coord(a)
    x1, y1 = as_coord(b)

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while x0 != x1 or y0 != y1:
        yield (x0, y0)
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def has_line_of_sight(grid: NavGrid, a: Any, b: Any) -> bool:
    """Return ``True`` if no cell on the walk from ``a`` to ``b`` is obstructed.

    The destination cell itself is not checked.
    """

    for x, y in line_cells(a, b):
        if not grid.is_passable(x, y):
            return False
    return True


__all__ = ["line_cells", "has_line_of_sight"]
