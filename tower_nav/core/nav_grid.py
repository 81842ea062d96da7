"""Navigability grid with additive obstruction counts."""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence, Tuple
import logging
import operator
import threading

from .errors import InvalidInput

logger = logging.getLogger(__name__)


Coord = Tuple[int, int]

_ASCII_CELLS = {".": 0, "#": 1}


def _cell_index(value: Any, point: Any) -> int:
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
    else:
        try:
            return operator.index(value)
        except TypeError:
            pass
    raise InvalidInput(f"Not a grid coordinate: {point!r}")


def as_coord(point: Any) -> Coord:
    """Return ``point`` as an ``(x, y)`` tuple.

    Accepts tuples/lists of two integers or any object with ``x`` and ``y``
    attributes (such as :class:`~tower_nav.core.components.position.Position`).
    Integral floats such as ``2.0`` are accepted; fractional values and
    non-numbers raise :class:`InvalidInput` instead of being truncated.
    """

    if hasattr(point, "x") and hasattr(point, "y"):
        x, y = point.x, point.y
    else:
        try:
            x, y = point
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Not a grid coordinate: {point!r}") from exc
    return (_cell_index(x, point), _cell_index(y, point))


class NavGrid:
    """Rectangular matrix of cells holding non-negative obstruction counts.

    Every obstacle covering a cell adds one to its count and removing the
    obstacle subtracts one again, so overlapping placements can be revoked
    independently. A cell is passable iff its count is exactly zero.
    """

    def __init__(self, width: int, height: int) -> None:
        if not isinstance(width, int) or not isinstance(height, int):
            raise InvalidInput("Grid dimensions must be integers")
        if width <= 0 or height <= 0:
            raise InvalidInput(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        # Row-major: _counts[y][x]
        self._counts: List[List[int]] = [[0] * width for _ in range(height)]
        self.revision: int = 0
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[Any]]) -> "NavGrid":
        """Build a grid from ``columns[x][y]``.

        Cells may be plain ints, ``{"obstruction": n}`` dicts or objects
        exposing an ``obstruction`` attribute. All columns must have the same length.
        """

        if not columns or not columns[0]:
            raise InvalidInput("Grid input must have at least one cell")
        width = len(columns)
        height = len(columns[0])
        for x, column in enumerate(columns):
            if len(column) != height:
                raise InvalidInput(
                    f"Grid is not rectangular: column {x} has {len(column)} cells, expected {height}"
                )

        grid = cls(width, height)
        for x, column in enumerate(columns):
            for y, cell in enumerate(column):
                if isinstance(cell, dict):
                    count = cell.get("obstruction")
                else:
                    count = getattr(cell, "obstruction", cell)
                if not isinstance(count, int) or count < 0:
                    raise InvalidInput(f"Invalid obstruction count {count!r} at ({x}, {y})")
                grid._counts[y][x] = count
        return grid

    @classmethod
    def from_ascii(cls, rows: Sequence[str]) -> "NavGrid":
        """Build a grid from text rows: ``.`` open, ``#`` blocked, digits are counts."""

        rows = [row for row in rows if row.strip()]
        if not rows:
            raise InvalidInput("Grid input must have at least one row")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise InvalidInput(
                    f"Grid is not rectangular: row {y} has {len(row)} cells, expected {width}"
                )

        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                if char in _ASCII_CELLS:
                    grid._counts[y][x] = _ASCII_CELLS[char]
                elif char.isdigit():
                    grid._counts[y][x] = int(char)
                else:
                    raise InvalidInput(f"Unknown grid glyph {char!r} at ({x}, {y})")
        return grid

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def is_passable(self, x: int, y: int) -> bool:
        """Return ``True`` if ``(x, y)`` is inside the grid and unobstructed."""

        return self.in_bounds(x, y) and self._counts[y][x] == 0

    def obstruction(self, x: int, y: int) -> int:
        """Return the obstruction count at ``(x, y)``; off-grid cells report 1."""

        if not self.in_bounds(x, y):
            return 1
        return self._counts[y][x]

    def check_coord(self, point: Any) -> Coord:
        """Normalise ``point`` and raise :class:`InvalidInput` if it is off-grid."""

        coord = as_coord(point)
        if not self.in_bounds(*coord):
            raise InvalidInput(
                f"Coordinate {coord} outside grid of size {self._width}x{self._height}"
            )
        return coord

    def blocked_cells(self) -> Iterator[Coord]:
        """Yield every obstructed coordinate in row-major order."""

        for y, row in enumerate(self._counts):
            for x, count in enumerate(row):
                if count:
                    yield (x, y)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_obstruction(self, x: int, y: int, delta: int = 1) -> None:
        """Adjust the count at ``(x, y)`` by ``delta``.

        Off-grid coordinates are ignored. Counts never drop below zero.
        """

        if not self.in_bounds(x, y) or delta == 0:
            return
        current = self._counts[y][x]
        updated = current + delta
        if updated < 0:
            logger.warning(
                "Obstruction underflow at (%d,%d): count %d, delta %d; clamping to 0",
                x, y, current, delta,
            )
            updated = 0
        if updated != current:
            self._counts[y][x] = updated
            self.revision += 1

    def remove_obstruction(self, x: int, y: int, delta: int = 1) -> None:
        """Inverse of :meth:`add_obstruction`."""

        self.add_obstruction(x, y, -delta)

    def add_obstruction_area(
        self, x: int, y: int, width: int, height: int, delta: int = 1
    ) -> None:
        """Apply :meth:`add_obstruction` to a ``width`` x ``height`` rectangle at ``(x, y)``."""

        for cx in range(x, x + width):
            for cy in range(y, y + height):
                self.add_obstruction(cx, cy, delta)

    def snapshot(self) -> "NavGrid":
        """Return an independent copy with the same counts and revision."""

        with self.lock:
            copy = NavGrid(self._width, self._height)
            copy._counts = [list(row) for row in self._counts]
            copy.revision = self.revision
        return copy

    def __repr__(self) -> str:
        return f"NavGrid({self._width}x{self._height}, revision={self.revision})"


__all__ = ["Coord", "NavGrid", "as_coord"]
