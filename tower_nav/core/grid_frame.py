"""Conversion between world positions and grid cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple
import math

from .errors import InvalidInput
from .nav_grid import Coord


@dataclass(frozen=True)
class GridFrame:
    """Place a grid in world space.

    ``origin`` is the world position of cell ``(0, 0)`` and ``cell_size`` the
    side length of one cell in world units.
    """

    cell_size: float
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise InvalidInput(f"cell_size must be positive, got {self.cell_size}")

    def grid_to_world(self, x: int, y: int) -> Tuple[float, float]:
        """Return the world position of cell ``(x, y)``."""

        ox, oy = self.origin
        return (ox + x * self.cell_size, oy + y * self.cell_size)

    def world_to_grid(self, wx: float, wy: float) -> Coord:
        """Return the cell nearest to world position ``(wx, wy)``.

        Halves round up, so a point exactly between two cells maps to the
        higher index.
        """

        ox, oy = self.origin
        gx = math.floor((wx - ox) / self.cell_size + 0.5)
        gy = math.floor((wy - oy) / self.cell_size + 0.5)
        return (int(gx), int(gy))

    def path_to_world(self, path: Iterable[Coord]) -> List[Tuple[float, float]]:
        return [self.grid_to_world(x, y) for x, y in path]


__all__ = ["GridFrame"]
