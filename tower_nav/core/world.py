"""Simple world container for the navigation grid and its systems."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple, TYPE_CHECKING

from .grid_frame import GridFrame
from .nav_grid import NavGrid

if TYPE_CHECKING:
    from ..systems.movement.navigation_system import NavigationSystem


class NavWorld:
    """Lightweight holder for the nav grid, its world frame and the navigation system."""

    def __init__(self, size: Tuple[int, int], cell_size: float = 1.0, origin: Tuple[float, float] = (0.0, 0.0)):
        width, height = size
        self.grid = NavGrid(width, height)
        self.frame = GridFrame(cell_size, origin)

        # Populated during bootstrap.
        self.navigation: "NavigationSystem" | None = None
        self.event_log: List[Dict[str, Any]] = []
        self.tick: int = 0

    @property
    def size(self) -> Tuple[int, int]:
        return self.grid.size

    def step(self) -> None:
        """Advance one tick, letting the navigation system serve requests."""

        if self.navigation is not None:
            self.navigation.update(self.tick)
        self.tick += 1


__all__ = ["NavWorld"]
