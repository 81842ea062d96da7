"""Grid pathfinding for tower-defence agents."""

from .core.errors import InvalidInput
from .core.grid_frame import GridFrame
from .core.nav_grid import Coord, NavGrid
from .systems.movement.path_reduction import (
    ReductionMode,
    collapse_turns,
    reduce_path,
    simplify_by_visibility,
)
from .systems.movement.pathfinding import PathSearch, SearchStatus, find_path
from .systems.perception.line_of_sight import has_line_of_sight

__all__ = [
    "Coord",
    "GridFrame",
    "InvalidInput",
    "NavGrid",
    "PathSearch",
    "ReductionMode",
    "SearchStatus",
    "collapse_turns",
    "find_path",
    "has_line_of_sight",
    "reduce_path",
    "simplify_by_visibility",
]
