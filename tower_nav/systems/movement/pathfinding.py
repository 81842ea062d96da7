"""Grid-based A* pathfinding over a :class:`NavGrid`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from heapq import heappop, heappush
from typing import Any, Dict, List, Set, Tuple
import logging

from ...core.nav_grid import Coord, NavGrid

logger = logging.getLogger(__name__)


# Up, right, down, left. The order decides which of several equal-length
# paths is returned.
_DIRECTIONS: Tuple[Coord, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))

_NO_PARENT = -1


class SearchStatus(Enum):
    """Lifecycle of a :class:`PathSearch`."""

    SEARCHING = "searching"
    FOUND = "found"
    UNREACHABLE = "unreachable"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class SearchNode:
    """A discovered cell. ``parent`` is an index into the search's node arena."""

    x: int
    y: int
    g: int
    h: int
    f: int
    parent: int = _NO_PARENT


def _heuristic(a: Coord, b: Coord) -> int:
    """Return estimated distance between two points.

    This uses Manhattan distance which is admissible and consistent for a
    4-neighbour grid with unit step cost.
    """

    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _neighbors(grid: NavGrid, x: int, y: int) -> List[Coord]:
    """Return the passable cardinal neighbours of ``(x, y)``."""

    result = []
    for dx, dy in _DIRECTIONS:
        nx, ny = x + dx, y + dy
        if grid.is_passable(nx, ny):
            result.append((nx, ny))
    return result


class PathSearch:
    """Interruptible A* search between two cells of ``grid``.

    Nodes live in an arena (``self.nodes``) and refer to their predecessor by
    index. The open set is a heap keyed on ``(f, arena index)`` so that nodes
    with equal ``f`` are expanded in discovery order.

    Call :meth:`step` with an expansion budget to spread a search over several
    ticks, or :meth:`run` to finish it in one go.
    """

    def __init__(self, grid: NavGrid, start: Any, target: Any) -> None:
        self.grid = grid
        self.start = grid.check_coord(start)
        self.target = grid.check_coord(target)

        self.nodes: List[SearchNode] = []
        self._open: List[Tuple[int, int]] = []
        self._index: Dict[Coord, int] = {}
        self._closed: Set[Coord] = set()

        self.status = SearchStatus.SEARCHING
        self.path: List[Coord] = []
        self.expanded = 0

        h = _heuristic(self.start, self.target)
        self._discover(self.start, 0, h, _NO_PARENT)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _discover(self, coord: Coord, g: int, h: int, parent: int) -> None:
        idx = len(self.nodes)
        self.nodes.append(SearchNode(coord[0], coord[1], g, h, g + h, parent))
        self._index[coord] = idx
        heappush(self._open, (g + h, idx))

    def _reconstruct(self, idx: int) -> List[Coord]:
        path: List[Coord] = []
        while idx != _NO_PARENT:
            node = self.nodes[idx]
            path.append((node.x, node.y))
            idx = node.parent
        path.reverse()
        return path

    def _finish(self, status: SearchStatus) -> None:
        self.status = status
        logger.debug(
            "Search %s -> %s finished: %s after %d expansions (%d nodes)",
            self.start, self.target, status.value, self.expanded, len(self.nodes),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def done(self) -> bool:
        return self.status is not SearchStatus.SEARCHING

    def cancel(self) -> None:
        """Abandon the search. Later :meth:`step` calls do nothing."""

        if not self.done:
            self._finish(SearchStatus.CANCELLED)

    def step(self, max_expansions: int | None = None) -> SearchStatus:
        """Expand up to ``max_expansions`` nodes (all if ``None``) and return the status."""

        budget = max_expansions
        while not self.done:
            if budget is not None and budget <= 0:
                break

            if not self._open:
                self._finish(SearchStatus.UNREACHABLE)
                break

            f, idx = heappop(self._open)
            current = self.nodes[idx]
            coord = (current.x, current.y)
            # Stale entry left behind by an improvement, or already expanded
            if f != current.f or coord in self._closed:
                continue

            if coord == self.target:
                self.path = self._reconstruct(idx)
                self._finish(SearchStatus.FOUND)
                break

            self._closed.add(coord)
            self.expanded += 1
            if budget is not None:
                budget -= 1

            for n in _neighbors(self.grid, current.x, current.y):
                if n in self._closed:
                    continue
                tentative_g = current.g + 1
                known = self._index.get(n)
                if known is None:
                    self._discover(n, tentative_g, _heuristic(n, self.target), idx)
                    continue

                node = self.nodes[known]
                if tentative_g >= node.g:
                    continue
                node.parent = idx
                node.g = tentative_g
                node.h = _heuristic(n, self.target)
                node.f = node.g + node.h
                heappush(self._open, (node.f, known))

        return self.status

    def run(self) -> List[Coord]:
        """Search to completion and return the path (empty if none)."""

        self.step()
        return self.path


def find_path(grid: NavGrid, start: Any, target: Any) -> List[Coord]:
    """Return the shortest 4-connected path from ``start`` to ``target``.

    The path includes both endpoints. An empty list means the target cannot
    be reached; that is a normal outcome, not an error. Raises
    :class:`~tower_nav.core.errors.InvalidInput` if either endpoint is off
    the grid.
    """

    return PathSearch(grid, start, target).run()


__all__ = ["SearchStatus", "SearchNode", "PathSearch", "find_path"]
