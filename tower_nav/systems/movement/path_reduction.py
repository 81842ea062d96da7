"""Passes that shrink a raw cell-by-cell path into a waypoint list."""

from __future__ import annotations

from enum import Enum
from math import gcd
from typing import Any, List, Sequence

from ...core.errors import InvalidInput
from ...core.nav_grid import Coord, NavGrid, as_coord
from ..perception.line_of_sight import has_line_of_sight


class ReductionMode(Enum):
    """Which reduction passes :func:`reduce_path` applies."""

    NONE = "none"
    TURNS = "turns"
    VISIBILITY = "visibility"
    BOTH = "both"

    @classmethod
    def parse(cls, value: "ReductionMode | str") -> "ReductionMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(m.value for m in cls)
            raise InvalidInput(f"Unknown reduction mode {value!r} (expected one of: {choices})") from exc


def _direction(a: Coord, b: Coord) -> Coord:
    """Return the step from ``a`` to ``b`` reduced to its smallest integer form."""

    dx, dy = b[0] - a[0], b[1] - a[1]
    div = gcd(abs(dx), abs(dy))
    if div == 0:
        return (0, 0)
    return (dx // div, dy // div)


def collapse_turns(path: Sequence[Any]) -> List[Coord]:
    """Keep the endpoints and every point where the path changes direction.

    Directions are compared after reduction, so ``(1, -1)`` and ``(2, -2)``
    count as the same heading. This keeps the pass stable on waypoint lists
    whose points are not one step apart.
    """

    points = [as_coord(p) for p in path]
    if len(points) < 3:
        return points

    waypoints = [points[0]]
    for prev, current, nxt in zip(points, points[1:], points[2:]):
        if _direction(prev, current) != _direction(current, nxt):
            waypoints.append(current)
    waypoints.append(points[-1])
    return waypoints


def _visibility_pass(grid: NavGrid, points: List[Coord]) -> List[Coord]:
    last = len(points) - 1
    reduced = [points[last]]
    anchor = last
    visible = last

    for i in range(last - 1, -1, -1):
        if has_line_of_sight(grid, points[anchor], points[i]):
            visible = i
            continue
        if visible != anchor:
            anchor = visible
            reduced.append(points[anchor])
        visible = i

    reduced.append(points[0])
    reduced.reverse()
    return reduced


def simplify_by_visibility(grid: NavGrid, path: Sequence[Any]) -> List[Coord]:
    """Drop waypoints that a straight unobstructed line can skip.

    Works backwards from the target. The anchor starts at the target; each
    earlier point the anchor can see becomes the latest visible point. When
    the anchor loses sight, the latest visible point is recorded and becomes
    the new anchor. The start is always kept.

    Neighbouring path points are treated as reachable from each other even
    when the grid has changed underneath the path, so no point is recorded
    twice.

    One backward pass can keep a waypoint whose neighbours in the result see
    each other, so passes repeat until the waypoint list stops shrinking.
    Every pass returns a subsequence of its input, which bounds the loop.
    """

    points = [as_coord(p) for p in path]
    if len(points) < 3:
        return points

    while True:
        reduced = _visibility_pass(grid, points)
        if len(reduced) == len(points):
            return reduced
        points = reduced


def reduce_path(
    grid: NavGrid, path: Sequence[Any], mode: "ReductionMode | str" = ReductionMode.VISIBILITY
) -> List[Coord]:
    """Apply the passes selected by ``mode``; ``BOTH`` collapses turns first."""

    mode = ReductionMode.parse(mode)
    if mode is ReductionMode.NONE:
        return [as_coord(p) for p in path]
    if mode is ReductionMode.TURNS:
        return collapse_turns(path)
    if mode is ReductionMode.VISIBILITY:
        return simplify_by_visibility(grid, path)
    return simplify_by_visibility(grid, collapse_turns(path))


__all__ = ["ReductionMode", "collapse_turns", "simplify_by_visibility", "reduce_path"]
