"""ASCII terminal renderer for navigation grids and paths."""

from __future__ import annotations

import sys
from typing import Any, Dict, Iterable, Optional

from ...core.nav_grid import Coord, NavGrid, as_coord


# Basic ANSI colour codes used by :func:`render_grid`
_COLOURS = {
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "reset": "\x1b[0m",
}

_GLYPH_COLOURS = {
    "#": "red",
    "*": "yellow",
    "S": "green",
    "T": "cyan",
    ".": "white",
}


def render_grid(
    grid: NavGrid, path: Optional[Iterable[Any]] = None, colour: bool = False
) -> str:
    """Return ``grid`` as text, one row per line.

    ``.`` is open, ``#`` obstructed, ``*`` a path cell, ``S``/``T`` the
    first and last path cells.
    """

    marks: Dict[Coord, str] = {}
    points = [as_coord(p) for p in path] if path else []
    for p in points:
        marks[p] = "*"
    if points:
        marks[points[0]] = "S"
        marks[points[-1]] = "T"

    lines: list[str] = []
    for y in range(grid.height):
        row: list[str] = []
        for x in range(grid.width):
            glyph = marks.get((x, y)) or ("." if grid.is_passable(x, y) else "#")
            if colour:
                row.append(f"{_COLOURS[_GLYPH_COLOURS[glyph]]}{glyph}")
            else:
                row.append(glyph)
        if colour:
            row.append(_COLOURS["reset"])
        lines.append("".join(row))
    return "\n".join(lines)


class TerminalView:
    """Toggleable grid viewer writing to ``stdout``."""

    def __init__(self, colour: bool = True) -> None:
        self.enabled: bool = False
        self.colour = colour

    def toggle(self) -> bool:
        """Toggle rendering. Returns ``True`` if enabled after toggle."""

        self.enabled = not self.enabled
        return self.enabled

    def render(self, grid: NavGrid, path: Optional[Iterable[Any]] = None) -> None:
        if not self.enabled:
            return
        sys.stdout.write(render_grid(grid, path, colour=self.colour) + "\n")
        sys.stdout.flush()


_VIEW = TerminalView()


def get_view() -> TerminalView:
    """Return the module-level :class:`TerminalView` instance."""

    return _VIEW


__all__ = ["render_grid", "TerminalView", "get_view"]
