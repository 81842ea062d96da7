"""Implementations of development CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from ...core.errors import InvalidInput
from ...core.nav_grid import Coord
from ...core.world import NavWorld
from ...systems.movement.path_reduction import reduce_path
from ...systems.movement.pathfinding import find_path
from ..observer import search_stats
from ..profiling import profile_navigation
from .terminal_view import get_view

logger = logging.getLogger(__name__)


DEFAULT_PROFILE_PATH = Path("profile.prof")


def _ints(args: List[str], count: int, usage: str) -> List[int]:
    if len(args) < count:
        raise ValueError(f"usage: {usage}")
    try:
        return [int(a) for a in args[:count]]
    except ValueError as exc:
        raise ValueError(f"usage: {usage}") from exc


def block(world: NavWorld, args: List[str], delta: int = 1) -> None:
    """Add (or with ``delta=-1`` remove) obstruction over ``x y [w h]``."""

    usage = "/block x y [w h]" if delta > 0 else "/unblock x y [w h]"
    x, y = _ints(args, 2, usage)
    w, h = _ints(args[2:], 2, usage) if len(args) >= 4 else (1, 1)
    with world.grid.lock:
        world.grid.add_obstruction_area(x, y, w, h, delta)
    logger.info(
        "%s %dx%d at (%d,%d); grid revision %d",
        "Blocked" if delta > 0 else "Unblocked", w, h, x, y, world.grid.revision,
    )


def path(world: NavWorld, args: List[str]) -> List[Coord]:
    """Search ``x0 y0 x1 y1`` and reduce with the optional mode argument."""

    x0, y0, x1, y1 = _ints(args, 4, "/path x0 y0 x1 y1 [none|turns|visibility|both]")
    mode: Any = args[4] if len(args) > 4 else None
    if mode is None:
        mode = world.navigation.reduction if world.navigation is not None else "visibility"

    with world.grid.lock:
        raw = find_path(world.grid, (x0, y0), (x1, y1))
        waypoints = reduce_path(world.grid, raw, mode)

    if not raw:
        logger.info("No path from (%d,%d) to (%d,%d)", x0, y0, x1, y1)
    else:
        logger.info(
            "Path of %d cells, %d waypoints: %s (world %s)",
            len(raw), len(waypoints), waypoints, world.frame.path_to_world(waypoints),
        )
    get_view().render(world.grid, raw)
    return waypoints


def request(world: NavWorld, args: List[str]) -> None:
    agent_id, x0, y0, x1, y1 = _ints(args, 5, "/request id x0 y0 x1 y1")
    if world.navigation is None:
        logger.warning("Navigation system not initialised.")
        return
    world.navigation.request_path(agent_id, (x0, y0), (x1, y1))
    logger.info("Queued path request for agent %d", agent_id)


def tick(world: NavWorld, args: List[str]) -> None:
    n = _ints(args, 1, "/tick [n]")[0] if args else 1
    for _ in range(max(n, 0)):
        world.step()
    pending = world.navigation.pending if world.navigation is not None else []
    logger.info("Advanced to tick %d; %d request(s) pending", world.tick, len(pending))


def route(world: NavWorld, args: List[str]) -> Optional[List[Coord]]:
    agent_id = _ints(args, 1, "/route id")[0]
    if world.navigation is None:
        logger.warning("Navigation system not initialised.")
        return None
    waypoints = world.navigation.get_route(agent_id)
    if waypoints is None:
        logger.info("No current route for agent %d", agent_id)
    elif not waypoints:
        logger.info("Agent %d: target unreachable", agent_id)
    else:
        logger.info(
            "Agent %d route: %s (world %s)",
            agent_id, waypoints, world.frame.path_to_world(waypoints),
        )
        get_view().render(world.grid, waypoints)
    return waypoints


def view(world: NavWorld, state: Dict[str, Any]) -> None:
    v = get_view()
    state["view"] = v.toggle()
    logger.info("Terminal view %s", "enabled" if state["view"] else "disabled")
    v.render(world.grid)


def profile(world: NavWorld, ticks_str: str | None = None) -> None:
    try:
        n = int(ticks_str) if ticks_str else 100
    except ValueError:
        logger.warning("Invalid tick count '%s'; using 100", ticks_str)
        n = 100
    if n <= 0:
        raise ValueError("usage: /profile [n] with n > 0")
    result = profile_navigation(world, n, DEFAULT_PROFILE_PATH)
    logger.info(
        "Profiled %d ticks to %s: %d expansions, busiest tick %s; search stats: %s",
        n, DEFAULT_PROFILE_PATH, result.total_expansions, result.busiest_tick, search_stats(),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Top functions:\n%s", result.top_functions(10))


def help_command(state: Dict[str, Any]) -> None:
    help_lines = [
        "\nAvailable commands:",
        "  /help                       - Show this help message.",
        "  /block x y [w h]            - Add obstruction over a rectangle.",
        "  /unblock x y [w h]          - Remove obstruction over a rectangle.",
        "  /path x0 y0 x1 y1 [mode]    - Find and reduce a path (none|turns|visibility|both).",
        "  /request id x0 y0 x1 y1     - Queue a path request for an agent.",
        "  /tick [n]                   - Run n navigation ticks (default 1).",
        "  /route id                   - Show the current route of an agent.",
        "  /view                       - Toggle ASCII grid rendering.",
        "  /profile [n]                - cProfile n navigation ticks.",
        "  /quit                       - Exit the application.\n",
    ]
    for line in help_lines:
        logger.info(line)


def execute(command: str, args: list[str], world: NavWorld, state: Dict[str, Any]) -> Any:
    """Run ``command`` with ``args``. Bad input is logged, never raised."""

    if "running" not in state:
        state["running"] = True
    cmd_lower = command.lower()

    try:
        if cmd_lower == "help":
            help_command(state)
        elif cmd_lower == "block":
            block(world, args, 1)
        elif cmd_lower == "unblock":
            block(world, args, -1)
        elif cmd_lower == "path":
            return path(world, args)
        elif cmd_lower == "request":
            request(world, args)
        elif cmd_lower == "tick":
            tick(world, args)
        elif cmd_lower == "route":
            return route(world, args)
        elif cmd_lower == "view":
            view(world, state)
        elif cmd_lower == "profile":
            profile(world, args[0] if args else None)
        elif cmd_lower in ("quit", "exit"):
            state["running"] = False
        else:
            logger.warning("Unknown command: /%s. Type /help for a list of commands.", command)
    except (InvalidInput, ValueError) as exc:
        logger.error("/%s failed: %s", cmd_lower, exc)
    return None


__all__ = [
    "block",
    "path",
    "request",
    "tick",
    "route",
    "view",
    "profile",
    "help_command",
    "execute",
]
