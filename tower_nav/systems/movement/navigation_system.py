# tower_nav/systems/movement/navigation_system.py
"""Navigation system serving per-agent path requests against a shared grid."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import time

from ...core.nav_grid import Coord, NavGrid
from ...utils.observer import log_event, record_search
from .path_reduction import ReductionMode, reduce_path
from .pathfinding import PathSearch, SearchStatus

logger = logging.getLogger(__name__)


@dataclass
class PathRequest:
    """A pending search for one agent."""

    agent_id: int
    start: Coord
    target: Coord
    search: PathSearch
    revision: int
    submitted_tick: int | None = None
    elapsed: float = 0.0


@dataclass
class Route:
    """Waypoints computed for an agent against a given grid revision."""

    waypoints: List[Coord] = field(default_factory=list)
    revision: int = 0
    tick: int | None = None


class NavigationSystem:
    """Run budgeted A* searches for many agents, once per tick.

    Requests are served in submission order. ``expansions_per_tick`` caps the
    node expansions spent per :meth:`update` across all requests; a search
    that runs out of budget resumes on the next tick. Searches are restarted
    when the grid changed since they began, and stored routes are dropped
    once the grid changes.
    """

    def __init__(
        self,
        grid: NavGrid,
        reduction: ReductionMode | str = ReductionMode.VISIBILITY,
        expansions_per_tick: int | None = None,
        event_log: List[Dict[str, Any]] | None = None,
    ) -> None:
        if expansions_per_tick is not None and expansions_per_tick <= 0:
            raise ValueError("expansions_per_tick must be positive or None")
        self.grid = grid
        self.reduction = ReductionMode.parse(reduction)
        self.expansions_per_tick = expansions_per_tick
        self.event_log = event_log if event_log is not None else []
        self._pending: "OrderedDict[int, PathRequest]" = OrderedDict()
        self._routes: Dict[int, Route] = {}
        self._last_tick: int | None = None
        # Node expansions spent during the most recent update
        self.last_expansions = 0

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def request_path(self, agent_id: int, start: Any, target: Any) -> None:
        """Queue a path request for ``agent_id``, replacing any pending one."""

        with self.grid.lock:
            search = PathSearch(self.grid, start, target)
            request = PathRequest(
                agent_id=agent_id,
                start=search.start,
                target=search.target,
                search=search,
                revision=self.grid.revision,
                submitted_tick=self._last_tick,
            )
        old = self._pending.pop(agent_id, None)
        if old is not None:
            old.search.cancel()
        self._pending[agent_id] = request
        self._routes.pop(agent_id, None)

    def cancel(self, agent_id: int) -> None:
        """Forget the pending request and stored route of ``agent_id``."""

        request = self._pending.pop(agent_id, None)
        if request is not None:
            request.search.cancel()
        self._routes.pop(agent_id, None)

    @property
    def pending(self) -> List[int]:
        return list(self._pending.keys())

    def get_route(self, agent_id: int) -> Optional[List[Coord]]:
        """Return the waypoints for ``agent_id`` if still valid for the current grid.

        An empty list means the target was unreachable. ``None`` means no
        route is known: never requested, still pending, or computed against
        an older grid.
        """

        route = self._routes.get(agent_id)
        if route is None:
            return None
        if route.revision != self.grid.revision:
            del self._routes[agent_id]
            return None
        return list(route.waypoints)

    # ------------------------------------------------------------------
    # Main update
    # ------------------------------------------------------------------
    def update(self, tick: int) -> None:
        """Advance pending searches within this tick's expansion budget."""

        self._last_tick = tick
        self.last_expansions = 0
        budget = self.expansions_per_tick

        with self.grid.lock:
            revision = self.grid.revision
            for agent_id in list(self._pending.keys()):
                if budget is not None and budget <= 0:
                    break
                request = self._pending[agent_id]

                if request.revision != revision:
                    logger.debug(
                        "[Tick %s] NavigationSystem: grid changed, restarting search for agent %s",
                        tick, agent_id,
                    )
                    request.search = PathSearch(self.grid, request.start, request.target)
                    request.revision = revision
                    request.elapsed = 0.0

                before = request.search.expanded
                started = time.perf_counter()
                status = request.search.step(budget)
                request.elapsed += time.perf_counter() - started
                spent = request.search.expanded - before
                self.last_expansions += spent
                if budget is not None:
                    budget -= spent

                if status is SearchStatus.SEARCHING:
                    continue

                del self._pending[agent_id]
                self._complete(request, tick)

    def _complete(self, request: PathRequest, tick: int) -> None:
        search = request.search
        found = search.status is SearchStatus.FOUND
        waypoints = reduce_path(self.grid, search.path, self.reduction) if found else []
        self._routes[request.agent_id] = Route(waypoints, request.revision, tick)
        record_search(request.elapsed, search.expanded, found)

        if found:
            logger.debug(
                "[Tick %s] NavigationSystem: agent %s path %s -> %s, %d cells, %d waypoints",
                tick, request.agent_id, request.start, request.target,
                len(search.path), len(waypoints),
            )
            log_event(
                "path_found",
                {
                    "agent": request.agent_id,
                    "start": request.start,
                    "target": request.target,
                    "waypoints": len(waypoints),
                    "tick": tick,
                },
                self.event_log,
            )
        else:
            logger.debug(
                "[Tick %s] NavigationSystem: agent %s target %s unreachable from %s",
                tick, request.agent_id, request.target, request.start,
            )
            log_event(
                "path_unreachable",
                {
                    "agent": request.agent_id,
                    "start": request.start,
                    "target": request.target,
                    "tick": tick,
                },
                self.event_log,
            )


__all__ = ["PathRequest", "Route", "NavigationSystem"]
