"""cProfile helpers for measuring navigation tick performance."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional
import cProfile
import io
import logging
import pstats
import time

from ..core.world import NavWorld
from .observer import record_tick

logger = logging.getLogger(__name__)


@dataclass
class TickProfile:
    """Outcome of a profiled run of ticks."""

    profiler: cProfile.Profile
    durations: List[float] = field(default_factory=list)
    # Empty unless an expansion counter was supplied
    expansions: List[int] = field(default_factory=list)

    @property
    def stats(self) -> pstats.Stats:
        return pstats.Stats(self.profiler)

    @property
    def total_expansions(self) -> int:
        return sum(self.expansions)

    @property
    def busiest_tick(self) -> Optional[int]:
        """Index of the tick that expanded the most nodes, if counted."""

        if not self.expansions:
            return None
        return max(range(len(self.expansions)), key=self.expansions.__getitem__)

    def top_functions(self, limit: int = 10) -> str:
        buf = io.StringIO()
        pstats.Stats(self.profiler, stream=buf).sort_stats("cumulative").print_stats(limit)
        return buf.getvalue()


def profile_ticks(
    n: int,
    tick_callback: Callable[[], None],
    out_path: str | Path = "profile.prof",
    expansions: Callable[[], int] | None = None,
) -> TickProfile:
    """Run ``tick_callback`` ``n`` times under cProfile and dump to ``out_path``.

    Each tick's wall time goes to :func:`~tower_nav.utils.observer.record_tick`.
    When ``expansions`` is given it is called after every tick and its value
    is kept as that tick's node expansion count.
    """

    profiler = cProfile.Profile()
    result_durations: List[float] = []
    result_expansions: List[int] = []
    for _ in range(n):
        started = time.perf_counter()
        profiler.enable()
        tick_callback()
        profiler.disable()
        duration = time.perf_counter() - started
        record_tick(duration)
        result_durations.append(duration)
        if expansions is not None:
            result_expansions.append(expansions())

    profiler.dump_stats(str(Path(out_path)))
    return TickProfile(profiler, result_durations, result_expansions)


def profile_navigation(world: NavWorld, n: int, out_path: str | Path = "profile.prof") -> TickProfile:
    """Profile ``n`` world ticks, counting the navigation system's expansions."""

    nav = world.navigation
    if nav is None:
        raise ValueError("world has no navigation system to profile")

    result = profile_ticks(n, world.step, out_path, expansions=lambda: nav.last_expansions)
    logger.debug(
        "Profiled %d navigation ticks: %d expansions, busiest tick %s",
        n, result.total_expansions, result.busiest_tick,
    )
    return result


__all__ = ["TickProfile", "profile_ticks", "profile_navigation"]
