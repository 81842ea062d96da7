"""Runtime observability helpers."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Tuple

# Rolling history of the last 1000 tick durations in seconds
_TICK_HISTORY_LEN = 1000
_tick_durations: Deque[float] = deque(maxlen=_TICK_HISTORY_LEN)

# Rolling history of finished searches: (duration seconds, expansions, found)
_SEARCH_HISTORY_LEN = 1000
_searches: Deque[Tuple[float, int, bool]] = deque(maxlen=_SEARCH_HISTORY_LEN)

# Global in-memory list for logged events when no destination is supplied
_events: List[Dict[str, Any]] = []


def record_tick(duration: float) -> None:
    """Append a tick ``duration`` in seconds to the rolling history."""

    _tick_durations.append(duration)


def average_fps() -> float:
    """Return the average ticks per second over the recorded history."""

    if not _tick_durations:
        return 0.0
    avg = sum(_tick_durations) / len(_tick_durations)
    return 1.0 / avg if avg > 0 else float("inf")


def record_search(duration: float, expanded: int, found: bool) -> None:
    """Remember how long a finished search took and how many nodes it expanded."""

    _searches.append((duration, expanded, found))


def search_stats() -> Dict[str, float]:
    """Summarise the recorded searches."""

    count = len(_searches)
    if not count:
        return {"count": 0, "found": 0, "avg_ms": 0.0, "avg_expanded": 0.0, "max_expanded": 0}
    return {
        "count": count,
        "found": sum(1 for _, _, found in _searches if found),
        "avg_ms": sum(d for d, _, _ in _searches) / count * 1000.0,
        "avg_expanded": sum(e for _, e, _ in _searches) / count,
        "max_expanded": max(e for _, e, _ in _searches),
    }


def log_event(
    event_type: str,
    data: Dict[str, Any],
    log: List[Dict[str, Any]] | None = None,
) -> None:
    """Append an event dict to ``log`` or the internal event buffer."""

    event = {"type": event_type}
    event.update(data)
    if log is None:
        _events.append(event)
    else:
        log.append(event)


__all__ = [
    "record_tick",
    "average_fps",
    "record_search",
    "search_stats",
    "log_event",
    "_tick_durations",
    "_searches",
    "_events",
]
