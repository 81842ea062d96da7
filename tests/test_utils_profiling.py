from pathlib import Path
import pstats

import pytest

from tower_nav.core.world import NavWorld
from tower_nav.systems.movement.navigation_system import NavigationSystem
from tower_nav.utils import observer
from tower_nav.utils.profiling import profile_navigation, profile_ticks


def _make_world(size=(20, 20), budget=None) -> NavWorld:
    world = NavWorld(size)
    world.navigation = NavigationSystem(world.grid, expansions_per_tick=budget)
    return world


def test_profile_ticks_creates_dump(tmp_path: Path) -> None:
    calls: list[int] = []

    def tick() -> None:
        calls.append(1)

    out = tmp_path / "prof.prof"
    result = profile_ticks(3, tick, out)

    assert out.exists()
    assert isinstance(result.stats, pstats.Stats)
    assert len(calls) == 3
    assert len(result.durations) == 3
    assert result.expansions == []
    assert result.busiest_tick is None


def test_profile_ticks_records_durations_and_counts(tmp_path: Path) -> None:
    observer._tick_durations.clear()
    counter = iter([3, 7, 2])

    result = profile_ticks(3, lambda: None, tmp_path / "prof.prof", expansions=lambda: next(counter))

    assert len(observer._tick_durations) == 3
    assert list(observer._tick_durations) == result.durations
    assert result.expansions == [3, 7, 2]
    assert result.busiest_tick == 1


def test_profile_navigation_counts_expansions_per_tick(tmp_path: Path) -> None:
    observer._tick_durations.clear()
    world = _make_world(size=(10, 1), budget=4)
    world.navigation.request_path(1, (0, 0), (9, 0))

    result = profile_navigation(world, 4, tmp_path / "nav.prof")

    # Nine expansions reach the target; the budget spreads them as 4, 4, 1
    assert result.expansions == [4, 4, 1, 0]
    assert result.total_expansions == 9
    assert result.busiest_tick == 0
    assert len(observer._tick_durations) == 4
    assert world.navigation.get_route(1) == [(0, 0), (9, 0)]
    assert "cumulative" in result.top_functions(5)


def test_profile_navigation_requires_navigation_system(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        profile_navigation(NavWorld((3, 3)), 1, tmp_path / "nav.prof")
