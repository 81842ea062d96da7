import random

import pytest

from tower_nav.core.errors import InvalidInput
from tower_nav.core.nav_grid import NavGrid
from tower_nav.systems.movement.path_reduction import (
    ReductionMode,
    collapse_turns,
    reduce_path,
    simplify_by_visibility,
)
from tower_nav.systems.movement.pathfinding import find_path
from tower_nav.systems.perception.line_of_sight import has_line_of_sight


def _is_subsequence(sub, seq) -> bool:
    it = iter(seq)
    return all(any(p == q for q in it) for p in sub)


def _random_grid(seed: int, size=(9, 7), density: float = 0.25) -> NavGrid:
    rng = random.Random(seed)
    grid = NavGrid(*size)
    for x in range(grid.width):
        for y in range(grid.height):
            if rng.random() < density:
                grid.add_obstruction(x, y)
    return grid


def _random_paths(grid: NavGrid, seed: int, count: int = 15):
    rng = random.Random(seed)
    open_cells = [(x, y) for x in range(grid.width) for y in range(grid.height) if grid.is_passable(x, y)]
    for _ in range(count):
        path = find_path(grid, rng.choice(open_cells), rng.choice(open_cells))
        if path:
            yield path


# ---------- Turn collapse ---------------------------------------------------


def test_collapse_straight_row():
    path = [(x, 0) for x in range(10)]
    assert collapse_turns(path) == [(0, 0), (9, 0)]


def test_collapse_keeps_turns_only():
    path = [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (3, 2)]
    assert collapse_turns(path) == [(0, 0), (2, 0), (2, 2), (3, 2)]


@pytest.mark.parametrize("path", [[], [(0, 0)], [(0, 0), (1, 0)]])
def test_collapse_short_paths_unchanged(path):
    result = collapse_turns(path)
    assert result == path
    assert result is not path


def test_collapse_is_idempotent():
    path = [(0, 0), (0, 1), (1, 1), (2, 1), (2, 2), (2, 3), (3, 3)]
    once = collapse_turns(path)
    assert collapse_turns(once) == once


def test_collapse_treats_scaled_steps_as_one_direction():
    waypoints = [(9, 0), (8, 1), (7, 2), (5, 4)]
    assert collapse_turns(waypoints) == [(9, 0), (5, 4)]
    assert collapse_turns([(0, 0), (0, 2), (0, 3), (1, 3)]) == [(0, 0), (0, 3), (1, 3)]


# ---------- Visibility simplification ---------------------------------------


def test_visibility_straight_line_open_grid():
    grid = NavGrid(10, 10)
    assert simplify_by_visibility(grid, [(x, 4) for x in range(10)]) == [(0, 4), (9, 4)]
    assert simplify_by_visibility(grid, [(3, y) for y in range(10)]) == [(3, 0), (3, 9)]


def test_visibility_cuts_corner_on_open_grid():
    grid = NavGrid(3, 3)
    path = find_path(grid, (0, 0), (2, 2))
    assert simplify_by_visibility(grid, path) == [(0, 0), (2, 2)]


def test_visibility_keeps_corner_around_obstacle():
    grid = NavGrid(3, 3)
    grid.add_obstruction(1, 1)
    path = [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    simplified = simplify_by_visibility(grid, path)
    assert simplified == [(0, 0), (1, 0), (2, 2)]
    assert simplify_by_visibility(grid, simplified) == simplified


def test_visibility_drops_waypoint_hidden_only_from_skipped_point():
    grid = NavGrid(5, 3)
    grid.add_obstruction(3, 1)
    # (2,2) is hidden from the target, so a single backward pass keeps (2,1);
    # the target still sees the start along the top row.
    path = [(0, 0), (1, 0), (1, 1), (1, 2), (2, 2), (2, 1), (2, 0), (3, 0), (4, 0)]
    assert simplify_by_visibility(grid, path) == [(0, 0), (4, 0)]


@pytest.mark.parametrize("path", [[], [(0, 0)], [(0, 0), (1, 0)]])
def test_visibility_short_paths_unchanged(path):
    assert simplify_by_visibility(NavGrid(3, 3), path) == path


def test_visibility_never_repeats_points_on_stale_grid():
    grid = NavGrid(5, 1)
    path = [(x, 0) for x in range(5)]
    # Obstacle placed on the path after it was computed
    grid.add_obstruction(3, 0)
    simplified = simplify_by_visibility(grid, path)
    assert simplified[0] == (0, 0) and simplified[-1] == (4, 0)
    assert len(simplified) == len(set(simplified))
    assert _is_subsequence(simplified, path)


@pytest.mark.parametrize("seed", range(6))
def test_reducers_preserve_endpoints_and_order(seed):
    grid = _random_grid(seed)
    for path in _random_paths(grid, seed):
        for reduced in (collapse_turns(path), simplify_by_visibility(grid, path)):
            assert reduced[0] == path[0] and reduced[-1] == path[-1]
            assert _is_subsequence(reduced, path)
            assert len(reduced) <= len(path)


@pytest.mark.parametrize("seed", range(6))
def test_visibility_segments_are_walkable(seed):
    grid = _random_grid(seed)
    for path in _random_paths(grid, seed):
        simplified = simplify_by_visibility(grid, path)
        index = {p: i for i, p in enumerate(path)}
        for a, b in zip(simplified, simplified[1:]):
            # Each kept point is seen from the next one, or follows it directly.
            assert has_line_of_sight(grid, b, a) or index[b] - index[a] == 1


# ---------- Combined ---------------------------------------------------------


def test_reduce_path_modes():
    grid = NavGrid(3, 3)
    path = find_path(grid, (0, 0), (2, 2))
    assert reduce_path(grid, path, ReductionMode.NONE) == path
    assert reduce_path(grid, path, "turns") == [(0, 0), (2, 0), (2, 2)]
    assert reduce_path(grid, path, "VISIBILITY") == [(0, 0), (2, 2)]
    assert reduce_path(grid, path, ReductionMode.BOTH) == [(0, 0), (2, 2)]


def test_reduce_path_unknown_mode():
    with pytest.raises(InvalidInput):
        reduce_path(NavGrid(2, 2), [(0, 0)], "smooth")


def test_reducers_compose_in_either_order():
    grid = NavGrid(3, 3)
    grid.add_obstruction(1, 1)
    path = [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    a = simplify_by_visibility(grid, collapse_turns(path))
    b = collapse_turns(simplify_by_visibility(grid, path))
    for result in (a, b):
        assert result[0] == (0, 0) and result[-1] == (2, 2)
        assert _is_subsequence(result, path)


@pytest.mark.parametrize("seed", range(30))
def test_visibility_is_idempotent_on_random_grids(seed):
    grid = _random_grid(seed, size=(12, 10), density=0.3)
    for path in _random_paths(grid, seed, count=10):
        once = simplify_by_visibility(grid, path)
        assert simplify_by_visibility(grid, once) == once


@pytest.mark.parametrize("seed", range(30))
def test_collapse_is_idempotent_on_random_grids(seed):
    grid = _random_grid(seed, size=(12, 10), density=0.3)
    for path in _random_paths(grid, seed, count=10):
        for collapsed in (
            collapse_turns(path),
            collapse_turns(simplify_by_visibility(grid, path)),
        ):
            assert collapse_turns(collapsed) == collapsed
            assert collapsed[0] == path[0] and collapsed[-1] == path[-1]
