import io
import logging
from pathlib import Path

from tower_nav import main
from tower_nav.systems.movement.path_reduction import ReductionMode


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "grid:\n"
        "  size: [6, 4]\n"
        "  cell_size: 10\n"
        "navigation:\n"
        "  reduction: turns\n"
        "  expansions_per_tick: 100\n"
        "logging:\n"
        "  global_level: WARNING\n"
        "  module_levels:\n"
        "    tower_nav.test_module: ERROR\n"
        "    tower_nav.bad_level: LOUD\n"
    )
    return path


def test_bootstrap_builds_world_from_config(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    world = main.bootstrap(_write_config(tmp_path))
    assert world.grid.size == (6, 4)
    assert world.frame.cell_size == 10.0
    assert world.navigation.reduction is ReductionMode.TURNS
    assert world.navigation.expansions_per_tick == 100
    assert logging.getLogger("tower_nav.test_module").level == logging.ERROR


def test_env_overrides_config_path(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TOWER_NAV_CONFIG", str(_write_config(tmp_path)))
    monkeypatch.setenv("TOWER_NAV_LOG_LEVEL", "error")
    world = main.bootstrap()
    assert world.grid.size == (6, 4)
    assert logging.getLogger().level == logging.ERROR


def test_run_loop_executes_until_quit(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    world = main.bootstrap(_write_config(tmp_path))
    stream = io.StringIO(
        "/block 2 0 1 3\n"
        "not a command\n"
        "/request 1 0 0 5 0\n"
        "/tick\n"
        "/quit\n"
        "/block 0 0\n"
    )
    main.run_loop(world, stream)
    assert (0, 0) not in set(world.grid.blocked_cells())
    route = world.navigation.get_route(1)
    assert route[0] == (0, 0) and route[-1] == (5, 0)
    # The only gap in the wall is the bottom row
    assert any(y == 3 for _, y in route)
