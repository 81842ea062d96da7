# tower_nav/main.py
"""World bootstrap and interactive development loop."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
import logging
import os
import sys

from dotenv import load_dotenv

from .config import CONFIG_PATH, Config, load_config
from .core.world import NavWorld
from .systems.movement.navigation_system import NavigationSystem
from .utils.cli.command_parser import parse_command
from .utils.cli.commands import execute

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(cfg: Config, level_override: str | None = None) -> None:
    """Apply the global and per-module log levels from ``cfg``."""

    log_level_str = (level_override or cfg.logging.global_level).upper()
    numeric_level = getattr(logging, log_level_str, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)

    for module_name, level_str in cfg.logging.module_levels.items():
        module_numeric_level = getattr(logging, str(level_str).upper(), None)
        if isinstance(module_numeric_level, int):
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning("Invalid log level '%s' for module '%s' in config.", level_str, module_name)


def bootstrap(config_path: str | Path | None = None) -> NavWorld:
    """Build a :class:`NavWorld` from config, honouring ``.env`` overrides."""

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    actual_config_path = Path(config_path or os.getenv("TOWER_NAV_CONFIG") or CONFIG_PATH)
    cfg = load_config(actual_config_path)
    configure_logging(cfg, os.getenv("TOWER_NAV_LOG_LEVEL"))

    world = NavWorld(cfg.grid.size, cfg.grid.cell_size, cfg.grid.origin)
    world.navigation = NavigationSystem(
        world.grid,
        reduction=cfg.navigation.reduction,
        expansions_per_tick=cfg.navigation.expansions_per_tick,
        event_log=world.event_log,
    )
    logger.info(
        "[Bootstrap] Grid %dx%d, reduction=%s, expansions_per_tick=%s",
        world.grid.width, world.grid.height,
        world.navigation.reduction.value, cfg.navigation.expansions_per_tick,
    )
    return world


def run_loop(world: NavWorld, stream: Any = None) -> None:
    """Read slash commands from ``stream`` (stdin by default) until ``/quit`` or EOF."""

    stream = stream if stream is not None else sys.stdin
    state: Dict[str, Any] = {"running": True}
    logger.info("Type commands prefixed with '/' (try /help).")
    for line in stream:
        cmd = parse_command(line)
        if cmd is None:
            continue
        execute(cmd.name, cmd.args, world, state)
        if not state["running"]:
            break
    logger.info("Exiting.")


def main() -> None:
    world = bootstrap()
    try:
        run_loop(world)
    except KeyboardInterrupt:
        logger.info("Interrupted.")


if __name__ == "__main__":
    main()
