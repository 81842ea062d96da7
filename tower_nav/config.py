"""Configuration loader for tower_nav."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


@dataclass
class GridConfig:
    """Grid dimensions and placement in world space."""

    size: tuple[int, int] = (28, 14)
    cell_size: float = 30.0
    origin: tuple[float, float] = (0.0, 0.0)


@dataclass
class NavigationConfig:
    """Search budget and waypoint reduction for agent path requests."""

    reduction: str = "visibility"
    expansions_per_tick: int | None = 2000


@dataclass
class LoggingConfig:
    """Global log level plus optional per-module overrides."""

    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Top level configuration dataclass."""

    grid: GridConfig
    navigation: NavigationConfig
    logging: LoggingConfig


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    grid_data = data.get("grid", {}) or {}
    grid = GridConfig(
        size=tuple(int(v) for v in grid_data.get("size", [28, 14])),
        cell_size=float(grid_data.get("cell_size", 30)),
        origin=tuple(float(v) for v in grid_data.get("origin", [0, 0])),
    )

    nav_data = data.get("navigation", {}) or {}
    budget = nav_data.get("expansions_per_tick", 2000)
    navigation = NavigationConfig(
        reduction=str(nav_data.get("reduction", "visibility")),
        expansions_per_tick=int(budget) if budget is not None else None,
    )

    log_data = data.get("logging", {}) or {}
    logging_cfg = LoggingConfig(
        global_level=str(log_data.get("global_level", "INFO")).upper(),
        module_levels=dict(log_data.get("module_levels") or {}),
    )

    return Config(grid=grid, navigation=navigation, logging=logging_cfg)


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    path = Path(path)
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
    else:
        raw = {}
    return _parse_config(raw)


# Load configuration at module import time.
CONFIG = load_config()


__all__ = [
    "CONFIG",
    "CONFIG_PATH",
    "Config",
    "GridConfig",
    "NavigationConfig",
    "LoggingConfig",
    "load_config",
]
