#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
config.py

Loads config/command_logic.yaml and resolves it into a LogicConfig.

The YAML holds the workspace geometry, grid constants, loop rate and the
topic/service names the node wires up. Every key is optional; missing keys
fall back to the defaults below, so an empty file gives the stock MiRo setup:

  grid:        resolution 40, layers 5
  workspace:   400 x 400 cm centered at the origin
  obstacle:    80 x 80 cm footprint
  goal_region: 20 x 20 cm box around the sampled goal
  ingestion:   scale 100 (mocap meters -> cm)
  loop:        10 Hz
"""

import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

try:
    from ament_index_python.packages import get_package_share_directory
    AMENT_AVAILABLE = True
except ImportError:
    AMENT_AVAILABLE = False

PACKAGE_NAME = "miro_command_logic"

DEFAULT_TOPICS = {
    "command": "command",
    "robot_pose": "Robot/ground_pose",
    "obstacle_pose": "Obstacle/ground_pose",
    "gesture_pose": "Gesture/pose",
    "path": "path",
    "enable": "enable",
    "turn": "/miro/rob01/platform/body_move",
}

DEFAULT_SERVICES = {
    "spatial_reasoner": "spatial_reasoner",
    "gesture_processing": "gesture_processing",
    "pertinence_mapper": "pertinence_mapper",
    "monte_carlo": "monte_carlo",
    "rrt_star": "rrtStarService",
}


@dataclass(frozen=True)
class LogicConfig:
    resolution: int = 40
    layers: int = 5
    hsize: float = 400.0
    vsize: float = 400.0
    obstacle_dims: Tuple[float, float] = (80.0, 80.0)
    goal_region_size: Tuple[float, float] = (20.0, 20.0)
    scale: float = 100.0
    rate_hz: float = 10.0
    settle_sec: float = 0.0
    service_wait_sec: float = 5.0
    topics: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TOPICS))
    services: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SERVICES))

    @property
    def period_sec(self) -> float:
        return 1.0 / self.rate_hz


def _default_config_path() -> pathlib.Path:
    """
    Installed package share dir first, source tree second:

      <install>/share/miro_command_logic/config/command_logic.yaml
      <src>/config/command_logic.yaml
    """
    if AMENT_AVAILABLE:
        try:
            share_dir = pathlib.Path(get_package_share_directory(PACKAGE_NAME))
            p = share_dir / "config" / "command_logic.yaml"
            if p.exists():
                return p
        except Exception:
            pass

    here = pathlib.Path(__file__).resolve()
    pkg_root = here.parents[1]
    return pkg_root / "config" / "command_logic.yaml"


def load_config_registry(path: Optional[str] = None) -> Dict[str, Any]:
    p = pathlib.Path(path) if path else _default_config_path()
    if not p.exists():
        raise FileNotFoundError(f"command_logic.yaml not found at: {str(p)}")

    data = yaml.safe_load(p.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError("command_logic.yaml must be a YAML mapping at top-level")
    return data


def _section(registry: Dict[str, Any], key: str) -> Dict[str, Any]:
    sec = registry.get(key, {})
    return sec if isinstance(sec, dict) else {}


def _pair(value: Any, default: Tuple[float, float], key: str) -> Tuple[float, float]:
    if value is None:
        return default
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{key}' must be a list of two numbers")
    return (float(value[0]), float(value[1]))


def resolve_logic_config(registry: Dict[str, Any]) -> LogicConfig:
    d = LogicConfig()
    grid = _section(registry, "grid")
    ws = _section(registry, "workspace")
    obs = _section(registry, "obstacle")
    goal = _section(registry, "goal_region")
    ing = _section(registry, "ingestion")
    loop = _section(registry, "loop")
    startup = _section(registry, "startup")

    rate_hz = float(loop.get("rate_hz", d.rate_hz))
    if rate_hz <= 0.0:
        raise ValueError("loop.rate_hz must be positive")

    resolution = int(grid.get("resolution", d.resolution))
    layers = int(grid.get("layers", d.layers))
    if resolution <= 0 or layers <= 0:
        raise ValueError("grid.resolution and grid.layers must be positive")

    topics = dict(DEFAULT_TOPICS)
    topics.update({k: str(v) for k, v in _section(registry, "topics").items()})
    services = dict(DEFAULT_SERVICES)
    services.update({k: str(v) for k, v in _section(registry, "services").items()})

    return LogicConfig(
        resolution=resolution,
        layers=layers,
        hsize=float(ws.get("hsize", d.hsize)),
        vsize=float(ws.get("vsize", d.vsize)),
        obstacle_dims=_pair(obs.get("dimensions"), d.obstacle_dims, "obstacle.dimensions"),
        goal_region_size=_pair(goal.get("size"), d.goal_region_size, "goal_region.size"),
        scale=float(ing.get("scale", d.scale)),
        rate_hz=rate_hz,
        settle_sec=max(0.0, float(startup.get("settle_sec", d.settle_sec))),
        service_wait_sec=max(0.0, float(startup.get("service_wait_sec", d.service_wait_sec))),
        topics=topics,
        services=services,
    )


def load_logic_config(path: Optional[str] = None) -> LogicConfig:
    return resolve_logic_config(load_config_registry(path))
