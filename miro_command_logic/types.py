#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
types.py

Plain value types shared by the command logic core and the ROS node.

Units:
  - positions are centimeters (already scaled at ingestion)
  - angles are radians
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple


class CommandTag(IntEnum):
    """Command tags sent by the interpreter on the `command` topic."""
    NONE = 0
    LOOK = 1
    GO = 2
    STOP = 3


class PipelineState(IntEnum):
    """Position of the "look" pipeline within one activation."""
    IDLE = 0
    TARGET_VALID = 1
    LANDSCAPE_VALID = 2
    GOAL_VALID = 3
    PATH_PUBLISHED = 4


@dataclass(frozen=True)
class Pose2D:
    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class GesturePose:
    """Operator gesture: position in cm plus quaternion orientation (x, y, z, w)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    orientation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Point2D:
    """Target or goal position."""
    x: float
    y: float


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class Region:
    """Axis-aligned box given by center and full size, as the path planner expects."""
    center_x: float
    center_y: float
    center_z: float
    size_x: float
    size_y: float
    size_z: float
