#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
turn_emitter.py

"Look, MiRo!": once a path is published, turn the robot to face the goal.
This is feedback for the operator only, independent of path execution.
"""
from __future__ import annotations

import logging
import math
from typing import Callable

from .types import Point2D, Pose2D


def normalize_angle(a: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    out = math.atan2(math.sin(a), math.cos(a))
    if out <= -math.pi:
        return math.pi
    return out


def compute_heading_delta(goal: Point2D, robot: Pose2D) -> float:
    bearing = math.atan2(goal.y - robot.y, goal.x - robot.x)
    return normalize_angle(bearing - robot.theta)


class TurnEmitter:
    def __init__(self, publish_fn: Callable[[float], None], logger=None):
        self._publish = publish_fn
        self._log = logger or logging.getLogger(__name__)

    def emit(self, goal: Point2D, robot: Pose2D) -> float:
        dtheta = compute_heading_delta(goal, robot)
        self._log.info(f"Look, MiRo! turning dtheta={dtheta:+.3f} rad")
        self._publish(dtheta)
        return dtheta
