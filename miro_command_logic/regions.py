#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
regions.py

Geometric regions handed to the RRT* path planner, and the workspace
validity gate used between pipeline stages.

The workspace and obstacle regions are built once at startup. The world is
assumed static: the obstacle region is NOT refreshed when the obstacle pose
changes later.
"""
from __future__ import annotations

import math
from typing import Sequence

from .types import Point2D, Pose2D, Region


def build_workspace(hsize: float, vsize: float) -> Region:
    """Workspace box centered at the origin, flat in z."""
    return Region(
        center_x=0.0,
        center_y=0.0,
        center_z=0.0,
        size_x=float(hsize),
        size_y=float(vsize),
        size_z=0.0,
    )


def build_obstacle(pose: Pose2D, dims: Sequence[float]) -> Region:
    """
    Obstacle footprint around a ground pose.

    Args:
        pose: Obstacle ground pose, already scaled to cm (theta is ignored)
        dims: (size_x, size_y) of the footprint in cm
    """
    return Region(
        center_x=float(pose.x),
        center_y=float(pose.y),
        center_z=0.0,
        size_x=float(dims[0]),
        size_y=float(dims[1]),
        size_z=0.0,
    )


def build_goal_region(goal: Point2D, size: Sequence[float]) -> Region:
    """
    Box around a sampled goal, handed to RRT* as the region to reach.

    Args:
        goal: Goal position in cm
        size: (size_x, size_y) of the box in cm
    """
    return Region(
        center_x=float(goal.x),
        center_y=float(goal.y),
        center_z=0.0,
        size_x=float(size[0]),
        size_y=float(size[1]),
        size_z=0.0,
    )


def is_finite_point(point: Point2D) -> bool:
    return math.isfinite(point.x) and math.isfinite(point.y)


def is_within_workspace(point: Point2D, hsize: float, vsize: float) -> bool:
    """
    True when the point lies in [-hsize/2, hsize/2] x [-vsize/2, vsize/2].

    Bounds are inclusive: a point exactly on the edge is accepted. NaN
    compares false and is rejected here too.
    """
    hx = hsize / 2.0
    hy = vsize / 2.0
    return -hx <= point.x <= hx and -hy <= point.y <= hy


def is_valid_point(point: Point2D, hsize: float, vsize: float) -> bool:
    """
    Validity gate for targets and goals.

    Args:
        point: Candidate position in cm
        hsize: Full workspace width in cm
        vsize: Full workspace height in cm

    Returns:
        True when both coordinates are finite and inside the workspace
    """
    return is_finite_point(point) and is_within_workspace(point, hsize, vsize)
