#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
services.py

Contract boundary for the remote computations the command logic chains:

  spatial_reasoner    -> relation landscapes (once, at startup)
  gesture_processing  -> target
  pertinence_mapper   -> fused landscape
  monte_carlo         -> goal
  rrt_star            -> trajectory

Each call returns a CallResult instead of raising. Three outcomes:

  success      the call completed; the value is judged by the pipeline gates
  failure      the service could not complete (unavailable, transport error,
               empty response); fatal for the process
  interrupted  the ROS context shut down while waiting; not a service fault,
               the process exits normally

The ROS node provides rclpy-backed callables; tests provide plain functions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

from .types import GesturePose, Point2D, Point3D, Pose2D, Region


@dataclass(frozen=True)
class CallResult:
    ok: bool
    value: Any = None
    error: str = ""
    interrupted: bool = False

    @classmethod
    def success(cls, value: Any) -> "CallResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "CallResult":
        return cls(ok=False, error=error)

    @classmethod
    def shutdown(cls, error: str = "shutdown requested") -> "CallResult":
        return cls(ok=False, error=error, interrupted=True)


@dataclass
class PipelineServices:
    """
    The five remote calls, as callables returning CallResult.

    map_landscapes(center: Pose2D, dims: Sequence[float])
        value: flat list of NZ*RES*RES floats
    extract_target(gesture: GesturePose)
        value: Point2D
    fuse_landscape(target: Point2D, matrices: List[float])
        value: flat list of RES*RES floats
    sample_goal(target: Point2D, landscape: List[float])
        value: Point2D
    search_path(workspace: Region, obstacles: List[Region], goal: Region, init: Point3D)
        value: list of Point3D
    """
    map_landscapes: Callable[[Pose2D, Sequence[float]], CallResult]
    extract_target: Callable[[GesturePose], CallResult]
    fuse_landscape: Callable[[Point2D, List[float]], CallResult]
    sample_goal: Callable[[Point2D, List[float]], CallResult]
    search_path: Callable[[Region, List[Region], Region, Point3D], CallResult]
