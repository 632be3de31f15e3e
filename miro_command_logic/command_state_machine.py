#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
command_state_machine.py

The "look" pipeline. One activation chains four remote calls and gates each
result before moving on:

  IDLE            gesture_processing -> target    (finite + inside workspace)
  TARGET_VALID    pertinence_mapper  -> landscape (first cell finite)
  LANDSCAPE_VALID monte_carlo        -> goal      (finite + inside workspace)
  GOAL_VALID      rrt_star           -> path      (published as-is)
  PATH_PUBLISHED  turn to face the goal

Three ways an activation stops early:
  - the call itself fails  -> report.fatal = True, nothing else is published,
                              the loop decides to terminate
  - shutdown mid-call      -> report.interrupted = True, nothing else is
                              published, not a service fault
  - the call returns junk  -> activation aborted, state back to IDLE,
                              wait for the next "look"

The landscape gate only looks at landscape[0]. It is a cheap "did the mapper
give us numbers" check, not a full grid scan.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .landscape_cache import LandscapeCache
from .regions import build_goal_region, is_finite_point, is_valid_point, is_within_workspace
from .services import CallResult, PipelineServices
from .turn_emitter import TurnEmitter
from .types import GesturePose, PipelineState, Point2D, Point3D, Pose2D, Region


@dataclass
class ActivationReport:
    """What one activation did. state_history lists every state entered, in order."""
    state: PipelineState = PipelineState.IDLE
    fatal: bool = False
    interrupted: bool = False
    reason: str = ""
    target: Optional[Point2D] = None
    goal: Optional[Point2D] = None
    trajectory: List[Point3D] = field(default_factory=list)
    heading_delta: Optional[float] = None
    state_history: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])

    @property
    def completed(self) -> bool:
        return self.state == PipelineState.PATH_PUBLISHED

    @property
    def furthest_state(self) -> PipelineState:
        return max(self.state_history)

    @property
    def outcome(self) -> str:
        if self.fatal:
            return "fatal"
        if self.interrupted:
            return "interrupted"
        return "ok" if self.completed else "aborted"


class LookPipeline:
    def __init__(
        self,
        services: PipelineServices,
        cache: LandscapeCache,
        workspace: Region,
        obstacle: Region,
        publish_path: Callable[[List[Point3D]], None],
        turn_emitter: TurnEmitter,
        hsize: float = 400.0,
        vsize: float = 400.0,
        goal_region_size: Sequence[float] = (20.0, 20.0),
        logger=None,
    ):
        self._services = services
        self._cache = cache
        self._workspace = workspace
        self._obstacle = obstacle
        self._publish_path = publish_path
        self._turn = turn_emitter
        self.hsize = float(hsize)
        self.vsize = float(vsize)
        self.goal_region_size = tuple(goal_region_size)
        self._log = logger or logging.getLogger(__name__)

    # ---------------- Transitions ----------------

    def _advance(self, report: ActivationReport, nxt: PipelineState) -> None:
        if nxt != report.state + 1:
            raise RuntimeError(f"illegal pipeline transition {report.state.name} -> {nxt.name}")
        report.state = nxt
        report.state_history.append(nxt)

    def _abort(self, report: ActivationReport, reason: str) -> ActivationReport:
        self._log.info(reason)
        report.state = PipelineState.IDLE
        report.reason = reason
        return report

    def _fatal(self, report: ActivationReport, service: str, result: CallResult) -> ActivationReport:
        if result.interrupted:
            self._log.info(f"{service} interrupted: {result.error}")
            report.interrupted = True
            report.reason = result.error
            return report

        reason = f"Failed to call {service}"
        if result.error:
            reason += f": {result.error}"
        self._log.error(reason)
        report.fatal = True
        report.reason = reason
        return report

    # ---------------- Activation ----------------

    def run_activation(self, gesture: GesturePose, robot: Pose2D) -> ActivationReport:
        report = ActivationReport()

        # 1) gesture -> target
        self._log.info("Calling Gesture Processing service")
        self._log.info(f"Gesture x: {gesture.x:f}")
        res = self._services.extract_target(gesture)
        if not res.ok:
            return self._fatal(report, "Gesture Processing", res)

        target: Point2D = res.value
        if not is_finite_point(target):
            return self._abort(report, "Invalid target: please try again")
        if not is_within_workspace(target, self.hsize, self.vsize):
            return self._abort(report, "Target out of the bounds")
        report.target = target
        self._log.info(f"Target obtained: ({target.x:f},{target.y:f})")
        self._advance(report, PipelineState.TARGET_VALID)

        # 2) target + relation landscapes -> pertinence landscape
        self._log.info("Calling Pertinence Mapping service")
        res = self._services.fuse_landscape(target, self._cache.flat())
        if not res.ok:
            return self._fatal(report, "Pertinence Mapping", res)

        landscape = [float(v) for v in (res.value or [])]
        if not landscape or not math.isfinite(landscape[0]):
            return self._abort(report, "Invalid pertinence mapping")
        self._log.info("Landscapes mapped")
        self._advance(report, PipelineState.LANDSCAPE_VALID)

        # 3) target + landscape -> goal
        self._log.info("Calling Monte Carlo Simulation service")
        res = self._services.sample_goal(target, landscape)
        if not res.ok:
            return self._fatal(report, "Monte Carlo service", res)

        goal: Point2D = res.value
        if not is_valid_point(goal, self.hsize, self.vsize):
            return self._abort(report, "Invalid goal position")
        report.goal = goal
        self._log.info(f"Goal obtained: ({goal.x:f},{goal.y:f})")
        self._advance(report, PipelineState.GOAL_VALID)

        # 4) regions + robot position -> trajectory
        self._log.info("Calling RRT* Path Planner service")
        init = Point3D(x=robot.x, y=robot.y, z=0.0)
        goal_reg = build_goal_region(goal, self.goal_region_size)
        res = self._services.search_path(self._workspace, [self._obstacle], goal_reg, init)
        if not res.ok:
            return self._fatal(report, "RRT* Path Planner", res)

        self._log.info("Path found: Publishing...")
        path = list(res.value or [])
        for i, p in enumerate(path):
            self._log.info(f"Point {i}: ({p.x:f},{p.y:f})")
        self._publish_path(path)
        report.trajectory = path
        self._advance(report, PipelineState.PATH_PUBLISHED)

        # 5) face the goal
        report.heading_delta = self._turn.emit(goal, robot)
        return report
