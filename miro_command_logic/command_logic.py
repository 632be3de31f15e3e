#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
command_logic.py

Loop-owned context for the command logic: poses, command tag, landscapes,
static regions, the look pipeline and the motion dispatcher.

One tick:
  1) drain every pending delivery (poses, command tag), last write wins
  2) act on the current command tag
       look      -> run one pipeline activation, then clear the tag
       go / stop -> publish the enable flag, then clear the tag
       other     -> ignored, tag left as-is

Clearing the tag after handling makes commands edge-triggered: the same tag
has to be delivered again to act again. A failed look is not retried.

Exit status: run_loop() returns 1 when startup or a look fails on a service
call and 0 when the context stops (including a shutdown that lands in the
middle of a service call).

Startup ordering matters: startup() captures the obstacle region from
whatever obstacle pose is known at that moment. Deliveries drained before
startup() are used; otherwise the obstacle sits at the default origin pose
and a warning is logged.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .audit_logger import AuditLogger
from .command_state_machine import ActivationReport, LookPipeline
from .config import LogicConfig
from .landscape_cache import LandscapeCache
from .motion_dispatcher import MotionDispatcher
from .pose_store import (
    CommandDelivery,
    DeliveryInbox,
    PoseDelivery,
    PoseSource,
    PoseStore,
    ingest_gesture,
    ingest_ground_pose,
)
from .regions import build_obstacle, build_workspace
from .services import CallResult, PipelineServices
from .turn_emitter import TurnEmitter
from .types import CommandTag, PipelineState, Point3D, Region


@dataclass
class TickOutcome:
    command: int
    report: Optional[ActivationReport] = None
    enable_published: bool = False
    fatal: bool = False
    shutdown: bool = False


class CommandLogic:
    def __init__(
        self,
        config: LogicConfig,
        services: PipelineServices,
        publish_path: Callable[[List[Point3D]], None],
        publish_enable: Callable[[bool], None],
        publish_turn: Callable[[float], None],
        logger=None,
        audit: Optional[AuditLogger] = None,
    ):
        self.config = config
        self.services = services
        self._publish_path = publish_path
        self._log = logger or logging.getLogger(__name__)
        self.audit = audit

        self.poses = PoseStore()
        self.inbox = DeliveryInbox()
        self.cache = LandscapeCache(config.resolution, config.layers, logger=self._log)
        self.dispatcher = MotionDispatcher(publish_enable, logger=self._log)
        self.turn = TurnEmitter(publish_turn, logger=self._log)

        self.command: int = CommandTag.NONE
        self.state = PipelineState.IDLE
        self.workspace: Optional[Region] = None
        self.obstacle: Optional[Region] = None
        self.pipeline: Optional[LookPipeline] = None

    # ---------------- Ingestion (any thread) ----------------

    def on_command(self, tag: int) -> None:
        self.inbox.put(CommandDelivery(tag=int(tag)))

    def on_robot_pose(self, x: float, y: float, theta: float) -> None:
        pose = ingest_ground_pose(x, y, theta, self.config.scale)
        self.inbox.put(PoseDelivery(PoseSource.ROBOT, pose))

    def on_obstacle_pose(self, x: float, y: float, theta: float) -> None:
        pose = ingest_ground_pose(x, y, theta, self.config.scale)
        self.inbox.put(PoseDelivery(PoseSource.OBSTACLE, pose))

    def on_gesture(self, x: float, y: float, z: float, orientation: Sequence[float]) -> None:
        pose = ingest_gesture(x, y, z, orientation, self.config.scale)
        self.inbox.put(PoseDelivery(PoseSource.GESTURE, pose))

    # ---------------- Loop-side ----------------

    def drain(self) -> int:
        deliveries = self.inbox.drain()
        for d in deliveries:
            if isinstance(d, CommandDelivery):
                self.command = d.tag
                self._log.info("Command received from interpreter")
            else:
                self.poses.update(d.source, d.pose)
        return len(deliveries)

    def startup(self) -> CallResult:
        """Build the static regions and fetch the relation landscapes (once)."""
        cfg = self.config
        self.workspace = build_workspace(cfg.hsize, cfg.vsize)

        if not self.poses.has_update(PoseSource.OBSTACLE):
            self._log.warning("No obstacle pose received yet; obstacle region uses the default pose")
        obs_pose = self.poses.read(PoseSource.OBSTACLE)
        self.obstacle = build_obstacle(obs_pose, cfg.obstacle_dims)

        result = self.cache.initialize(self.services.map_landscapes, obs_pose, cfg.obstacle_dims)
        if result.interrupted:
            self._log.info(f"Spatial reasoner interrupted: {result.error}")
            return result
        if not result.ok:
            self._log.error(f"Failed to call spatial reasoner: {result.error}")
            return result

        self.pipeline = LookPipeline(
            services=self.services,
            cache=self.cache,
            workspace=self.workspace,
            obstacle=self.obstacle,
            publish_path=self._publish_path,
            turn_emitter=self.turn,
            hsize=cfg.hsize,
            vsize=cfg.vsize,
            goal_region_size=cfg.goal_region_size,
            logger=self._log,
        )
        return result

    def tick(self) -> TickOutcome:
        self.drain()
        outcome = TickOutcome(command=self.command)

        if self.command == CommandTag.LOOK:
            if self.pipeline is None:
                raise RuntimeError("startup() must succeed before the loop runs")

            self.state = PipelineState.IDLE
            t0 = time.monotonic()
            report = self.pipeline.run_activation(
                self.poses.read(PoseSource.GESTURE),
                self.poses.read(PoseSource.ROBOT),
            )
            self.state = report.state
            if self.audit:
                self.audit.log_activation(report, duration_s=time.monotonic() - t0)

            outcome.report = report
            outcome.fatal = report.fatal
            outcome.shutdown = report.interrupted
            self.command = CommandTag.NONE

        elif self.command in (CommandTag.GO, CommandTag.STOP):
            self.dispatcher.handle(self.command)
            if self.audit:
                self.audit.log_motion(self.dispatcher.enabled)
            outcome.enable_published = True
            self.command = CommandTag.NONE

        return outcome

    def run_loop(
        self,
        spin_until: Callable[[float], None],
        ok: Callable[[], bool],
        clock: Callable[[], float] = time.monotonic,
    ) -> int:
        """
        Startup, then the fixed-period loop. Returns the process exit status.

        Args:
            spin_until: processes callbacks until the given clock deadline
            ok: False once the process should stop
            clock: monotonic time source, seconds

        Returns:
            1 when a service call failed, 0 on shutdown
        """
        cfg = self.config
        if cfg.settle_sec > 0.0:
            self._log.info(f"Waiting {cfg.settle_sec:.1f}s for mocap before initialization")
            spin_until(clock() + cfg.settle_sec)
            self.drain()

        result = self.startup()
        if result.interrupted:
            return 0
        if not result.ok:
            return 1

        next_tick = clock()
        while ok():
            outcome = self.tick()
            if outcome.fatal:
                return 1
            if outcome.shutdown:
                return 0

            next_tick += cfg.period_sec
            now = clock()
            if next_tick < now:
                # a look activation overran the period
                next_tick = now
            spin_until(next_tick)

        return 0
