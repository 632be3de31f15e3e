#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary

"""
command_logic_node.py

ROLE
----
Master node of the MiRo teleoperation stack. It turns interpreter commands
into either a planned trajectory ("look") or a controller enable flag
("go" / "stop").

Subscribes:
  command               std_msgs/UInt8            1=look 2=go 3=stop
  Robot/ground_pose     geometry_msgs/Pose2D      mocap, meters
  Obstacle/ground_pose  geometry_msgs/Pose2D      mocap, meters
  Gesture/pose          geometry_msgs/PoseStamped mocap, meters

Publishes:
  path                  miro_teleop_interfaces/Path   trajectory for the robot controller
  enable                std_msgs/Bool                 controller enable flag
  /miro/rob01/platform/body_move  geometry_msgs/Pose2D  theta = turn to face the goal

Service clients:
  spatial_reasoner      relation landscapes (once, at startup)
  gesture_processing    gesture -> target
  pertinence_mapper     target + landscapes -> pertinence landscape
  monte_carlo           target + landscape -> goal
  rrtStarService        workspace + obstacle + goal region + robot -> path

LOOP
----
Single thread, fixed period (10 Hz by default). Subscription callbacks only
enqueue into the CommandLogic inbox; each tick drains the inbox and then acts.
Service calls block the loop (spin_until_future_complete) while an activation
is running, so the period stretches during a look.

EXIT STATUS
-----------
0 on normal shutdown, including a shutdown that interrupts a pending service
call. 1 when any service call fails (startup or look).
"""

import time

import rclpy
from rclpy.node import Node

from geometry_msgs.msg import Pose, Pose2D as Pose2DMsg, PoseStamped, Vector3
from std_msgs.msg import Bool, UInt8

from miro_teleop_interfaces.msg import Path, Region as RegionMsg
from miro_teleop_interfaces.srv import (
    GestureProcessing,
    MonteCarlo,
    PertinenceMapping,
    RrtStar,
    SpatialReasoner,
)

from .audit_logger import AuditLogger
from .command_logic import CommandLogic
from .config import load_logic_config
from .services import CallResult, PipelineServices
from .types import Point2D, Point3D


def region_to_msg(region) -> RegionMsg:
    msg = RegionMsg()
    msg.center_x = float(region.center_x)
    msg.center_y = float(region.center_y)
    msg.center_z = float(region.center_z)
    msg.size_x = float(region.size_x)
    msg.size_y = float(region.size_y)
    msg.size_z = float(region.size_z)
    return msg


def point2d_to_msg(p) -> Pose2DMsg:
    msg = Pose2DMsg()
    msg.x = float(p.x)
    msg.y = float(p.y)
    msg.theta = float(getattr(p, "theta", 0.0))
    return msg


class CommandLogicNode(Node):
    def __init__(self):
        super().__init__("command_logic")

        self.declare_parameter("config_path", "")
        self.declare_parameter("audit_log_path", "")

        config_path = str(self.get_parameter("config_path").value).strip() or None
        audit_path = str(self.get_parameter("audit_log_path").value).strip() or None

        self.cfg = load_logic_config(config_path)
        topics = self.cfg.topics
        names = self.cfg.services

        # ---- Publishers
        self.path_pub = self.create_publisher(Path, topics["path"], 1)
        self.flag_pub = self.create_publisher(Bool, topics["enable"], 1)
        self.turn_pub = self.create_publisher(Pose2DMsg, topics["turn"], 10)

        # ---- Service clients
        self.cli_spat = self.create_client(SpatialReasoner, names["spatial_reasoner"])
        self.cli_gest = self.create_client(GestureProcessing, names["gesture_processing"])
        self.cli_pert = self.create_client(PertinenceMapping, names["pertinence_mapper"])
        self.cli_mont = self.create_client(MonteCarlo, names["monte_carlo"])
        self.cli_rrts = self.create_client(RrtStar, names["rrt_star"])

        self.audit = AuditLogger(self.get_logger(), log_file_path=audit_path)

        self.logic = CommandLogic(
            config=self.cfg,
            services=PipelineServices(
                map_landscapes=self._map_landscapes,
                extract_target=self._extract_target,
                fuse_landscape=self._fuse_landscape,
                sample_goal=self._sample_goal,
                search_path=self._search_path,
            ),
            publish_path=self._publish_path,
            publish_enable=self._publish_enable,
            publish_turn=self._publish_turn,
            logger=self.get_logger(),
            audit=self.audit,
        )

        # ---- Subscriptions (enqueue only)
        self.create_subscription(UInt8, topics["command"], self._on_command, 3)
        self.create_subscription(Pose2DMsg, topics["robot_pose"], self._on_robot_pose, 10)
        self.create_subscription(PoseStamped, topics["gesture_pose"], self._on_gesture, 1)
        self.create_subscription(Pose2DMsg, topics["obstacle_pose"], self._on_obstacle_pose, 1)

        self.get_logger().info("Command logic (master) node active")

    # ---------------- Subscriber callbacks ----------------

    def _on_command(self, msg: UInt8):
        self.logic.on_command(msg.data)

    def _on_robot_pose(self, msg: Pose2DMsg):
        self.logic.on_robot_pose(msg.x, msg.y, msg.theta)

    def _on_obstacle_pose(self, msg: Pose2DMsg):
        self.logic.on_obstacle_pose(msg.x, msg.y, msg.theta)

    def _on_gesture(self, msg: PoseStamped):
        p = msg.pose.position
        q = msg.pose.orientation
        self.logic.on_gesture(p.x, p.y, p.z, (q.x, q.y, q.z, q.w))

    # ---------------- Publishers ----------------

    def _publish_path(self, points):
        msg = Path()
        msg.path = [Vector3(x=float(p.x), y=float(p.y), z=float(p.z)) for p in points]
        self.path_pub.publish(msg)

    def _publish_enable(self, enabled: bool):
        self.flag_pub.publish(Bool(data=bool(enabled)))

    def _publish_turn(self, dtheta: float):
        msg = Pose2DMsg()
        msg.theta = float(dtheta)
        self.turn_pub.publish(msg)

    # ---------------- Service calls ----------------

    def _call(self, client, request) -> CallResult:
        if not client.wait_for_service(timeout_sec=self.cfg.service_wait_sec):
            if not rclpy.ok():
                return CallResult.shutdown()
            return CallResult.failure(f"service '{client.srv_name}' not available")

        future = client.call_async(request)
        rclpy.spin_until_future_complete(self, future)
        if not future.done():
            # context went down while waiting
            return CallResult.shutdown(f"shutdown while waiting for '{client.srv_name}'")

        exc = future.exception()
        if exc is not None:
            return CallResult.failure(str(exc))
        response = future.result()
        if response is None:
            return CallResult.failure(f"no response from '{client.srv_name}'")
        return CallResult.success(response)

    def _map_landscapes(self, center, dims) -> CallResult:
        req = SpatialReasoner.Request()
        req.center = point2d_to_msg(center)
        req.dimensions = [float(d) for d in dims]
        res = self._call(self.cli_spat, req)
        if not res.ok:
            return res
        return CallResult.success(list(res.value.matrices))

    def _extract_target(self, gesture) -> CallResult:
        req = GestureProcessing.Request()
        pose = Pose()
        pose.position.x = float(gesture.x)
        pose.position.y = float(gesture.y)
        pose.position.z = float(gesture.z)
        pose.orientation.x, pose.orientation.y, pose.orientation.z, pose.orientation.w = (
            float(q) for q in gesture.orientation
        )
        req.gesture = pose
        res = self._call(self.cli_gest, req)
        if not res.ok:
            return res
        t = res.value.target
        return CallResult.success(Point2D(x=t.x, y=t.y))

    def _fuse_landscape(self, target, matrices) -> CallResult:
        req = PertinenceMapping.Request()
        req.target = point2d_to_msg(target)
        req.matrices = [float(v) for v in matrices]
        res = self._call(self.cli_pert, req)
        if not res.ok:
            return res
        return CallResult.success(list(res.value.landscape))

    def _sample_goal(self, target, landscape) -> CallResult:
        req = MonteCarlo.Request()
        req.target = point2d_to_msg(target)
        req.landscape = [float(v) for v in landscape]
        res = self._call(self.cli_mont, req)
        if not res.ok:
            return res
        g = res.value.goal
        return CallResult.success(Point2D(x=g.x, y=g.y))

    def _search_path(self, workspace, obstacles, goal, init) -> CallResult:
        req = RrtStar.Request()
        req.workspace = region_to_msg(workspace)
        req.obstacles = [region_to_msg(o) for o in obstacles]
        req.goal = region_to_msg(goal)
        req.init = Vector3(x=float(init.x), y=float(init.y), z=float(init.z))
        res = self._call(self.cli_rrts, req)
        if not res.ok:
            return res
        return CallResult.success([Point3D(x=p.x, y=p.y, z=p.z) for p in res.value.path])

    # ---------------- Loop ----------------

    def _spin_until(self, deadline: float):
        while rclpy.ok():
            remaining = deadline - time.monotonic()
            if remaining <= 0.0:
                return
            rclpy.spin_once(self, timeout_sec=remaining)

    def run(self) -> int:
        """Initialize, then run the fixed-period loop. Returns the exit status."""
        return self.logic.run_loop(self._spin_until, rclpy.ok)


def main(args=None):
    rclpy.init(args=args)
    node = CommandLogicNode()
    code = 0
    try:
        code = node.run()
    except KeyboardInterrupt:
        pass
    finally:
        node.audit.close()
        node.destroy_node()
        rclpy.try_shutdown()
    return code


if __name__ == "__main__":
    raise SystemExit(main())
