#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
pose_store.py

Latest-known poses from motion capture, plus the inbox that funnels
subscription deliveries to the loop.

Threading model
---------------
Subscription callbacks never touch the store directly. They push a delivery
into DeliveryInbox, and the loop drains the inbox at the top of each tick.
That keeps a single owner for every mutation, so nothing changes under an
activation that is in progress (service calls spin the executor, and the
callbacks that fire during that spin only enqueue).

Ingestion scaling
-----------------
Motion capture reports meters. Everything downstream works in centimeters,
so positions are multiplied by the scale factor exactly once, here.
Orientation passes through unchanged.
"""
from __future__ import annotations

import queue
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Set, Union

from .types import GesturePose, Pose2D

DEFAULT_SCALE = 100.0


class PoseSource(Enum):
    ROBOT = "robot"
    OBSTACLE = "obstacle"
    GESTURE = "gesture"


Pose = Union[Pose2D, GesturePose]


def ingest_ground_pose(x: float, y: float, theta: float, scale: float = DEFAULT_SCALE) -> Pose2D:
    """
    Convert a mocap ground pose to the internal frame.

    Args:
        x, y: Position in meters
        theta: Heading in radians, passed through unchanged
        scale: Position multiplier (meters -> cm by default)

    Returns:
        Pose2D in cm
    """
    return Pose2D(x=scale * float(x), y=scale * float(y), theta=float(theta))


def ingest_gesture(
    x: float,
    y: float,
    z: float,
    orientation: Sequence[float],
    scale: float = DEFAULT_SCALE,
) -> GesturePose:
    """Same as ingest_ground_pose for the hand pose. The quaternion is copied as-is."""
    return GesturePose(
        x=scale * float(x),
        y=scale * float(y),
        z=scale * float(z),
        orientation=tuple(float(q) for q in orientation),
    )


class PoseStore:
    """
    Last-write-wins pose table.

    Entries start at default (zero) poses. update() swaps in a new immutable
    pose object, so a reader can never observe a half-written pose.
    """

    def __init__(self):
        self._poses: Dict[PoseSource, Pose] = {
            PoseSource.ROBOT: Pose2D(),
            PoseSource.OBSTACLE: Pose2D(),
            PoseSource.GESTURE: GesturePose(),
        }
        self._updated: Set[PoseSource] = set()

    def update(self, source: PoseSource, pose: Pose) -> None:
        """Replace the pose for source and mark it as received."""
        self._poses[source] = pose
        self._updated.add(source)

    def read(self, source: PoseSource) -> Pose:
        return self._poses[source]

    def has_update(self, source: PoseSource) -> bool:
        """False until the first delivery for source; read() still returns the default."""
        return source in self._updated


@dataclass(frozen=True)
class PoseDelivery:
    source: PoseSource
    pose: Pose


@dataclass(frozen=True)
class CommandDelivery:
    tag: int


Delivery = Union[PoseDelivery, CommandDelivery]


class DeliveryInbox:
    """Thread-safe FIFO of pending deliveries."""

    def __init__(self):
        self._q: "queue.SimpleQueue[Delivery]" = queue.SimpleQueue()

    def put(self, delivery: Delivery) -> None:
        self._q.put(delivery)

    def drain(self) -> List[Delivery]:
        """Take every pending delivery, oldest first. Never blocks."""
        out: List[Delivery] = []
        while True:
            try:
                out.append(self._q.get_nowait())
            except queue.Empty:
                return out
