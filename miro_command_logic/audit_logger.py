#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary

"""
audit_logger.py

Structured audit trail for operator commands handled by the command logic.

One event per handled command:
- "look": how far the pipeline got, why it stopped, target/goal, path length,
  heading correction, wall time of the activation
- "go" / "stop": the enable flag that was published

Events go to the ROS logger (or stdlib logging when no logger is given) as
one human-readable line, and optionally to a JSON-lines file for after-action
review.

Usage:
  audit = AuditLogger(node.get_logger(), log_file_path="/tmp/command_logic_audit.jsonl")
  audit.log_activation(report, duration_s=0.8)
  audit.log_motion(enabled=True)
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import List, Optional

from .command_state_machine import ActivationReport
from .types import CommandTag


@dataclass
class ActivationAuditEvent:
    timestamp: float  # Unix timestamp
    command: str  # look, go, stop
    outcome: str  # ok, aborted, fatal, interrupted
    final_state: str  # PipelineState name at the end of the activation
    furthest_state: str  # Last state entered before an abort/failure
    reason: Optional[str] = None
    target: Optional[List[float]] = None
    goal: Optional[List[float]] = None
    path_points: int = 0
    heading_delta: Optional[float] = None
    enabled: Optional[bool] = None
    duration_s: Optional[float] = None


class AuditLogger:
    def __init__(self, logger=None, log_file_path: Optional[str] = None):
        self.logger = logger or logging.getLogger("audit.command_logic")
        self.log_file_path = log_file_path

        if log_file_path:
            try:
                self.log_file = open(log_file_path, "a")
            except OSError as e:
                self.logger.warning(f"Could not open audit log file {log_file_path}: {e}")
                self.log_file = None
        else:
            self.log_file = None

    def log_activation(self, report: ActivationReport, duration_s: Optional[float] = None) -> ActivationAuditEvent:
        event = ActivationAuditEvent(
            timestamp=time.time(),
            command=CommandTag.LOOK.name.lower(),
            outcome=report.outcome,
            final_state=report.state.name,
            furthest_state=report.furthest_state.name,
            reason=report.reason or None,
            target=[report.target.x, report.target.y] if report.target else None,
            goal=[report.goal.x, report.goal.y] if report.goal else None,
            path_points=len(report.trajectory),
            heading_delta=report.heading_delta,
            duration_s=duration_s,
        )
        self._write(event)
        return event

    def log_motion(self, enabled: bool) -> ActivationAuditEvent:
        tag = CommandTag.GO if enabled else CommandTag.STOP
        event = ActivationAuditEvent(
            timestamp=time.time(),
            command=tag.name.lower(),
            outcome="ok",
            final_state="-",
            furthest_state="-",
            enabled=enabled,
        )
        self._write(event)
        return event

    def _write(self, event: ActivationAuditEvent) -> None:
        msg = f"[AUDIT] cmd={event.command} outcome={event.outcome}"
        if event.command == "look":
            msg += f" state={event.final_state} reached={event.furthest_state} path_points={event.path_points}"
        if event.enabled is not None:
            msg += f" enabled={event.enabled}"
        if event.duration_s is not None:
            msg += f" duration_s={event.duration_s:.2f}"
        if event.reason:
            msg += f" | {event.reason}"

        self.logger.info(msg)

        if self.log_file:
            try:
                self.log_file.write(json.dumps(asdict(event), separators=(",", ":")) + "\n")
                self.log_file.flush()
            except (OSError, ValueError) as e:
                self.logger.warning(f"Failed to write audit log: {e}")

    def close(self):
        if self.log_file:
            self.log_file.close()
            self.log_file = None
