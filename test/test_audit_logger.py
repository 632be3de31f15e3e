#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""Audit trail of handled commands."""

import json

from miro_command_logic.audit_logger import AuditLogger
from miro_command_logic.types import CommandTag, Point2D


def _read(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_activation_events_written_as_json_lines(tmp_path, make_logic, services):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(log_file_path=str(path))
    logic = make_logic(audit=audit)

    logic.on_command(CommandTag.LOOK)
    logic.tick()
    services.goal = Point2D(500.0, 0.0)
    logic.on_command(CommandTag.LOOK)
    logic.tick()
    logic.on_command(CommandTag.GO)
    logic.tick()
    audit.close()

    ok, aborted, go = _read(path)
    assert ok["command"] == "look"
    assert ok["outcome"] == "ok"
    assert ok["final_state"] == "PATH_PUBLISHED"
    assert ok["path_points"] == 3
    assert ok["target"] == [50.0, 20.0]
    assert ok["duration_s"] >= 0.0

    assert aborted["outcome"] == "aborted"
    assert aborted["final_state"] == "IDLE"
    assert aborted["furthest_state"] == "LANDSCAPE_VALID"
    assert aborted["reason"] == "Invalid goal position"
    assert aborted["goal"] is None

    assert go["command"] == "go"
    assert go["enabled"] is True


def test_fatal_activation_is_recorded(tmp_path, make_logic, services):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(log_file_path=str(path))
    logic = make_logic(audit=audit)
    services.fail.add("search_path")

    logic.on_command(CommandTag.LOOK)
    assert logic.tick().fatal
    audit.close()

    (event,) = _read(path)
    assert event["outcome"] == "fatal"
    assert event["final_state"] == "GOAL_VALID"
    assert event["reason"].startswith("Failed to call RRT* Path Planner")


def test_no_file_sink(caplog):
    audit = AuditLogger()
    with caplog.at_level("INFO"):
        event = audit.log_motion(False)
    assert event.command == "stop"
    assert "[AUDIT] cmd=stop" in caplog.text
    audit.close()


def test_unwritable_path_falls_back_to_log_only(tmp_path, caplog):
    with caplog.at_level("WARNING"):
        audit = AuditLogger(log_file_path=str(tmp_path / "missing" / "audit.jsonl"))
    assert audit.log_file is None
    assert "Could not open audit log file" in caplog.text
