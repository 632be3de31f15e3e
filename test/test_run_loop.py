#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""Exit status and pacing of the fixed-period loop."""

import pytest

from miro_command_logic.config import LogicConfig
from miro_command_logic.types import CommandTag


class FakeClock:
    """Monotonic clock that only moves when the loop spins."""

    def __init__(self):
        self.now = 100.0
        self.deadlines = []

    def __call__(self) -> float:
        return self.now

    def spin_until(self, deadline: float) -> None:
        self.deadlines.append(deadline)
        self.now = max(self.now, deadline)


def ok_for(ticks: int):
    remaining = [ticks]

    def ok() -> bool:
        remaining[0] -= 1
        return remaining[0] >= 0

    return ok


def test_context_shutdown_exits_zero(make_logic, services):
    clock = FakeClock()
    logic = make_logic(start=False)

    assert logic.run_loop(clock.spin_until, ok_for(3), clock=clock) == 0
    assert services.calls == ["map_landscapes"]
    assert clock.deadlines == pytest.approx([100.1, 100.2, 100.3])


def test_startup_failure_exits_one(make_logic, services):
    services.fail.add("map_landscapes")
    logic = make_logic(start=False)

    assert logic.run_loop(lambda _: None, ok_for(5)) == 1
    assert services.calls == ["map_landscapes"]


def test_startup_interrupted_exits_zero(make_logic, services):
    services.interrupt.add("map_landscapes")
    logic = make_logic(start=False)

    assert logic.run_loop(lambda _: None, ok_for(5)) == 0


@pytest.mark.parametrize("stage", ["extract_target", "sample_goal", "search_path"])
def test_fatal_look_exits_one(make_logic, services, published, stage):
    services.fail.add(stage)
    logic = make_logic(start=False)
    logic.on_command(CommandTag.LOOK)

    assert logic.run_loop(lambda _: None, ok_for(5)) == 1
    assert services.calls[-1] == stage
    assert published.paths == []


@pytest.mark.parametrize("stage", ["extract_target", "fuse_landscape", "search_path"])
def test_shutdown_mid_look_exits_zero(make_logic, services, published, stage):
    services.interrupt.add(stage)
    logic = make_logic(start=False)
    logic.on_command(CommandTag.LOOK)

    assert logic.run_loop(lambda _: None, ok_for(5)) == 0
    assert services.calls[-1] == stage
    assert published.count == 0


def test_commands_delivered_between_ticks_are_handled(make_logic, published):
    clock = FakeClock()
    logic = make_logic(start=False)

    def spin_until(deadline):
        clock.spin_until(deadline)
        if len(clock.deadlines) == 1:
            logic.on_command(CommandTag.GO)

    assert logic.run_loop(spin_until, ok_for(3), clock=clock) == 0
    assert published.enables == [True]


def test_overrun_resets_the_schedule(make_logic, services):
    clock = FakeClock()
    logic = make_logic(start=False)
    logic.on_command(CommandTag.LOOK)

    def slow_search(*args):
        clock.now += 1.0
        return services.search_path(*args)

    logic.services.search_path = slow_search

    assert logic.run_loop(clock.spin_until, ok_for(2), clock=clock) == 0
    # first tick overran its 0.1 s slot, so the next one is scheduled from now
    assert clock.deadlines == pytest.approx([101.0, 101.1])


def test_settle_drains_deliveries_before_startup(make_logic, services):
    clock = FakeClock()
    logic = make_logic(config=LogicConfig(settle_sec=2.0), start=False)

    def spin_until(deadline):
        clock.spin_until(deadline)
        logic.on_obstacle_pose(0.5, -0.5, 0.0)

    assert logic.run_loop(spin_until, ok_for(0), clock=clock) == 0
    assert clock.deadlines == [102.0]
    assert (logic.obstacle.center_x, logic.obstacle.center_y) == (50.0, -50.0)
