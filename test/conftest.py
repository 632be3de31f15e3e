#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""Shared fakes: in-process planning services and publish recorders."""

from typing import List

import pytest

from miro_command_logic.command_logic import CommandLogic
from miro_command_logic.config import LogicConfig
from miro_command_logic.services import CallResult, PipelineServices
from miro_command_logic.types import Point2D, Point3D


class FakeServices:
    """Scriptable stand-in for the five planning services."""

    def __init__(self, resolution: int = 40, layers: int = 5):
        self.calls: List[str] = []
        self.fail = set()
        self.interrupt = set()
        self.matrices = [0.5] * (layers * resolution * resolution)
        self.target = Point2D(50.0, 20.0)
        self.landscape = [0.25] * (resolution * resolution)
        self.goal = Point2D(100.0, 0.0)
        self.path = [Point3D(0.0, 0.0), Point3D(50.0, 0.0), Point3D(100.0, 0.0)]
        self.requests = {}

    def _answer(self, name, value, **request):
        self.calls.append(name)
        self.requests[name] = request
        if name in self.interrupt:
            return CallResult.shutdown()
        if name in self.fail:
            return CallResult.failure(f"{name} unavailable")
        return CallResult.success(value)

    def map_landscapes(self, center, dims):
        return self._answer("map_landscapes", self.matrices, center=center, dims=list(dims))

    def extract_target(self, gesture):
        return self._answer("extract_target", self.target, gesture=gesture)

    def fuse_landscape(self, target, matrices):
        return self._answer("fuse_landscape", self.landscape, target=target, matrices=matrices)

    def sample_goal(self, target, landscape):
        return self._answer("sample_goal", self.goal, target=target, landscape=landscape)

    def search_path(self, workspace, obstacles, goal, init):
        return self._answer(
            "search_path", self.path, workspace=workspace, obstacles=obstacles, goal=goal, init=init
        )

    def bundle(self) -> PipelineServices:
        return PipelineServices(
            map_landscapes=self.map_landscapes,
            extract_target=self.extract_target,
            fuse_landscape=self.fuse_landscape,
            sample_goal=self.sample_goal,
            search_path=self.search_path,
        )


class Published:
    def __init__(self):
        self.paths = []
        self.enables = []
        self.turns = []

    @property
    def count(self) -> int:
        return len(self.paths) + len(self.enables) + len(self.turns)


@pytest.fixture
def services():
    return FakeServices()


@pytest.fixture
def published():
    return Published()


@pytest.fixture
def make_logic(services, published):
    def _make(config: LogicConfig = None, audit=None, start: bool = True) -> CommandLogic:
        logic = CommandLogic(
            config=config or LogicConfig(),
            services=services.bundle(),
            publish_path=published.paths.append,
            publish_enable=published.enables.append,
            publish_turn=published.turns.append,
            audit=audit,
        )
        if start:
            assert logic.startup().ok
        return logic

    return _make
