#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""command_logic.yaml loading and defaults."""

import pathlib

import pytest

from miro_command_logic.config import (
    DEFAULT_SERVICES,
    DEFAULT_TOPICS,
    LogicConfig,
    load_config_registry,
    load_logic_config,
    resolve_logic_config,
)

SHIPPED = pathlib.Path(__file__).resolve().parents[1] / "config" / "command_logic.yaml"


def test_empty_registry_gives_defaults():
    cfg = resolve_logic_config({})
    assert cfg == LogicConfig()
    assert (cfg.resolution, cfg.layers) == (40, 5)
    assert (cfg.hsize, cfg.vsize) == (400.0, 400.0)
    assert cfg.obstacle_dims == (80.0, 80.0)
    assert cfg.goal_region_size == (20.0, 20.0)
    assert cfg.scale == 100.0
    assert cfg.period_sec == pytest.approx(0.1)
    assert cfg.topics == DEFAULT_TOPICS
    assert cfg.services == DEFAULT_SERVICES


def test_shipped_config_matches_defaults():
    assert load_logic_config(str(SHIPPED)) == LogicConfig()


def test_overrides(tmp_path):
    p = tmp_path / "logic.yaml"
    p.write_text(
        "workspace: {hsize: 300, vsize: 200}\n"
        "obstacle: {dimensions: [60, 40]}\n"
        "loop: {rate_hz: 5}\n"
        "topics: {enable: /miro/enable}\n"
    )
    cfg = load_logic_config(str(p))
    assert (cfg.hsize, cfg.vsize) == (300.0, 200.0)
    assert cfg.obstacle_dims == (60.0, 40.0)
    assert cfg.period_sec == pytest.approx(0.2)
    assert cfg.topics["enable"] == "/miro/enable"
    assert cfg.topics["path"] == "path"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_registry(str(tmp_path / "nope.yaml"))


def test_top_level_must_be_mapping(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config_registry(str(p))


@pytest.mark.parametrize("registry", [
    {"loop": {"rate_hz": 0}},
    {"grid": {"resolution": -1}},
    {"obstacle": {"dimensions": [80]}},
])
def test_invalid_values_rejected(registry):
    with pytest.raises(ValueError):
        resolve_logic_config(registry)


def test_default_names_follow_miro_deployment():
    cfg = resolve_logic_config({})
    assert cfg.services["rrt_star"] == "rrtStarService"
    assert cfg.topics["turn"] == "/miro/rob01/platform/body_move"
    assert load_logic_config(str(SHIPPED)).services["rrt_star"] == "rrtStarService"


def test_source_tree_fallback_without_ament(monkeypatch):
    import miro_command_logic.config as config

    monkeypatch.setattr(config, "AMENT_AVAILABLE", False)
    assert config._default_config_path() == SHIPPED
    assert config.load_logic_config() == LogicConfig()
