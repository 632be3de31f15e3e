#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
command_logic.launch.py

Starts the MiRo command logic (master) node.

The planning services (spatial_reasoner, gesture_processing,
pertinence_mapper, monte_carlo, rrt_star) and the mocap bridge are launched
separately. spatial_reasoner must be up before this node starts: the node
calls it once during initialization and exits with status 1 if it cannot.
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description() -> LaunchDescription:
    config_path_arg = DeclareLaunchArgument(
        "config_path",
        default_value="",
        description="Optional path to command_logic.yaml; empty uses installed config.",
    )

    audit_log_path_arg = DeclareLaunchArgument(
        "audit_log_path",
        default_value="",
        description="Optional JSON-lines audit file; empty disables the file sink.",
    )

    command_logic = Node(
        package="miro_command_logic",
        executable="command_logic",
        name="command_logic",
        output="screen",
        parameters=[
            {"config_path": LaunchConfiguration("config_path")},
            {"audit_log_path": LaunchConfiguration("audit_log_path")},
        ],
    )

    return LaunchDescription(
        [
            config_path_arg,
            audit_log_path_arg,
            command_logic,
        ]
    )
