#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary

"""
setup.py (miro_command_logic)

Installs the command logic node for ROS 2 / colcon.

`ros2 launch miro_command_logic command_logic.launch.py` looks for launch
files in <install_prefix>/share/miro_command_logic/launch/, and the node
reads its defaults from share/miro_command_logic/config/command_logic.yaml,
so both folders are copied there by data_files.

rclpy, the message packages and ament_index_python come from the ROS
distribution (see package.xml); only the plain Python dependencies are
listed in install_requires.
"""

import os
from glob import glob

from setuptools import find_packages, setup

package_name = "miro_command_logic"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        # ament index + package manifest
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        (os.path.join("share", package_name, "config"), glob("config/*.yaml")),
        (os.path.join("share", package_name, "launch"), glob("launch/*.launch.py")),
    ],
    install_requires=["setuptools", "PyYAML", "numpy"],
    extras_require={"test": ["pytest"]},
    zip_safe=True,
    maintainer="Vitruvian Systems",
    maintainer_email="devnull@example.com",
    description="MiRo command logic: look/go/stop sequencing over remote planning services (proprietary).",
    license="LicenseRef-Proprietary",
    tests_require=["pytest"],
    entry_points={
        "console_scripts": [
            "command_logic = miro_command_logic.command_logic_node:main",
        ],
    },
)
