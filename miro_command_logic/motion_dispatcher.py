#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
motion_dispatcher.py

"go" / "stop" handling: toggles the enable flag that gates the downstream
robot controller. Independent of the look pipeline.
"""
from __future__ import annotations

import logging
from typing import Callable

from .types import CommandTag


class MotionDispatcher:
    def __init__(self, publish_fn: Callable[[bool], None], logger=None):
        self._publish = publish_fn
        self._log = logger or logging.getLogger(__name__)
        self.enabled = False

    def handle(self, tag: int) -> bool:
        """
        Returns True when the tag was a motion command and the flag was
        published. Any other tag is ignored with no side effect.
        """
        if tag == CommandTag.GO:
            self.enabled = True
        elif tag == CommandTag.STOP:
            self.enabled = False
        else:
            return False

        self._publish(self.enabled)
        self._log.info(f"Controller enable flag -> {self.enabled}")
        return True
