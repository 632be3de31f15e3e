#!/usr/bin/env python3
# SPDX-License-Identifier: LicenseRef-Proprietary
"""
landscape_cache.py

Relation landscapes from the spatial reasoner, fetched once at startup and
replayed into every pertinence-mapping request afterwards.

The reasoner answers with NZ*RES*RES floats, layer-major then row-major.
Layer order is the reasoner's: north, west, south, east, distance-to.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

import numpy as np

from .services import CallResult
from .types import Pose2D

LAYER_NAMES = ("north", "west", "south", "east", "distance")


class LandscapeCache:
    def __init__(self, resolution: int = 40, layers: int = 5, logger=None):
        self.resolution = int(resolution)
        self.layer_count = int(layers)
        self._log = logger or logging.getLogger(__name__)
        self._layers: Optional[np.ndarray] = None
        self._attempted = False

    @property
    def ready(self) -> bool:
        return self._layers is not None

    @property
    def layers(self) -> np.ndarray:
        if self._layers is None:
            raise RuntimeError("landscape cache is not initialized")
        return self._layers

    def initialize(
        self,
        mapping_call: Callable[[Pose2D, Sequence[float]], CallResult],
        obstacle_pose: Pose2D,
        dims: Sequence[float],
    ) -> CallResult:
        """
        Ask the spatial reasoner for all landscapes around the obstacle.

        Only one attempt is allowed per process: a failure here is fatal for
        the caller, there is no mode of operation without landscapes.
        """
        if self._attempted:
            raise RuntimeError("landscape cache can only be initialized once")
        self._attempted = True

        self._log.info("Initialization: calling spatial reasoner")
        result = mapping_call(obstacle_pose, list(dims))
        if not result.ok:
            return result

        expected = self.layer_count * self.resolution * self.resolution
        flat = np.asarray(result.value, dtype=np.float64).ravel()
        if flat.size != expected:
            return CallResult.failure(
                f"spatial reasoner returned {flat.size} values, expected {expected}"
            )

        grid = flat.reshape(self.layer_count, self.resolution, self.resolution)
        grid.setflags(write=False)
        self._layers = grid
        self._log.info("Environment landscapes generated successfully")
        return CallResult.success(grid)

    def flat(self) -> List[float]:
        """Layers flattened back to the reasoner order, for pertinence-mapping requests."""
        return self.layers.ravel().tolist()

    def layer(self, name: str) -> np.ndarray:
        """
        One RES x RES relation landscape, read-only.

        Args:
            name: One of LAYER_NAMES (north, west, south, east, distance)

        Returns:
            View into the cached grid

        Raises:
            ValueError: unknown layer name
            KeyError: the reasoner was configured with fewer layers
            RuntimeError: cache not initialized
        """
        idx = LAYER_NAMES.index(name)
        if idx >= self.layer_count:
            raise KeyError(name)
        return self.layers[idx]
