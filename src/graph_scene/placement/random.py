"""
Random placement strategies.

UniformRandomPlacement scatters nodes over the whole viewport;
RandomNearCenterPlacement keeps them in a disc around the viewport center,
which gives the force simulation a compact starting configuration.
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING, Collection, Optional

from ..types import GraphSource
from .base import PlacementStrategy

if TYPE_CHECKING:
    from ..scene.nodes import VisualNode


class UniformRandomPlacement(PlacementStrategy):
    """
    Uniform random placement over ``[0, width] x [0, height]``.

    Args:
        random_seed: Seed for reproducible placement. None uses system entropy.
    """

    def __init__(self, *, random_seed: Optional[int] = None) -> None:
        self._random_seed = random_seed
        self._rng = random.Random(random_seed)

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed."""
        return self._random_seed

    def place(
        self,
        width: float,
        height: float,
        graph: GraphSource,
        nodes: Collection[VisualNode],
    ) -> None:
        for node in nodes:
            node.move_to(self._rng.uniform(0, width), self._rng.uniform(0, height))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(random_seed={self._random_seed!r})"


class RandomNearCenterPlacement(PlacementStrategy):
    """
    Random placement inside a disc around the viewport center.

    Each node gets a radius uniform in ``[0, min(width, height) / 4]`` and an
    angle uniform in ``[0, 2*pi)``.

    Args:
        random_seed: Seed for reproducible placement. None uses system entropy.
    """

    def __init__(self, *, random_seed: Optional[int] = None) -> None:
        self._random_seed = random_seed
        self._rng = random.Random(random_seed)

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed."""
        return self._random_seed

    def place(
        self,
        width: float,
        height: float,
        graph: GraphSource,
        nodes: Collection[VisualNode],
    ) -> None:
        cx = width / 2.0
        cy = height / 2.0
        max_radius = min(width, height) / 4.0

        for node in nodes:
            r = self._rng.uniform(0, max_radius)
            angle = self._rng.uniform(0, 2 * math.pi)
            node.move_to(cx + r * math.cos(angle), cy + r * math.sin(angle))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(random_seed={self._random_seed!r})"


__all__ = ["UniformRandomPlacement", "RandomNearCenterPlacement"]
