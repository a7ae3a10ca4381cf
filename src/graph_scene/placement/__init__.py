"""
Initial placement of nodes.

- CircularSortedPlacement: nodes on a circle, sorted by label
- UniformRandomPlacement: uniform over the viewport
- RandomNearCenterPlacement: random disc around the viewport center
- spawn_position: rule for vertices added after initialization
"""

from .base import PlacementStrategy
from .circular import CircularSortedPlacement
from .random import RandomNearCenterPlacement, UniformRandomPlacement
from .spawn import spawn_position

__all__ = [
    "PlacementStrategy",
    "CircularSortedPlacement",
    "UniformRandomPlacement",
    "RandomNearCenterPlacement",
    "spawn_position",
]
