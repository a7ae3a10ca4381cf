"""
Force-directed automatic layout.

- ForceDirectedLayoutEngine: tick-driven simulation over scene nodes
- LogarithmicSpringStrategy: default force model
- SpringSystemStrategy / SpringGravityStrategy: alternative force models
"""

from .engine import ForceDirectedLayoutEngine
from .strategies import (
    ForceDirectedStrategy,
    LogarithmicSpringStrategy,
    SpringGravityStrategy,
    SpringSystemStrategy,
    default_strategy,
)

__all__ = [
    "ForceDirectedLayoutEngine",
    "ForceDirectedStrategy",
    "LogarithmicSpringStrategy",
    "SpringSystemStrategy",
    "SpringGravityStrategy",
    "default_strategy",
]
