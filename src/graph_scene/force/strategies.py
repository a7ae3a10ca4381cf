"""
Force models for the layout engine.

A strategy maps the staged positions of the visible nodes to one force
vector per node. Pair forces are computed once per unordered pair with
numpy: the force F acting on u is added to u and -F to v.

- LogarithmicSpringStrategy: inverse-square repulsion plus a damped
  logarithmic spring between adjacent nodes (default)
- SpringSystemStrategy: the same shape with stronger, undamped terms and
  a global acceleration factor
- SpringGravityStrategy: spring system plus a pull toward the viewport center
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..config import SceneConfig
from ..geometry import ATTRACTION_DAMPING, MIN_FORCE_DISTANCE
from ..validation import InvalidParameterError, validate_in_range, validate_positive


class ForceDirectedStrategy(ABC):
    """
    Abstract force model.

    Subclasses implement ``pair_magnitude``; the signed result is applied
    along the unit direction u -> v (positive pulls u toward v).
    """

    def compute_forces(
        self,
        positions: np.ndarray,
        adjacency: np.ndarray,
        size: tuple[float, float],
    ) -> np.ndarray:
        """
        Compute the force acting on every node.

        Args:
            positions: (n, 2) array of staged node centers
            adjacency: (n, n) boolean array, True where two nodes share an edge
            size: Viewport (width, height)

        Returns:
            (n, 2) array of force vectors
        """
        n = positions.shape[0]
        forces = np.zeros((n, 2), dtype=np.float64)
        if n < 2:
            return self.node_forces(positions, forces, size)

        src, dst = np.triu_indices(n, k=1)
        delta = positions[dst] - positions[src]
        raw = np.hypot(delta[:, 0], delta[:, 1])

        # coincident nodes get a zero direction, so their force vanishes
        unit = np.zeros_like(delta)
        nonzero = raw > 0
        unit[nonzero] = delta[nonzero] / raw[nonzero, None]

        dist = np.maximum(raw, MIN_FORCE_DISTANCE)
        magnitude = self.pair_magnitude(dist, adjacency[src, dst])
        pair = unit * magnitude[:, None]

        np.add.at(forces, src, pair)
        np.add.at(forces, dst, -pair)
        return self.node_forces(positions, forces, size)

    @abstractmethod
    def pair_magnitude(self, dist: np.ndarray, adjacent: np.ndarray) -> np.ndarray:
        """
        Signed force magnitude for each pair.

        Args:
            dist: Pair distances, already clamped to MIN_FORCE_DISTANCE
            adjacent: Boolean mask of pairs joined by an edge
        """
        pass

    def node_forces(
        self, positions: np.ndarray, forces: np.ndarray, size: tuple[float, float]
    ) -> np.ndarray:
        """Hook for per-node terms; returns ``forces`` unchanged by default."""
        return forces

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LogarithmicSpringStrategy(ForceDirectedStrategy):
    """
    Default force model.

    - repulsion between every pair: ``repulsion_force / d^2``
    - attraction between adjacent nodes:
      ``attraction_force * ln(d / attraction_scale) * 0.1``

    Example:
        strategy = LogarithmicSpringStrategy(repulsion_force=20000)
    """

    def __init__(
        self,
        *,
        repulsion_force: float = 25000.0,
        attraction_force: float = 30.0,
        attraction_scale: float = 10.0,
    ) -> None:
        self._repulsion_force = validate_positive(repulsion_force, "repulsion_force")
        self._attraction_force = validate_positive(attraction_force, "attraction_force")
        self._attraction_scale = validate_positive(attraction_scale, "attraction_scale")

    @classmethod
    def from_config(cls, config: SceneConfig) -> LogarithmicSpringStrategy:
        return cls(
            repulsion_force=config.repulsion_force,
            attraction_force=config.attraction_force,
            attraction_scale=config.attraction_scale,
        )

    @property
    def repulsion_force(self) -> float:
        return self._repulsion_force

    @property
    def attraction_force(self) -> float:
        return self._attraction_force

    @property
    def attraction_scale(self) -> float:
        return self._attraction_scale

    def pair_magnitude(self, dist: np.ndarray, adjacent: np.ndarray) -> np.ndarray:
        magnitude = -self._repulsion_force / (dist * dist)
        attraction = (
            self._attraction_force * np.log(dist / self._attraction_scale) * ATTRACTION_DAMPING
        )
        return magnitude + np.where(adjacent, attraction, 0.0)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(repulsion_force={self._repulsion_force}, "
            f"attraction_force={self._attraction_force}, "
            f"attraction_scale={self._attraction_scale})"
        )


class SpringSystemStrategy(ForceDirectedStrategy):
    """
    Spring system with an acceleration factor.

    - repulsion between every pair: ``repulsive_force * 1000 / d^2``
    - attraction between adjacent nodes: ``attraction_force * ln(d / attraction_scale)``
    - the total is multiplied by ``acceleration`` in (0, 1]
    """

    def __init__(
        self,
        *,
        repulsive_force: float = 25.0,
        attraction_force: float = 3.0,
        attraction_scale: float = 10.0,
        acceleration: float = 0.8,
    ) -> None:
        self._repulsive_force = validate_positive(repulsive_force, "repulsive_force")
        self._attraction_force = validate_positive(attraction_force, "attraction_force")
        self._attraction_scale = validate_positive(attraction_scale, "attraction_scale")
        acceleration = float(acceleration)
        if not (0 < acceleration <= 1):
            raise InvalidParameterError(f"acceleration must be in (0, 1], got {acceleration}")
        self._acceleration = acceleration

    @property
    def repulsive_force(self) -> float:
        return self._repulsive_force

    @property
    def attraction_force(self) -> float:
        return self._attraction_force

    @property
    def attraction_scale(self) -> float:
        return self._attraction_scale

    @property
    def acceleration(self) -> float:
        return self._acceleration

    def pair_magnitude(self, dist: np.ndarray, adjacent: np.ndarray) -> np.ndarray:
        magnitude = -self._repulsive_force * 1000.0 / (dist * dist)
        attraction = self._attraction_force * np.log(dist / self._attraction_scale)
        return (magnitude + np.where(adjacent, attraction, 0.0)) * self._acceleration

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(repulsive_force={self._repulsive_force}, "
            f"attraction_force={self._attraction_force}, "
            f"attraction_scale={self._attraction_scale}, "
            f"acceleration={self._acceleration})"
        )


class SpringGravityStrategy(SpringSystemStrategy):
    """
    Spring system plus a pull toward the viewport center.

    Every node additionally receives ``gravity * (center - position)``, which
    keeps disconnected components from drifting to the viewport border.
    """

    def __init__(
        self,
        *,
        repulsive_force: float = 25.0,
        attraction_force: float = 3.0,
        attraction_scale: float = 10.0,
        acceleration: float = 0.8,
        gravity: float = 0.01,
    ) -> None:
        super().__init__(
            repulsive_force=repulsive_force,
            attraction_force=attraction_force,
            attraction_scale=attraction_scale,
            acceleration=acceleration,
        )
        self._gravity = validate_in_range(gravity, "gravity", 0.0, 1.0)

    @property
    def gravity(self) -> float:
        return self._gravity

    def node_forces(
        self, positions: np.ndarray, forces: np.ndarray, size: tuple[float, float]
    ) -> np.ndarray:
        center = np.array([size[0] / 2.0, size[1] / 2.0])
        return forces + self._gravity * (center - positions)

    def __repr__(self) -> str:
        return f"{super().__repr__()[:-1]}, gravity={self._gravity})"


def default_strategy(config: Optional[SceneConfig] = None) -> ForceDirectedStrategy:
    """Strategy used when none is given: the logarithmic spring from ``config``."""
    return LogarithmicSpringStrategy.from_config(config if config is not None else SceneConfig())


__all__ = [
    "ForceDirectedStrategy",
    "LogarithmicSpringStrategy",
    "SpringSystemStrategy",
    "SpringGravityStrategy",
    "default_strategy",
]
