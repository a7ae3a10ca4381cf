"""
Scene configuration.

All tunables live in one frozen dataclass with named, defaultable fields.
Values are validated on construction; use ``replace()`` to derive variants.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .validation import (
    InvalidParameterError,
    validate_iterations,
    validate_non_negative,
    validate_positive,
)

# Dotted property names understood by SceneConfig.from_mapping().
PROPERTY_KEYS: dict[str, str] = {
    "vertex.allow-user-move": "vertex_allow_user_move",
    "vertex.radius": "vertex_radius",
    "layout.repulsive-force": "repulsion_force",
    "layout.attraction-force": "attraction_force",
    "layout.attraction-scale": "attraction_scale",
    "edge.arrow": "edge_arrows",
    "layout.iterations": "inner_iterations",
}


@dataclass(frozen=True)
class SceneConfig:
    """
    Tunables consumed by the panel, engine, router and placement code.

    Attributes:
        vertex_allow_user_move: Whether the host may drag vertices
        vertex_radius: Default node radius when the payload supplies none
        repulsion_force: Inverse-square repulsion scale
        attraction_force: Logarithmic spring strength between adjacent nodes
        attraction_scale: Spring rest distance (attraction is zero here)
        edge_arrows: Whether edges are drawn with arrowheads
        inner_iterations: Simulation sub-steps per visible update
        tick_interval: Seconds between engine ticks with a threaded scheduler
        spawn_offset: Offset used when spawning a vertex next to a neighbour
        curve_angle: Base bend angle (degrees) of the first parallel curves
        min_curve_angle: Base bend angle at or beyond the distance threshold
        max_curve_angle: Hard cap on any curve bend angle
        curve_distance_threshold: Distance at which curves reach min angle
        loop_radius_factor: Self-loop length as a multiple of node radius
        loop_size_increment: Extra loop length (in radii) per routing index
        loop_spread: Half opening angle (degrees) of a self-loop
        loop_angle_step: Rotation (degrees) between stacked self-loops
        random_seed: Seed for spawn and random placement, None for entropy
    """

    vertex_allow_user_move: bool = True
    vertex_radius: float = 15.0
    repulsion_force: float = 25000.0
    attraction_force: float = 30.0
    attraction_scale: float = 10.0
    edge_arrows: bool = True
    inner_iterations: int = 20
    tick_interval: float = 1.0 / 60.0
    spawn_offset: float = 50.0
    curve_angle: float = 20.0
    min_curve_angle: float = 3.0
    max_curve_angle: float = 75.0
    curve_distance_threshold: float = 400.0
    loop_radius_factor: float = 3.0
    loop_size_increment: float = 0.5
    loop_spread: float = 45.0
    loop_angle_step: float = 30.0
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        validate_positive(self.vertex_radius, "vertex_radius")
        validate_positive(self.repulsion_force, "repulsion_force")
        validate_positive(self.attraction_force, "attraction_force")
        validate_positive(self.attraction_scale, "attraction_scale")
        validate_iterations(self.inner_iterations)
        validate_positive(self.tick_interval, "tick_interval")
        validate_non_negative(self.spawn_offset, "spawn_offset")
        validate_non_negative(self.curve_angle, "curve_angle")
        validate_non_negative(self.min_curve_angle, "min_curve_angle")
        validate_positive(self.curve_distance_threshold, "curve_distance_threshold")
        validate_positive(self.loop_radius_factor, "loop_radius_factor")
        validate_non_negative(self.loop_size_increment, "loop_size_increment")
        validate_non_negative(self.loop_angle_step, "loop_angle_step")
        if not (0 < self.max_curve_angle < 90):
            raise InvalidParameterError(
                f"max_curve_angle must be in (0, 90), got {self.max_curve_angle}"
            )
        if not (0 < self.loop_spread < 90):
            raise InvalidParameterError(f"loop_spread must be in (0, 90), got {self.loop_spread}")

    def replace(self, **changes: Any) -> SceneConfig:
        """Return a copy with the given fields changed (re-validated)."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> SceneConfig:
        """
        Build a config from a flat mapping.

        Keys may be field names or the dotted property names in
        ``PROPERTY_KEYS``. Values must already carry the field's type;
        parsing property files is left to the host.

        Raises:
            InvalidParameterError: On an unknown key or a string value
        """
        fields = {f.name: f for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, raw in values.items():
            name = PROPERTY_KEYS.get(key, key)
            if name not in fields:
                raise InvalidParameterError(f"Unknown configuration key: {key!r}")
            if isinstance(raw, str):
                raise InvalidParameterError(f"{key} expects a typed value, got string {raw!r}")
            kwargs[name] = raw
        return cls(**kwargs)


__all__ = ["SceneConfig", "PROPERTY_KEYS"]
