"""
Edge geometry.

The router turns a VisualEdge into control geometry the host can draw:

- LINE: a straight segment between the endpoint boundaries
- CURVE: a quadratic-style bend used when several edges join the same pair
- LOOP: a teardrop anchored on a single node for self-loops

Parallel edges are told apart by a per-pair routing index handed out by
RoutingIndexTable. Indices for a pair only ever grow, so two edges rendered
between the same nodes never share an index.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import SceneConfig
from ..geometry import (
    angle_degrees,
    boundary_point,
    distance,
    linear_decay,
    midpoint,
    normalize,
    rotate,
)
from ..types import Point
from .nodes import VisualEdge, VisualNode, pair_key

# Loop direction when a node has no other visible neighbour (screen up).
DEFAULT_LOOP_DIRECTION: Point = (0.0, -1.0)


class EdgeShape(Enum):
    LINE = "line"
    CURVE = "curve"
    LOOP = "loop"


@dataclass(frozen=True)
class EdgeGeometry:
    """
    Drawable description of one edge.

    Attributes:
        kind: LINE, CURVE or LOOP
        start: Point on the outbound node boundary where the edge leaves
        end: Point on the inbound node boundary where the edge arrives
        control1: First control point (None for LINE)
        control2: Second control point (None for LINE; equals control1 for CURVE)
        terminal: Where an arrowhead attaches
        tangent_angle: Direction of travel at the terminal, in degrees
    """

    kind: EdgeShape
    start: Point
    end: Point
    control1: Optional[Point] = None
    control2: Optional[Point] = None
    terminal: Point = (0.0, 0.0)
    tangent_angle: float = 0.0


class RoutingIndexTable:
    """
    Monotonic per-pair counter.

    Keys are unordered VisualNode pairs; entries are never removed. A vertex
    that is removed and re-added gets a new VisualNode and so a fresh counter.
    """

    def __init__(self) -> None:
        self._counters: dict[tuple[VisualNode, VisualNode], int] = {}

    def next_index(self, a: VisualNode, b: VisualNode) -> int:
        """Hand out the next index for the pair (0 for the first edge)."""
        key = pair_key(a, b)
        index = self._counters.get(key, 0)
        self._counters[key] = index + 1
        return index

    def issued(self, a: VisualNode, b: VisualNode) -> int:
        """Number of indices handed out so far for the pair."""
        return self._counters.get(pair_key(a, b), 0)

    def __len__(self) -> int:
        return len(self._counters)


class EdgeRouter:
    """
    Computes EdgeGeometry from the current positions of an edge's endpoints.

    Args:
        config: Scene configuration supplying the curve and loop tunables
    """

    def __init__(self, config: Optional[SceneConfig] = None) -> None:
        self._config = config if config is not None else SceneConfig()

    @property
    def config(self) -> SceneConfig:
        return self._config

    @config.setter
    def config(self, value: SceneConfig) -> None:
        self._config = value

    def route(self, edge: VisualEdge) -> EdgeGeometry:
        if edge.is_self_loop:
            return self.route_loop(edge)
        if edge.parallel:
            return self.route_curve(edge)
        return self.route_line(edge)

    # -------------------------------------------------------------------------
    # Shapes
    # -------------------------------------------------------------------------

    def route_line(self, edge: VisualEdge) -> EdgeGeometry:
        out, inb = edge.outbound, edge.inbound
        start = boundary_point(out.position, out.radius, inb.position)
        end = boundary_point(inb.position, inb.radius, out.position)
        return EdgeGeometry(
            kind=EdgeShape.LINE,
            start=start,
            end=end,
            terminal=end,
            tangent_angle=angle_degrees(out.position, inb.position),
        )

    def curve_angle(self, edge: VisualEdge) -> float:
        """
        Signed bend angle (degrees) of a parallel edge.

        Even indices bend to one side and odd indices to the other; every
        second index moves one tier further out. The base angle shrinks
        linearly with endpoint distance.
        """
        cfg = self._config
        dist = distance(edge.outbound.position, edge.inbound.position)
        base = linear_decay(
            cfg.curve_angle, cfg.min_curve_angle, dist, cfg.curve_distance_threshold
        )
        side = -1.0 if edge.routing_index % 2 == 0 else 1.0
        tier = edge.routing_index // 2 + 1
        return side * min(cfg.max_curve_angle, base * tier)

    def route_curve(self, edge: VisualEdge) -> EdgeGeometry:
        out, inb = edge.outbound, edge.inbound
        # rotate around the same endpoint whatever the edge direction
        pivot, other = pair_key(out, inb)
        mid = midpoint(pivot.position, other.position)
        control = rotate(mid, pivot.position, self.curve_angle(edge))

        start = boundary_point(out.position, out.radius, control)
        end = boundary_point(inb.position, inb.radius, control)
        return EdgeGeometry(
            kind=EdgeShape.CURVE,
            start=start,
            end=end,
            control1=control,
            control2=control,
            terminal=end,
            tangent_angle=angle_degrees(control, end),
        )

    def loop_direction(self, node: VisualNode) -> Point:
        """Unit vector pointing away from the node's other visible neighbours."""
        sx = sy = 0.0
        for other in node.adjacent:
            if other is node or not other.visible:
                continue
            ux, uy = normalize((other.x - node.x, other.y - node.y))
            sx += ux
            sy += uy
        away = normalize((-sx, -sy))
        if math.hypot(away[0], away[1]) < 0.5:
            return DEFAULT_LOOP_DIRECTION
        return away

    def route_loop(self, edge: VisualEdge) -> EdgeGeometry:
        cfg = self._config
        node = edge.outbound
        center = node.position
        index = edge.routing_index

        length = node.radius * (cfg.loop_radius_factor + index * cfg.loop_size_increment)
        ux, uy = self.loop_direction(node)
        apex = rotate(
            (center[0] + ux * length, center[1] + uy * length),
            center,
            index * cfg.loop_angle_step,
        )
        control1 = rotate(apex, center, -cfg.loop_spread)
        control2 = rotate(apex, center, cfg.loop_spread)

        start = boundary_point(center, node.radius, control1)
        end = boundary_point(center, node.radius, control2)
        return EdgeGeometry(
            kind=EdgeShape.LOOP,
            start=start,
            end=end,
            control1=control1,
            control2=control2,
            terminal=end,
            tangent_angle=angle_degrees(control2, end),
        )


__all__ = [
    "EdgeShape",
    "EdgeGeometry",
    "RoutingIndexTable",
    "EdgeRouter",
    "DEFAULT_LOOP_DIRECTION",
]
