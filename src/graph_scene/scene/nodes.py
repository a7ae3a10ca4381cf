"""
Rendering-layer records for vertices and edges.

VisualNode and VisualEdge are owned by the scene and live exactly as long as
their graph counterparts are rendered. A node keeps a redundant adjacency set
so the O(V^2) force loop never has to query the graph, and it re-routes its
incident edges whenever it moves.
"""

from __future__ import annotations

import itertools
import numbers
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from ..geometry import bound_center_coordinate
from ..types import Edge, Point, Vertex

if TYPE_CHECKING:
    from .routing import EdgeGeometry, EdgeRouter

_serials = itertools.count()


class NodeKind(Enum):
    """How a node obtains its visual extent, decided once at construction."""

    SHAPE = "shape"  # default primitive circle of the configured radius
    PAYLOAD = "payload"  # the payload is its own visual and reports a radius


def node_kind_for(element: Any) -> NodeKind:
    """Select the node kind for a vertex payload."""
    radius = getattr(element, "radius", None)
    if isinstance(radius, numbers.Real) and not isinstance(radius, bool) and radius > 0:
        return NodeKind.PAYLOAD
    return NodeKind.SHAPE


class VisualNode:
    """
    Scene record of one rendered vertex.

    Attributes:
        vertex: The graph vertex this node renders
        x, y: Current center position
        radius: Visual radius used for clamping and edge attachment
        fx, fy: Force accumulator of the last simulation sub-step
        staged_x, staged_y: Position the simulation is integrating toward
        adjacent: Nodes joined to this one by at least one rendered edge
        visible: Invisible nodes are skipped by the simulation
        pinned: Pinned nodes (e.g. being dragged) are never moved by the engine
        allow_move: Whether the host may drag this node
        serial: Monotonic creation number, gives pairs a canonical order
        edges: Rendered edges incident to this node
        style: Free-form host styling handle; never read by the core
    """

    def __init__(
        self,
        vertex: Vertex,
        x: float = 0.0,
        y: float = 0.0,
        *,
        radius: float = 15.0,
        allow_move: bool = True,
    ) -> None:
        self.vertex = vertex
        self.kind = node_kind_for(vertex.element)
        if self.kind is NodeKind.PAYLOAD:
            self.radius = float(vertex.element.radius)
        else:
            self.radius = float(radius)

        self.x = float(x)
        self.y = float(y)
        self.fx = 0.0
        self.fy = 0.0
        self.staged_x = self.x
        self.staged_y = self.y

        self.adjacent: set[VisualNode] = set()
        self.edges: set[VisualEdge] = set()
        self.visible = True
        self.pinned = False
        self.allow_move = bool(allow_move)
        self.serial = next(_serials)
        self.style: dict[str, Any] = {}
        self._move_listeners: list[Callable[[VisualNode], None]] = []

    # -------------------------------------------------------------------------
    # Position
    # -------------------------------------------------------------------------

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def staged_position(self) -> Point:
        return (self.staged_x, self.staged_y)

    def move_to(self, x: float, y: float) -> None:
        """
        Move the node and re-route every incident edge.

        Self-loops of adjacent nodes point away from this node and are
        re-routed as well. Move listeners (the host's drawing layer) are
        notified afterwards.
        """
        self.x = float(x)
        self.y = float(y)
        for edge in list(self.edges):
            edge.reroute()
        for other in list(self.adjacent):
            other.reroute_loops()
        for listener in self._move_listeners:
            listener(self)

    def add_move_listener(self, listener: Callable[[VisualNode], None]) -> None:
        self._move_listeners.append(listener)

    def remove_move_listener(self, listener: Callable[[VisualNode], None]) -> None:
        self._move_listeners.remove(listener)

    def reroute_loops(self) -> None:
        """Re-route the self-loops anchored on this node."""
        for edge in list(self.edges):
            if edge.is_self_loop:
                edge.reroute()

    def clamped(self, x: float, y: float, width: float, height: float) -> Point:
        """Clamp a center position so the node stays inside the viewport."""
        return (
            bound_center_coordinate(x, 0.0, width, self.radius),
            bound_center_coordinate(y, 0.0, height, self.radius),
        )

    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding box as (min_x, min_y, max_x, max_y)."""
        return (self.x - self.radius, self.y - self.radius, self.x + self.radius, self.y + self.radius)

    # -------------------------------------------------------------------------
    # Forces
    # -------------------------------------------------------------------------

    def reset_forces(self) -> None:
        self.fx = self.fy = 0.0
        self.staged_x = self.x
        self.staged_y = self.y

    def add_force(self, dx: float, dy: float) -> None:
        self.fx += dx
        self.fy += dy

    # -------------------------------------------------------------------------
    # Adjacency
    # -------------------------------------------------------------------------

    def add_adjacent(self, other: VisualNode) -> None:
        self.adjacent.add(other)

    def remove_adjacent(self, other: VisualNode) -> bool:
        if other in self.adjacent:
            self.adjacent.discard(other)
            return True
        return False

    def remove_adjacents(self, others: Iterable[VisualNode]) -> None:
        self.adjacent.difference_update(others)

    def is_adjacent_to(self, other: VisualNode) -> bool:
        return other in self.adjacent

    @property
    def element(self) -> Any:
        return self.vertex.element

    def __repr__(self) -> str:
        return f"VisualNode({self.vertex.element!r}, x={self.x:.2f}, y={self.y:.2f})"


class VisualEdge:
    """
    Scene record of one rendered edge.

    Attributes:
        edge: The graph edge this record renders
        outbound, inbound: Endpoint nodes (the same node for a self-loop)
        routing_index: Disambiguates parallel edges and stacked loops
        parallel: True while another rendered edge joins the same pair
        geometry: Cached control geometry, refreshed by reroute()
        style: Free-form host styling handle; never read by the core
    """

    def __init__(
        self,
        edge: Edge,
        outbound: VisualNode,
        inbound: VisualNode,
        router: EdgeRouter,
        routing_index: int = 0,
    ) -> None:
        self.edge = edge
        self.outbound = outbound
        self.inbound = inbound
        self.routing_index = routing_index
        self.parallel = False
        self.geometry: Optional[EdgeGeometry] = None
        self.style: dict[str, Any] = {}
        self._router = router

    @property
    def is_self_loop(self) -> bool:
        return self.outbound is self.inbound

    @property
    def element(self) -> Any:
        return self.edge.element

    def endpoints(self) -> tuple[VisualNode, VisualNode]:
        return (self.outbound, self.inbound)

    def other(self, node: VisualNode) -> VisualNode:
        return self.inbound if node is self.outbound else self.outbound

    def reroute(self) -> EdgeGeometry:
        self.geometry = self._router.route(self)
        return self.geometry

    def __repr__(self) -> str:
        return (
            f"VisualEdge({self.edge.element!r}: {self.outbound.vertex.element!r} -> "
            f"{self.inbound.vertex.element!r}, index={self.routing_index})"
        )


def pair_key(a: VisualNode, b: VisualNode) -> tuple[VisualNode, VisualNode]:
    """Unordered pair key: the node created first comes first."""
    return (a, b) if a.serial <= b.serial else (b, a)


__all__ = ["NodeKind", "node_kind_for", "VisualNode", "VisualEdge", "pair_key"]
