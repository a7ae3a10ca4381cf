"""
Incremental synchronization of the scene with a mutable graph.

Each pass diffs the rendered VisualNode/VisualEdge maps against the current
contents of a GraphSource and applies the difference as a list of commands,
in a fixed order, under the scene lock:

1. RemoveEdge   - stale edges, including every edge touching a vanished vertex
2. RemoveVertex - stale vertices, purged from every adjacency set
3. AddVertex    - new vertices, positioned by the spawn rule
4. AddEdge      - new edges, with adjacency, routing index and parallel flags

Nodes and edges that did not change are left untouched, so their positions
survive any number of passes.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..config import SceneConfig
from ..errors import InvalidStateError
from ..placement.spawn import spawn_position
from ..types import Edge, GraphSource, Point, SizeType, Vertex
from ..validation import validate_canvas_size
from .nodes import VisualEdge, VisualNode, pair_key
from .routing import EdgeRouter, RoutingIndexTable

if TYPE_CHECKING:
    from typing_extensions import Self

LOGGER = logging.getLogger(__name__)

PairKey = tuple[VisualNode, VisualNode]


@dataclass
class ReconcilePlan:
    """Difference between the scene and a graph snapshot."""

    vertices_to_add: list[Vertex] = field(default_factory=list)
    vertices_to_remove: list[Vertex] = field(default_factory=list)
    edges_to_add: list[Edge] = field(default_factory=list)
    edges_to_remove: list[Edge] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.vertices_to_add
            or self.vertices_to_remove
            or self.edges_to_add
            or self.edges_to_remove
        )

    def commands(self) -> Iterator[SceneCommand]:
        """Commands realizing this plan, in application order."""
        for edge in self.edges_to_remove:
            yield RemoveEdge(edge)
        for vertex in self.vertices_to_remove:
            yield RemoveVertex(vertex)
        for vertex in self.vertices_to_add:
            yield AddVertex(vertex)
        for edge in self.edges_to_add:
            yield AddEdge(edge)


@dataclass
class ReconcileResult:
    """What a reconciliation pass actually changed."""

    added_vertices: list[Vertex] = field(default_factory=list)
    removed_vertices: list[Vertex] = field(default_factory=list)
    added_edges: list[Edge] = field(default_factory=list)
    removed_edges: list[Edge] = field(default_factory=list)
    skipped_edges: list[Edge] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.added_vertices or self.removed_vertices or self.added_edges or self.removed_edges
        )


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


class SceneCommand:
    """A single mutation of the scene maps. Applied under the scene lock."""

    def apply(self, scene: SceneReconciler, result: ReconcileResult) -> None:
        raise NotImplementedError


@dataclass
class RemoveEdge(SceneCommand):
    edge: Edge

    def apply(self, scene: SceneReconciler, result: ReconcileResult) -> None:
        if scene._detach_edge(self.edge):
            result.removed_edges.append(self.edge)


@dataclass
class RemoveVertex(SceneCommand):
    vertex: Vertex

    def apply(self, scene: SceneReconciler, result: ReconcileResult) -> None:
        if scene._detach_vertex(self.vertex):
            result.removed_vertices.append(self.vertex)


@dataclass
class AddVertex(SceneCommand):
    vertex: Vertex
    position: Optional[Point] = None

    def apply(self, scene: SceneReconciler, result: ReconcileResult) -> None:
        scene._attach_vertex(self.vertex, self.position)
        result.added_vertices.append(self.vertex)


@dataclass
class AddEdge(SceneCommand):
    edge: Edge

    def apply(self, scene: SceneReconciler, result: ReconcileResult) -> None:
        if scene._attach_edge(self.edge):
            result.added_edges.append(self.edge)
        else:
            result.skipped_edges.append(self.edge)


# -----------------------------------------------------------------------------
# Reconciler
# -----------------------------------------------------------------------------


class SceneReconciler:
    """
    Owner of the VisualNode and VisualEdge maps.

    Example:
        scene = SceneReconciler(size=(800, 600))
        scene.populate(graph)          # initial build, nodes at (0, 0)
        placement.place(800, 600, graph, scene.nodes())
        graph.insert_vertex("D")
        scene.reconcile(graph)         # D is spawned, nothing else moves
    """

    def __init__(
        self,
        *,
        size: SizeType = (1.0, 1.0),
        config: Optional[SceneConfig] = None,
        router: Optional[EdgeRouter] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._config = config if config is not None else SceneConfig()
        self._size: tuple[float, float] = validate_canvas_size(size)
        self._router = router if router is not None else EdgeRouter(self._config)
        self._lock = lock if lock is not None else threading.RLock()
        self._rng = random.Random(self._config.random_seed)

        self._vertex_nodes: dict[Vertex, VisualNode] = {}
        self._edge_nodes: dict[Edge, VisualEdge] = {}
        self._pair_edges: dict[PairKey, list[VisualEdge]] = {}
        self._routing = RoutingIndexTable()
        self._graph: Optional[GraphSource] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def config(self) -> SceneConfig:
        return self._config

    @property
    def router(self) -> EdgeRouter:
        return self._router

    @property
    def routing(self) -> RoutingIndexTable:
        return self._routing

    @property
    def size(self) -> tuple[float, float]:
        """Get viewport size as (width, height)."""
        return self._size

    @size.setter
    def size(self, value: SizeType) -> None:
        self._size = validate_canvas_size(value)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def nodes(self) -> list[VisualNode]:
        with self._lock:
            return list(self._vertex_nodes.values())

    def edges(self) -> list[VisualEdge]:
        with self._lock:
            return list(self._edge_nodes.values())

    def vertex_node(self, vertex: Vertex) -> Optional[VisualNode]:
        with self._lock:
            return self._vertex_nodes.get(vertex)

    def edge_node(self, edge: Edge) -> Optional[VisualEdge]:
        with self._lock:
            return self._edge_nodes.get(edge)

    def vertices(self) -> list[Vertex]:
        with self._lock:
            return list(self._vertex_nodes)

    def __len__(self) -> int:
        return len(self._vertex_nodes)

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    def populate(self, graph: GraphSource) -> ReconcileResult:
        """
        Initial build: one node per vertex at (0, 0), then every edge.

        Positions are left for a placement strategy to assign.

        Raises:
            InvalidStateError: If the scene already holds nodes
        """
        with self._lock:
            if self._vertex_nodes:
                raise InvalidStateError("Scene is already populated.")
            commands: list[SceneCommand] = [AddVertex(v, (0.0, 0.0)) for v in graph.vertices()]
            commands.extend(AddEdge(e) for e in graph.edges())
            result = self.apply(commands)
        LOGGER.debug(
            "Populated scene with %d nodes and %d edges",
            len(result.added_vertices),
            len(result.added_edges),
        )
        return result

    def plan(self, graph: GraphSource) -> ReconcilePlan:
        """Diff the scene against a snapshot of ``graph``."""
        vertices = list(graph.vertices())
        edges = list(graph.edges())
        current_vertices = set(vertices)
        current_edges = set(edges)

        with self._lock:
            vanished = {v for v in self._vertex_nodes if v not in current_vertices}
            return ReconcilePlan(
                vertices_to_add=[v for v in vertices if v not in self._vertex_nodes],
                vertices_to_remove=[v for v in self._vertex_nodes if v in vanished],
                edges_to_add=[e for e in edges if e not in self._edge_nodes],
                edges_to_remove=[
                    e
                    for e, visual in self._edge_nodes.items()
                    if e not in current_edges
                    or visual.outbound.vertex in vanished
                    or visual.inbound.vertex in vanished
                ],
            )

    def reconcile(self, graph: GraphSource) -> ReconcileResult:
        """
        Bring the scene in line with ``graph``.

        Reconciling twice without a graph change is a no-op.
        """
        with self._lock:
            plan = self.plan(graph)
            if plan.is_empty:
                return ReconcileResult()
            result = self.apply(plan.commands(), graph)
        LOGGER.debug(
            "Reconciled scene: +%d/-%d nodes, +%d/-%d edges, %d skipped",
            len(result.added_vertices),
            len(result.removed_vertices),
            len(result.added_edges),
            len(result.removed_edges),
            len(result.skipped_edges),
        )
        return result

    def apply(
        self, commands: Iterable[SceneCommand], graph: Optional[GraphSource] = None
    ) -> ReconcileResult:
        """Apply commands in order. ``graph`` is consulted by the spawn rule."""
        result = ReconcileResult()
        with self._lock:
            self._graph = graph
            try:
                for command in commands:
                    command.apply(self, result)
            finally:
                self._graph = None
        return result

    # -------------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------------

    def check_invariants(self, graph: Optional[GraphSource] = None) -> Self:
        """
        Verify the structural invariants of the scene.

        - every VisualEdge endpoint is a current VisualNode
        - adjacency is symmetric and only references current nodes
        - routing indices are distinct within each pair
        - with ``graph``: node keys equal the graph's vertices and every graph
          edge is rendered unless one of its endpoints is not

        Raises:
            InvalidStateError: On the first violated invariant
        """
        with self._lock:
            live = set(self._vertex_nodes.values())
            for visual in self._edge_nodes.values():
                if visual.outbound not in live or visual.inbound not in live:
                    raise InvalidStateError(f"{visual!r} references a node not in the scene")
            for node in live:
                for other in node.adjacent:
                    if other not in live:
                        raise InvalidStateError(f"{node!r} is adjacent to a removed node")
                    if node not in other.adjacent:
                        raise InvalidStateError(f"Adjacency of {node!r} and {other!r} is asymmetric")
            for key, visuals in self._pair_edges.items():
                indices = [visual.routing_index for visual in visuals]
                if len(indices) != len(set(indices)):
                    raise InvalidStateError(f"Duplicate routing index between {key!r}")

            if graph is not None:
                vertices = set(graph.vertices())
                if set(self._vertex_nodes) != vertices:
                    raise InvalidStateError("Rendered vertices differ from the graph")
                for edge in graph.edges():
                    if edge in self._edge_nodes:
                        continue
                    outbound, inbound = edge.vertices()
                    if outbound in self._vertex_nodes and inbound in self._vertex_nodes:
                        raise InvalidStateError(f"Edge {edge!r} is not rendered")
                edges = set(graph.edges())
                for edge in self._edge_nodes:
                    if edge not in edges:
                        raise InvalidStateError(f"Rendered edge {edge!r} is not in the graph")
        return self

    # -------------------------------------------------------------------------
    # Command implementations
    # -------------------------------------------------------------------------

    def _attach_vertex(self, vertex: Vertex, position: Optional[Point]) -> VisualNode:
        node = VisualNode(
            vertex,
            radius=self._config.vertex_radius,
            allow_move=self._config.vertex_allow_user_move,
        )
        if position is None:
            if self._graph is None:
                position = (self._size[0] / 2.0, self._size[1] / 2.0)
            else:
                position = spawn_position(
                    vertex,
                    self._graph,
                    self._vertex_nodes,
                    self._size[0],
                    self._size[1],
                    radius=node.radius,
                    offset=self._config.spawn_offset,
                    rng=self._rng,
                )
        node.move_to(*position)
        self._vertex_nodes[vertex] = node
        return node

    def _attach_edge(self, edge: Edge) -> bool:
        outbound_vertex, inbound_vertex = edge.vertices()
        outbound = self._vertex_nodes.get(outbound_vertex)
        inbound = self._vertex_nodes.get(inbound_vertex)
        if outbound is None or inbound is None:
            LOGGER.debug("Skipping edge %r: endpoint not rendered yet", edge)
            return False

        index = self._routing.next_index(outbound, inbound)
        visual = VisualEdge(edge, outbound, inbound, self._router, routing_index=index)
        self._edge_nodes[edge] = visual
        outbound.edges.add(visual)
        inbound.edges.add(visual)
        if outbound is not inbound:
            outbound.add_adjacent(inbound)
            inbound.add_adjacent(outbound)
            outbound.reroute_loops()
            inbound.reroute_loops()

        siblings = self._pair_edges.setdefault(pair_key(outbound, inbound), [])
        siblings.append(visual)
        self._refresh_pair(siblings)
        return True

    def _detach_edge(self, edge: Edge) -> bool:
        visual = self._edge_nodes.pop(edge, None)
        if visual is None:
            return False
        outbound, inbound = visual.endpoints()
        outbound.edges.discard(visual)
        inbound.edges.discard(visual)

        key = pair_key(outbound, inbound)
        siblings = self._pair_edges.get(key, [])
        if visual in siblings:
            siblings.remove(visual)
        if siblings:
            self._refresh_pair(siblings)
        else:
            self._pair_edges.pop(key, None)
            # no other edge joins the pair any more
            outbound.remove_adjacent(inbound)
            inbound.remove_adjacent(outbound)
            outbound.reroute_loops()
            inbound.reroute_loops()
        return True

    def _detach_vertex(self, vertex: Vertex) -> bool:
        node = self._vertex_nodes.pop(vertex, None)
        if node is None:
            return False
        for visual in list(node.edges):
            self._detach_edge(visual.edge)
        for other in self._vertex_nodes.values():
            if other.remove_adjacent(node):
                other.reroute_loops()
        node.adjacent.clear()
        return True

    def _refresh_pair(self, siblings: list[VisualEdge]) -> None:
        parallel = len(siblings) > 1
        for visual in siblings:
            visual.parallel = parallel
            visual.reroute()


__all__ = [
    "SceneReconciler",
    "ReconcilePlan",
    "ReconcileResult",
    "SceneCommand",
    "RemoveEdge",
    "RemoveVertex",
    "AddVertex",
    "AddEdge",
]
