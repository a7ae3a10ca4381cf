"""
Edge-list graph implementations.

Vertices and edges are kept in insertion-ordered dictionaries keyed by their
payload, so payloads must be unique within a graph. Every public method takes
the graph's lock, which makes it safe to mutate the graph from worker threads
while a panel queries it from the scene thread. Queries return snapshots.
"""

from __future__ import annotations

import threading
from typing import Any, Generic, Hashable, Optional, TypeVar

from ..errors import InvalidEdgeError, InvalidVertexError

V = TypeVar("V", bound=Hashable)
E = TypeVar("E", bound=Hashable)


class _GraphVertex(Generic[V]):
    """Vertex identity. Hashes by identity, not by payload."""

    __slots__ = ("_element", "_owner")

    def __init__(self, element: V, owner: object) -> None:
        self._element = element
        self._owner: Optional[object] = owner

    @property
    def element(self) -> V:
        return self._element

    def __repr__(self) -> str:
        return f"Vertex({self._element!r})"


class _GraphEdge(Generic[E, V]):
    """Edge identity holding its (outbound, inbound) endpoints."""

    __slots__ = ("_element", "_outbound", "_inbound", "_owner")

    def __init__(
        self,
        element: E,
        outbound: _GraphVertex[V],
        inbound: _GraphVertex[V],
        owner: object,
    ) -> None:
        self._element = element
        self._outbound = outbound
        self._inbound = inbound
        self._owner: Optional[object] = owner

    @property
    def element(self) -> E:
        return self._element

    def vertices(self) -> tuple[_GraphVertex[V], _GraphVertex[V]]:
        return (self._outbound, self._inbound)

    def contains(self, vertex: _GraphVertex[V]) -> bool:
        return self._outbound is vertex or self._inbound is vertex

    def __repr__(self) -> str:
        return f"Edge({self._element!r}: {self._outbound!r} -- {self._inbound!r})"


class GraphEdgeList(Generic[V, E]):
    """
    Undirected graph stored as vertex and edge collections.

    Parallel edges and self-loops are allowed; payloads are unique.

    Example:
        g = GraphEdgeList()
        a = g.insert_vertex("A")
        b = g.insert_vertex("B")
        g.insert_edge(a, b, "AB")
        g.insert_edge_between("A", "B", "AB2")
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._vertices: dict[V, _GraphVertex[V]] = {}
        self._edges: dict[E, _GraphEdge[E, V]] = {}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def num_vertices(self) -> int:
        with self._lock:
            return len(self._vertices)

    def num_edges(self) -> int:
        with self._lock:
            return len(self._edges)

    def vertices(self) -> list[_GraphVertex[V]]:
        with self._lock:
            return list(self._vertices.values())

    def edges(self) -> list[_GraphEdge[E, V]]:
        with self._lock:
            return list(self._edges.values())

    def incident_edges(self, vertex: _GraphVertex[V]) -> list[_GraphEdge[E, V]]:
        with self._lock:
            v = self._check_vertex(vertex)
            return [e for e in self._edges.values() if e.contains(v)]

    def opposite(self, vertex: _GraphVertex[V], edge: _GraphEdge[E, V]) -> _GraphVertex[V]:
        """
        Return the endpoint of ``edge`` other than ``vertex``.

        Raises:
            InvalidEdgeError: If ``vertex`` is not an endpoint of ``edge``
        """
        with self._lock:
            v = self._check_vertex(vertex)
            e = self._check_edge(edge)
            outbound, inbound = e.vertices()
            if outbound is v:
                return inbound
            if inbound is v:
                return outbound
            raise InvalidEdgeError(f"{vertex!r} is not incident to {edge!r}")

    def are_adjacent(self, u: _GraphVertex[V], v: _GraphVertex[V]) -> bool:
        with self._lock:
            a = self._check_vertex(u)
            b = self._check_vertex(v)
            for e in self._edges.values():
                outbound, inbound = e.vertices()
                if (outbound is a and inbound is b) or (outbound is b and inbound is a):
                    return True
            return False

    def vertex(self, element: V) -> Optional[_GraphVertex[V]]:
        """Look up a vertex by payload."""
        with self._lock:
            return self._vertices.get(element)

    def edge(self, element: E) -> Optional[_GraphEdge[E, V]]:
        """Look up an edge by payload."""
        with self._lock:
            return self._edges.get(element)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert_vertex(self, element: V) -> _GraphVertex[V]:
        with self._lock:
            if element in self._vertices:
                raise InvalidVertexError(f"There's already a vertex with element {element!r}")
            vertex: _GraphVertex[V] = _GraphVertex(element, self)
            self._vertices[element] = vertex
            return vertex

    def insert_edge(
        self, u: _GraphVertex[V], v: _GraphVertex[V], element: E
    ) -> _GraphEdge[E, V]:
        """Insert an edge between two existing vertices (``u`` is outbound)."""
        with self._lock:
            if element in self._edges:
                raise InvalidEdgeError(f"There's already an edge with element {element!r}")
            outbound = self._check_vertex(u)
            inbound = self._check_vertex(v)
            edge: _GraphEdge[E, V] = _GraphEdge(element, outbound, inbound, self)
            self._edges[element] = edge
            return edge

    def insert_edge_between(self, u_element: V, v_element: V, element: E) -> _GraphEdge[E, V]:
        """Insert an edge between the vertices holding the given payloads."""
        with self._lock:
            u = self._vertices.get(u_element)
            if u is None:
                raise InvalidVertexError(f"No vertex contains {u_element!r}")
            v = self._vertices.get(v_element)
            if v is None:
                raise InvalidVertexError(f"No vertex contains {v_element!r}")
            return self.insert_edge(u, v, element)

    def remove_vertex(self, vertex: _GraphVertex[V]) -> V:
        """Remove a vertex together with all of its incident edges."""
        with self._lock:
            v = self._check_vertex(vertex)
            for e in [e for e in self._edges.values() if e.contains(v)]:
                self._detach_edge(e)
            del self._vertices[v.element]
            v._owner = None
            return v.element

    def remove_edge(self, edge: _GraphEdge[E, V]) -> E:
        with self._lock:
            e = self._check_edge(edge)
            self._detach_edge(e)
            return e.element

    def replace_vertex(self, vertex: _GraphVertex[V], element: V) -> V:
        """Swap a vertex payload, returning the old one."""
        with self._lock:
            v = self._check_vertex(vertex)
            if element in self._vertices:
                raise InvalidVertexError(f"There's already a vertex with element {element!r}")
            old = v.element
            del self._vertices[old]
            v._element = element
            self._vertices[element] = v
            return old

    def replace_edge(self, edge: _GraphEdge[E, V], element: E) -> E:
        """Swap an edge payload, returning the old one."""
        with self._lock:
            e = self._check_edge(edge)
            if element in self._edges:
                raise InvalidEdgeError(f"There's already an edge with element {element!r}")
            old = e.element
            del self._edges[old]
            e._element = element
            self._edges[element] = e
            return old

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _detach_edge(self, edge: _GraphEdge[E, V]) -> None:
        del self._edges[edge.element]
        edge._owner = None

    def _check_vertex(self, vertex: Any) -> _GraphVertex[V]:
        if vertex is None:
            raise InvalidVertexError("Null vertex.")
        if not isinstance(vertex, _GraphVertex):
            raise InvalidVertexError("Not a vertex.")
        if vertex._owner is not self:
            raise InvalidVertexError("Vertex does not belong to this graph.")
        return vertex

    def _check_edge(self, edge: Any) -> _GraphEdge[E, V]:
        if edge is None:
            raise InvalidEdgeError("Null edge.")
        if not isinstance(edge, _GraphEdge):
            raise InvalidEdgeError("Not an edge.")
        if edge._owner is not self:
            raise InvalidEdgeError("Edge does not belong to this graph.")
        return edge

    def __repr__(self) -> str:
        return f"{type(self).__name__}(vertices={self.num_vertices()}, edges={self.num_edges()})"


class DigraphEdgeList(GraphEdgeList[V, E]):
    """
    Directed variant of GraphEdgeList.

    ``insert_edge(u, v, x)`` creates the arc u -> v. ``incident_edges`` still
    returns every arc touching the vertex, which is what the scene needs;
    direction-specific queries are available separately.
    """

    def outbound_edges(self, vertex: _GraphVertex[V]) -> list[_GraphEdge[E, V]]:
        with self._lock:
            v = self._check_vertex(vertex)
            return [e for e in self._edges.values() if e.vertices()[0] is v]

    def incoming_edges(self, vertex: _GraphVertex[V]) -> list[_GraphEdge[E, V]]:
        with self._lock:
            v = self._check_vertex(vertex)
            return [e for e in self._edges.values() if e.vertices()[1] is v]

    def are_adjacent(self, u: _GraphVertex[V], v: _GraphVertex[V]) -> bool:
        """True only if an arc u -> v exists."""
        with self._lock:
            a = self._check_vertex(u)
            b = self._check_vertex(v)
            return any(e.vertices() == (a, b) for e in self._edges.values())


__all__ = ["GraphEdgeList", "DigraphEdgeList"]
