"""
Common types for graph-scene.

This module provides the fundamental types shared by every component:
- Vertex / Edge: opaque graph identities owned by a graph source
- GraphSource: read-only query surface the scene is synchronized against
- EventType / Event: engine lifecycle events
- Point: plain (x, y) coordinate pair
"""

from __future__ import annotations

from enum import IntEnum
from typing import (
    Any,
    Callable,
    Collection,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypedDict,
    Union,
    runtime_checkable,
)

Point = Tuple[float, float]
"""A 2D point or vector as an (x, y) tuple."""


class EventType(IntEnum):
    """
    Layout engine lifecycle events.

    - start: The engine switched to running
    - tick: Fired once per visible position update
    - end: The engine was stopped
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    ticks: int
    energy: Optional[float]


@runtime_checkable
class Vertex(Protocol):
    """Opaque vertex identity. Carries an application payload."""

    @property
    def element(self) -> Any: ...


@runtime_checkable
class Edge(Protocol):
    """
    Opaque edge identity.

    ``vertices()`` returns ``(outbound, inbound)``; both are the same vertex
    for a self-loop. For undirected graphs the order is insertion order.
    """

    @property
    def element(self) -> Any: ...

    def vertices(self) -> Tuple[Vertex, Vertex]: ...


@runtime_checkable
class GraphSource(Protocol):
    """
    Read-only query surface over a mutable graph.

    Mutation happens elsewhere and is observed by re-querying.
    """

    def vertices(self) -> Collection[Vertex]: ...

    def edges(self) -> Collection[Edge]: ...

    def incident_edges(self, vertex: Vertex) -> Collection[Edge]: ...

    def opposite(self, vertex: Vertex, edge: Edge) -> Vertex: ...

    def num_vertices(self) -> int: ...


EventCallback = Callable[[Optional[Event]], None]


SizeType = Union[Tuple[float, float], Sequence[float]]
"""Viewport size: (width, height) tuple, list, or sequence."""


__all__ = [
    "Point",
    "EventType",
    "Event",
    "EventCallback",
    "Vertex",
    "Edge",
    "GraphSource",
    "SizeType",
]
