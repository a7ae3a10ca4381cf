"""
Exception hierarchy for graph-scene.

Programmer errors (wrong call order, foreign graph elements) fail fast with
one of these; recoverable races during reconciliation are never raised.
"""

from __future__ import annotations


class GraphSceneError(Exception):
    """Base exception for all graph-scene errors."""

    pass


class InvalidStateError(GraphSceneError, RuntimeError):
    """Raised when a lifecycle method is called in the wrong state."""

    pass


class InvalidVertexError(GraphSceneError, ValueError):
    """Raised when a vertex is foreign, removed, or duplicated."""

    pass


class InvalidEdgeError(GraphSceneError, ValueError):
    """Raised when an edge is foreign, removed, or duplicated."""

    pass


__all__ = [
    "GraphSceneError",
    "InvalidStateError",
    "InvalidVertexError",
    "InvalidEdgeError",
]
