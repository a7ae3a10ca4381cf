"""
Scene model: visual records, edge routing and graph synchronization.
"""

from .nodes import NodeKind, VisualEdge, VisualNode
from .reconciler import (
    AddEdge,
    AddVertex,
    ReconcilePlan,
    ReconcileResult,
    RemoveEdge,
    RemoveVertex,
    SceneCommand,
    SceneReconciler,
)
from .routing import EdgeGeometry, EdgeRouter, EdgeShape, RoutingIndexTable

__all__ = [
    "NodeKind",
    "VisualNode",
    "VisualEdge",
    "EdgeShape",
    "EdgeGeometry",
    "EdgeRouter",
    "RoutingIndexTable",
    "SceneReconciler",
    "ReconcilePlan",
    "ReconcileResult",
    "SceneCommand",
    "RemoveEdge",
    "RemoveVertex",
    "AddVertex",
    "AddEdge",
]
