"""
graph-scene: layout and synchronization engine for interactive graph views.

This package keeps a 2D scene model (positioned nodes and routed edges) in
sync with a mutable graph, without any drawing code of its own.

Components:
- placement: initial placement (circular sorted, random) and spawn rule
- force: force-directed automatic layout engine and force models
- scene: visual records, edge routing and incremental reconciliation
- panel: GraphPanel, the lifecycle surface a host toolkit drives
- graph: thread-safe in-memory reference graphs
"""

__version__ = "0.1.0"

# Configuration and errors
from .config import SceneConfig
from .errors import (
    GraphSceneError,
    InvalidEdgeError,
    InvalidStateError,
    InvalidVertexError,
)

# Force-directed layout
from .force import (
    ForceDirectedLayoutEngine,
    ForceDirectedStrategy,
    LogarithmicSpringStrategy,
    SpringGravityStrategy,
    SpringSystemStrategy,
)

# In-memory graphs
from .graph import DigraphEdgeList, GraphEdgeList

# Panel
from .panel import GraphPanel

# Initial placement
from .placement import (
    CircularSortedPlacement,
    PlacementStrategy,
    RandomNearCenterPlacement,
    UniformRandomPlacement,
    spawn_position,
)

# Scene model
from .scene import (
    EdgeGeometry,
    EdgeRouter,
    EdgeShape,
    NodeKind,
    ReconcileResult,
    RoutingIndexTable,
    SceneReconciler,
    VisualEdge,
    VisualNode,
)

# Scheduling
from .scheduling import (
    InlineExecutor,
    ManualScheduler,
    SceneExecutor,
    Scheduler,
    ThreadedExecutor,
    ThreadedScheduler,
)

# Shared types
from .types import Edge, Event, EventType, GraphSource, Point, Vertex

# Validation
from .validation import (
    InvalidCanvasSizeError,
    InvalidParameterError,
    ValidationError,
)

__all__ = [
    "__version__",
    # Configuration and errors
    "SceneConfig",
    "GraphSceneError",
    "InvalidStateError",
    "InvalidVertexError",
    "InvalidEdgeError",
    "ValidationError",
    "InvalidCanvasSizeError",
    "InvalidParameterError",
    # Types
    "Point",
    "Vertex",
    "Edge",
    "GraphSource",
    "EventType",
    "Event",
    # Graphs
    "GraphEdgeList",
    "DigraphEdgeList",
    # Placement
    "PlacementStrategy",
    "CircularSortedPlacement",
    "UniformRandomPlacement",
    "RandomNearCenterPlacement",
    "spawn_position",
    # Force layout
    "ForceDirectedLayoutEngine",
    "ForceDirectedStrategy",
    "LogarithmicSpringStrategy",
    "SpringSystemStrategy",
    "SpringGravityStrategy",
    # Scene
    "NodeKind",
    "VisualNode",
    "VisualEdge",
    "EdgeShape",
    "EdgeGeometry",
    "EdgeRouter",
    "RoutingIndexTable",
    "SceneReconciler",
    "ReconcileResult",
    # Scheduling
    "SceneExecutor",
    "InlineExecutor",
    "ThreadedExecutor",
    "Scheduler",
    "ManualScheduler",
    "ThreadedScheduler",
    # Panel
    "GraphPanel",
]
