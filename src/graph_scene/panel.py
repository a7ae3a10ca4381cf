"""
Host-facing lifecycle surface.

GraphPanel glues the pieces together: it owns the scene (SceneReconciler),
the force-directed engine, the initial placement strategy, the owner-thread
executor and the tick scheduler. A host toolkit drives it with
``initialize()``, ``refresh()`` and ``resize()`` and reads positions and edge
geometry back for drawing.
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Optional

from .config import SceneConfig
from .errors import InvalidStateError
from .force import ForceDirectedLayoutEngine, ForceDirectedStrategy
from .placement import CircularSortedPlacement, PlacementStrategy
from .scene import EdgeGeometry, ReconcileResult, SceneReconciler, VisualEdge, VisualNode
from .scheduling import (
    InlineExecutor,
    ManualScheduler,
    SceneExecutor,
    Scheduler,
    ThreadedScheduler,
)
from .types import Edge, GraphSource, Point, Vertex
from .validation import validate_canvas_size

LOGGER = logging.getLogger(__name__)


class GraphPanel:
    """
    Visual scene of a mutable graph, with optional automatic layout.

    Example:
        graph = GraphEdgeList()
        graph.insert_vertex("A")
        graph.insert_vertex("B")
        graph.insert_edge_between("A", "B", "AB")

        panel = GraphPanel(graph, scheduler=ManualScheduler())
        panel.initialize(800, 600)
        panel.set_automatic_layout_enabled(True)

        graph.insert_vertex("C")
        panel.refresh_blocking()
        x, y = panel.vertex_position(graph.vertex("C"))
    """

    def __init__(
        self,
        graph: GraphSource,
        *,
        config: Optional[SceneConfig] = None,
        placement: Optional[PlacementStrategy] = None,
        strategy: Optional[ForceDirectedStrategy] = None,
        executor: Optional[SceneExecutor] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        """
        Initialize the panel. Nothing is rendered until ``initialize()``.

        Args:
            graph: Graph to render
            config: Scene configuration
            placement: Initial placement strategy. Defaults to CircularSortedPlacement.
            strategy: Force model. Defaults to LogarithmicSpringStrategy from config.
            executor: Owner-thread executor. Defaults to InlineExecutor.
            scheduler: Tick scheduler. With an InlineExecutor it defaults to a
                ManualScheduler the host fires from its own loop; otherwise to
                a ThreadedScheduler posting onto the executor every
                ``config.tick_interval`` seconds. A ThreadedScheduler without
                an executor is given this panel's executor.
        """
        self._graph = graph
        self._config = config if config is not None else SceneConfig()
        self._lock = threading.RLock()
        self._placement = placement if placement is not None else CircularSortedPlacement()
        self._executor = executor if executor is not None else InlineExecutor()
        if scheduler is None:
            if isinstance(self._executor, InlineExecutor):
                scheduler = ManualScheduler()
            else:
                scheduler = ThreadedScheduler(
                    interval=self._config.tick_interval, executor=self._executor
                )
        elif isinstance(scheduler, ThreadedScheduler) and scheduler.executor is None:
            # ticks must run on the owner thread
            scheduler.executor = self._executor
        self._scheduler = scheduler

        self._scene = SceneReconciler(config=self._config, lock=self._lock)
        self._engine = ForceDirectedLayoutEngine(
            nodes=self._scene.nodes,
            config=self._config,
            strategy=strategy,
            lock=self._lock,
        )
        self._scheduler.bind(self._engine.tick)

        self._initialized = False
        self._automatic_layout = False

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> GraphSource:
        return self._graph

    @property
    def config(self) -> SceneConfig:
        return self._config

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding the scene maps; shared with the engine."""
        return self._lock

    @property
    def scene(self) -> SceneReconciler:
        return self._scene

    @property
    def engine(self) -> ForceDirectedLayoutEngine:
        return self._engine

    @property
    def placement(self) -> PlacementStrategy:
        return self._placement

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def executor(self) -> SceneExecutor:
        return self._executor

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def size(self) -> tuple[float, float]:
        """Get viewport size as (width, height)."""
        return self._scene.size

    @property
    def automatic_layout_enabled(self) -> bool:
        return self._automatic_layout

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def initialize(self, width: float, height: float) -> None:
        """
        Build the scene and run the initial placement.

        Must be called exactly once, after the host knows the viewport size.

        Raises:
            InvalidStateError: If already initialized
            InvalidCanvasSizeError: If the viewport has zero area
        """
        if self._initialized:
            raise InvalidStateError("Already initialized. Use refresh() instead.")
        size = validate_canvas_size((width, height))
        self._on_owner(self._initialize, size)

    def _initialize(self, size: tuple[float, float]) -> None:
        with self._lock:
            if self._initialized:
                raise InvalidStateError("Already initialized. Use refresh() instead.")
            self._scene.size = size
            self._engine.size = size
            self._scene.populate(self._graph)
            self._placement.place(size[0], size[1], self._graph, self._scene.nodes())
            self._initialized = True
        LOGGER.debug("Panel initialized at %gx%g with %r", size[0], size[1], self._placement)
        if self._automatic_layout:
            self._start_layout()

    def refresh(self) -> Future[ReconcileResult]:
        """
        Schedule a reconciliation with the graph and return immediately.

        A failed pass is logged even when the returned future is discarded.

        Raises:
            InvalidStateError: If called before ``initialize()``
        """
        self._require_initialized()
        future = self._executor.submit(self._reconcile)
        future.add_done_callback(_log_reconcile_failure)
        return future

    def refresh_blocking(self, timeout: float = 1.0) -> bool:
        """
        Reconcile with the graph and wait for the result.

        On the owner thread the pass runs inline. Elsewhere it is submitted to
        the executor and awaited for at most ``timeout`` seconds; on timeout a
        warning is logged and the pass still completes later.

        Returns:
            True if the pass finished, False on timeout

        Raises:
            InvalidStateError: If called before ``initialize()``
        """
        self._require_initialized()
        if self._executor.is_owner_thread():
            self._reconcile()
            return True

        future = self._executor.submit(self._reconcile)
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            LOGGER.warning("Scene reconciliation did not finish within %.2f seconds", timeout)
            return False
        return True

    def _reconcile(self) -> ReconcileResult:
        with self._lock:
            return self._scene.reconcile(self._graph)

    def set_automatic_layout_enabled(self, enabled: bool) -> None:
        """
        Start or stop the force-directed layout.

        May be called before ``initialize()``; the layout then starts once the
        scene is built.
        """
        self._automatic_layout = bool(enabled)
        if not self._initialized:
            return
        if self._automatic_layout:
            self._start_layout()
        else:
            self._stop_layout()

    def _start_layout(self) -> None:
        self._engine.start()
        self._scheduler.start()

    def _stop_layout(self) -> None:
        self._scheduler.stop()
        self._engine.stop()

    def set_layout_strategy(self, strategy: ForceDirectedStrategy) -> None:
        """Swap the force model used by the automatic layout."""
        self._engine.strategy = strategy

    def resize(self, width: float, height: float) -> None:
        """
        Adopt a new viewport size and pull every node back inside it.

        Raises:
            InvalidCanvasSizeError: If the viewport has zero area
        """
        size = validate_canvas_size((width, height))
        with self._lock:
            self._scene.size = size
            self._engine.size = size
            for node in self._scene.nodes():
                x, y = node.clamped(node.x, node.y, size[0], size[1])
                if (x, y) != node.position:
                    node.move_to(x, y)

    def shutdown(self) -> None:
        """Stop the layout and release the executor."""
        self._stop_layout()
        self._executor.shutdown()

    # -------------------------------------------------------------------------
    # Per-element access
    # -------------------------------------------------------------------------

    def vertex_node(self, vertex: Vertex) -> Optional[VisualNode]:
        return self._scene.vertex_node(vertex)

    def edge_node(self, edge: Edge) -> Optional[VisualEdge]:
        return self._scene.edge_node(edge)

    def vertex_node_for(self, element: Any) -> Optional[VisualNode]:
        """Look up a rendered vertex by its payload."""
        with self._lock:
            for node in self._scene.nodes():
                if node.vertex.element == element:
                    return node
        return None

    def edge_node_for(self, element: Any) -> Optional[VisualEdge]:
        """Look up a rendered edge by its payload."""
        with self._lock:
            for visual in self._scene.edges():
                if visual.edge.element == element:
                    return visual
        return None

    def vertex_bounds(self, vertex: Vertex) -> Optional[tuple[float, float, float, float]]:
        """Bounding box ``(min_x, min_y, max_x, max_y)``, or None if not rendered."""
        node = self._scene.vertex_node(vertex)
        return node.bounds() if node is not None else None

    def edge_geometry(self, edge: Edge) -> Optional[EdgeGeometry]:
        """Current drawable geometry of an edge, or None if not rendered."""
        with self._lock:
            visual = self._scene.edge_node(edge)
            if visual is None:
                return None
            if visual.geometry is None:
                return visual.reroute()
            return visual.geometry

    def set_vertex_position(self, vertex: Vertex, x: float, y: float) -> bool:
        """
        Move a rendered vertex.

        Returns:
            False if the vertex is not rendered
        """
        with self._lock:
            node = self._scene.vertex_node(vertex)
            if node is None:
                return False
            node.move_to(x, y)
            return True

    def vertex_position(self, vertex: Vertex) -> Point:
        """Center of a rendered vertex; ``(nan, nan)`` if it is not rendered."""
        node = self._scene.vertex_node(vertex)
        if node is None:
            return (math.nan, math.nan)
        return node.position

    # -------------------------------------------------------------------------
    # Dragging
    # -------------------------------------------------------------------------

    def begin_drag(self, vertex: Vertex) -> bool:
        """Pin a vertex so the engine stops moving it. False if not draggable."""
        with self._lock:
            node = self._scene.vertex_node(vertex)
            if node is None or not node.allow_move:
                return False
            node.pinned = True
            return True

    def drag_to(self, vertex: Vertex, x: float, y: float) -> bool:
        """Move a pinned vertex, clamped into the viewport."""
        with self._lock:
            node = self._scene.vertex_node(vertex)
            if node is None or not node.pinned:
                return False
            width, height = self._scene.size
            node.move_to(*node.clamped(x, y, width, height))
            return True

    def end_drag(self, vertex: Vertex) -> bool:
        with self._lock:
            node = self._scene.vertex_node(vertex)
            if node is None or not node.pinned:
                return False
            node.pinned = False
            return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise InvalidStateError("You must call initialize() before any updates.")

    def _on_owner(self, fn: Any, *args: Any) -> Any:
        if self._executor.is_owner_thread():
            return fn(*args)
        return self._executor.submit(fn, *args).result()

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "new"
        return f"{type(self).__name__}({state}, nodes={len(self._scene)}, engine={self._engine!r})"


def _log_reconcile_failure(future: Future[ReconcileResult]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        LOGGER.error("Scene reconciliation failed", exc_info=exc)


__all__ = ["GraphPanel"]
