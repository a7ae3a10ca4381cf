"""
Force-directed layout engine.

The engine nudges the visible nodes of a scene toward a low-energy
configuration. It is driven by an external scheduler: every scheduler firing
calls ``tick()``, which runs a batch of invisible sub-steps and then applies
one visible position update.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, Collection, Optional

import numpy as np

from ..base import EventEmitter
from ..config import SceneConfig
from ..types import EventCallback, EventType, SizeType
from ..validation import validate_canvas_size, validate_iterations
from .strategies import ForceDirectedStrategy, default_strategy

if TYPE_CHECKING:
    from typing_extensions import Self

    from ..scene.nodes import VisualNode

LOGGER = logging.getLogger(__name__)

NodeProvider = Callable[[], Collection["VisualNode"]]


class ForceDirectedLayoutEngine(EventEmitter):
    """
    Iterative force simulation over a set of VisualNodes.

    One tick, for the visible nodes:

    1. the staged position of every node is set to its visible position;
    2. ``iterations`` times: forces are computed from the staged positions
       and added to them (explicit Euler, no velocity);
    3. staged positions are clamped into the viewport and applied with
       ``VisualNode.move_to``.

    Pinned nodes still exert forces but are never moved.

    Example:
        engine = ForceDirectedLayoutEngine(nodes=lambda: scene_nodes, size=(800, 600))
        engine.on("tick", lambda e: redraw())
        engine.start()
        scheduler.fire()  # calls engine.tick()
    """

    def __init__(
        self,
        *,
        nodes: Optional[NodeProvider] = None,
        size: SizeType = (1.0, 1.0),
        config: Optional[SceneConfig] = None,
        strategy: Optional[ForceDirectedStrategy] = None,
        lock: Optional[threading.RLock] = None,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            nodes: Callable returning the current scene nodes
            size: Viewport size as (width, height)
            config: Scene configuration (iterations and default force model)
            strategy: Force model. Defaults to LogarithmicSpringStrategy from config.
            lock: Lock shared with the scene; held for the duration of a tick
            on_start: Callback fired when the engine starts running
            on_tick: Callback fired after every visible update
            on_end: Callback fired when the engine stops
        """
        super().__init__(on_start=on_start, on_tick=on_tick, on_end=on_end)
        config = config if config is not None else SceneConfig()
        self._nodes: NodeProvider = nodes if nodes is not None else (lambda: ())
        self._size: tuple[float, float] = validate_canvas_size(size)
        self._strategy: ForceDirectedStrategy = (
            strategy if strategy is not None else default_strategy(config)
        )
        self._iterations: int = config.inner_iterations
        self._lock = lock if lock is not None else threading.RLock()
        self._running: bool = False
        self._ticks: int = 0
        self._energy: Optional[float] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        """Whether scheduler firings currently advance the simulation."""
        return self._running

    @property
    def size(self) -> tuple[float, float]:
        """Get viewport size as (width, height)."""
        return self._size

    @size.setter
    def size(self, value: SizeType) -> None:
        """Set viewport size; nodes are clamped into it on the next tick."""
        with self._lock:
            self._size = validate_canvas_size(value)

    @property
    def strategy(self) -> ForceDirectedStrategy:
        """Get the force model."""
        return self._strategy

    @strategy.setter
    def strategy(self, value: ForceDirectedStrategy) -> None:
        """Swap the force model; takes effect on the next tick."""
        with self._lock:
            self._strategy = value

    @property
    def iterations(self) -> int:
        """Get the number of sub-steps per tick."""
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        self._iterations = validate_iterations(value)

    @property
    def ticks(self) -> int:
        """Number of visible updates applied so far."""
        return self._ticks

    @property
    def energy(self) -> Optional[float]:
        """Sum of force magnitudes in the last sub-step (None before any tick)."""
        return self._energy

    def bind(self, nodes: NodeProvider) -> Self:
        """Attach the callable that yields the scene's nodes."""
        self._nodes = nodes
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def start(self) -> Self:
        """Switch to RUNNING. Resumes from the current positions."""
        if not self._running:
            self._running = True
            LOGGER.debug("Layout engine started")
            self.trigger({"type": EventType.start, "ticks": self._ticks, "energy": self._energy})
        return self

    def stop(self) -> Self:
        """Switch to STOPPED. Positions and counters are kept."""
        if self._running:
            self._running = False
            LOGGER.debug("Layout engine stopped after %d ticks", self._ticks)
            self.trigger({"type": EventType.end, "ticks": self._ticks, "energy": self._energy})
        return self

    def tick(self) -> bool:
        """
        Advance the simulation by one visible update if running.

        Returns:
            True if an update was applied, False when stopped.
        """
        if not self._running:
            return False
        self.step()
        return True

    def run(self, ticks: int = 1) -> Self:
        """Apply ``ticks`` visible updates synchronously, regardless of state."""
        for _ in range(validate_iterations(ticks)):
            self.step()
        return self

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def step(self) -> None:
        """Run one batch of sub-steps and apply the result."""
        with self._lock:
            nodes = [node for node in self._nodes() if node.visible]
            if nodes:
                self._energy = self._simulate(nodes)
            self._ticks += 1
        self.trigger({"type": EventType.tick, "ticks": self._ticks, "energy": self._energy})

    def _simulate(self, nodes: list[VisualNode]) -> float:
        n = len(nodes)
        index = {node: i for i, node in enumerate(nodes)}

        staged = np.array([node.position for node in nodes], dtype=np.float64)
        pinned = np.array([node.pinned for node in nodes], dtype=bool)
        adjacency = np.zeros((n, n), dtype=bool)
        for i, node in enumerate(nodes):
            for other in node.adjacent:
                j = index.get(other)
                if j is not None and j != i:
                    adjacency[i, j] = True
                    adjacency[j, i] = True

        free = ~pinned
        forces = np.zeros((n, 2), dtype=np.float64)
        for _ in range(self._iterations):
            forces = self._strategy.compute_forces(staged, adjacency, self._size)
            staged[free] += forces[free]

        width, height = self._size
        for i, node in enumerate(nodes):
            node.fx, node.fy = float(forces[i, 0]), float(forces[i, 1])
            if node.pinned:
                node.staged_x, node.staged_y = node.x, node.y
                continue
            x, y = node.clamped(float(staged[i, 0]), float(staged[i, 1]), width, height)
            node.staged_x, node.staged_y = x, y
            node.move_to(x, y)

        return float(np.hypot(forces[:, 0], forces[:, 1]).sum())

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        return f"{type(self).__name__}({state}, ticks={self._ticks}, strategy={self._strategy!r})"


__all__ = ["ForceDirectedLayoutEngine"]
