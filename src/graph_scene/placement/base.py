"""
Base class for initial placement strategies.

A placement strategy assigns a first position to a batch of freshly created
nodes when the panel is initialized. Vertices that appear later are placed by
the spawn rule in ``placement.spawn`` instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Collection

from ..types import GraphSource

if TYPE_CHECKING:
    from ..scene.nodes import VisualNode


class PlacementStrategy(ABC):
    """
    Abstract placement strategy.

    Implementations mutate the position of every node they are given and
    must not read or write any other node.
    """

    @abstractmethod
    def place(
        self,
        width: float,
        height: float,
        graph: GraphSource,
        nodes: Collection[VisualNode],
    ) -> None:
        """
        Position ``nodes`` inside a viewport of the given size.

        Args:
            width: Viewport width
            height: Viewport height
            graph: The graph being rendered (read-only)
            nodes: Nodes to position
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["PlacementStrategy"]
