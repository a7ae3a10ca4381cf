"""
Circular placement.

Places nodes evenly on a circle centered in the viewport, ordered by the
lower-cased string form of their payload.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Collection

from ..geometry import rotate
from ..types import GraphSource
from .base import PlacementStrategy

if TYPE_CHECKING:
    from ..scene.nodes import VisualNode


def sort_key(node: VisualNode) -> str:
    return str(node.vertex.element).lower()


class CircularSortedPlacement(PlacementStrategy):
    """
    Circle placement sorted by payload label.

    The first node sits at 12 o'clock; each following node is rotated
    clockwise by 360/N degrees. The ring radius is
    ``min(width, height) / 2 - 2 * radius`` where ``radius`` is the largest
    node radius, so nodes keep clear of the viewport border.

    Example:
        CircularSortedPlacement().place(800, 600, graph, nodes)
    """

    def place(
        self,
        width: float,
        height: float,
        graph: GraphSource,
        nodes: Collection[VisualNode],
    ) -> None:
        if not nodes:
            return

        # sorted() is stable, so equal labels keep iteration order
        ordered = sorted(nodes, key=sort_key)
        node_radius = max(node.radius for node in ordered)

        center = (width / 2.0, height / 2.0)
        ring = min(width, height) / 2.0 - 2.0 * node_radius
        if ring <= 0:
            warnings.warn(
                f"Node radius {node_radius} is too large for a {width}x{height} "
                "viewport; all nodes will be placed at the center.",
                UserWarning,
                stacklevel=2,
            )
            ring = 0.0

        first = (center[0], center[1] - ring)
        step = 360.0 / len(ordered)
        for i, node in enumerate(ordered):
            x, y = rotate(first, center, step * i)
            node.move_to(x, y)


__all__ = ["CircularSortedPlacement"]
