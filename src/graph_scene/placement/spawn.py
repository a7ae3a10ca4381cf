"""
Initial position for vertices added after the panel is initialized.

A new vertex is placed next to an already rendered neighbour when it has one,
otherwise at the center of the bounding box of every rendered node. The
result is always clamped into the viewport.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Mapping, Optional

from ..errors import InvalidEdgeError, InvalidVertexError
from ..geometry import bound_center_coordinate, rotate
from ..types import GraphSource, Point, Vertex

if TYPE_CHECKING:
    from ..scene.nodes import VisualNode

LOGGER = logging.getLogger(__name__)


def plotted_neighbor(
    vertex: Vertex, graph: GraphSource, nodes: Mapping[Vertex, VisualNode]
) -> Optional[VisualNode]:
    """First rendered node joined to ``vertex`` by an edge, self excluded."""
    try:
        for edge in graph.incident_edges(vertex):
            other = graph.opposite(vertex, edge)
            if other is not vertex and other in nodes:
                return nodes[other]
    except (InvalidVertexError, InvalidEdgeError) as err:
        # the graph changed under us; treat the vertex as isolated
        LOGGER.debug("Neighbour lookup for %r failed: %s", vertex, err)
    return None


def bounding_box_center(nodes: Mapping[Vertex, VisualNode]) -> Optional[Point]:
    """Center of the bounding box of all node centers, None when empty."""
    if not nodes:
        return None
    xs = [node.x for node in nodes.values()]
    ys = [node.y for node in nodes.values()]
    return ((min(xs) + max(xs)) / 2.0, (min(ys) + max(ys)) / 2.0)


def spawn_position(
    vertex: Vertex,
    graph: GraphSource,
    nodes: Mapping[Vertex, VisualNode],
    width: float,
    height: float,
    *,
    radius: float,
    offset: float = 50.0,
    rng: Optional[random.Random] = None,
) -> Point:
    """
    Compute the first position of a vertex added to a live scene.

    Args:
        vertex: The new vertex
        graph: Graph the vertex belongs to
        nodes: Currently rendered nodes (the new vertex is not among them)
        width: Viewport width
        height: Viewport height
        radius: Radius of the new node, used for clamping
        offset: Distance (per axis) from the neighbour before rotation
        rng: Random source for the rotation angle

    Returns:
        (x, y) position inside the viewport
    """
    if rng is None:
        rng = random.Random()

    neighbor = plotted_neighbor(vertex, graph, nodes)
    if neighbor is not None:
        pivot = neighbor.position
        x, y = rotate((pivot[0] + offset, pivot[1] + offset), pivot, rng.uniform(0, 360))
    else:
        center = bounding_box_center(nodes)
        if center is None:
            center = (width / 2.0, height / 2.0)
        x, y = center

    return (
        bound_center_coordinate(x, 0.0, width, radius),
        bound_center_coordinate(y, 0.0, height, radius),
    )


__all__ = ["spawn_position", "plotted_neighbor", "bounding_box_center"]
