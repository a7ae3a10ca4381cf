"""
Tests for edge routing: straight lines, parallel curves and self-loops.
"""

import math

import pytest

from graph_scene.config import SceneConfig
from graph_scene.geometry import cross, distance
from graph_scene.graph import GraphEdgeList
from graph_scene.scene.nodes import VisualEdge, VisualNode
from graph_scene.scene.routing import (
    EdgeGeometry,
    EdgeRouter,
    EdgeShape,
    RoutingIndexTable,
)

# =============================================================================
# Test Fixtures
# =============================================================================


def create_pair(a_pos=(100.0, 100.0), b_pos=(300.0, 100.0)):
    """Two nodes; ``a`` is created first and is the canonical pair start."""
    g = GraphEdgeList()
    a = VisualNode(g.insert_vertex("a"), *a_pos)
    b = VisualNode(g.insert_vertex("b"), *b_pos)
    return g, a, b


def attach(g, router, outbound, inbound, element, index=0, parallel=False):
    """Create a rendered edge wired into both endpoints."""
    edge = g.insert_edge(outbound.vertex, inbound.vertex, element)
    visual = VisualEdge(edge, outbound, inbound, router, routing_index=index)
    visual.parallel = parallel
    outbound.edges.add(visual)
    inbound.edges.add(visual)
    if outbound is not inbound:
        outbound.add_adjacent(inbound)
        inbound.add_adjacent(outbound)
    visual.reroute()
    return visual


# =============================================================================
# Routing Index Table Tests
# =============================================================================


class TestRoutingIndexTable:
    """Tests for the per-pair monotonic counter."""

    def test_sequential_indices(self):
        _, a, b = create_pair()
        table = RoutingIndexTable()
        assert [table.next_index(a, b) for _ in range(3)] == [0, 1, 2]

    def test_pair_is_unordered(self):
        """(a, b) and (b, a) share one counter."""
        _, a, b = create_pair()
        table = RoutingIndexTable()
        assert table.next_index(a, b) == 0
        assert table.next_index(b, a) == 1
        assert table.issued(a, b) == 2

    def test_pairs_are_independent(self):
        g, a, b = create_pair()
        c = VisualNode(g.insert_vertex("c"))
        table = RoutingIndexTable()
        table.next_index(a, b)
        assert table.next_index(a, c) == 0
        assert len(table) == 2

    def test_self_loop_pair(self):
        _, a, _ = create_pair()
        table = RoutingIndexTable()
        assert table.next_index(a, a) == 0
        assert table.next_index(a, a) == 1


# =============================================================================
# Line Tests
# =============================================================================


class TestLineRouting:
    """Tests for straight edges."""

    def test_line_between_boundaries(self):
        g, a, b = create_pair()
        visual = attach(g, EdgeRouter(), a, b, "ab")
        geometry = visual.geometry

        assert geometry.kind is EdgeShape.LINE
        assert geometry.start == pytest.approx((115.0, 100.0))
        assert geometry.end == pytest.approx((285.0, 100.0))
        assert geometry.control1 is None
        assert geometry.control2 is None

    def test_arrow_terminal_and_tangent(self):
        """The arrowhead sits on the inbound boundary, pointing along the edge."""
        g, a, b = create_pair(b_pos=(100.0, 300.0))
        geometry = attach(g, EdgeRouter(), a, b, "ab").geometry
        assert geometry.terminal == pytest.approx((100.0, 285.0))
        assert geometry.tangent_angle == pytest.approx(90.0)

    def test_geometry_is_immutable(self):
        g, a, b = create_pair()
        geometry = attach(g, EdgeRouter(), a, b, "ab").geometry
        assert isinstance(geometry, EdgeGeometry)
        with pytest.raises(AttributeError):
            geometry.kind = EdgeShape.CURVE

    def test_reroute_on_move(self):
        """Moving an endpoint recomputes the incident edge geometry."""
        g, a, b = create_pair()
        visual = attach(g, EdgeRouter(), a, b, "ab")
        b.move_to(100.0, 300.0)
        assert visual.geometry.end == pytest.approx((100.0, 285.0))


# =============================================================================
# Curve Tests
# =============================================================================


class TestCurveRouting:
    """Tests for parallel edge curves."""

    def test_parallel_edges_curve(self):
        g, a, b = create_pair()
        router = EdgeRouter()
        visual = attach(g, router, a, b, "ab", index=0, parallel=True)
        assert visual.geometry.kind is EdgeShape.CURVE
        assert visual.geometry.control1 == visual.geometry.control2

    def test_first_two_bow_to_opposite_sides(self):
        g, a, b = create_pair()
        router = EdgeRouter()
        first = attach(g, router, a, b, "ab0", index=0, parallel=True)
        second = attach(g, router, a, b, "ab1", index=1, parallel=True)

        side0 = cross(a.position, b.position, first.geometry.control1)
        side1 = cross(a.position, b.position, second.geometry.control1)
        assert side0 * side1 < 0

    def test_reverse_edge_uses_same_pivot(self):
        """An edge drawn b -> a bends relative to the same canonical start."""
        g, a, b = create_pair()
        router = EdgeRouter()
        forward = attach(g, router, a, b, "ab0", index=0, parallel=True)
        reverse = attach(g, router, b, a, "ba2", index=2, parallel=True)

        side0 = cross(a.position, b.position, forward.geometry.control1)
        side2 = cross(a.position, b.position, reverse.geometry.control1)
        assert side0 * side2 > 0
        # the third edge sits one tier further out
        assert abs(side2) > abs(side0)

    def test_curve_angle_formula(self):
        g, a, b = create_pair()
        router = EdgeRouter()
        visual = attach(g, router, a, b, "ab", index=3, parallel=True)
        base = 20.0 + (3.0 - 20.0) * 200.0 / 400.0
        assert router.curve_angle(visual) == pytest.approx(2 * base)

    def test_curvature_shrinks_with_distance(self):
        g, a, b = create_pair()
        router = EdgeRouter()
        visual = attach(g, router, a, b, "ab", index=0, parallel=True)
        near = abs(router.curve_angle(visual))
        b.move_to(700.0, 100.0)
        assert abs(router.curve_angle(visual)) < near

    def test_curve_angle_capped(self):
        config = SceneConfig(curve_angle=60.0, min_curve_angle=60.0)
        g, a, b = create_pair()
        router = EdgeRouter(config)
        visual = attach(g, router, a, b, "ab", index=2, parallel=True)
        assert router.curve_angle(visual) == pytest.approx(-75.0)

    def test_endpoints_on_boundaries(self):
        g, a, b = create_pair()
        geometry = attach(g, EdgeRouter(), a, b, "ab", index=1, parallel=True).geometry
        assert distance(geometry.start, a.position) == pytest.approx(a.radius)
        assert distance(geometry.end, b.position) == pytest.approx(b.radius)


# =============================================================================
# Loop Tests
# =============================================================================


class TestLoopRouting:
    """Tests for self-loops."""

    def test_loop_points_up_without_neighbors(self):
        g, a, _ = create_pair()
        geometry = attach(g, EdgeRouter(), a, a, "aa").geometry

        assert geometry.kind is EdgeShape.LOOP
        assert geometry.control1[1] < a.y
        assert geometry.control2[1] < a.y
        # symmetric around the vertical through the node
        assert geometry.control1[0] - a.x == pytest.approx(-(geometry.control2[0] - a.x))

    def test_loop_size(self):
        g, a, _ = create_pair()
        geometry = attach(g, EdgeRouter(), a, a, "aa").geometry
        assert distance(geometry.control1, a.position) == pytest.approx(a.radius * 3.0)

    def test_loop_faces_away_from_neighbors(self):
        """With a neighbour on the right, the loop opens to the left."""
        g, a, b = create_pair()
        router = EdgeRouter()
        attach(g, router, a, b, "ab")
        geometry = attach(g, router, a, a, "aa").geometry
        assert geometry.control1[0] < a.x
        assert geometry.control2[0] < a.x

    def test_stacked_loops_grow_and_rotate(self):
        g, a, _ = create_pair()
        router = EdgeRouter()
        first = attach(g, router, a, a, "aa0", index=0).geometry
        second = attach(g, router, a, a, "aa1", index=1).geometry

        assert distance(second.control1, a.position) == pytest.approx(a.radius * 3.5)
        assert second.control1 != pytest.approx(first.control1)

    def test_loop_endpoints_on_boundary(self):
        g, a, _ = create_pair()
        geometry = attach(g, EdgeRouter(), a, a, "aa").geometry
        assert distance(geometry.start, a.position) == pytest.approx(a.radius)
        assert distance(geometry.end, a.position) == pytest.approx(a.radius)
        assert geometry.terminal == geometry.end
        assert math.isfinite(geometry.tangent_angle)
