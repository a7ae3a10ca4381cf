"""
Tests for incremental scene reconciliation.
"""

import itertools
import math
import random

import pytest

from graph_scene.config import SceneConfig
from graph_scene.errors import InvalidStateError
from graph_scene.geometry import cross, distance
from graph_scene.graph import GraphEdgeList
from graph_scene.scene import (
    AddEdge,
    AddVertex,
    EdgeShape,
    RemoveEdge,
    SceneReconciler,
)

# =============================================================================
# Test Fixtures
# =============================================================================


def create_scene(**config):
    return SceneReconciler(size=(800, 600), config=SceneConfig(random_seed=1, **config))


def create_path_graph():
    """A - B - C."""
    g = GraphEdgeList()
    for element in "ABC":
        g.insert_vertex(element)
    g.insert_edge_between("A", "B", "AB")
    g.insert_edge_between("B", "C", "BC")
    return g


def node_of(scene, g, element):
    return scene.vertex_node(g.vertex(element))


def edge_of(scene, g, element):
    return scene.edge_node(g.edge(element))


def rendered_vertices(scene):
    return {node.vertex.element for node in scene.nodes()}


def rendered_edges(scene):
    return {visual.edge.element for visual in scene.edges()}


class PartialView:
    """Graph view that hides some vertices, as if inserted during a pass."""

    def __init__(self, graph, hidden):
        self._graph = graph
        self._hidden = set(hidden)

    def vertices(self):
        return [v for v in self._graph.vertices() if v.element not in self._hidden]

    def edges(self):
        return self._graph.edges()

    def incident_edges(self, vertex):
        return self._graph.incident_edges(vertex)

    def opposite(self, vertex, edge):
        return self._graph.opposite(vertex, edge)

    def num_vertices(self):
        return len(self.vertices())


# =============================================================================
# Populate Tests
# =============================================================================


class TestPopulate:
    """Tests for the initial build."""

    def test_round_trip(self):
        """After the build, node keys equal vertices and edge keys equal edges."""
        g = create_path_graph()
        scene = create_scene()
        result = scene.populate(g)

        assert rendered_vertices(scene) == {"A", "B", "C"}
        assert rendered_edges(scene) == {"AB", "BC"}
        assert len(result.added_vertices) == 3
        assert len(result.added_edges) == 2
        scene.check_invariants(g)

    def test_nodes_start_at_origin(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        assert all(node.position == (0.0, 0.0) for node in scene.nodes())

    def test_config_applied_to_nodes(self):
        g = create_path_graph()
        scene = create_scene(vertex_radius=9.0, vertex_allow_user_move=False)
        scene.populate(g)
        node = node_of(scene, g, "A")
        assert node.radius == 9.0
        assert not node.allow_move

    def test_populate_twice(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        with pytest.raises(InvalidStateError, match="already populated"):
            scene.populate(g)

    def test_adjacency_built(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        a, b, c = (node_of(scene, g, x) for x in "ABC")
        assert a.adjacent == {b}
        assert b.adjacent == {a, c}
        assert c.adjacent == {b}


# =============================================================================
# Reconcile Tests
# =============================================================================


class TestReconcile:
    """Tests for incremental passes."""

    def test_remove_middle_vertex(self):
        """Removing B drops both edges and leaves A and C unconnected."""
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)

        g.remove_vertex(g.vertex("B"))
        result = scene.reconcile(g)

        assert rendered_vertices(scene) == {"A", "C"}
        assert rendered_edges(scene) == set()
        assert node_of(scene, g, "A").adjacent == set()
        assert node_of(scene, g, "C").adjacent == set()
        assert [v.element for v in result.removed_vertices] == ["B"]
        assert {e.element for e in result.removed_edges} == {"AB", "BC"}
        scene.check_invariants(g)

    def test_isolated_vertex_spawns_at_bounding_box_center(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        node_of(scene, g, "A").move_to(100, 100)
        node_of(scene, g, "B").move_to(500, 200)
        node_of(scene, g, "C").move_to(300, 500)

        g.insert_vertex("D")
        scene.reconcile(g)

        assert node_of(scene, g, "D").position == (300.0, 300.0)

    def test_connected_vertex_spawns_near_neighbor(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        node_of(scene, g, "A").move_to(400, 300)

        g.insert_vertex("E")
        g.insert_edge_between("E", "A", "EA")
        scene.reconcile(g)

        e = node_of(scene, g, "E")
        assert distance(e.position, (400, 300)) == pytest.approx(50 * math.sqrt(2))
        assert e.is_adjacent_to(node_of(scene, g, "A"))

    def test_unaffected_nodes_keep_positions(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        for i, element in enumerate("ABC"):
            node_of(scene, g, element).move_to(100 + 100 * i, 200)
        keep_a = node_of(scene, g, "A")

        g.insert_vertex("D")
        g.insert_edge_between("C", "D", "CD")
        scene.reconcile(g)

        assert node_of(scene, g, "A") is keep_a
        assert [node_of(scene, g, x).position for x in "ABC"] == [
            (100.0, 200.0),
            (200.0, 200.0),
            (300.0, 200.0),
        ]

    def test_idempotent(self):
        """A second pass without graph changes is a no-op."""
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        g.insert_vertex("D")
        assert scene.reconcile(g).changed

        before = {node.vertex: node.position for node in scene.nodes()}
        result = scene.reconcile(g)

        assert not result.changed
        assert scene.plan(g).is_empty
        assert {node.vertex: node.position for node in scene.nodes()} == before

    def test_parallel_edges(self):
        """Two u-v edges get indices 0 and 1 and bow to opposite sides."""
        g = GraphEdgeList()
        g.insert_vertex("u")
        g.insert_vertex("v")
        scene = create_scene()
        scene.populate(g)
        u, v = node_of(scene, g, "u"), node_of(scene, g, "v")
        u.move_to(200, 300)
        v.move_to(500, 300)

        g.insert_edge_between("u", "v", "uv1")
        g.insert_edge_between("u", "v", "uv2")
        scene.reconcile(g)
        first, second = edge_of(scene, g, "uv1"), edge_of(scene, g, "uv2")

        assert (first.routing_index, second.routing_index) == (0, 1)
        assert first.parallel and second.parallel
        assert first.geometry.kind is EdgeShape.CURVE
        side1 = cross(u.position, v.position, first.geometry.control1)
        side2 = cross(u.position, v.position, second.geometry.control1)
        assert side1 * side2 < 0

        g.insert_edge_between("v", "u", "vu")
        scene.reconcile(g)
        assert edge_of(scene, g, "vu").routing_index == 2

    def test_routing_indices_never_reused(self):
        g = GraphEdgeList()
        g.insert_vertex("u")
        g.insert_vertex("v")
        g.insert_edge_between("u", "v", "e0")
        g.insert_edge_between("u", "v", "e1")
        scene = create_scene()
        scene.populate(g)

        g.remove_edge(g.edge("e0"))
        scene.reconcile(g)
        g.insert_edge_between("u", "v", "e2")
        scene.reconcile(g)

        assert edge_of(scene, g, "e1").routing_index == 1
        assert edge_of(scene, g, "e2").routing_index == 2
        scene.check_invariants(g)

    def test_remaining_parallel_edge_straightens(self):
        """Removing one of two parallel edges keeps adjacency and draws a line."""
        g = GraphEdgeList()
        g.insert_vertex("u")
        g.insert_vertex("v")
        g.insert_edge_between("u", "v", "e0")
        g.insert_edge_between("u", "v", "e1")
        scene = create_scene()
        scene.populate(g)
        node_of(scene, g, "v").move_to(300, 0)

        g.remove_edge(g.edge("e0"))
        scene.reconcile(g)

        remaining = edge_of(scene, g, "e1")
        assert not remaining.parallel
        assert remaining.geometry.kind is EdgeShape.LINE
        assert node_of(scene, g, "u").is_adjacent_to(node_of(scene, g, "v"))

    def test_self_loop(self):
        g = create_path_graph()
        g.insert_edge_between("A", "A", "AA")
        scene = create_scene()
        scene.populate(g)

        loop = edge_of(scene, g, "AA")
        a = node_of(scene, g, "A")
        assert loop.is_self_loop
        assert loop.geometry.kind is EdgeShape.LOOP
        assert a not in a.adjacent
        scene.check_invariants(g)

    def test_loop_turns_away_from_new_neighbour(self):
        """A self-loop follows adjacency changes and neighbour moves."""
        g = GraphEdgeList()
        g.insert_vertex("A")
        g.insert_vertex("B")
        g.insert_edge_between("A", "A", "AA")
        scene = create_scene()
        scene.populate(g)
        a, b = node_of(scene, g, "A"), node_of(scene, g, "B")
        a.move_to(400, 300)
        b.move_to(400, 150)
        loop = edge_of(scene, g, "AA")
        assert loop.geometry.control1[1] < 300

        g.insert_edge_between("A", "B", "AB")
        scene.reconcile(g)
        assert loop.geometry == scene.router.route(loop)
        assert loop.geometry.control1[1] > 300
        assert loop.geometry.control2[1] > 300

        b.move_to(550, 300)
        assert loop.geometry == scene.router.route(loop)
        assert loop.geometry.control1[0] < 400
        assert loop.geometry.control2[0] < 400

        g.remove_edge(g.edge("AB"))
        scene.reconcile(g)
        assert loop.geometry == scene.router.route(loop)
        assert loop.geometry.control1[1] < 300

    def test_loop_rerouted_when_neighbour_removed(self):
        g = GraphEdgeList()
        g.insert_vertex("A")
        g.insert_vertex("B")
        g.insert_edge_between("A", "A", "AA")
        g.insert_edge_between("A", "B", "AB")
        scene = create_scene()
        scene.populate(g)
        node_of(scene, g, "A").move_to(400, 300)
        node_of(scene, g, "B").move_to(400, 150)
        loop = edge_of(scene, g, "AA")
        assert loop.geometry.control1[1] > 300

        g.remove_vertex(g.vertex("B"))
        scene.reconcile(g)
        assert loop.geometry == scene.router.route(loop)
        assert loop.geometry.control1[1] < 300

    def test_readded_vertex_gets_fresh_counter(self):
        g = GraphEdgeList()
        g.insert_vertex("u")
        g.insert_vertex("v")
        g.insert_edge_between("u", "v", "e0")
        scene = create_scene()
        scene.populate(g)

        g.remove_vertex(g.vertex("u"))
        scene.reconcile(g)
        g.insert_vertex("u")
        g.insert_edge_between("u", "v", "e1")
        scene.reconcile(g)

        assert edge_of(scene, g, "e1").routing_index == 0

    def test_edge_with_unrendered_endpoint_is_skipped(self):
        """Edges whose endpoint has no node yet wait for a later pass."""
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)

        g.insert_vertex("D")
        g.insert_edge_between("C", "D", "CD")
        result = scene.reconcile(PartialView(g, hidden={"D"}))

        assert [e.element for e in result.skipped_edges] == ["CD"]
        assert "CD" not in rendered_edges(scene)
        scene.check_invariants(PartialView(g, hidden={"D"}))

        scene.reconcile(g)
        assert "CD" in rendered_edges(scene)
        scene.check_invariants(g)

    def test_plan_is_ordered_and_side_effect_free(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        g.remove_vertex(g.vertex("B"))
        g.insert_vertex("D")

        plan = scene.plan(g)
        kinds = [type(command).__name__ for command in plan.commands()]

        assert kinds == ["RemoveEdge", "RemoveEdge", "RemoveVertex", "AddVertex"]
        assert rendered_vertices(scene) == {"A", "B", "C"}

    def test_commands_apply_directly(self):
        g = create_path_graph()
        scene = create_scene()
        result = scene.apply([AddVertex(g.vertex("A"), (10.0, 20.0)), AddEdge(g.edge("AB"))])
        assert node_of(scene, g, "A").position == (10.0, 20.0)
        assert [e.element for e in result.skipped_edges] == ["AB"]

        result = scene.apply([RemoveEdge(g.edge("AB"))])
        assert result.removed_edges == []


# =============================================================================
# Invariant Tests
# =============================================================================


class TestInvariants:
    """Tests for structural invariants across arbitrary mutations."""

    def test_random_mutations(self):
        """Round-trip, adjacency symmetry and index uniqueness hold after every pass."""
        rng = random.Random(4)
        names = itertools.count()
        g = GraphEdgeList()
        scene = create_scene()
        scene.populate(g)

        for _ in range(60):
            for _ in range(3):
                vertices = g.vertices()
                op = rng.random()
                if op < 0.3 or len(vertices) < 2:
                    g.insert_vertex(f"v{next(names)}")
                elif op < 0.65:
                    g.insert_edge(rng.choice(vertices), rng.choice(vertices), f"e{next(names)}")
                elif op < 0.85 and g.num_edges():
                    g.remove_edge(rng.choice(g.edges()))
                else:
                    g.remove_vertex(rng.choice(vertices))

            scene.reconcile(g)
            scene.check_invariants(g)
            assert {node.vertex for node in scene.nodes()} == set(g.vertices())
            assert {visual.edge for visual in scene.edges()} == set(g.edges())
            for node in scene.nodes():
                for other in node.adjacent:
                    assert node in other.adjacent

    def test_detects_asymmetric_adjacency(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        node_of(scene, g, "A").adjacent.discard(node_of(scene, g, "B"))
        with pytest.raises(InvalidStateError, match="asymmetric"):
            scene.check_invariants()

    def test_detects_missing_vertex(self):
        g = create_path_graph()
        scene = create_scene()
        scene.populate(g)
        g.insert_vertex("D")
        with pytest.raises(InvalidStateError, match="differ"):
            scene.check_invariants(g)
