"""Unit tests for the components module."""

from stockflow.components import Decomposition, build_undirected_graph, decompose
from stockflow.models import EdgeSpec


class TestDecomposition:
    """Tests for Decomposition dataclass."""

    def test_defaults(self):
        result = Decomposition()
        assert result.isolated == []
        assert result.components == []


class TestBuildUndirectedGraph:
    """Tests for build_undirected_graph."""

    def test_direction_ignored(self):
        graph = build_undirected_graph(["A", "B"], [EdgeSpec("f", "B", "A")])
        assert graph.has_edge("A", "B")
        assert graph.has_edge("B", "A")

    def test_unknown_endpoints_dropped(self):
        graph = build_undirected_graph(["A"], [EdgeSpec("f", "A", "ghost")])
        assert list(graph.nodes()) == ["A"]
        assert graph.number_of_edges() == 0


class TestDecompose:
    """Tests for decompose."""

    def test_empty(self):
        result = decompose([], [])
        assert result.isolated == []
        assert result.components == []

    def test_all_isolated(self):
        """Nodes without edges are isolated, in sorted order."""
        result = decompose(["c", "a", "b"], [])
        assert result.isolated == ["a", "b", "c"]
        assert result.components == []

    def test_single_component_bfs_order(self):
        """Components list ids breadth-first from their smallest id."""
        edges = [
            EdgeSpec("f1", "C", "A"),
            EdgeSpec("f2", "A", "B"),
            EdgeSpec("f3", "B", "D"),
        ]
        result = decompose(["D", "C", "B", "A"], edges)
        assert result.components == [["A", "B", "C", "D"]]
        assert result.isolated == []

    def test_multiple_components_in_sorted_discovery_order(self):
        edges = [EdgeSpec("f1", "y", "z"), EdgeSpec("f2", "a", "b")]
        result = decompose(["z", "y", "b", "a", "m"], edges)
        assert result.components == [["a", "b"], ["y", "z"]]
        assert result.isolated == ["m"]

    def test_edge_to_unknown_node_leaves_node_isolated(self):
        result = decompose(["A"], [EdgeSpec("f", "A", "ghost")])
        assert result.isolated == ["A"]
        assert result.components == []

    def test_self_loop_is_a_component(self):
        """A node whose only flow is to itself is not isolated."""
        result = decompose(["A", "B"], [EdgeSpec("loop", "A", "A")])
        assert result.components == [["A"]]
        assert result.isolated == ["B"]

    def test_cycle(self):
        edges = [
            EdgeSpec("f1", "A", "B"),
            EdgeSpec("f2", "B", "C"),
            EdgeSpec("f3", "C", "A"),
        ]
        result = decompose(["A", "B", "C"], edges)
        assert result.components == [["A", "B", "C"]]

    def test_deterministic(self):
        """Insertion order of ids and edges does not matter."""
        edges = [EdgeSpec("f1", "A", "B"), EdgeSpec("f2", "C", "D")]
        first = decompose(["A", "B", "C", "D"], edges)
        second = decompose(["D", "C", "B", "A"], list(reversed(edges)))
        assert first == second
