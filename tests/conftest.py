"""Pytest configuration and shared fixtures for stockflow tests."""

import pytest

from stockflow import EdgeSpec, NodeSpec, Placement


def _make_nodes(*ids, width=100, height=50):
    return {node_id: NodeSpec(node_id, width, height) for node_id in ids}


@pytest.fixture
def make_nodes():
    """Factory for a NodeSpec mapping with the same size for every id."""
    return _make_nodes


@pytest.fixture
def chain_nodes():
    """Three equally sized stocks."""
    return _make_nodes("A", "B", "C")


@pytest.fixture
def chain_edges():
    """A -> B -> C."""
    return [EdgeSpec("f1", "A", "B"), EdgeSpec("f2", "B", "C")]


@pytest.fixture
def cyclic_edges():
    """A -> B -> C -> A."""
    return [
        EdgeSpec("f1", "A", "B"),
        EdgeSpec("f2", "B", "C"),
        EdgeSpec("f3", "C", "A"),
    ]


@pytest.fixture
def row_placements():
    """A, B and C side by side, 200 apart."""
    return {
        "A": Placement("A", 0, 0, 100, 50),
        "B": Placement("B", 300, 0, 100, 50),
        "C": Placement("C", 600, 0, 100, 50),
    }
