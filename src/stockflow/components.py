"""
Component decomposition for the force-directed layout.

Uses networkx for:
- Undirected adjacency over the directed flows
- Breadth-first traversal for connected components

Ids and neighbours are visited in sorted order so the component list, and
therefore the final layout, never depends on dict or set ordering.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

import networkx as nx

from .models import EdgeSpec

logger = logging.getLogger(__name__)


@dataclass
class Decomposition:
    """
    Result of splitting the node set.

    Attributes:
        isolated: Nodes with no incident edge, sorted by id.
        components: Connected components in discovery order; each lists its
                    ids in breadth-first order from its smallest id.
    """

    isolated: List[str] = field(default_factory=list)
    components: List[List[str]] = field(default_factory=list)


def build_undirected_graph(
    node_ids: Iterable[str], edges: Iterable[EdgeSpec]
) -> nx.Graph:
    """
    Build an undirected graph over the known ids.

    Edges with an endpoint outside node_ids are left out.
    """
    known = set(node_ids)
    graph = nx.Graph()
    graph.add_nodes_from(sorted(known))
    for edge in edges:
        if edge.source_id in known and edge.target_id in known:
            graph.add_edge(edge.source_id, edge.target_id)
        else:
            logger.debug("Ignoring edge %s with unknown endpoint", edge.id)
    return graph


def decompose(node_ids: Iterable[str], edges: Iterable[EdgeSpec]) -> Decomposition:
    """
    Split node ids into isolated nodes and connected components.

    Args:
        node_ids: Ids of every node in the diagram
        edges: Directed flows; direction is ignored here

    Returns:
        Decomposition with isolated ids and components
    """
    graph = build_undirected_graph(node_ids, edges)
    result = Decomposition()
    visited = set()

    for node in sorted(graph.nodes()):
        if graph.degree(node) == 0:
            result.isolated.append(node)
            continue
        if node in visited:
            continue

        component = [node]
        for _, reached in nx.bfs_edges(graph, node, sort_neighbors=sorted):
            component.append(reached)
        visited.update(component)
        result.components.append(component)

    logger.debug(
        "Decomposed %d nodes into %d components and %d isolated nodes",
        graph.number_of_nodes(),
        len(result.components),
        len(result.isolated),
    )
    return result
