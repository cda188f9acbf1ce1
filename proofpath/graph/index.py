"""O(1) lookup structures over a normalized graph."""

import logging
from collections import Counter, defaultdict

from proofpath.models import Edge, Graph, Node, Relation

logger = logging.getLogger(__name__)


class GraphIndex:
    """By-id node map plus outgoing/incoming adjacency.

    Edges pointing at ids missing from the node list stay in the adjacency
    maps; ``get_node`` simply returns None for them.
    """

    def __init__(self) -> None:
        self.nodes_by_id: dict[str, Node] = {}
        self.outgoing: dict[str, list[Edge]] = defaultdict(list)
        self.incoming: dict[str, list[Edge]] = defaultdict(list)
        self.edges: list[Edge] = []

    def __repr__(self) -> str:
        return f"GraphIndex({len(self.nodes_by_id)} nodes, {len(self.edges)} edges)"

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes_by_id

    def get_node(self, node_id: str) -> Node | None:
        return self.nodes_by_id.get(node_id)

    def outgoing_edges(self, node_id: str) -> list[Edge]:
        return self.outgoing.get(node_id, [])

    def incoming_edges(self, node_id: str) -> list[Edge]:
        return self.incoming.get(node_id, [])

    def outgoing_by_relation(self, node_id: str) -> dict[Relation, list[Edge]]:
        return _group(self.outgoing_edges(node_id))

    def incoming_by_relation(self, node_id: str) -> dict[Relation, list[Edge]]:
        return _group(self.incoming_edges(node_id))

    @property
    def node_types(self) -> dict[str, int]:
        return dict(Counter(n.type for n in self.nodes_by_id.values()))

    @property
    def relation_counts(self) -> dict[str, int]:
        return dict(Counter(e.relation.value for e in self.edges))


def _group(edges: list[Edge]) -> dict[Relation, list[Edge]]:
    grouped: dict[Relation, list[Edge]] = {}
    for e in edges:
        grouped.setdefault(e.relation, []).append(e)
    return grouped


def build_index(graph: Graph) -> GraphIndex:
    """Build the index in one pass over nodes and edges (expects normalized edges)."""
    index = GraphIndex()
    for node in graph.nodes:
        index.nodes_by_id[node.id] = node

    dangling = 0
    for edge in graph.edges:
        index.edges.append(edge)
        index.outgoing[edge.source].append(edge)
        index.incoming[edge.target].append(edge)
        if edge.source not in index.nodes_by_id or edge.target not in index.nodes_by_id:
            dangling += 1

    if dangling:
        logger.debug("%d edges reference nodes missing from the graph", dangling)
    logger.info("Built %r", index)
    return index
