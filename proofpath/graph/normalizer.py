"""Canonicalize raw dependency edges into prerequisite -> dependent form."""

import logging

from proofpath.models import CANONICAL_RELATIONS, Edge, Graph, Relation

logger = logging.getLogger(__name__)

# raw type -> canonical relation; all of these are stored dependent -> base
# in the source data, so they get reversed.
REVERSED_TYPES: dict[str, Relation] = {
    "uses_result": Relation.USED_IN,
    "uses_definition": Relation.USED_IN,
    "is_corollary_of": Relation.USED_IN,
    "is_generalization_of": Relation.GENERALIZED_BY,
}

DROPPED_TYPES = frozenset({"provides_remark"})


def edge_key(source: str, target: str) -> tuple[str, str]:
    return (source, target)


def normalize_edge(edge: Edge) -> Edge | None:
    """Return the canonical form of one edge, or None if it is dropped."""
    dep = edge.dependency_type
    if dep in DROPPED_TYPES:
        return None
    if dep in REVERSED_TYPES:
        return edge.model_copy(update={
            "source": edge.target,
            "target": edge.source,
            "dependency_type": REVERSED_TYPES[dep].value,
        })
    if dep in CANONICAL_RELATIONS:
        return edge.model_copy()
    return edge.model_copy(update={"dependency_type": Relation.INTERNAL.value})


def normalize_edges(edges: list[Edge]) -> list[Edge]:
    """Map every edge to used_in / generalized_by / internal.

    Pure: the input list and its edges are left untouched. Duplicates and
    self-loops are kept.
    """
    normalized: list[Edge] = []
    dropped = 0
    for edge in edges:
        result = normalize_edge(edge)
        if result is None:
            dropped += 1
            continue
        normalized.append(result)
    logger.debug("Normalized %d edges (%d remark edges dropped)", len(normalized), dropped)
    return normalized


def normalize_graph(graph: Graph) -> Graph:
    return Graph(nodes=list(graph.nodes), edges=normalize_edges(graph.edges))
