"""Bounded prerequisite subgraph selection (the proof path)."""

import logging

from proofpath.graph.index import GraphIndex
from proofpath.models import Relation, Subgraph

logger = logging.getLogger(__name__)


def select_subgraph(target_id: str, depth: int, index: GraphIndex) -> Subgraph:
    """Collect the target and its prerequisites up to ``depth`` levels back.

    Walks incoming edges breadth-first, one level per step, and stops early
    once no further ancestors exist. generalized_by edges mean "is a special
    case of" rather than "is needed by" and are never followed. Every call
    recomputes from scratch.
    """
    depth = max(1, depth)
    visible_nodes: dict[str, None] = {target_id: None}
    visible_edges: dict[tuple[str, str], None] = {}

    frontier = [target_id]
    level = 0
    while level < depth and frontier:
        next_frontier: dict[str, None] = {}
        for node_id in frontier:
            for edge in index.incoming_edges(node_id):
                if edge.relation is Relation.GENERALIZED_BY:
                    continue
                visible_nodes[edge.source] = None
                visible_edges[edge.key] = None
                next_frontier[edge.source] = None
        level += 1
        frontier = list(next_frontier)

    subgraph = Subgraph(
        target_id=target_id,
        depth=depth,
        visible_nodes=list(visible_nodes),
        visible_edges=list(visible_edges),
    )
    logger.debug(
        "Selected %d nodes / %d edges for %s at depth %d",
        len(subgraph.visible_nodes), len(subgraph.visible_edges), target_id, depth,
    )
    return subgraph


def max_prereq_depth(target_id: str, index: GraphIndex) -> int:
    """Number of BFS levels reachable over outgoing edges from the target."""
    visited = {target_id}
    frontier = [target_id]
    depth = 0
    while frontier:
        next_frontier: list[str] = []
        for node_id in frontier:
            for edge in index.outgoing_edges(node_id):
                if edge.target not in visited:
                    visited.add(edge.target)
                    next_frontier.append(edge.target)
        if not next_frontier:
            break
        depth += 1
        frontier = next_frontier
    return depth


def clamp_depth(depth: int, max_depth: int) -> int:
    """Clamp to [1, max_depth]; a target with no chain still gets depth 1."""
    return max(1, min(max(1, max_depth), depth))
