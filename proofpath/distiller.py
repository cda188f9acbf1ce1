"""Distillation assembler — proof subgraph -> ordered, deduplicated document.

Given the visible subgraph around a target, the assembler

1. drops scaffolding nodes (remarks, unknown types),
2. restricts to the visible ``used_in`` edges among the kept nodes,
3. orders the kept nodes topologically (prerequisites first),
4. gathers definition/notation items from each node's prerequisite text,
   first occurrence wins,
5. lists the supporting results in that order,
6. records the full prerequisite closure of the target so a reader can keep
   unfolding past the selected depth without going back to the graph,
7. builds the depth-limited unfold tree used for incremental disclosure.

The returned model is frozen; a new depth or target means a new model.
"""

import logging
from collections import deque

from proofpath.config import DistillConfig
from proofpath.graph.index import GraphIndex
from proofpath.models import (
    DistillationModel,
    Node,
    NodeSummary,
    ProofSession,
    Relation,
    Subgraph,
    UnfoldNode,
)
from proofpath.text import clean_markup, dedupe, segment

logger = logging.getLogger(__name__)


def summarize(node: Node) -> NodeSummary:
    return NodeSummary(id=node.id, title=node.title, content=clean_markup(node.content_preview))


def topo_sort(node_ids: list[str], edges: list[tuple[str, str]]) -> list[str]:
    """Kahn's algorithm; nodes stuck on a cycle are appended in input order."""
    adjacency: dict[str, list[str]] = {n: [] for n in node_ids}
    indegree: dict[str, int] = {n: 0 for n in node_ids}
    for u, v in edges:
        if u not in adjacency or v not in indegree:
            continue
        adjacency[u].append(v)
        indegree[v] += 1

    queue = deque(n for n in node_ids if indegree[n] == 0)
    order: list[str] = []
    while queue:
        u = queue.popleft()
        order.append(u)
        for v in adjacency[u]:
            indegree[v] -= 1
            if indegree[v] == 0:
                queue.append(v)

    if len(order) != len(node_ids):
        placed = set(order)
        residual = [n for n in node_ids if n not in placed]
        logger.warning("Prerequisite cycle among %d nodes; appending in original order", len(residual))
        order.extend(residual)
    return order


def _kept_nodes(subgraph: Subgraph, index: GraphIndex, config: DistillConfig) -> list[str]:
    excluded = set(config.excluded_types)
    kept: list[str] = []
    for node_id in subgraph.visible_nodes:
        node = index.get_node(node_id)
        if node is None:
            logger.debug("Skipping missing node %s", node_id)
            continue
        if node.type in excluded:
            continue
        kept.append(node_id)
    return kept


def _induced_edges(kept: set[str], subgraph: Subgraph, index: GraphIndex) -> list[tuple[str, str]]:
    visible = subgraph.edge_set
    induced: list[tuple[str, str]] = []
    for edge in index.edges:
        if edge.source not in kept or edge.target not in kept:
            continue
        if edge.key not in visible:
            continue
        if edge.relation is not Relation.USED_IN:
            continue
        induced.append(edge.key)
    return induced


def _collect_definitions(order: list[str], index: GraphIndex) -> list[str]:
    seen: set[str] = set()
    definitions: list[str] = []
    for node_id in order:
        node = index.get_node(node_id)
        if node is None:
            continue
        definitions.extend(dedupe(segment(node.prerequisites_preview), seen))
    return definitions


def _collect_supporting(
    order: list[str], target_id: str, index: GraphIndex, result_types: set[str],
) -> list[NodeSummary]:
    supporting: list[NodeSummary] = []
    for node_id in order:
        if node_id == target_id:
            continue
        node = index.get_node(node_id)
        if node is None or node.type not in result_types:
            continue
        summary = summarize(node)
        if summary.content:
            supporting.append(summary)
    return supporting


def build_closure(
    target_id: str, index: GraphIndex, result_types: set[str],
) -> tuple[dict[str, list[str]], dict[str, NodeSummary]]:
    """Full prerequisite closure of the target, independent of depth.

    Follows every incoming non-generalized_by edge whose source is a known
    result node. Returns (node -> immediate prerequisite ids, summaries of
    every visited node including the target).
    """
    adjacency: dict[str, list[str]] = {}
    visited = {target_id}
    order = [target_id]
    queue = deque([target_id])
    while queue:
        node_id = queue.popleft()
        for edge in index.incoming_edges(node_id):
            if edge.relation is Relation.GENERALIZED_BY:
                continue
            source = index.get_node(edge.source)
            if source is None or source.type not in result_types:
                continue
            children = adjacency.setdefault(node_id, [])
            if edge.source not in children:
                children.append(edge.source)
            if edge.source not in visited:
                visited.add(edge.source)
                order.append(edge.source)
                queue.append(edge.source)

    summaries: dict[str, NodeSummary] = {}
    for node_id in order:
        node = index.get_node(node_id)
        if node is not None:
            summaries[node_id] = summarize(node)
    return adjacency, summaries


def build_unfold_tree(target_id: str, induced: list[tuple[str, str]], depth: int) -> UnfoldNode:
    """Depth-limited prerequisite tree over the induced edges.

    A child that already appears on the path from the root is emitted as a
    leaf, so a genuine prerequisite cycle cannot recurse.
    """
    children_of: dict[str, list[str]] = {}
    for source, target in induced:
        children_of.setdefault(target, []).append(source)

    def build(node_id: str, level: int, path: frozenset[str]) -> UnfoldNode:
        if level >= depth:
            return UnfoldNode(id=node_id)
        kids = []
        for child in children_of.get(node_id, []):
            if child in path:
                kids.append(UnfoldNode(id=child))
            else:
                kids.append(build(child, level + 1, path | {child}))
        return UnfoldNode(id=node_id, children=kids)

    return build(target_id, 0, frozenset({target_id}))


def assemble(
    target_id: str,
    subgraph: Subgraph,
    index: GraphIndex,
    config: DistillConfig | None = None,
) -> DistillationModel:
    """Build the distillation document for ``target_id`` from its visible subgraph."""
    config = config or DistillConfig()
    result_types = set(config.result_types)

    kept = _kept_nodes(subgraph, index, config)
    induced = _induced_edges(set(kept), subgraph, index)
    order = topo_sort(kept, induced)

    definitions = _collect_definitions(order, index)
    supporting = _collect_supporting(order, target_id, index, result_types)
    adjacency, summaries = build_closure(target_id, index, result_types)
    tree = build_unfold_tree(target_id, induced, subgraph.depth)

    target = index.get_node(target_id)
    target_summary = summarize(target) if target else NodeSummary(id=target_id, title=target_id)

    model = DistillationModel(
        title=target_summary.title,
        depth=subgraph.depth,
        target=target_summary,
        definitions=definitions,
        supporting=supporting,
        adjacency=adjacency,
        node_summaries=summaries,
        unfold_tree=tree,
    )
    logger.info(
        "Distilled %s at depth %d: %d definitions, %d supporting results",
        target_id, subgraph.depth, len(definitions), len(supporting),
    )
    return model


def distill(session: ProofSession, index: GraphIndex, config: DistillConfig | None = None) -> DistillationModel:
    """Distill the current proof-mode selection."""
    return assemble(session.target_id, session.subgraph, index, config)


def unfold_children(model: DistillationModel, node_id: str) -> list[NodeSummary]:
    """Immediate prerequisites of any artifact in the document, from the closure."""
    return [
        model.node_summaries[child]
        for child in model.adjacency.get(node_id, [])
        if child in model.node_summaries
    ]
