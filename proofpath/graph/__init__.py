"""Graph normalization, indexing and bounded prerequisite selection."""

from proofpath.graph.index import GraphIndex, build_index
from proofpath.graph.normalizer import edge_key, normalize_edges, normalize_graph
from proofpath.graph.subgraph import clamp_depth, max_prereq_depth, select_subgraph

__all__ = [
    "GraphIndex",
    "build_index",
    "clamp_depth",
    "edge_key",
    "max_prereq_depth",
    "normalize_edges",
    "normalize_graph",
    "select_subgraph",
]
