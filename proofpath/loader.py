"""Graph ingestion boundary: raw JSON -> Graph with plain string endpoints."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from proofpath.graph import GraphIndex, build_index, normalize_graph
from proofpath.models import Edge, Graph, Node

logger = logging.getLogger(__name__)


def _endpoint_id(value: Any) -> str | None:
    """Collapse an edge endpoint (raw id or embedded node object) to its id."""
    if isinstance(value, dict):
        value = value.get("id")
    if value is None:
        return None
    return str(value)


def parse_graph(data: Any) -> Graph:
    """Build a Graph from the hosting page's ``{nodes, edges}`` payload.

    The payload is read, never mutated. A top-level ``graphData`` wrapper is
    unwrapped.
    """
    if isinstance(data, dict) and "graphData" in data:
        data = data["graphData"]
    if not isinstance(data, dict):
        raise ValueError("Graph data must be an object with 'nodes' and 'edges'")

    raw_nodes = data.get("nodes") or []
    raw_edges = data.get("edges") or data.get("links") or []

    nodes: list[Node] = []
    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict) or raw.get("id") is None:
            raise ValueError(f"Node {i} has no id")
        fields = {k: v for k, v in raw.items() if v is not None}
        fields["id"] = str(raw["id"])
        try:
            nodes.append(Node(**fields))
        except ValidationError as e:
            raise ValueError(f"Invalid node {fields['id']!r}: {e}") from e

    edges: list[Edge] = []
    for i, raw in enumerate(raw_edges):
        if not isinstance(raw, dict):
            raise ValueError(f"Edge {i} is not an object")
        source = _endpoint_id(raw.get("source"))
        target = _endpoint_id(raw.get("target"))
        if source is None or target is None:
            raise ValueError(f"Edge {i} is missing an endpoint")
        edges.append(Edge(
            source=source,
            target=target,
            dependency_type=raw.get("dependency_type"),
            context=raw.get("context"),
        ))

    logger.info("Parsed graph: %d nodes, %d edges", len(nodes), len(edges))
    return Graph(nodes=nodes, edges=edges)


def load_graph(path: Path) -> Graph:
    """Load a graph JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Graph file not found: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Graph file is not valid JSON: {path}: {e}") from e
    return parse_graph(data)


def load_index(path: Path) -> GraphIndex:
    """Load, normalize and index a graph file in one step."""
    return build_index(normalize_graph(load_graph(path)))
