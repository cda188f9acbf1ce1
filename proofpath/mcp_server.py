#!/usr/bin/env python3
"""Proof-path MCP Server — explore proof paths and distill proofs."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from proofpath.config import Config, load_config
from proofpath.distiller import distill
from proofpath.explain import build_explain_context, explain_messages
from proofpath.graph.index import GraphIndex
from proofpath.graph.subgraph import max_prereq_depth
from proofpath.loader import load_index
from proofpath.review import (
    build_proof_outline,
    build_review_items,
    review_messages,
    review_prompt,
    review_section_prompt,
)
from proofpath.session import enter_proof_mode, set_depth

mcp = FastMCP("proofpath")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_index: GraphIndex | None = None
_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_index() -> GraphIndex:
    global _index
    if _index is None:
        path = _get_config().resolved_graph_path
        if path is None:
            raise ValueError("graph_path is not set in config.yaml")
        _index = load_index(path)
    return _index


def _session(target_id: str, depth: Optional[int]):
    index = _get_index()
    session = enter_proof_mode(index, target_id)
    return set_depth(session, index, depth or _get_config().distill.default_depth)


@mcp.tool()
def graph_info() -> str:
    """Node counts by type and edge counts by canonical relation."""
    try:
        index = _get_index()
        return json.dumps({
            "nodes": len(index.nodes_by_id),
            "edges": len(index.edges),
            "node_types": index.node_types,
            "relations": index.relation_counts,
        })
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def max_depth(target_id: str) -> str:
    """Deepest unfold level available for a target."""
    try:
        index = _get_index()
        if target_id not in index:
            raise ValueError(f"Node not found: {target_id}")
        return json.dumps({"target_id": target_id, "max_depth": max_prereq_depth(target_id, index)})
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def select_proof_subgraph(target_id: str, depth: Optional[int] = None) -> str:
    """Visible proof-path nodes and edges for a target at the given depth."""
    try:
        session = _session(target_id, depth)
        return session.subgraph.model_dump_json()
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def distill_proof(target_id: str, depth: Optional[int] = None) -> str:
    """Distilled proof document: definitions, supporting results, target, unfold tree."""
    try:
        session = _session(target_id, depth)
        model = distill(session, _get_index(), _get_config().distill)
        return model.model_dump_json()
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def proof_outline(target_id: str, depth: Optional[int] = None) -> str:
    """Review-mode outline (definitions + supporting results) for a theorem."""
    try:
        index = _get_index()
        if target_id not in index:
            raise ValueError(f"Node not found: {target_id}")
        outline = build_proof_outline(
            target_id,
            index,
            depth=depth or _get_config().review.outline_depth,
            config=_get_config().distill,
        )
        return outline.model_dump_json()
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def explain_prompt(
    target_id: str,
    mode: str,
    selection: str,
    local_context: str = "",
    depth: Optional[int] = None,
) -> str:
    """Chat messages asking to explain a selection from the target's distilled proof."""
    try:
        session = _session(target_id, depth)
        model = distill(session, _get_index(), _get_config().distill)
        context = build_explain_context(
            model, mode, selection, local_context, _get_config().explain,
        )
        return json.dumps(explain_messages(context))
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def list_review_items() -> str:
    """Theorems review mode steps through, in paper order."""
    try:
        items = build_review_items(_get_index(), _get_config().review)
        return json.dumps([{"node_id": it.node_id, "title": it.title} for it in items])
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def review_prompt_messages(target_id: str, section: Optional[str] = None, paper_title: str = "") -> str:
    """Chat messages asking for referee notes on a theorem, one section or all three."""
    try:
        index = _get_index()
        config = _get_config()
        item = next(
            (it for it in build_review_items(index, config.review) if it.node_id == target_id), None,
        )
        if item is None:
            raise ValueError(f"Not a review item: {target_id}")
        outline = build_proof_outline(
            target_id, index, depth=config.review.outline_depth, config=config.distill,
        )
        if section:
            prompt = review_section_prompt(section, item, outline, paper_title, config.review)
        else:
            prompt = review_prompt(item, outline, paper_title, config.review)
        return json.dumps(review_messages(prompt))
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
