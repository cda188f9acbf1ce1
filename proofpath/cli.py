"""CLI entry point for the proof-path distiller."""

import argparse
import json
import logging
import sys
from pathlib import Path

from proofpath.config import Config, load_config
from proofpath.distiller import distill
from proofpath.export import distillation_to_latex, distillation_to_text
from proofpath.graph.index import GraphIndex
from proofpath.graph.subgraph import max_prereq_depth
from proofpath.loader import load_index
from proofpath.review import build_proof_outline, build_review_items
from proofpath.session import enter_proof_mode, set_depth


def _resolve_graph_path(args: argparse.Namespace, config: Config) -> Path:
    if args.graph:
        return Path(args.graph)
    if config.resolved_graph_path is not None:
        return config.resolved_graph_path
    raise ValueError("No graph file given. Pass --graph or set graph_path in config.yaml")


def _require_node(index: GraphIndex, node_id: str) -> None:
    if node_id not in index:
        raise ValueError(f"Node not found: {node_id}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Proof-path distiller")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--graph", help="Path to the graph JSON file")
    parser.add_argument("--config", help="Path to a config YAML file")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("info", help="Show node and edge counts")

    depth_parser = sub.add_parser("depth", help="Show the maximum unfold depth for a target")
    depth_parser.add_argument("target", help="Target node id")

    subgraph_parser = sub.add_parser("subgraph", help="List the visible proof-path nodes and edges")
    subgraph_parser.add_argument("target", help="Target node id")
    subgraph_parser.add_argument("--depth", type=int, default=None, help="Unfold depth")

    distill_parser = sub.add_parser("distill", help="Build the distilled proof for a target")
    distill_parser.add_argument("target", help="Target node id")
    distill_parser.add_argument("--depth", type=int, default=None, help="Unfold depth")
    distill_parser.add_argument(
        "--format", choices=["json", "latex", "text"], default="text",
        help="Output format",
    )
    distill_parser.add_argument("--output", help="Write to this file instead of stdout")

    outline_parser = sub.add_parser("outline", help="Show the review proof outline for a theorem")
    outline_parser.add_argument("target", help="Target node id")
    outline_parser.add_argument("--depth", type=int, default=None, help="Outline depth")

    sub.add_parser("review-items", help="List the theorems review mode steps through")
    return parser


def run(args: argparse.Namespace, config: Config) -> str:
    """Execute one command and return what should be printed."""
    index = load_index(_resolve_graph_path(args, config))

    if args.command == "info":
        lines = [f"{len(index.nodes_by_id)} nodes, {len(index.edges)} edges"]
        lines.append("Node types:")
        for node_type, count in sorted(index.node_types.items()):
            lines.append(f"  {node_type}: {count}")
        lines.append("Relations:")
        for relation, count in sorted(index.relation_counts.items()):
            lines.append(f"  {relation}: {count}")
        return "\n".join(lines)

    if args.command == "review-items":
        items = build_review_items(index, config.review)
        if not items:
            return "No theorems to review."
        return "\n".join(f"  {it.node_id}: {it.title}" for it in items)

    _require_node(index, args.target)

    if args.command == "depth":
        return str(max_prereq_depth(args.target, index))

    if args.command == "outline":
        depth = args.depth or config.review.outline_depth
        outline = build_proof_outline(args.target, index, depth=depth, config=config.distill)
        return json.dumps(outline.model_dump(), indent=2)

    session = enter_proof_mode(index, args.target)
    session = set_depth(session, index, args.depth or config.distill.default_depth)

    if args.command == "subgraph":
        lines = [f"Target {session.target_id} at depth {session.depth}"]
        lines.append(f"Nodes ({len(session.subgraph.visible_nodes)}):")
        for node_id in session.subgraph.visible_nodes:
            node = index.get_node(node_id)
            kind = node.type if node else "missing"
            lines.append(f"  {node_id} [{kind}]")
        lines.append(f"Edges ({len(session.subgraph.visible_edges)}):")
        for source, target in session.subgraph.visible_edges:
            lines.append(f"  {source} --> {target}")
        return "\n".join(lines)

    model = distill(session, index, config.distill)
    if args.format == "json":
        return model.model_dump_json(indent=2)
    if args.format == "latex":
        return distillation_to_latex(model)
    return distillation_to_text(model)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(Path(args.config) if args.config else None)

    try:
        output = run(args, config)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if getattr(args, "output", None):
        Path(args.output).write_text(output)
        print(f"Output: {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
