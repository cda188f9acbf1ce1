"""Shared test fixtures for proofpath tests."""

import copy
import json

import pytest

from proofpath.config import Config
from proofpath.graph import build_index, normalize_graph
from proofpath.loader import parse_graph
from proofpath.store import KeyValueStore

SAMPLE_GRAPH = {
    "nodes": [
        {
            "id": "def_group",
            "type": "definition",
            "display_name": "Definition 1",
            "content_preview": "A group is a set with an associative operation, identity and inverses.\\label{def:group}",
            "prerequisites_preview": "",
        },
        {
            "id": "lem_1",
            "type": "lemma",
            "display_name": "Lemma 1",
            "content_preview": "\\label{lem:one}The identity of $G$ is unique.",
            "prerequisites_preview": (
                "Notation: $G$ denotes a group with identity $e$.\n"
                "Group: a set with an associative binary operation."
            ),
        },
        {
            "id": "lem_2",
            "type": "lemma",
            "display_name": "Lemma 2",
            "content_preview": "Every subgroup contains $e$.",
            "prerequisites_preview": (
                "Notation:  $G$ denotes a group\nwith identity $e$.\n\n"
                "Subgroup: a subset $H \\subseteq G$ closed under the operation.\\label{def:sub}"
            ),
        },
        {
            "id": "rem_1",
            "type": "remark",
            "display_name": "Remark 1",
            "content_preview": "The converse fails for semigroups.",
        },
        {
            "id": "thm_main",
            "type": "theorem",
            "display_name": "Theorem 10",
            "content_preview": "Every finite group has a subgroup of each prime order dividing $|G|$.\\label{thm:main}",
            "prerequisites_preview": "Subgroup: a subset $H \\subseteq G$ closed under the operation.",
        },
        {
            "id": "cor_1",
            "type": "corollary",
            "label": "Corollary 3",
            "content_preview": "Groups of prime order are cyclic.",
        },
        {
            "id": "thm_general",
            "type": "theorem",
            "display_name": "Theorem 2",
            "content_preview": "A version of Theorem 10 for profinite groups.",
        },
    ],
    "edges": [
        {"source": "lem_1", "target": "def_group", "dependency_type": "uses_definition"},
        {"source": "lem_2", "target": "lem_1", "dependency_type": "uses_result"},
        {"source": "lem_2", "target": "def_group", "dependency_type": "uses_definition"},
        {"source": {"id": "thm_main"}, "target": {"id": "lem_2"}, "dependency_type": "uses_result"},
        {"source": "rem_1", "target": "thm_main", "dependency_type": "provides_remark"},
        {"source": "thm_main", "target": "rem_1", "dependency_type": "uses_result"},
        {"source": "cor_1", "target": "thm_main", "dependency_type": "is_corollary_of"},
        {"source": "thm_general", "target": "thm_main", "dependency_type": "is_generalization_of"},
    ],
}


@pytest.fixture()
def raw_graph():
    """A fresh copy of the sample paper graph, as the hosting page supplies it."""
    return copy.deepcopy(SAMPLE_GRAPH)


@pytest.fixture()
def graph(raw_graph):
    return parse_graph(raw_graph)


@pytest.fixture()
def index(graph):
    return build_index(normalize_graph(graph))


@pytest.fixture()
def make_index():
    """Build an index from compact node and edge lists.

    ``nodes`` maps id -> type, ``edges`` is a list of (source, target, raw_type).
    """
    def _make(nodes: dict[str, str], edges: list[tuple[str, str, str | None]], **node_fields):
        data = {
            "nodes": [
                {"id": nid, "type": ntype, "content_preview": f"Statement of {nid}", **node_fields.get(nid, {})}
                for nid, ntype in nodes.items()
            ],
            "edges": [
                {"source": s, "target": t, "dependency_type": dep} for s, t, dep in edges
            ],
        }
        return build_index(normalize_graph(parse_graph(data)))
    return _make


@pytest.fixture()
def graph_file(tmp_path, raw_graph):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(raw_graph))
    return path


@pytest.fixture()
def tmp_store(tmp_path):
    """Create a KeyValueStore backed by a temp file."""
    store = KeyValueStore(Config(db_path=str(tmp_path / "test.db")))
    store.init_db()
    yield store
    store.close()
