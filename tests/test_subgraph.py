"""Tests for the graph index and bounded proof-path selection."""

import pytest

from proofpath.graph.subgraph import clamp_depth, max_prereq_depth, select_subgraph
from proofpath.models import Relation


class TestGraphIndex:
    def test_nodes_by_id(self, index):
        assert index.get_node("lem_1").type == "lemma"
        assert "thm_main" in index
        assert index.get_node("missing") is None

    def test_adjacency(self, index):
        incoming = [e.source for e in index.incoming_edges("lem_2")]
        assert incoming == ["lem_1", "def_group"]
        outgoing = [e.target for e in index.outgoing_edges("thm_main")]
        assert sorted(outgoing) == ["cor_1", "thm_general"]

    def test_grouped_by_relation(self, index):
        grouped = index.outgoing_by_relation("thm_main")
        assert [e.target for e in grouped[Relation.USED_IN]] == ["cor_1"]
        assert [e.target for e in grouped[Relation.GENERALIZED_BY]] == ["thm_general"]
        assert set(index.incoming_by_relation("thm_general")) == {Relation.GENERALIZED_BY}

    def test_unknown_id_has_no_edges(self, index):
        assert index.incoming_edges("nowhere") == []
        assert index.outgoing_by_relation("nowhere") == {}

    def test_dangling_edges_retained(self, make_index):
        index = make_index({"a": "lemma"}, [("a", "ghost", "uses_result")])
        assert [e.source for e in index.incoming_edges("a")] == ["ghost"]
        assert index.get_node("ghost") is None

    def test_counts(self, index):
        assert index.node_types["lemma"] == 2
        assert index.relation_counts == {"used_in": 6, "generalized_by": 1}


class TestSelectSubgraph:
    def test_depth_one_is_immediate_prerequisites(self, index):
        sub = select_subgraph("thm_main", 1, index)
        assert sub.node_set == {"thm_main", "lem_2", "rem_1"}
        assert sub.edge_set == {("lem_2", "thm_main"), ("rem_1", "thm_main")}

    def test_depth_two(self, index):
        sub = select_subgraph("thm_main", 2, index)
        assert sub.node_set == {"thm_main", "lem_2", "rem_1", "lem_1", "def_group"}
        assert ("def_group", "lem_1") not in sub.edge_set

    def test_depth_three_adds_edges_between_known_nodes(self, index):
        sub = select_subgraph("thm_main", 3, index)
        assert ("def_group", "lem_1") in sub.edge_set

    def test_monotonic_in_depth(self, index):
        for target in index.nodes_by_id:
            previous = set()
            for depth in range(1, 6):
                nodes = select_subgraph(target, depth, index).node_set
                assert previous <= nodes
                previous = nodes

    def test_chain_scenario(self, make_index):
        # B uses A, C uses B
        index = make_index(
            {"A": "lemma", "B": "lemma", "C": "theorem"},
            [("B", "A", "uses_result"), ("C", "B", "uses_result")],
        )
        assert select_subgraph("C", 2, index).node_set == {"A", "B", "C"}
        assert select_subgraph("C", 1, index).node_set == {"B", "C"}

    def test_generalization_never_followed(self, index):
        sub = select_subgraph("thm_general", 5, index)
        assert sub.node_set == {"thm_general"}
        assert sub.visible_edges == []
        assert "thm_general" not in select_subgraph("thm_main", 5, index).node_set

    def test_internal_edges_followed(self, make_index):
        index = make_index({"a": "lemma", "b": "theorem"}, [("a", "b", None)])
        assert select_subgraph("b", 1, index).node_set == {"a", "b"}

    def test_no_prerequisites(self, index):
        sub = select_subgraph("def_group", 3, index)
        assert sub.visible_nodes == ["def_group"]
        assert sub.visible_edges == []

    def test_stops_early_when_frontier_empty(self, index):
        assert select_subgraph("lem_1", 50, index).node_set == {"lem_1", "def_group"}

    def test_recomputed_from_scratch(self, index):
        deep = select_subgraph("thm_main", 3, index)
        shallow = select_subgraph("thm_main", 1, index)
        assert shallow.node_set == {"thm_main", "lem_2", "rem_1"}
        assert deep.node_set != shallow.node_set

    def test_cycle_is_bounded_by_depth(self, make_index):
        index = make_index({"x": "lemma", "y": "lemma"}, [("x", "y", "uses_result"), ("y", "x", "uses_result")])
        sub = select_subgraph("x", 10, index)
        assert sub.node_set == {"x", "y"}
        assert sub.edge_set == {("y", "x"), ("x", "y")}

    def test_missing_target_gives_only_target(self, index):
        assert select_subgraph("ghost", 2, index).visible_nodes == ["ghost"]


class TestDepthBounds:
    def test_max_depth_follows_outgoing_edges(self, index):
        # lem_1 -> lem_2 -> thm_main -> {cor_1, thm_general}
        assert max_prereq_depth("lem_1", index) == 3
        assert max_prereq_depth("def_group", index) == 3
        assert max_prereq_depth("thm_main", index) == 1
        assert max_prereq_depth("cor_1", index) == 0

    @pytest.mark.parametrize("depth,max_depth,expected", [
        (0, 3, 1),
        (-4, 3, 1),
        (2, 3, 2),
        (7, 3, 3),
        (2, 0, 1),
    ])
    def test_clamp(self, depth, max_depth, expected):
        assert clamp_depth(depth, max_depth) == expected
