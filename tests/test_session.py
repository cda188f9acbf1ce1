"""Tests for proof-mode session transitions."""

import pytest

from proofpath.session import (
    change_target,
    enter_proof_mode,
    exit_proof_mode,
    restore_session,
    set_depth,
    unfold_less,
    unfold_more,
)


class TestEnterProofMode:
    def test_starts_at_depth_one(self, index):
        session = enter_proof_mode(index, "lem_2")
        assert session.pinned_id == session.target_id == "lem_2"
        assert session.depth == 1
        assert session.subgraph.node_set == {"lem_2", "lem_1", "def_group"}

    def test_unknown_target_raises(self, index):
        with pytest.raises(ValueError, match="Node not found"):
            enter_proof_mode(index, "ghost")


class TestDepthChanges:
    def test_unfold_more_and_less(self, index):
        session = enter_proof_mode(index, "lem_1")
        deeper = unfold_more(session, index)
        assert deeper.depth == 2
        assert session.depth == 1
        assert unfold_less(deeper, index).depth == 1

    def test_depth_never_below_one(self, index):
        session = enter_proof_mode(index, "lem_1")
        assert unfold_less(session, index).depth == 1
        assert set_depth(session, index, -3).depth == 1

    def test_depth_clamped_to_max(self, index):
        session = set_depth(enter_proof_mode(index, "lem_1"), index, 10)
        assert session.depth == 3
        assert unfold_more(session, index).depth == 3

    def test_subgraph_follows_depth(self, index):
        session = set_depth(enter_proof_mode(index, "lem_2"), index, 1)
        assert session.subgraph.depth == 1
        assert session.subgraph.target_id == "lem_2"

    def test_target_with_shallow_bound(self, index):
        # thm_main only reaches cor_1 / thm_general downstream
        session = set_depth(enter_proof_mode(index, "thm_main"), index, 3)
        assert session.depth == 1


class TestTargetChanges:
    def test_change_target_resets_depth(self, index):
        session = set_depth(enter_proof_mode(index, "lem_1"), index, 3)
        switched = change_target(session, index, "lem_2")
        assert switched.target_id == "lem_2"
        assert switched.depth == 1

    def test_change_target_from_nothing(self, index):
        assert change_target(None, index, "thm_main").target_id == "thm_main"

    def test_exit(self, index):
        assert exit_proof_mode(enter_proof_mode(index, "lem_1")) is None
        assert exit_proof_mode(None) is None


class TestRestoreSession:
    def test_restores_target_and_depth(self, index):
        session = restore_session(index, "lem_1", "2")
        assert session.target_id == "lem_1"
        assert session.depth == 2

    @pytest.mark.parametrize("depth,expected", [("2.5", 2), ("3abc", 3), (" 2", 2), (2, 2)])
    def test_depth_read_from_leading_digits(self, index, depth, expected):
        assert restore_session(index, "lem_1", depth).depth == expected

    @pytest.mark.parametrize("depth", [None, "abc", "0", -1, "x2"])
    def test_bad_depth_falls_back_to_one(self, index, depth):
        assert restore_session(index, "lem_1", depth).depth == 1

    def test_unknown_or_missing_target(self, index):
        assert restore_session(index, "ghost", 2) is None
        assert restore_session(index, None) is None
