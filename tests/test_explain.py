"""Tests for explain-request context building."""

import pytest

from proofpath.config import ExplainConfig
from proofpath.distiller import assemble
from proofpath.explain import (
    EXPLAIN_SYSTEM_PROMPT,
    build_explain_context,
    explain_messages,
    parse_mode,
    render_explain_prompt,
)
from proofpath.graph.subgraph import select_subgraph
from proofpath.models import ExplainMode


@pytest.fixture()
def model(index):
    return assemble("thm_main", select_subgraph("thm_main", 2, index), index)


class TestParseMode:
    def test_valid(self):
        assert parse_mode("intuition") is ExplainMode.INTUITION
        assert parse_mode(ExplainMode.EXPAND) is ExplainMode.EXPAND

    def test_invalid(self):
        with pytest.raises(ValueError, match="Unknown explain mode"):
            parse_mode("summarize")


class TestBuildContext:
    def test_includes_document_context(self, model):
        ctx = build_explain_context(model, "simplify", "  the identity is unique  ")
        assert ctx.mode is ExplainMode.SIMPLIFY
        assert ctx.selection == "the identity is unique"
        assert ctx.target.id == "thm_main"
        assert len(ctx.definitions) == 3
        assert [r.id for r in ctx.supporting] == ["lem_1", "lem_2"]

    def test_limits(self, model):
        config = ExplainConfig(max_definitions=1, max_supporting=1, max_selection_chars=5, max_context_chars=3)
        ctx = build_explain_context(model, "expand", "abcdefgh", "  xyzw ", config)
        assert ctx.selection == "abcde"
        assert ctx.local_context == "xyz"
        assert len(ctx.definitions) == 1
        assert [r.id for r in ctx.supporting] == ["lem_1"]


class TestRender:
    def test_prompt_sections(self, model):
        ctx = build_explain_context(model, "intuition", "Sylow", "Proof of Theorem 10")
        prompt = render_explain_prompt(ctx)
        assert prompt.startswith("Mode: intuition\n\nSelection: Sylow")
        assert "Local context: Proof of Theorem 10" in prompt
        assert "Target: Theorem 10: Every finite group" in prompt
        assert "Definitions (subset):\n- Notation:" in prompt
        assert "Supporting (subset):\n- Lemma 1: The identity of $G$ is unique." in prompt

    def test_empty_local_context_omitted(self, model):
        prompt = render_explain_prompt(build_explain_context(model, "simplify", "x"))
        assert "Local context" not in prompt

    def test_messages(self, model):
        messages = explain_messages(build_explain_context(model, "simplify", "x"))
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == EXPLAIN_SYSTEM_PROMPT
