"""Context for the "explain this selection" collaborator.

Only the request is assembled here. Sending it, and whatever comes back, is
the caller's business.
"""

from proofpath.config import ExplainConfig
from proofpath.models import DistillationModel, ExplainContext, ExplainMode

EXPLAIN_SYSTEM_PROMPT = (
    "You are The Explainer for mathematical content. Be precise and correct; preserve "
    "meaning; include small LaTeX where helpful; avoid fabrications; if unsure, say so."
)


def parse_mode(mode: str | ExplainMode) -> ExplainMode:
    try:
        return ExplainMode(mode)
    except ValueError:
        valid = ", ".join(m.value for m in ExplainMode)
        raise ValueError(f"Unknown explain mode {mode!r} (expected one of: {valid})") from None


def build_explain_context(
    model: DistillationModel,
    mode: str | ExplainMode,
    selection: str,
    local_context: str = "",
    config: ExplainConfig | None = None,
) -> ExplainContext:
    config = config or ExplainConfig()
    return ExplainContext(
        mode=parse_mode(mode),
        selection=selection.strip()[:config.max_selection_chars],
        local_context=local_context.strip()[:config.max_context_chars],
        target=model.target,
        definitions=model.definitions[:config.max_definitions],
        supporting=model.supporting[:config.max_supporting],
    )


def render_explain_prompt(context: ExplainContext) -> str:
    parts = [
        f"Mode: {context.mode.value}",
        f"Selection: {context.selection}",
    ]
    if context.local_context:
        parts.append(f"Local context: {context.local_context}")
    if context.target:
        parts.append(f"Target: {context.target.title}: {context.target.content}")
    if context.definitions:
        parts.append("Definitions (subset):\n- " + "\n- ".join(context.definitions))
    if context.supporting:
        parts.append("Supporting (subset):\n- " + "\n- ".join(
            f"{r.title}: {r.content}" for r in context.supporting
        ))
    return "\n\n".join(parts)


def explain_messages(context: ExplainContext) -> list[dict[str, str]]:
    """Chat-style message list for the request."""
    return [
        {"role": "system", "content": EXPLAIN_SYSTEM_PROMPT},
        {"role": "user", "content": render_explain_prompt(context)},
    ]
