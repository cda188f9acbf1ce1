"""Review mode — step through theorems with a proof outline and referee notes.

The review state is a plain value; transitions return a new state. Prompt
builders produce the text an external model would be asked; nothing here
calls a model.
"""

import logging
import re
import time

from pydantic import ValidationError

from proofpath.config import DistillConfig, ReviewConfig
from proofpath.graph.index import GraphIndex
from proofpath.models import (
    NodeSummary,
    ProofOutline,
    Relation,
    ReviewItem,
    ReviewSections,
    ReviewState,
    ReviewStatus,
)
from proofpath.store import KeyValueStore
from proofpath.text import clean_markup, dedupe, segment

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("clarity", "soundness", "suggestions")
SECTION_RE = {
    "clarity": re.compile(r"^(?:\d[.)]?)?\s*clarity"),
    "soundness": re.compile(r"^(?:\d[.)]?)?\s*soundness"),
    "suggestions": re.compile(r"^(?:\d[.)]?)?\s*suggestions"),
}

SYSTEM_PROMPT = (
    "You are a careful, conservative mathematical assistant. Be precise, avoid "
    "speculation; if unsure, say so explicitly. Use brief LaTeX inline when appropriate."
)


def _natural_key(title: str) -> list[object]:
    """Sort key that orders 'Theorem 2' before 'Theorem 10'."""
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", title)]


def build_review_items(index: GraphIndex, config: ReviewConfig | None = None) -> list[ReviewItem]:
    config = config or ReviewConfig()
    types = set(config.review_types)
    items = [
        ReviewItem(
            node_id=n.id,
            title=n.title,
            statement=clean_markup(n.content_preview),
            prerequisites=n.prerequisites_preview,
        )
        for n in index.nodes_by_id.values()
        if n.type in types
    ]
    items.sort(key=lambda it: _natural_key(it.title))
    return items


def build_proof_outline(
    node_id: str, index: GraphIndex, depth: int = 2, config: DistillConfig | None = None,
) -> ProofOutline:
    """Definitions and supporting results within ``depth`` prerequisite levels."""
    result_types = set((config or DistillConfig()).result_types)
    visited = {node_id}
    frontier = [node_id]
    level = 0
    seen_keys: set[str] = set()
    definitions: list[str] = []
    supporting: list[NodeSummary] = []
    supporting_ids: set[str] = set()

    while level < depth and frontier:
        next_frontier: list[str] = []
        for current in frontier:
            for edge in index.incoming_edges(current):
                if edge.relation is Relation.GENERALIZED_BY:
                    continue
                if edge.source not in visited:
                    visited.add(edge.source)
                    next_frontier.append(edge.source)
                node = index.get_node(edge.source)
                if node is None:
                    continue
                if node.type in result_types and node.id not in supporting_ids:
                    supporting_ids.add(node.id)
                    supporting.append(NodeSummary(
                        id=node.id, title=node.title, content=clean_markup(node.content_preview),
                    ))
                definitions.extend(dedupe(segment(node.prerequisites_preview), seen_keys))
        level += 1
        frontier = next_frontier

    return ProofOutline(definitions=definitions, supporting=supporting)


# --- State transitions ---


def new_review(index: GraphIndex, config: ReviewConfig | None = None) -> ReviewState:
    config = config or ReviewConfig()
    return ReviewState(items=build_review_items(index, config), types=list(config.review_types))


def _clamp_index(state: ReviewState, i: int) -> int:
    return max(0, min(len(state.items) - 1, i)) if state.items else 0


def goto(state: ReviewState, i: int) -> ReviewState:
    return state.model_copy(update={"current_index": _clamp_index(state, i)})


def _update_current(state: ReviewState, **changes: object) -> ReviewState:
    if not state.items:
        return state
    items = list(state.items)
    items[state.current_index] = items[state.current_index].model_copy(update=changes)
    return state.model_copy(update={"items": items})


def mark_status(state: ReviewState, status: ReviewStatus) -> ReviewState:
    return _update_current(state, status=status, edited_at=time.time())


def set_field(state: ReviewState, field: str, value: str) -> ReviewState:
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown review field: {field}")
    return _update_current(state, **{field: value, "edited_at": time.time()})


def toggle_selected(state: ReviewState) -> ReviewState:
    if not state.items:
        return state
    current = state.items[state.current_index]
    return _update_current(state, selected_for_report=not current.selected_for_report)


def set_included(state: ReviewState, i: int, included: bool) -> ReviewState:
    if not 0 <= i < len(state.items):
        return state
    items = list(state.items)
    items[i] = items[i].model_copy(update={"include_in_report": included})
    return state.model_copy(update={"items": items})


def advance(state: ReviewState, status: ReviewStatus = ReviewStatus.DONE, step: int = 1) -> ReviewState:
    """Mark the current item and move ``step`` items on."""
    state = mark_status(state, status)
    return goto(state, state.current_index + step)


def enter(state: ReviewState, start_id: str | None = None) -> ReviewState:
    """Open review mode, jumping to ``start_id`` when it is a review item."""
    if start_id:
        for i, item in enumerate(state.items):
            if item.node_id == start_id:
                return goto(state, i)
    return state


def reset(index: GraphIndex, config: ReviewConfig | None = None) -> ReviewState:
    """Discard all notes and start over."""
    return new_review(index, config)


# --- Persistence ---


def review_key(paper_id: str) -> str:
    return f"review:{paper_id}"


def load_review(store: KeyValueStore, paper_id: str) -> ReviewState | None:
    """Saved review for the paper, with its position clamped to the current items."""
    raw = store.get_json(review_key(paper_id))
    if not isinstance(raw, dict):
        return None
    try:
        state = ReviewState(**raw)
    except ValidationError as e:
        logger.warning("Discarding unreadable review for %s: %s", paper_id, e)
        return None
    return goto(state, state.current_index)


def save_review(store: KeyValueStore, paper_id: str, state: ReviewState) -> None:
    store.set_json(review_key(paper_id), state.model_dump(mode="json"))


def load_or_create_review(
    store: KeyValueStore, paper_id: str, index: GraphIndex, config: ReviewConfig | None = None,
) -> ReviewState:
    state = load_review(store, paper_id)
    if state is None:
        state = new_review(index, config)
        save_review(store, paper_id, state)
    return state


# --- Prompt context ---


def _outline_header(
    item: ReviewItem, outline: ProofOutline, paper_title: str, config: ReviewConfig,
) -> list[str]:
    defs = "\n".join(f"- {d}" for d in outline.definitions[:config.max_definitions])
    supp = "\n".join(
        f"- {r.title or r.id}: {r.content}" for r in outline.supporting[:config.max_supporting]
    )
    parts = [
        f"Paper: {paper_title}",
        f"Theorem: {item.title}",
        f"Statement: {item.statement}",
    ]
    if defs:
        parts.append(f"Key definitions/notations (subset):\n{defs}")
    if supp:
        parts.append(f"Supporting results (subset):\n{supp}")
    return parts


SECTION_TASKS = {
    "clarity": (
        "Task: Provide a concise referee comment on CLARITY (exposition, notation, "
        "readability). Use 3-6 sentences; reference definitions/notations from the "
        "outline if helpful. Output plain text only."
    ),
    "soundness": (
        "Task: Provide a concise referee comment on SOUNDNESS (correctness/rigor as can "
        "be judged from the statement and outline). Use 3-6 sentences; where appropriate, "
        "cite which supporting result/definition your claim relies on. Output plain text only."
    ),
    "suggestions": (
        "Task: Provide concrete, actionable SUGGESTIONS FOR IMPROVEMENT (clarity, rigor, "
        "structure). Use bullet-like short paragraphs (but output as plain text lines). "
        "Output plain text only."
    ),
}


def review_section_prompt(
    mode: str,
    item: ReviewItem,
    outline: ProofOutline,
    paper_title: str,
    config: ReviewConfig | None = None,
) -> str:
    """Prompt asking for one review section about ``item``."""
    if mode not in SECTION_TASKS:
        raise ValueError(f"Unknown review section: {mode}")
    config = config or ReviewConfig()
    header = "\n".join(_outline_header(item, outline, paper_title, config))
    return f"{header}\n\n{SECTION_TASKS[mode]}"


def review_prompt(
    item: ReviewItem, outline: ProofOutline, paper_title: str, config: ReviewConfig | None = None,
) -> str:
    """Single prompt asking for all three sections at once."""
    config = config or ReviewConfig()
    intro = [
        "You are assisting a referee reviewing a mathematical paper.",
        "Return three labeled sections in this exact order with clear, concise paragraphs:",
        "1) Clarity - comment on exposition, notation, readability; reference definitions "
        "or notations from the outline if helpful.",
        "2) Soundness - discuss correctness as far as can be judged using the statement and "
        "outline; when making a claim, briefly cite which supporting result/definition it depends on.",
        "3) Suggestions for Improvement - concrete, actionable recommendations to improve "
        "clarity, rigor, or structure.",
    ]
    return "\n".join(intro) + "\n\n" + "\n\n".join(_outline_header(item, outline, paper_title, config))


def _notes_bullets(items: list[ReviewItem]) -> str:
    return "\n".join(
        f"- {it.title}\n  Clarity: {it.clarity or '-'}\n  Soundness: {it.soundness or '-'}"
        f"\n  Suggestions: {it.suggestions or '-'}"
        for it in items
    )


def compose_report_prompt(state: ReviewState) -> str:
    included = [it for it in state.items if it.include_in_report]
    settings = state.report
    return "\n\n".join([
        "You are drafting a concise, professional referee report.",
        f"Tone: {settings.tone}. Length: {settings.length}. Template: {settings.template}.",
        "Write a coherent narrative that synthesizes the points below (do not restate theorem statements).",
        "Close with an overall assessment and concrete recommendations. Use cautious language when appropriate.",
        "Per-theorem notes:",
        _notes_bullets(included),
    ])


def review_messages(prompt: str) -> list[dict[str, str]]:
    """Chat-style message list for any review, section or report prompt."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def parse_review_reply(text: str | None) -> ReviewSections:
    """Split a model reply into clarity / soundness / suggestions by heading keywords."""
    sections = {"clarity": [], "soundness": [], "suggestions": []}
    current = "clarity"
    for raw in re.split(r"\n+", str(text or "")):
        lowered = raw.strip().lower()
        heading = next((name for name, pat in SECTION_RE.items() if pat.match(lowered)), None)
        if heading:
            current = heading
            continue
        sections[current].append(raw)
    return ReviewSections(**{k: "\n".join(v).strip() for k, v in sections.items()})


def compose_report_local(state: ReviewState) -> str:
    """Narrative stitched together from the included items' notes."""
    included = [it for it in state.items if it.include_in_report]
    parts = [
        f"Summary. This report addresses {len(included)} results in the paper. The remarks "
        "below aggregate clarity, soundness, and suggestions gathered during "
        "theorem-by-theorem review."
    ]
    for it in included:
        notes = []
        if it.clarity:
            notes.append(f"Clarity: {it.clarity}")
        if it.soundness:
            notes.append(f"Soundness: {it.soundness}")
        if it.suggestions:
            notes.append(f"Suggestions: {it.suggestions}")
        if notes:
            parts.append(f"{it.title}. " + " ".join(notes))
    return "\n\n".join(parts)


def with_narrative(state: ReviewState, narrative: str) -> ReviewState:
    report = state.report.model_copy(update={"narrative": narrative})
    return state.model_copy(update={"report": report})

