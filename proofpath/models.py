"""Pydantic models for the proof-path distiller."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    THEOREM = "theorem"
    LEMMA = "lemma"
    PROPOSITION = "proposition"
    COROLLARY = "corollary"
    CLAIM = "claim"
    DEFINITION = "definition"
    REMARK = "remark"
    UNKNOWN = "unknown"


class Relation(str, Enum):
    """Canonical edge semantics after normalization."""
    USED_IN = "used_in"
    GENERALIZED_BY = "generalized_by"
    INTERNAL = "internal"


CANONICAL_RELATIONS = {r.value for r in Relation}


# --- Graph input ---


class Node(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    type: str = NodeType.UNKNOWN.value
    display_name: str | None = None
    label: str | None = None
    content_preview: str = ""
    prerequisites_preview: str = ""

    @property
    def title(self) -> str:
        return self.display_name or self.label or self.id


class Edge(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: str
    target: str
    dependency_type: str | None = None
    context: str | None = None

    @property
    def relation(self) -> Relation:
        """Canonical relation; raw or unknown types read as internal."""
        if self.dependency_type in CANONICAL_RELATIONS:
            return Relation(self.dependency_type)
        return Relation.INTERNAL

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.target)


class Graph(BaseModel):
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)


# --- Proof path selection ---


class Subgraph(BaseModel):
    """Bounded prerequisite subgraph around one target."""
    target_id: str
    depth: int = Field(ge=1)
    visible_nodes: list[str] = Field(default_factory=list)
    visible_edges: list[tuple[str, str]] = Field(default_factory=list)

    @property
    def node_set(self) -> set[str]:
        return set(self.visible_nodes)

    @property
    def edge_set(self) -> set[tuple[str, str]]:
        return set(self.visible_edges)


class ProofSession(BaseModel):
    """The single live proof-mode selection, owned by the caller."""
    pinned_id: str
    target_id: str
    depth: int = Field(ge=1)
    subgraph: Subgraph


# --- Distillation output ---


class NodeSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""


class UnfoldNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    children: tuple["UnfoldNode", ...] = ()


class DistillationModel(BaseModel):
    """Read-only document handed to the renderer.

    Sequences are tuples and nested models are frozen. The two lookup dicts are
    plain dicts whose values are tuples or frozen summaries.
    """
    model_config = ConfigDict(frozen=True)

    title: str
    depth: int
    target: NodeSummary
    definitions: tuple[str, ...] = ()
    supporting: tuple[NodeSummary, ...] = ()
    adjacency: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    node_summaries: dict[str, NodeSummary] = Field(default_factory=dict)
    unfold_tree: UnfoldNode


# --- Review mode ---


class ReviewStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    SKIPPED = "skipped"


class ReviewItem(BaseModel):
    node_id: str
    title: str
    statement: str = ""
    prerequisites: str = ""
    status: ReviewStatus = ReviewStatus.PENDING
    clarity: str = ""
    soundness: str = ""
    suggestions: str = ""
    include_in_report: bool = True
    selected_for_report: bool = False
    edited_at: float | None = None


class ReportSettings(BaseModel):
    tone: str = "balanced"
    length: str = "medium"
    template: str = "generic"
    narrative: str = ""


class ReviewState(BaseModel):
    items: list[ReviewItem] = Field(default_factory=list)
    current_index: int = 0
    types: list[str] = Field(default_factory=lambda: [NodeType.THEOREM.value])
    report: ReportSettings = Field(default_factory=ReportSettings)


class ProofOutline(BaseModel):
    definitions: list[str] = Field(default_factory=list)
    supporting: list[NodeSummary] = Field(default_factory=list)


class ReviewSections(BaseModel):
    clarity: str = ""
    soundness: str = ""
    suggestions: str = ""


# --- AI explanation context ---


class ExplainMode(str, Enum):
    SIMPLIFY = "simplify"
    INTUITION = "intuition"
    EXPAND = "expand"


class ExplainContext(BaseModel):
    """Everything an external explainer call needs, assembled deterministically."""
    mode: ExplainMode
    selection: str
    local_context: str = ""
    target: NodeSummary | None = None
    definitions: list[str] = Field(default_factory=list)
    supporting: list[NodeSummary] = Field(default_factory=list)
