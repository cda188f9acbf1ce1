"""Configuration loading for the proof-path distiller."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class DistillConfig(BaseModel):
    excluded_types: list[str] = Field(default_factory=lambda: ["remark", "unknown"])
    result_types: list[str] = Field(default_factory=lambda: [
        "theorem", "lemma", "proposition", "corollary", "claim",
    ])
    default_depth: int = Field(default=1, ge=1)


class ReviewConfig(BaseModel):
    outline_depth: int = Field(default=2, ge=1)
    max_definitions: int = 6
    max_supporting: int = 5
    review_types: list[str] = Field(default_factory=lambda: ["theorem"])


class ExplainConfig(BaseModel):
    max_definitions: int = 6
    max_supporting: int = 3
    max_selection_chars: int = 4000
    max_context_chars: int = 4000


class Config(BaseModel):
    db_path: str = "data/proofpath.db"
    graph_path: str | None = None
    distill: DistillConfig = Field(default_factory=DistillConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    explain: ExplainConfig = Field(default_factory=ExplainConfig)

    @property
    def resolved_db_path(self) -> Path:
        """Resolve db_path relative to project root."""
        p = Path(self.db_path)
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_graph_path(self) -> Path | None:
        if self.graph_path is None:
            return None
        return Path(self.graph_path).expanduser()


def _project_root() -> Path:
    """Return the proofpath project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
