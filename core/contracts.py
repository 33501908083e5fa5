"""Canonical data contracts for scoring and the refinement loop."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Absolute upper bound for thresholds.max_sensationalism. No configuration or
# adjustment may push the hard filter above this value.
SENSATIONALISM_CEILING = 0.4


class FailureKind(str, Enum):
    """Acceptance checks, in evaluation order."""

    ITEM_COUNT = "item_count"
    SENSATIONALISM = "sensationalism"
    FORWARD_PROGRESS = "forward_progress"
    OPTIMISM = "optimism"
    SOURCE_DIVERSITY = "source_diversity"


class AdjustmentKind(str, Enum):
    """Parameter group touched by an adjustment."""

    WEIGHT = "weight"
    THRESHOLD = "threshold"
    PENALTY = "penalty"


class LoopState(str, Enum):
    """Refinement loop controller states."""

    INIT = "init"
    SELECTING = "selecting"
    EVALUATING = "evaluating"
    ADJUSTING = "adjusting"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


class Candidate(BaseModel):
    """Read-only content item supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    excerpt: Optional[str] = None
    source_name: str
    published_at: datetime
    credibility: float = Field(default=0.5, ge=0.0, le=1.0)
    category: str
    url: Optional[str] = None

    @field_validator("id", "source_name", "category", mode="before")
    @classmethod
    def _non_empty_text(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("value is required")
        return text

    @field_validator("published_at", mode="after")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def text(self) -> str:
        return f"{self.title} {self.excerpt or ''}"


class ItemScores(BaseModel):
    """Normalized quality scores for one candidate."""

    model_config = ConfigDict(frozen=True)

    optimism: float
    sensationalism: float
    forward_progress: float
    freshness: float
    credibility: float
    topic_fit: float
    total: float


class ScoredCandidate(BaseModel):
    """Candidate paired with the scores computed for it."""

    model_config = ConfigDict(frozen=True)

    candidate: Candidate
    scores: ItemScores

    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def source_name(self) -> str:
        return self.candidate.source_name


class RankedCandidate(BaseModel):
    """Item picked by the selector, in selection order."""

    model_config = ConfigDict(frozen=True)

    rank: int
    candidate: Candidate
    scores: ItemScores
    adjusted_score: float

    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def source_name(self) -> str:
        return self.candidate.source_name


class ScoringWeights(BaseModel):
    """Blend weights for the total score. Renormalized to sum to 1."""

    model_config = ConfigDict(frozen=True)

    optimism: float = Field(default=0.25, ge=0.0)
    forward_progress: float = Field(default=0.25, ge=0.0)
    credibility: float = Field(default=0.2, ge=0.0)
    freshness: float = Field(default=0.15, ge=0.0)
    topic_fit: float = Field(default=0.15, ge=0.0)

    def total(self) -> float:
        return self.optimism + self.forward_progress + self.credibility + self.freshness + self.topic_fit


class ScoringPenalties(BaseModel):
    """Penalty multipliers. Only sensationalism feeds the core loop."""

    model_config = ConfigDict(frozen=True)

    sensationalism: float = Field(default=0.3, ge=0.0)
    social_only: float = Field(default=0.1, ge=0.0)
    duplicate_source: float = Field(default=0.1, ge=0.0)


class CategoryThresholds(BaseModel):
    """Selection size and quality bounds for one category."""

    model_config = ConfigDict(frozen=True)

    target_item_count: int = 5
    min_item_count: int = 3
    max_item_count: int = 8
    max_sensationalism: float = 0.3
    min_optimism: float = 0.3
    min_forward_progress_pct: float = 0.4
    max_same_source_items: int = 3
    require_company_match: bool = False


class LoopParams(BaseModel):
    """Immutable (weights, thresholds, penalties) snapshot for one pass."""

    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: CategoryThresholds = Field(default_factory=CategoryThresholds)
    penalties: ScoringPenalties = Field(default_factory=ScoringPenalties)


class SelectionMetrics(BaseModel):
    """Aggregate statistics over one selection."""

    model_config = ConfigDict(frozen=True)

    avg_sensationalism: float = 0.0
    avg_optimism: float = 0.0
    forward_progress_pct: float = 0.0
    item_count: int = 0
    source_diversity: int = 0
    sources: List[str] = Field(default_factory=list)


class FailureReason(BaseModel):
    """Structured acceptance failure consumed directly by the adjustor."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    observed: float
    limit: float
    message: str

    def __str__(self) -> str:
        return self.message


class Adjustment(BaseModel):
    """Audit record of one applied parameter nudge."""

    model_config = ConfigDict(frozen=True)

    kind: AdjustmentKind
    field: str
    old_value: float
    new_value: float
    reason: str


class AcceptanceVerdict(BaseModel):
    """Outcome of evaluating metrics against thresholds."""

    model_config = ConfigDict(frozen=True)

    accepted: bool
    failure_reasons: List[FailureReason] = Field(default_factory=list)


class LoopResult(BaseModel):
    """Terminal output of one refinement loop run."""

    model_config = ConfigDict(frozen=True)

    category: str
    accepted: bool
    pass_number: int
    passes_executed: int
    state: LoopState
    metrics: SelectionMetrics
    adjustments: List[Adjustment] = Field(default_factory=list)
    failure_reasons: List[FailureReason] = Field(default_factory=list)
    selected_items: List[RankedCandidate] = Field(default_factory=list)
    final_params: LoopParams

    @property
    def selected_ids(self) -> List[str]:
        return [row.candidate.id for row in self.selected_items]


class PassLog(BaseModel):
    """Append-only audit entry for one (category, pass_number)."""

    model_config = ConfigDict(frozen=True)

    category: str
    pass_number: int
    metrics: SelectionMetrics
    thresholds: CategoryThresholds
    accepted: bool
    failure_reasons: List[FailureReason] = Field(default_factory=list)
