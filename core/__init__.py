"""Core contracts and shared types for the curation engine."""

from .contracts import (
    SENSATIONALISM_CEILING,
    AcceptanceVerdict,
    Adjustment,
    AdjustmentKind,
    Candidate,
    CategoryThresholds,
    FailureKind,
    FailureReason,
    ItemScores,
    LoopParams,
    LoopResult,
    LoopState,
    PassLog,
    RankedCandidate,
    ScoredCandidate,
    ScoringPenalties,
    ScoringWeights,
    SelectionMetrics,
)

__all__ = [
    "SENSATIONALISM_CEILING",
    "AcceptanceVerdict",
    "Adjustment",
    "AdjustmentKind",
    "Candidate",
    "CategoryThresholds",
    "FailureKind",
    "FailureReason",
    "ItemScores",
    "LoopParams",
    "LoopResult",
    "LoopState",
    "PassLog",
    "RankedCandidate",
    "ScoredCandidate",
    "ScoringPenalties",
    "ScoringWeights",
    "SelectionMetrics",
]
