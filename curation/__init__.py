"""Scoring, selection and the bounded refinement loop."""

from .adjustor import ParameterAdjustor, apply_adjustments, renormalize_weights
from .candidate_pool import has_new_qualifying_items, mentions_company, score_candidates, shortlist_candidates
from .evaluation import aggregate_metrics, evaluate_acceptance
from .pass_log import LoggingPassLogSink, NullPassLogSink, PassLogSink
from .refinement_loop import RefinementLoop, run_refinement_loop
from .scoring import adjusted_score, score_candidate
from .selector import select_items

__all__ = [
    "LoggingPassLogSink",
    "NullPassLogSink",
    "ParameterAdjustor",
    "PassLogSink",
    "RefinementLoop",
    "adjusted_score",
    "aggregate_metrics",
    "apply_adjustments",
    "evaluate_acceptance",
    "has_new_qualifying_items",
    "mentions_company",
    "renormalize_weights",
    "run_refinement_loop",
    "score_candidate",
    "score_candidates",
    "select_items",
    "shortlist_candidates",
]
