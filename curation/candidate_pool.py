"""Batch scoring and shortlisting ahead of the refinement loop."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence

from core import Candidate, CategoryThresholds, LoopParams, ScoredCandidate
from curation.scoring import contains_term, score_candidate


def score_candidates(
    candidates: Sequence[Candidate],
    *,
    params: LoopParams,
    category_keywords: Sequence[str],
    now: datetime,
) -> List[ScoredCandidate]:
    return [
        ScoredCandidate(
            candidate=row,
            scores=score_candidate(
                row,
                weights=params.weights,
                penalties=params.penalties,
                category_keywords=category_keywords,
                now=now,
            ),
        )
        for row in list(candidates or [])
    ]


def mentions_company(text: str, names: Iterable[str]) -> bool:
    return any(contains_term(text, name) for name in list(names or []))


def shortlist_candidates(
    scored: Sequence[ScoredCandidate],
    thresholds: CategoryThresholds,
    companies: Sequence[str] = (),
    limit: int = 50,
) -> List[ScoredCandidate]:
    """
    Keep positively scored items, best first.

    When the category requires a company match, items that name none of the
    configured companies are dropped. An empty company list drops nothing.
    """
    rows = [row for row in list(scored or []) if row.scores.total > 0]
    if thresholds.require_company_match and companies:
        rows = [row for row in rows if mentions_company(row.candidate.text, companies)]
    rows.sort(key=lambda row: (-row.scores.total, row.candidate.id))
    return rows[: max(0, int(limit))]


def has_new_qualifying_items(
    pool: Sequence[ScoredCandidate],
    previous_item_ids: Iterable[str],
    min_total: float = 0.5,
) -> bool:
    """True when an item not in the previous selection scores above ``min_total``."""
    previous = set(previous_item_ids or [])
    return any(row.candidate.id not in previous and row.scores.total > min_total for row in list(pool or []))
