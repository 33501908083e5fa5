"""Filter, re-rank and source-cap scored candidates for one pass."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from core import LoopParams, RankedCandidate, ScoredCandidate
from curation.scoring import adjusted_score


def passes_hard_filter(row: ScoredCandidate, params: LoopParams) -> bool:
    thresholds = params.thresholds
    if row.scores.sensationalism > thresholds.max_sensationalism:
        return False
    # Looser than the acceptance floor so the pool stays wide across passes.
    if row.scores.optimism < thresholds.min_optimism * 0.5:
        return False
    return True


def _sort_key(entry: Tuple[float, ScoredCandidate]) -> Tuple[float, float, float, str]:
    score, row = entry
    return (
        -score,
        -row.scores.total,
        -row.candidate.published_at.timestamp(),
        row.candidate.id,
    )


def select_items(scored_candidates: Sequence[ScoredCandidate], params: LoopParams) -> List[RankedCandidate]:
    thresholds = params.thresholds
    ranked = [
        (adjusted_score(row.scores, params.weights, params.penalties), row)
        for row in list(scored_candidates or [])
        if passes_hard_filter(row, params)
    ]
    ranked.sort(key=_sort_key)

    selected: List[RankedCandidate] = []
    per_source: Dict[str, int] = {}
    for score, row in ranked:
        if len(selected) >= thresholds.target_item_count:
            break
        source = row.candidate.source_name
        if per_source.get(source, 0) >= thresholds.max_same_source_items:
            continue
        per_source[source] = per_source.get(source, 0) + 1
        selected.append(
            RankedCandidate(
                rank=len(selected) + 1,
                candidate=row.candidate,
                scores=row.scores,
                adjusted_score=score,
            )
        )
    return selected
