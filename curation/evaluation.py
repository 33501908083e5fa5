"""Selection metrics and acceptance checks."""

from __future__ import annotations

from typing import List, Sequence

from core import (
    AcceptanceVerdict,
    CategoryThresholds,
    FailureKind,
    FailureReason,
    RankedCandidate,
    SelectionMetrics,
)


FORWARD_PROGRESS_QUALIFIER = 0.5


def aggregate_metrics(selection: Sequence[RankedCandidate]) -> SelectionMetrics:
    rows = list(selection or [])
    if not rows:
        return SelectionMetrics()

    count = len(rows)
    sources: List[str] = []
    for row in rows:
        if row.candidate.source_name not in sources:
            sources.append(row.candidate.source_name)
    progressing = sum(1 for row in rows if row.scores.forward_progress >= FORWARD_PROGRESS_QUALIFIER)

    return SelectionMetrics(
        avg_sensationalism=sum(row.scores.sensationalism for row in rows) / count,
        avg_optimism=sum(row.scores.optimism for row in rows) / count,
        forward_progress_pct=progressing / count,
        item_count=count,
        source_diversity=len(sources),
        sources=sources,
    )


def evaluate_acceptance(metrics: SelectionMetrics, thresholds: CategoryThresholds) -> AcceptanceVerdict:
    """Run every check in fixed order. Accepted only when none fail."""
    reasons: List[FailureReason] = []

    if metrics.item_count < thresholds.min_item_count:
        reasons.append(
            FailureReason(
                kind=FailureKind.ITEM_COUNT,
                observed=float(metrics.item_count),
                limit=float(thresholds.min_item_count),
                message=f"Item count {metrics.item_count} below minimum {thresholds.min_item_count}",
            )
        )
    if metrics.avg_sensationalism > thresholds.max_sensationalism:
        reasons.append(
            FailureReason(
                kind=FailureKind.SENSATIONALISM,
                observed=metrics.avg_sensationalism,
                limit=thresholds.max_sensationalism,
                message=(
                    f"Avg sensationalism {metrics.avg_sensationalism:.3f} "
                    f"above max {thresholds.max_sensationalism}"
                ),
            )
        )
    if metrics.forward_progress_pct < thresholds.min_forward_progress_pct:
        reasons.append(
            FailureReason(
                kind=FailureKind.FORWARD_PROGRESS,
                observed=metrics.forward_progress_pct,
                limit=thresholds.min_forward_progress_pct,
                message=(
                    f"Forward progress {metrics.forward_progress_pct * 100:.1f}% "
                    f"below min {thresholds.min_forward_progress_pct * 100:.1f}%"
                ),
            )
        )
    if metrics.avg_optimism < thresholds.min_optimism:
        reasons.append(
            FailureReason(
                kind=FailureKind.OPTIMISM,
                observed=metrics.avg_optimism,
                limit=thresholds.min_optimism,
                message=f"Avg optimism {metrics.avg_optimism:.3f} below min {thresholds.min_optimism}",
            )
        )
    # Blocking, even though it reads like advice.
    if metrics.source_diversity == 1 and metrics.item_count > 2:
        source = metrics.sources[0] if metrics.sources else "unknown"
        reasons.append(
            FailureReason(
                kind=FailureKind.SOURCE_DIVERSITY,
                observed=float(metrics.source_diversity),
                limit=2.0,
                message=f"Low source diversity: all items from {source}",
            )
        )

    return AcceptanceVerdict(accepted=not reasons, failure_reasons=reasons)
