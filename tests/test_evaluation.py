from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from core import Candidate, CategoryThresholds, FailureKind, ItemScores, RankedCandidate, SelectionMetrics
from curation.evaluation import aggregate_metrics, evaluate_acceptance


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _ranked(
    item_id: str,
    source: str,
    *,
    sensationalism: float = 0.1,
    optimism: float = 0.6,
    forward_progress: float = 0.7,
) -> RankedCandidate:
    return RankedCandidate(
        rank=1,
        candidate=Candidate(
            id=item_id,
            title=f"Item {item_id}",
            source_name=source,
            published_at=NOW,
            category="technology",
        ),
        scores=ItemScores(
            optimism=optimism,
            sensationalism=sensationalism,
            forward_progress=forward_progress,
            freshness=1.0,
            credibility=0.7,
            topic_fit=0.5,
            total=0.6,
        ),
        adjusted_score=0.6,
    )


def _kinds(metrics: SelectionMetrics, thresholds: CategoryThresholds) -> List[FailureKind]:
    return [reason.kind for reason in evaluate_acceptance(metrics, thresholds).failure_reasons]


def test_empty_selection_has_zero_metrics() -> None:
    metrics = aggregate_metrics([])
    assert metrics.item_count == 0
    assert metrics.source_diversity == 0
    assert metrics.avg_sensationalism == 0.0
    assert metrics.avg_optimism == 0.0
    assert metrics.forward_progress_pct == 0.0
    assert metrics.sources == []


def test_metrics_average_and_count_distinct_sources() -> None:
    metrics = aggregate_metrics(
        [
            _ranked("a", "wire", sensationalism=0.2, optimism=0.4, forward_progress=0.5),
            _ranked("b", "blog", sensationalism=0.0, optimism=0.8, forward_progress=0.49),
            _ranked("c", "wire", sensationalism=0.1, optimism=0.6, forward_progress=0.0),
            _ranked("d", "desk", sensationalism=0.1, optimism=0.2, forward_progress=1.0),
        ]
    )
    assert metrics.item_count == 4
    assert abs(metrics.avg_sensationalism - 0.1) < 1e-9
    assert abs(metrics.avg_optimism - 0.5) < 1e-9
    assert metrics.forward_progress_pct == 0.5
    assert metrics.source_diversity == 3
    assert metrics.sources == ["wire", "blog", "desk"]


def test_empty_selection_fails_in_fixed_order() -> None:
    kinds = _kinds(aggregate_metrics([]), CategoryThresholds())
    assert kinds == [FailureKind.ITEM_COUNT, FailureKind.FORWARD_PROGRESS, FailureKind.OPTIMISM]


def test_every_check_is_reported() -> None:
    metrics = SelectionMetrics(
        avg_sensationalism=0.5,
        avg_optimism=0.1,
        forward_progress_pct=0.0,
        item_count=3,
        source_diversity=1,
        sources=["wire"],
    )
    thresholds = CategoryThresholds(min_item_count=4, max_item_count=8)
    assert _kinds(metrics, thresholds) == [
        FailureKind.ITEM_COUNT,
        FailureKind.SENSATIONALISM,
        FailureKind.FORWARD_PROGRESS,
        FailureKind.OPTIMISM,
        FailureKind.SOURCE_DIVERSITY,
    ]


def test_single_source_blocks_acceptance_above_two_items() -> None:
    three = aggregate_metrics([_ranked(f"w{i}", "wire") for i in range(3)])
    verdict = evaluate_acceptance(three, CategoryThresholds())
    assert not verdict.accepted
    assert [reason.kind for reason in verdict.failure_reasons] == [FailureKind.SOURCE_DIVERSITY]
    assert "wire" in verdict.failure_reasons[0].message

    two = aggregate_metrics([_ranked(f"w{i}", "wire") for i in range(2)])
    assert _kinds(two, CategoryThresholds(min_item_count=2)) == []


def test_clean_selection_is_accepted() -> None:
    selection = [_ranked(f"i{i}", f"source{i}") for i in range(4)]
    verdict = evaluate_acceptance(aggregate_metrics(selection), CategoryThresholds())
    assert verdict.accepted
    assert verdict.failure_reasons == []


def test_failure_reason_carries_observed_and_limit() -> None:
    verdict = evaluate_acceptance(SelectionMetrics(item_count=1), CategoryThresholds(min_item_count=3))
    reason = verdict.failure_reasons[0]
    assert reason.kind == FailureKind.ITEM_COUNT
    assert reason.observed == 1.0
    assert reason.limit == 3.0
    assert str(reason) == "Item count 1 below minimum 3"
