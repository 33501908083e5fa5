from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from core import (
    Candidate,
    FailureKind,
    FailureReason,
    LoopParams,
    LoopResult,
    LoopState,
    RankedCandidate,
    ItemScores,
    SelectionMetrics,
)


def _candidate(**overrides: object) -> Candidate:
    payload = {
        "id": "c1",
        "title": "Testnet upgrade ships",
        "source_name": "wire",
        "published_at": datetime(2026, 3, 1, 9, 0),
        "category": "crypto",
    }
    payload.update(overrides)
    return Candidate(**payload)


def test_naive_timestamps_are_read_as_utc() -> None:
    assert _candidate().published_at == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    offset = timezone(timedelta(hours=2))
    shifted = _candidate(published_at=datetime(2026, 3, 1, 11, 0, tzinfo=offset))
    assert shifted.published_at == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert shifted.published_at.tzinfo == timezone.utc


def test_candidate_requires_identity_fields() -> None:
    with pytest.raises(ValidationError):
        _candidate(id="  ")
    with pytest.raises(ValidationError):
        _candidate(source_name="")
    with pytest.raises(ValidationError):
        _candidate(credibility=1.5)


def test_candidate_is_immutable_and_text_joins_excerpt() -> None:
    candidate = _candidate(excerpt="Validators report smooth rollout")
    assert candidate.text == "Testnet upgrade ships Validators report smooth rollout"
    assert candidate.credibility == 0.5
    with pytest.raises(ValidationError):
        candidate.title = "changed"


def test_loop_result_exposes_selected_ids_in_order() -> None:
    scores = ItemScores(
        optimism=0.5,
        sensationalism=0.0,
        forward_progress=0.5,
        freshness=1.0,
        credibility=0.5,
        topic_fit=0.5,
        total=0.5,
    )
    rows = [
        RankedCandidate(rank=index + 1, candidate=_candidate(id=item_id), scores=scores, adjusted_score=0.5)
        for index, item_id in enumerate(["z", "a", "m"])
    ]
    result = LoopResult(
        category="crypto",
        accepted=True,
        pass_number=1,
        passes_executed=1,
        state=LoopState.ACCEPTED,
        metrics=SelectionMetrics(item_count=3),
        selected_items=rows,
        final_params=LoopParams(),
    )
    assert result.selected_ids == ["z", "a", "m"]


def test_failure_reason_renders_its_message() -> None:
    reason = FailureReason(kind=FailureKind.OPTIMISM, observed=0.1, limit=0.3, message="Avg optimism 0.100 below min 0.3")
    assert str(reason) == "Avg optimism 0.100 below min 0.3"
    assert reason.kind.value == "optimism"


def test_default_weights_sum_to_one() -> None:
    assert abs(LoopParams().weights.total() - 1.0) < 1e-9
