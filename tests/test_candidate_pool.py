from __future__ import annotations

from datetime import datetime, timezone

from core import Candidate, CategoryThresholds, ItemScores, LoopParams, ScoredCandidate
from curation.candidate_pool import (
    has_new_qualifying_items,
    mentions_company,
    score_candidates,
    shortlist_candidates,
)


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _scored(item_id: str, total: float, title: str = "Quarterly update") -> ScoredCandidate:
    return ScoredCandidate(
        candidate=Candidate(
            id=item_id,
            title=title,
            source_name="wire",
            published_at=NOW,
            category="business",
        ),
        scores=ItemScores(
            optimism=0.5,
            sensationalism=0.0,
            forward_progress=0.5,
            freshness=1.0,
            credibility=0.5,
            topic_fit=0.5,
            total=total,
        ),
    )


def test_score_candidates_scores_every_item() -> None:
    candidates = [
        Candidate(id="a", title="Nvidia ships new chip", source_name="wire", published_at=NOW, category="technology"),
        Candidate(id="b", title="Markets drift", source_name="desk", published_at=NOW, category="technology"),
    ]
    scored = score_candidates(candidates, params=LoopParams(), category_keywords=["chip"], now=NOW)
    assert [row.id for row in scored] == ["a", "b"]
    assert scored[0].scores.topic_fit > scored[1].scores.topic_fit


def test_shortlist_drops_non_positive_and_sorts_by_total() -> None:
    pool = [_scored("low", 0.2), _scored("zero", 0.0), _scored("high", 0.8), _scored("mid", 0.5)]
    shortlist = shortlist_candidates(pool, CategoryThresholds())
    assert [row.id for row in shortlist] == ["high", "mid", "low"]


def test_shortlist_applies_limit() -> None:
    pool = [_scored(f"i{i:02d}", 0.1 + i * 0.01) for i in range(60)]
    shortlist = shortlist_candidates(pool, CategoryThresholds(), limit=50)
    assert len(shortlist) == 50
    assert shortlist[0].id == "i59"


def test_company_match_filters_when_required() -> None:
    pool = [
        _scored("named", 0.6, "Microsoft reports record cloud revenue"),
        _scored("anonymous", 0.9, "Retailers expect steady holiday demand"),
    ]
    strict = CategoryThresholds(require_company_match=True)

    assert [row.id for row in shortlist_candidates(pool, strict, ["Microsoft", "Apple"])] == ["named"]
    assert [row.id for row in shortlist_candidates(pool, CategoryThresholds(), ["Microsoft"])] == ["anonymous", "named"]
    assert len(shortlist_candidates(pool, strict, [])) == 2


def test_mentions_company_is_whole_word() -> None:
    assert mentions_company("Berkshire Hathaway raises stake", ["Berkshire Hathaway"])
    assert not mentions_company("Metadata standards evolve", ["Meta"])


def test_new_qualifying_items_detection() -> None:
    pool = [_scored("kept", 0.9), _scored("new-weak", 0.4), _scored("new-strong", 0.7)]
    assert has_new_qualifying_items(pool, ["kept"])
    assert not has_new_qualifying_items(pool, ["kept", "new-strong"])
    assert not has_new_qualifying_items([], [])
