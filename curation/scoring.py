"""Lexicon scoring for candidate items."""

from __future__ import annotations

from datetime import datetime, timezone
import math
import re
from typing import Iterable, Sequence

from core import Candidate, ItemScores, ScoringPenalties, ScoringWeights


SENSATIONAL_WORDS = (
    "breaking",
    "urgent",
    "shocking",
    "devastating",
    "catastrophic",
    "explosive",
    "bombshell",
    "slam",
    "destroy",
    "annihilate",
    "chaos",
    "crisis",
    "panic",
    "doom",
    "disaster",
    "nightmare",
    "insane",
    "crazy",
    "unbelievable",
    "massive",
    "huge",
    "epic",
    "terrifying",
    "horrifying",
    "outrage",
    "furious",
    "scandal",
    "controversy",
    "war",
    "battle",
    "fight",
    "clash",
)

OPTIMISM_WORDS = (
    "launch",
    "release",
    "announce",
    "introduce",
    "unveil",
    "breakthrough",
    "discover",
    "achieve",
    "succeed",
    "improve",
    "grow",
    "expand",
    "advance",
    "progress",
    "develop",
    "innovate",
    "partnership",
    "collaborate",
    "invest",
    "fund",
    "support",
    "milestone",
    "record",
    "first",
    "new",
    "next",
    "future",
    "solution",
    "solve",
    "fix",
    "upgrade",
    "enhance",
    "optimize",
)

FORWARD_PROGRESS_WORDS = (
    "release",
    "launch",
    "prototype",
    "research",
    "discovery",
    "development",
    "update",
    "version",
    "beta",
    "alpha",
    "preview",
    "mainnet",
    "testnet",
    "upgrade",
    "deploy",
    "ship",
    "rollout",
    "funding",
    "raised",
    "acquisition",
    "merger",
    "partnership",
    "milestone",
    "achievement",
    "breakthrough",
    "innovation",
)

# ~12 hour half-life.
FRESHNESS_DECAY_HOURS = 17.3

_WORD_RE = re.compile(r"[A-Za-z0-9]+")
_ACRONYM_RE = re.compile(r"[A-Z]{2,5}")


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def contains_term(text: str, term: str) -> bool:
    payload = re.sub(r"[-_/]+", " ", str(text or "").lower())
    token = str(term or "").strip().lower()
    if not payload or not token:
        return False
    pattern = r"\b" + re.escape(token).replace(r"\ ", r"[\s\-_]+") + r"\b"
    return re.search(pattern, payload) is not None


def count_term_hits(text: str, terms: Iterable[str]) -> int:
    """Number of distinct terms present in text. Repeats of one term count once."""
    seen = set()
    hits = 0
    for term in terms:
        key = str(term or "").strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        if contains_term(text, key):
            hits += 1
    return hits


def _shouted_words(text: str) -> int:
    count = 0
    for word in _WORD_RE.findall(str(text or "")):
        if len(word) > 3 and word.isupper() and not _ACRONYM_RE.fullmatch(word):
            count += 1
    return count


def sensationalism_score(text: str) -> float:
    raw = count_term_hits(text, SENSATIONAL_WORDS)
    raw += 0.5 * _shouted_words(text)
    raw += 0.3 * str(text or "").count("!")
    return _clamp01(raw / 5.0)


def optimism_score(text: str) -> float:
    return _clamp01(count_term_hits(text, OPTIMISM_WORDS) / 4.0)


def forward_progress_score(text: str) -> float:
    return _clamp01(count_term_hits(text, FORWARD_PROGRESS_WORDS) / 3.0)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def freshness_score(published_at: datetime, now: datetime) -> float:
    age_hours = (_as_utc(now) - _as_utc(published_at)).total_seconds() / 3600.0
    if age_hours <= 0:
        return 1.0
    return _clamp01(math.exp(-age_hours / FRESHNESS_DECAY_HOURS))


def topic_fit_score(text: str, category_keywords: Sequence[str]) -> float:
    keywords = [str(term) for term in list(category_keywords or []) if str(term or "").strip()]
    if not keywords:
        return 0.5
    return _clamp01(count_term_hits(text, keywords) / 3.0)


def adjusted_score(scores: ItemScores, weights: ScoringWeights, penalties: ScoringPenalties) -> float:
    """Blend stored component scores with live weights and penalties."""
    value = (
        scores.optimism * weights.optimism
        + scores.forward_progress * weights.forward_progress
        + scores.credibility * weights.credibility
        + scores.freshness * weights.freshness
        + scores.topic_fit * weights.topic_fit
        - scores.sensationalism * penalties.sensationalism
    )
    return _clamp01(value)


def score_candidate(
    candidate: Candidate,
    *,
    weights: ScoringWeights,
    penalties: ScoringPenalties,
    category_keywords: Sequence[str],
    now: datetime,
) -> ItemScores:
    """
    Compute all component scores and the weighted total for one candidate.

    Pure: the same candidate, parameters and ``now`` always give the same scores.
    """
    text = f"{candidate.title} {candidate.excerpt or ''}"
    partial = ItemScores(
        optimism=optimism_score(text),
        sensationalism=sensationalism_score(text),
        forward_progress=forward_progress_score(text),
        freshness=freshness_score(candidate.published_at, now),
        credibility=_clamp01(candidate.credibility),
        topic_fit=topic_fit_score(text, category_keywords),
        total=0.0,
    )
    return partial.model_copy(update={"total": adjusted_score(partial, weights, penalties)})
