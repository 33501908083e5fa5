"""
Category Catalog
Per-category thresholds, topic keywords and company lists, plus validation
of the parameter snapshot a refinement loop starts from.
"""
from __future__ import annotations

import json
import logging
import math
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from core import (
    SENSATIONALISM_CEILING,
    CategoryThresholds,
    LoopParams,
    ScoringPenalties,
    ScoringWeights,
)
from utils.exceptions import ConfigurationError

from .settings import get_catalog_settings


logger = logging.getLogger(__name__)


class CategoryProfile(BaseModel):
    """Defaults for one category"""

    thresholds: CategoryThresholds = Field(default_factory=CategoryThresholds)
    keywords: List[str] = Field(default_factory=list)
    companies: List[str] = Field(default_factory=list)


class CategoryCatalog(BaseModel):
    """Shared scoring defaults plus every category profile"""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    penalties: ScoringPenalties = Field(default_factory=ScoringPenalties)
    categories: Dict[str, CategoryProfile] = Field(default_factory=dict)
    default_category: str = "technology"

    def names(self) -> List[str]:
        return list(self.categories.keys())

    def profile(self, category: str) -> CategoryProfile:
        key = str(category or "").strip().lower()
        found = self.categories.get(key)
        if found is not None:
            return found
        fallback = self.categories.get(self.default_category)
        if fallback is None:
            raise ConfigurationError(
                "No profile for category and no default profile",
                {"category": key, "default_category": self.default_category},
            )
        logger.warning("category_fallback category=%s default=%s", key, self.default_category)
        return fallback

    def initial_params(self, category: str) -> LoopParams:
        """Validated starting parameters for a category run."""
        params = LoopParams(
            weights=self.weights,
            thresholds=self.profile(category).thresholds,
            penalties=self.penalties,
        )
        validate_loop_params(params)
        return params


DEFAULT_CATEGORY_PROFILES: Dict[str, CategoryProfile] = {
    "technology": CategoryProfile(
        thresholds=CategoryThresholds(
            target_item_count=5,
            min_item_count=3,
            max_item_count=8,
            max_sensationalism=0.3,
            min_optimism=0.3,
            min_forward_progress_pct=0.4,
            max_same_source_items=2,
        ),
        keywords=[
            "software",
            "hardware",
            "chip",
            "semiconductor",
            "cloud",
            "device",
            "app",
            "platform",
            "startup",
            "open source",
            "developer",
            "robotics",
        ],
    ),
    "crypto": CategoryProfile(
        thresholds=CategoryThresholds(
            target_item_count=5,
            min_item_count=3,
            max_item_count=8,
            max_sensationalism=0.25,
            min_optimism=0.3,
            min_forward_progress_pct=0.4,
            max_same_source_items=2,
        ),
        keywords=[
            "bitcoin",
            "ethereum",
            "blockchain",
            "crypto",
            "token",
            "defi",
            "stablecoin",
            "wallet",
            "layer 2",
            "mainnet",
            "staking",
            "protocol",
        ],
    ),
    "ai": CategoryProfile(
        thresholds=CategoryThresholds(
            target_item_count=5,
            min_item_count=3,
            max_item_count=8,
            max_sensationalism=0.3,
            min_optimism=0.35,
            min_forward_progress_pct=0.5,
            max_same_source_items=2,
        ),
        keywords=[
            "ai",
            "artificial intelligence",
            "machine learning",
            "model",
            "llm",
            "neural",
            "inference",
            "training",
            "agent",
            "dataset",
            "benchmark",
            "research",
        ],
    ),
    "business": CategoryProfile(
        thresholds=CategoryThresholds(
            target_item_count=5,
            min_item_count=3,
            max_item_count=8,
            max_sensationalism=0.3,
            min_optimism=0.25,
            min_forward_progress_pct=0.3,
            max_same_source_items=2,
            require_company_match=True,
        ),
        keywords=[
            "earnings",
            "revenue",
            "company",
            "acquisition",
            "merger",
            "ceo",
            "quarterly",
            "profit",
            "investment",
            "market share",
            "ipo",
            "growth",
        ],
        companies=[
            "Apple",
            "Microsoft",
            "Alphabet",
            "Google",
            "Amazon",
            "Nvidia",
            "Meta",
            "Tesla",
            "Berkshire Hathaway",
            "JPMorgan",
            "Visa",
            "Walmart",
            "OpenAI",
            "SpaceX",
            "Stripe",
            "Databricks",
        ],
    ),
    "market_movements": CategoryProfile(
        thresholds=CategoryThresholds(
            target_item_count=4,
            min_item_count=2,
            max_item_count=6,
            max_sensationalism=0.25,
            min_optimism=0.2,
            min_forward_progress_pct=0.25,
            max_same_source_items=2,
        ),
        keywords=[
            "stocks",
            "index",
            "nasdaq",
            "s&p 500",
            "dow",
            "bond",
            "yield",
            "futures",
            "treasury",
            "inflation",
            "rates",
            "commodities",
        ],
    ),
}


def default_catalog() -> CategoryCatalog:
    return CategoryCatalog(
        weights=ScoringWeights(),
        penalties=ScoringPenalties(),
        categories={name: profile.model_copy(deep=True) for name, profile in DEFAULT_CATEGORY_PROFILES.items()},
        default_category=get_catalog_settings().default_category,
    )


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", str(key)).lower()


def _snake_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {_snake(key): value for key, value in dict(payload or {}).items()}


def _category_profile(payload: Mapping[str, Any]) -> CategoryProfile:
    data = _snake_keys(payload)
    keywords = [str(value) for value in list(data.pop("keywords", []) or []) if str(value).strip()]
    companies = [str(value) for value in list(data.pop("companies", []) or []) if str(value).strip()]
    nested = data.pop("thresholds", None)
    thresholds = _snake_keys(nested) if isinstance(nested, Mapping) else data
    return CategoryProfile(
        thresholds=CategoryThresholds(**thresholds),
        keywords=keywords,
        companies=companies,
    )


def catalog_from_payload(payload: Mapping[str, Any]) -> CategoryCatalog:
    """
    Build a catalog from the thresholds.json layout.

    Keys may be camelCase. Categories missing from the payload keep their
    built-in defaults.
    """
    data = dict(payload or {})
    scoring = dict(data.get("scoring") or {})
    base = default_catalog()
    try:
        weights = ScoringWeights(**_snake_keys(scoring["weights"])) if scoring.get("weights") else base.weights
        penalties = (
            ScoringPenalties(**_snake_keys(scoring["penalties"])) if scoring.get("penalties") else base.penalties
        )
        categories = dict(base.categories)
        for name, raw in dict(data.get("categories") or {}).items():
            categories[str(name).strip().lower()] = _category_profile(dict(raw or {}))
    except ValidationError as exc:
        raise ConfigurationError("Invalid category catalog", {"errors": exc.errors(include_url=False)}) from exc

    default_category = str(data.get("defaultCategory") or data.get("default_category") or base.default_category)
    return CategoryCatalog(
        weights=weights,
        penalties=penalties,
        categories=categories,
        default_category=default_category.strip().lower(),
    )


def load_category_catalog(path: Optional[Union[str, Path]] = None) -> CategoryCatalog:
    """Load a catalog from JSON. Without a path the built-in defaults are used."""
    if path is None:
        return default_catalog()
    file_path = Path(path)
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError("Category catalog file not found", {"path": str(file_path)}) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError("Category catalog is not valid JSON", {"path": str(file_path), "error": str(exc)}) from exc
    if not isinstance(payload, dict):
        raise ConfigurationError("Category catalog must be a JSON object", {"path": str(file_path)})
    catalog = catalog_from_payload(payload)
    logger.info("catalog_loaded path=%s categories=%s", file_path, ",".join(catalog.names()))
    return catalog


@lru_cache()
def get_category_catalog() -> CategoryCatalog:
    """Catalog from CURATION_CATALOG_PATH, or the built-in defaults."""
    return load_category_catalog(get_catalog_settings().path)


def validate_loop_params(
    params: LoopParams,
    *,
    max_passes: Optional[int] = None,
    adjustment_step: Optional[float] = None,
) -> None:
    """Reject malformed starting parameters before any pass runs."""
    weights = params.weights.model_dump()
    for name, value in weights.items():
        if not math.isfinite(value) or value < 0.0:
            raise ConfigurationError("Scoring weight must be a finite non-negative number", {"field": name, "value": value})
    weight_sum = params.weights.total()
    if weight_sum <= 0.0:
        raise ConfigurationError("Scoring weights must sum to a positive value", {"sum": weight_sum})

    for name, value in params.penalties.model_dump().items():
        if not math.isfinite(value) or value < 0.0:
            raise ConfigurationError("Scoring penalty must be a finite non-negative number", {"field": name, "value": value})

    thresholds = params.thresholds
    if thresholds.min_item_count > thresholds.max_item_count:
        raise ConfigurationError(
            "min_item_count exceeds max_item_count",
            {"min_item_count": thresholds.min_item_count, "max_item_count": thresholds.max_item_count},
        )
    if thresholds.target_item_count < 1 or thresholds.target_item_count > thresholds.max_item_count:
        raise ConfigurationError(
            "target_item_count must be within [1, max_item_count]",
            {"target_item_count": thresholds.target_item_count, "max_item_count": thresholds.max_item_count},
        )
    if thresholds.max_same_source_items < 1:
        raise ConfigurationError(
            "max_same_source_items must be at least 1",
            {"max_same_source_items": thresholds.max_same_source_items},
        )
    if not 0.0 <= thresholds.max_sensationalism <= SENSATIONALISM_CEILING:
        raise ConfigurationError(
            "max_sensationalism must be within [0, ceiling]",
            {"max_sensationalism": thresholds.max_sensationalism, "ceiling": SENSATIONALISM_CEILING},
        )
    for name in ("min_optimism", "min_forward_progress_pct"):
        value = float(getattr(thresholds, name))
        if not 0.0 <= value <= 1.0:
            raise ConfigurationError(f"{name} must be within [0, 1]", {name: value})

    if max_passes is not None and int(max_passes) < 1:
        raise ConfigurationError("max_passes must be at least 1", {"max_passes": max_passes})
    if adjustment_step is not None and not (math.isfinite(adjustment_step) and adjustment_step > 0.0):
        raise ConfigurationError("adjustment_step must be positive", {"adjustment_step": adjustment_step})
