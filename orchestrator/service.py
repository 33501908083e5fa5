"""Per-category curation runs and concurrent multi-category refreshes."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import logging
from threading import Lock
from typing import Dict, Iterable, Mapping, Optional, Sequence

from config import CategoryCatalog, get_category_catalog, get_orchestrator_settings
from config.settings import OrchestratorSettings
from core import Candidate, LoopResult
from curation.candidate_pool import has_new_qualifying_items, score_candidates, shortlist_candidates
from curation.refinement_loop import RefinementLoop
from utils.logger import setup_from_settings
from .store import InMemoryPassLogStore


logger = logging.getLogger(__name__)


def _utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class CurationStatus(str, Enum):
    SELECTED = "selected"
    KEPT_PREVIOUS = "kept_previous"
    NO_CANDIDATES = "no_candidates"
    EMPTY_SELECTION = "empty_selection"
    ERROR = "error"


@dataclass
class CurationOutcome:
    """What happened to one category during a refresh."""

    category: str
    status: CurationStatus
    result: Optional[LoopResult] = None
    pool_size: int = 0
    error: Optional[str] = None
    finished_at: str = field(default_factory=_utc_iso)


class CurationOrchestrator:
    """Shortlists candidates per category and runs the refinement loop on them."""

    def __init__(
        self,
        *,
        catalog: Optional[CategoryCatalog] = None,
        store: Optional[InMemoryPassLogStore] = None,
        settings: Optional[OrchestratorSettings] = None,
        loop: Optional[RefinementLoop] = None,
    ) -> None:
        self.catalog = catalog or get_category_catalog()
        self.store = store if store is not None else InMemoryPassLogStore()
        self.settings = settings or get_orchestrator_settings()
        self.loop = loop or RefinementLoop(catalog=self.catalog, sink=self.store)

    def curate_category(
        self,
        category: str,
        candidates: Sequence[Candidate],
        previous_item_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> CurationOutcome:
        category = str(category or "").strip().lower()
        now = now or datetime.now(timezone.utc)
        try:
            profile = self.catalog.profile(category)
            params = self.catalog.initial_params(category)
            scored = score_candidates(
                candidates,
                params=params,
                category_keywords=profile.keywords,
                now=now,
            )
            pool = shortlist_candidates(
                scored,
                params.thresholds,
                profile.companies,
                limit=self.settings.candidate_limit,
            )
            if not pool:
                logger.info("category_skipped category=%s reason=no_candidates", category)
                return CurationOutcome(category=category, status=CurationStatus.NO_CANDIDATES)

            previous = list(previous_item_ids or [])
            if previous and not has_new_qualifying_items(pool, previous, self.settings.min_new_item_total):
                logger.info("category_skipped category=%s reason=no_new_items pool=%s", category, len(pool))
                return CurationOutcome(
                    category=category,
                    status=CurationStatus.KEPT_PREVIOUS,
                    pool_size=len(pool),
                )

            # The store keeps the latest run per category.
            self.store.clear(category)
            result = self.loop.run(category, pool, now=now, params=params)
        except Exception as exc:
            logger.exception("category_failed category=%s", category)
            return CurationOutcome(category=category, status=CurationStatus.ERROR, error=str(exc))

        status = CurationStatus.SELECTED if result.selected_items else CurationStatus.EMPTY_SELECTION
        logger.info(
            "category_curated category=%s status=%s accepted=%s items=%s passes=%s",
            category,
            status.value,
            result.accepted,
            len(result.selected_items),
            result.passes_executed,
        )
        return CurationOutcome(category=category, status=status, result=result, pool_size=len(pool))

    def run_all(
        self,
        candidates_by_category: Mapping[str, Sequence[Candidate]],
        previous_ids_by_category: Optional[Mapping[str, Iterable[str]]] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, CurationOutcome]:
        """Curate every category concurrently. One failing category never stops the others."""
        now = now or datetime.now(timezone.utc)
        previous_map = dict(previous_ids_by_category or {})
        categories = list(candidates_by_category.keys())
        if not categories:
            return {}

        workers = max(1, min(int(self.settings.max_workers), len(categories)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                category: executor.submit(
                    self.curate_category,
                    category,
                    candidates_by_category[category],
                    previous_map.get(category),
                    now,
                )
                for category in categories
            }
            outcomes = {category: future.result() for category, future in futures.items()}

        logger.info(
            "refresh_complete categories=%s selected=%s errors=%s",
            len(outcomes),
            sum(1 for row in outcomes.values() if row.status == CurationStatus.SELECTED),
            sum(1 for row in outcomes.values() if row.status == CurationStatus.ERROR),
        )
        return outcomes


_DEFAULT_ORCHESTRATOR: Optional[CurationOrchestrator] = None
_DEFAULT_LOCK = Lock()


def get_default_orchestrator() -> CurationOrchestrator:
    global _DEFAULT_ORCHESTRATOR
    with _DEFAULT_LOCK:
        if _DEFAULT_ORCHESTRATOR is None:
            setup_from_settings()
            _DEFAULT_ORCHESTRATOR = CurationOrchestrator()
        return _DEFAULT_ORCHESTRATOR


def curate_all(
    candidates_by_category: Mapping[str, Sequence[Candidate]],
    previous_ids_by_category: Optional[Mapping[str, Iterable[str]]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, CurationOutcome]:
    return get_default_orchestrator().run_all(candidates_by_category, previous_ids_by_category, now)
