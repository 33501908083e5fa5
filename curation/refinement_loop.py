"""Select, evaluate and adjust until a category's selection is accepted."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import time
from typing import Callable, List, Optional, Sequence, Union

from config import CategoryCatalog, get_category_catalog, get_loop_settings, validate_loop_params
from core import (
    Adjustment,
    Candidate,
    FailureReason,
    LoopParams,
    LoopResult,
    LoopState,
    PassLog,
    RankedCandidate,
    ScoredCandidate,
    SelectionMetrics,
)
from curation.adjustor import ParameterAdjustor, apply_adjustments
from curation.evaluation import aggregate_metrics, evaluate_acceptance
from curation.pass_log import PassLogSink
from curation.scoring import score_candidate
from curation.selector import select_items


logger = logging.getLogger(__name__)

CandidateInput = Union[Candidate, ScoredCandidate]


@dataclass
class _PassSnapshot:
    pass_number: int
    metrics: SelectionMetrics
    selection: List[RankedCandidate]
    failure_reasons: List[FailureReason]
    adjustments: List[Adjustment] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefinementLoop:
    """
    Bounded refinement of one category's selection.

    Passes run strictly in order. Each pass selects with the current
    parameter snapshot, evaluates the selection, reports a PassLog entry,
    and either accepts or derives the next snapshot from the adjustor.
    When the pass budget or deadline runs out, the selection with the
    lowest average sensationalism is returned unaccepted.
    """

    def __init__(
        self,
        *,
        catalog: Optional[CategoryCatalog] = None,
        max_passes: Optional[int] = None,
        adjustment_step: Optional[float] = None,
        deadline_seconds: Optional[float] = None,
        sink: Optional[PassLogSink] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = get_loop_settings()
        self.catalog = catalog or get_category_catalog()
        self.max_passes = settings.max_passes if max_passes is None else max_passes
        self.adjustment_step = settings.adjustment_step if adjustment_step is None else adjustment_step
        self.deadline_seconds = settings.deadline_seconds if deadline_seconds is None else deadline_seconds
        self.sink = sink
        self._clock = clock

    def _initial_params(self, category: str, params: Optional[LoopParams]) -> LoopParams:
        resolved = params if params is not None else self.catalog.initial_params(category)
        validate_loop_params(
            resolved,
            max_passes=self.max_passes,
            adjustment_step=self.adjustment_step,
        )
        return resolved

    def _score_pool(
        self,
        category: str,
        candidates: Sequence[CandidateInput],
        params: LoopParams,
        now: datetime,
    ) -> List[ScoredCandidate]:
        keywords = self.catalog.profile(category).keywords if self.catalog.categories else []
        pool: List[ScoredCandidate] = []
        for row in list(candidates or []):
            if isinstance(row, ScoredCandidate):
                pool.append(row)
                continue
            scores = score_candidate(
                row,
                weights=params.weights,
                penalties=params.penalties,
                category_keywords=keywords,
                now=now,
            )
            pool.append(ScoredCandidate(candidate=row, scores=scores))
        return pool

    def _emit(self, entry: PassLog) -> None:
        if self.sink is None:
            return
        try:
            self.sink.append(entry)
        except Exception:
            logger.exception(
                "pass_log_sink_failed category=%s pass=%s",
                entry.category,
                entry.pass_number,
            )

    def _enter(self, category: str, pass_number: int, state: LoopState) -> LoopState:
        logger.debug("loop_state category=%s pass=%s state=%s", category, pass_number, state.value)
        return state

    def run(
        self,
        category: str,
        candidates: Sequence[CandidateInput],
        *,
        now: Optional[datetime] = None,
        params: Optional[LoopParams] = None,
    ) -> LoopResult:
        category = str(category or "").strip().lower()
        self._enter(category, 0, LoopState.INIT)
        current = self._initial_params(category, params)
        now = now or _utcnow()
        pool = self._score_pool(category, candidates, current, now)
        adjustor = ParameterAdjustor(step=self.adjustment_step)

        deadline: Optional[float] = None
        if self.deadline_seconds is not None:
            deadline = self._clock() + float(self.deadline_seconds)

        logger.debug(
            "loop_start category=%s candidates=%s max_passes=%s",
            category,
            len(pool),
            self.max_passes,
        )

        best: Optional[_PassSnapshot] = None
        executed = 0
        for pass_number in range(1, int(self.max_passes) + 1):
            if deadline is not None and self._clock() >= deadline:
                logger.warning("loop_deadline category=%s passes=%s", category, executed)
                break

            self._enter(category, pass_number, LoopState.SELECTING)
            selection = select_items(pool, current)
            metrics = aggregate_metrics(selection)
            self._enter(category, pass_number, LoopState.EVALUATING)
            verdict = evaluate_acceptance(metrics, current.thresholds)
            executed = pass_number

            self._emit(
                PassLog(
                    category=category,
                    pass_number=pass_number,
                    metrics=metrics,
                    thresholds=current.thresholds,
                    accepted=verdict.accepted,
                    failure_reasons=verdict.failure_reasons,
                )
            )
            logger.debug(
                "pass_evaluated category=%s pass=%s accepted=%s items=%s reasons=%s",
                category,
                pass_number,
                verdict.accepted,
                metrics.item_count,
                ",".join(reason.kind.value for reason in verdict.failure_reasons) or "-",
            )

            if verdict.accepted:
                logger.info(
                    "loop_accepted category=%s pass=%s items=%s",
                    category,
                    pass_number,
                    metrics.item_count,
                )
                return LoopResult(
                    category=category,
                    accepted=True,
                    pass_number=pass_number,
                    passes_executed=executed,
                    state=self._enter(category, pass_number, LoopState.ACCEPTED),
                    metrics=metrics,
                    adjustments=[],
                    failure_reasons=[],
                    selected_items=selection,
                    final_params=current,
                )

            self._enter(category, pass_number, LoopState.ADJUSTING)
            adjustments = adjustor.propose(metrics, current, verdict.failure_reasons, pass_number)
            if best is None or metrics.avg_sensationalism < best.metrics.avg_sensationalism:
                best = _PassSnapshot(
                    pass_number=pass_number,
                    metrics=metrics,
                    selection=selection,
                    failure_reasons=list(verdict.failure_reasons),
                    adjustments=adjustments,
                )
            current = apply_adjustments(current, adjustments)

        if best is None:
            best = _PassSnapshot(pass_number=0, metrics=SelectionMetrics(), selection=[], failure_reasons=[])

        logger.info(
            "loop_exhausted category=%s passes=%s best_pass=%s items=%s",
            category,
            executed,
            best.pass_number,
            best.metrics.item_count,
        )
        return LoopResult(
            category=category,
            accepted=False,
            pass_number=best.pass_number,
            passes_executed=executed,
            state=self._enter(category, executed, LoopState.EXHAUSTED),
            metrics=best.metrics,
            adjustments=best.adjustments,
            failure_reasons=best.failure_reasons,
            selected_items=best.selection,
            final_params=current,
        )


def run_refinement_loop(
    category: str,
    candidates: Sequence[CandidateInput],
    *,
    now: Optional[datetime] = None,
    params: Optional[LoopParams] = None,
    catalog: Optional[CategoryCatalog] = None,
    max_passes: Optional[int] = None,
    adjustment_step: Optional[float] = None,
    deadline_seconds: Optional[float] = None,
    sink: Optional[PassLogSink] = None,
) -> LoopResult:
    """Run one category's loop. Stateless across calls."""
    loop = RefinementLoop(
        catalog=catalog,
        max_passes=max_passes,
        adjustment_step=adjustment_step,
        deadline_seconds=deadline_seconds,
        sink=sink,
    )
    return loop.run(category, candidates, now=now, params=params)
