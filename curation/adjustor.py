"""Parameter nudges proposed from structured acceptance failures."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from core import (
    SENSATIONALISM_CEILING,
    Adjustment,
    AdjustmentKind,
    FailureKind,
    FailureReason,
    LoopParams,
    ScoringWeights,
    SelectionMetrics,
)


logger = logging.getLogger(__name__)


PENALTY_SENSATIONALISM_CAP = 1.0
WEIGHT_FORWARD_PROGRESS_CAP = 0.5
WEIGHT_OPTIMISM_CAP = 0.5
WEIGHT_CREDIBILITY_CAP = 0.4
WEIGHT_FRESHNESS_CAP = 0.3
MIN_OPTIMISM_FLOOR = 0.2
OPTIMISM_RELAX_AFTER_PASS = 10
FALLBACK_AFTER_PASS = 5


class ParameterAdjustor:
    """Maps each failure kind to a fixed-step parameter nudge."""

    def __init__(self, step: float = 0.05) -> None:
        self.step = float(step)

    def propose(
        self,
        metrics: SelectionMetrics,
        params: LoopParams,
        failure_reasons: Sequence[FailureReason],
        pass_number: int,
    ) -> List[Adjustment]:
        step = self.step
        weights = params.weights
        thresholds = params.thresholds
        adjustments: List[Adjustment] = []

        for reason in list(failure_reasons or []):
            if reason.kind == FailureKind.SENSATIONALISM:
                old = params.penalties.sensationalism
                adjustments.append(
                    Adjustment(
                        kind=AdjustmentKind.PENALTY,
                        field="sensationalism",
                        old_value=old,
                        new_value=min(PENALTY_SENSATIONALISM_CAP, old + step),
                        reason="Reduce sensationalism by increasing penalty",
                    )
                )
            elif reason.kind == FailureKind.FORWARD_PROGRESS:
                old = weights.forward_progress
                adjustments.append(
                    Adjustment(
                        kind=AdjustmentKind.WEIGHT,
                        field="forward_progress",
                        old_value=old,
                        new_value=min(WEIGHT_FORWARD_PROGRESS_CAP, old + step),
                        reason="Prioritize forward-progress items",
                    )
                )
            elif reason.kind == FailureKind.OPTIMISM:
                old = weights.optimism
                adjustments.append(
                    Adjustment(
                        kind=AdjustmentKind.WEIGHT,
                        field="optimism",
                        old_value=old,
                        new_value=min(WEIGHT_OPTIMISM_CAP, old + step),
                        reason="Prioritize optimistic items",
                    )
                )
                if pass_number > OPTIMISM_RELAX_AFTER_PASS:
                    old_floor = thresholds.min_optimism
                    adjustments.append(
                        Adjustment(
                            kind=AdjustmentKind.THRESHOLD,
                            field="min_optimism",
                            old_value=old_floor,
                            new_value=max(MIN_OPTIMISM_FLOOR, old_floor - step * 0.5),
                            reason="Slightly relax optimism minimum to get more candidates",
                        )
                    )
            elif reason.kind == FailureKind.SOURCE_DIVERSITY:
                old = weights.credibility
                adjustments.append(
                    Adjustment(
                        kind=AdjustmentKind.WEIGHT,
                        field="credibility",
                        old_value=old,
                        new_value=min(WEIGHT_CREDIBILITY_CAP, old + step),
                        reason="Prioritize primary sources for diversity",
                    )
                )
            elif reason.kind == FailureKind.ITEM_COUNT:
                old = thresholds.max_sensationalism
                if old < SENSATIONALISM_CEILING:
                    adjustments.append(
                        Adjustment(
                            kind=AdjustmentKind.THRESHOLD,
                            field="max_sensationalism",
                            old_value=old,
                            new_value=min(SENSATIONALISM_CEILING, old + step * 0.5),
                            reason="Slightly relax sensationalism to get more items (within strict cap)",
                        )
                    )

        if not adjustments and pass_number > FALLBACK_AFTER_PASS:
            old = weights.freshness
            adjustments.append(
                Adjustment(
                    kind=AdjustmentKind.WEIGHT,
                    field="freshness",
                    old_value=old,
                    new_value=min(WEIGHT_FRESHNESS_CAP, old + step),
                    reason="Progressive: prioritize fresher items",
                )
            )

        logger.debug(
            "adjustments_proposed pass=%s count=%s fields=%s",
            pass_number,
            len(adjustments),
            ",".join(item.field for item in adjustments),
        )
        return adjustments


def renormalize_weights(weights: ScoringWeights) -> ScoringWeights:
    """Scale weights to sum to 1. A non-positive sum keeps the prior weights."""
    total = weights.total()
    if not total > 0.0:
        return weights
    values = weights.model_dump()
    return ScoringWeights(**{name: value / total for name, value in values.items()})


def apply_adjustments(params: LoopParams, adjustments: Sequence[Adjustment]) -> LoopParams:
    """Return a new snapshot with the adjustments applied and weights renormalized."""
    updates: Dict[AdjustmentKind, Dict[str, float]] = {
        AdjustmentKind.WEIGHT: {},
        AdjustmentKind.THRESHOLD: {},
        AdjustmentKind.PENALTY: {},
    }
    for item in list(adjustments or []):
        updates[item.kind][item.field] = item.new_value

    weights = params.weights.model_copy(update=updates[AdjustmentKind.WEIGHT])
    thresholds = params.thresholds.model_copy(update=updates[AdjustmentKind.THRESHOLD])
    penalties = params.penalties.model_copy(update=updates[AdjustmentKind.PENALTY])

    if thresholds.max_sensationalism > SENSATIONALISM_CEILING:
        thresholds = thresholds.model_copy(update={"max_sensationalism": SENSATIONALISM_CEILING})

    return LoopParams(
        weights=renormalize_weights(weights),
        thresholds=thresholds,
        penalties=penalties,
    )
