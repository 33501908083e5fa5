"""Audit sinks for per-pass log entries."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from core import PassLog
from utils.logger import get_audit_logger


@runtime_checkable
class PassLogSink(Protocol):
    """Receives one entry per (category, pass_number). Fire-and-forget."""

    def append(self, entry: PassLog) -> None:
        ...


class LoggingPassLogSink:
    """Writes each entry to the audit logger as a key=value line."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self._logger = logger or get_audit_logger()
        self._level = level

    def append(self, entry: PassLog) -> None:
        metrics = entry.metrics
        self._logger.log(
            self._level,
            "pass_log category=%s pass=%s accepted=%s items=%s avg_sensationalism=%.3f "
            "avg_optimism=%.3f forward_progress_pct=%.3f sources=%s max_sensationalism=%s reasons=%s",
            entry.category,
            entry.pass_number,
            entry.accepted,
            metrics.item_count,
            metrics.avg_sensationalism,
            metrics.avg_optimism,
            metrics.forward_progress_pct,
            metrics.source_diversity,
            entry.thresholds.max_sensationalism,
            "|".join(reason.kind.value for reason in entry.failure_reasons) or "-",
        )


class NullPassLogSink:
    def append(self, entry: PassLog) -> None:
        return None

