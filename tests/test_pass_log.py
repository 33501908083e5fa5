from __future__ import annotations

import logging
from threading import Thread

import pytest

from core import CategoryThresholds, FailureKind, FailureReason, PassLog, SelectionMetrics
from curation.pass_log import LoggingPassLogSink, NullPassLogSink, PassLogSink
from orchestrator.store import InMemoryPassLogStore
from utils.exceptions import PassLogSinkError


def _entry(category: str = "crypto", pass_number: int = 1, accepted: bool = False) -> PassLog:
    return PassLog(
        category=category,
        pass_number=pass_number,
        metrics=SelectionMetrics(item_count=2, source_diversity=2, sources=["a", "b"]),
        thresholds=CategoryThresholds(),
        accepted=accepted,
        failure_reasons=[
            FailureReason(kind=FailureKind.ITEM_COUNT, observed=2.0, limit=3.0, message="Item count 2 below minimum 3")
        ],
    )


def test_sinks_satisfy_protocol() -> None:
    assert isinstance(InMemoryPassLogStore(), PassLogSink)
    assert isinstance(LoggingPassLogSink(logging.getLogger("test.audit")), PassLogSink)
    assert isinstance(NullPassLogSink(), PassLogSink)


def test_logging_sink_writes_key_value_line(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="test.audit")
    LoggingPassLogSink(logging.getLogger("test.audit")).append(_entry())

    assert "pass_log category=crypto pass=1 accepted=False items=2" in caplog.text
    assert "reasons=item_count" in caplog.text


def test_store_keeps_entries_in_pass_order() -> None:
    store = InMemoryPassLogStore()
    for number in (1, 2, 3):
        store.append(_entry(pass_number=number))
    store.append(_entry(category="ai", pass_number=1, accepted=True))

    assert [entry.pass_number for entry in store.list_entries("crypto")] == [1, 2, 3]
    assert store.get("ai", 1).accepted is True
    assert store.get("ai", 2) is None
    assert store.categories() == ["crypto", "ai"]
    assert len(store) == 4


def test_store_rejects_duplicate_keys() -> None:
    store = InMemoryPassLogStore()
    store.append(_entry())
    with pytest.raises(PassLogSinkError) as exc_info:
        store.append(_entry())
    assert exc_info.value.category == "crypto"
    assert exc_info.value.pass_number == 1


def test_store_clear_by_category() -> None:
    store = InMemoryPassLogStore()
    store.append(_entry(category="crypto"))
    store.append(_entry(category="ai"))
    store.clear("crypto")
    assert store.list_entries("crypto") == []
    assert store.categories() == ["ai"]
    store.clear()
    assert len(store) == 0


def test_store_handles_concurrent_appends() -> None:
    store = InMemoryPassLogStore()

    def _write(category: str) -> None:
        for number in range(1, 51):
            store.append(_entry(category=category, pass_number=number))

    workers = [Thread(target=_write, args=(name,)) for name in ("technology", "crypto", "ai", "business")]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(store) == 200
    for name in ("technology", "crypto", "ai", "business"):
        assert [entry.pass_number for entry in store.list_entries(name)] == list(range(1, 51))


def test_empty_store_is_truthy() -> None:
    store = InMemoryPassLogStore()
    assert len(store) == 0
    assert bool(store) is True
    assert (store or InMemoryPassLogStore()) is store
