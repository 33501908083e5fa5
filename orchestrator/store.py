"""In-memory pass log store shared by concurrent category loops."""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional, Tuple

from core import PassLog
from utils.exceptions import PassLogSinkError


class InMemoryPassLogStore:
    """Thread-safe, append-only store keyed by (category, pass_number)."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[str, int], PassLog] = {}
        self._order: Dict[str, List[int]] = {}
        self._lock = Lock()

    def append(self, entry: PassLog) -> None:
        key = (entry.category, int(entry.pass_number))
        with self._lock:
            if key in self._entries:
                raise PassLogSinkError(
                    "Pass log entry already recorded",
                    category=entry.category,
                    pass_number=entry.pass_number,
                )
            self._entries[key] = entry
            self._order.setdefault(entry.category, []).append(int(entry.pass_number))

    def list_entries(self, category: str) -> List[PassLog]:
        with self._lock:
            return [self._entries[(category, number)] for number in self._order.get(category, [])]

    def get(self, category: str, pass_number: int) -> Optional[PassLog]:
        with self._lock:
            return self._entries.get((category, int(pass_number)))

    def categories(self) -> List[str]:
        with self._lock:
            return list(self._order.keys())

    def clear(self, category: Optional[str] = None) -> None:
        with self._lock:
            if category is None:
                self._entries.clear()
                self._order.clear()
                return
            for number in self._order.pop(category, []):
                self._entries.pop((category, number), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __bool__(self) -> bool:
        # An empty store is still a usable sink.
        return True
