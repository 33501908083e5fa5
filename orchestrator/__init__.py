"""Multi-category curation orchestration."""

from .service import (
    CurationOrchestrator,
    CurationOutcome,
    CurationStatus,
    curate_all,
    get_default_orchestrator,
)
from .store import InMemoryPassLogStore

__all__ = [
    "CurationOrchestrator",
    "CurationOutcome",
    "CurationStatus",
    "InMemoryPassLogStore",
    "curate_all",
    "get_default_orchestrator",
]
