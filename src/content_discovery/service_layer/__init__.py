"""Service layer - search use cases over the repository adapters."""

from .orchestrator import SearchOrchestrator
from .search_service import ContentSearchService
from .validator import ResultValidator


__all__ = [
    "ContentSearchService",
    "ResultValidator",
    "SearchOrchestrator",
]
