"""Search service orchestration layer.

Combines path-candidate generation, strategy orchestration and result
validation behind a single ``search`` call for the MCP tools.
"""

from __future__ import annotations

import logging

from content_discovery.adapters.repository import AbstractRepositoryClient
from content_discovery.config import Settings
from content_discovery.domain.search import PathCandidate, SearchOutcome, SearchQuery, build_query
from content_discovery.observability import SEARCH_LATENCY, bind_search_context, create_span
from content_discovery.observability.metrics import track_latency
from content_discovery.search.locales import LocaleConfig, PathCandidateGenerator
from content_discovery.service_layer.orchestrator import SearchOrchestrator
from content_discovery.service_layer.validator import ResultValidator


logger = logging.getLogger(__name__)


class ContentSearchService:
    """High-level content search service.

    Each call builds its own candidates, variants and report, so one service
    instance can serve concurrent searches.
    """

    def __init__(
        self,
        client: AbstractRepositoryClient,
        *,
        locale_config: LocaleConfig | None = None,
        max_concurrency: int = 8,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize search service with dependencies.

        Args:
            client: Repository client used for probes and listings
            locale_config: Locale structure conventions (defaults when omitted)
            max_concurrency: Maximum concurrent repository calls per search
            request_timeout: Per-call timeout in seconds (None disables)
        """
        self.client = client
        self.generator = PathCandidateGenerator(
            client,
            locale_config,
            max_concurrency=max_concurrency,
            probe_timeout=request_timeout,
        )
        self.orchestrator = SearchOrchestrator(
            client,
            self.generator,
            max_concurrency=max_concurrency,
            request_timeout=request_timeout,
        )
        self.validator = ResultValidator(self.orchestrator)

    @classmethod
    def from_settings(cls, client: AbstractRepositoryClient, settings: Settings) -> ContentSearchService:
        return cls(
            client,
            locale_config=settings.get_locale_config(),
            max_concurrency=settings.max_concurrency,
            request_timeout=settings.request_timeout,
        )

    async def search(self, query: SearchQuery) -> SearchOutcome:
        """Run a full search: orchestration, validation and at most one relaxed retry.

        Raises:
            SearchExhaustedError: If every repository listing failed
        """
        bind_search_context(query.base_path, query.term)
        with (
            track_latency(SEARCH_LATENCY),
            create_span(
                "search.run",
                attributes={"search.term": query.term[:100], "search.base_path": query.base_path},
            ) as span,
        ):
            results, report = await self.orchestrator.run(query)
            results, report = await self.validator.validate_with_retry(results, report, query)
            span.set_attribute("search.results", len(results))
            span.set_attribute("search.coverage", report.coverage.value)
        return SearchOutcome(results=results, report=report)

    async def search_term(self, term: str, base_path: str, **options) -> SearchOutcome:
        """Validate raw arguments into a query, then search.

        Raises:
            InvalidQueryError: Before any repository call, when the arguments are invalid
        """
        return await self.search(build_query(term=term, base_path=base_path, **options))

    async def path_candidates(self, base_path: str, include_inactive: bool = False) -> list[PathCandidate]:
        """Expose the locale subtrees the engine would search beneath ``base_path``."""
        return await self.generator.candidates(base_path, include_inactive=include_inactive)

    async def aclose(self) -> None:
        await self.client.aclose()
