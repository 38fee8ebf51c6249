"""Search strategy orchestration.

Runs the strategy table against the path candidates of one query:

    EXACT -> ENHANCED -> FUZZY -> CROSS_SECTION

Listing calls within a pass fan out concurrently, but their outcomes are
committed to the report in candidate generation order, so two runs over the
same repository snapshot produce identical reports.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from content_discovery.adapters.repository import AbstractRepositoryClient, RepositoryNode
from content_discovery.domain.errors import RepositoryError, RepositoryErrorKind, SearchExhaustedError
from content_discovery.domain.search import (
    MatchCandidate,
    PathCandidate,
    PathError,
    SearchQuery,
    SearchReport,
    StrategyName,
    TermVariant,
    compute_confidence,
    rank_matches,
)
from content_discovery.observability import REPOSITORY_CALLS, STRATEGY_RUNS, create_span
from content_discovery.search.fanout import gather_ordered
from content_discovery.search.locales import PathCandidateGenerator
from content_discovery.search.strategies import (
    DEFAULT_STRATEGIES,
    MatchPass,
    StrategyContext,
    StrategyDescriptor,
    coverage_for,
)
from content_discovery.search.variants import generate_variants


logger = logging.getLogger(__name__)


@dataclass
class _RunState:
    """Mutable bookkeeping for a single run; frozen into a SearchReport at the end."""

    query: SearchQuery
    accepted: dict[str, MatchCandidate] = field(default_factory=dict)
    strategies_used: list[StrategyName] = field(default_factory=list)
    paths_explored: list[str] = field(default_factory=list)
    errors: list[PathError] = field(default_factory=list)
    attempts: int = 0
    successes: int = 0

    def record_attempt(self, strategy: StrategyName) -> None:
        self.attempts += 1
        if strategy not in self.strategies_used:
            self.strategies_used.append(strategy)

    def record_success(self, path: str) -> None:
        self.successes += 1
        if path not in self.paths_explored:
            self.paths_explored.append(path)

    def record_error(self, path: str, strategy: StrategyName, error: RepositoryError) -> None:
        self.errors.append(PathError(path=path, strategy=strategy, kind=error.kind, message=error.message))

    def accept(self, match: MatchCandidate) -> None:
        current = self.accepted.get(match.node_path)
        if current is None or match.score > current.score:
            self.accepted[match.node_path] = match

    def ranked(self) -> list[MatchCandidate]:
        return rank_matches(self.accepted.values())

    def satisfied(self) -> bool:
        """Enough accepted results, and the weakest one kept still clears the threshold."""
        limit = self.query.limit
        ranked = self.ranked()
        if len(ranked) < limit:
            return False
        return ranked[limit - 1].score >= self.query.fuzzy_threshold

    def to_report(self) -> SearchReport:
        return SearchReport(
            strategies_used=list(self.strategies_used),
            paths_explored=list(self.paths_explored),
            total_attempts=self.attempts,
            confidence=compute_confidence(self.ranked(), self.query.limit),
            coverage=coverage_for(self.strategies_used),
            errors=list(self.errors),
        )


class SearchOrchestrator:
    """Runs successive search strategies over generated path candidates."""

    def __init__(
        self,
        client: AbstractRepositoryClient,
        generator: PathCandidateGenerator,
        *,
        strategies: Sequence[StrategyDescriptor] = DEFAULT_STRATEGIES,
        max_concurrency: int = 8,
        request_timeout: float | None = None,
    ) -> None:
        self.client = client
        self.generator = generator
        self.strategies = tuple(strategies)
        self.max_concurrency = max_concurrency
        self.request_timeout = request_timeout

    async def run(self, query: SearchQuery) -> tuple[list[MatchCandidate], SearchReport]:
        """Execute the strategy table for ``query``.

        Returns:
            Ranked results (at most ``query.limit``) and the run's report

        Raises:
            SearchExhaustedError: If every listing call across every strategy failed
        """
        variants = generate_variants(query.term)
        candidates = await self.generator.candidates(query.base_path, include_inactive=query.include_inactive)
        logger.debug(
            "Search '%s' under %s: %d variants, %d path candidates",
            query.term,
            query.base_path,
            len(variants),
            len(candidates),
        )

        state = _RunState(query=query)
        for descriptor in self.strategies:
            if state.satisfied():
                logger.debug("Short-circuit before %s with %d accepted", descriptor.name.value, len(state.accepted))
                break
            if not descriptor.applies(StrategyContext(query=query, accepted_count=len(state.accepted))):
                continue
            targets = [candidate for candidate in candidates if candidate.source in descriptor.sources]
            if not targets:
                continue
            with create_span(
                "search.strategy",
                attributes={"search.strategy": descriptor.name.value, "search.targets": len(targets)},
            ):
                await self._execute(descriptor, targets, variants, state)
            STRATEGY_RUNS.labels(strategy=descriptor.name.value).inc()

        if state.attempts and not state.successes:
            logger.error("All %d listing attempts failed for %s", state.attempts, query.base_path)
            raise SearchExhaustedError(state.errors)

        results = state.ranked()[: query.limit]
        report = state.to_report()
        logger.info(
            "Search '%s' finished: %d results, strategies=%s, attempts=%d, confidence=%.3f",
            query.term,
            len(results),
            [s.value for s in report.strategies_used],
            report.total_attempts,
            report.confidence,
        )
        return results, report

    async def _execute(
        self,
        descriptor: StrategyDescriptor,
        targets: list[PathCandidate],
        variants: list[TermVariant],
        state: _RunState,
    ) -> None:
        query = state.query
        for index, match_pass in enumerate(descriptor.passes):
            if index and state.satisfied():
                break
            outcomes = await gather_ordered(
                [
                    lambda c=candidate: self.client.list_children(c.path, query.search_depth, query.include_inactive)
                    for candidate in targets
                ],
                max_concurrency=self.max_concurrency,
                timeout=self.request_timeout,
            )
            for candidate, outcome in zip(targets, outcomes):
                state.record_attempt(descriptor.name)
                if isinstance(outcome, Exception):
                    error = _as_repository_error(outcome, candidate.path)
                    logger.warning(
                        "Listing %s failed during %s: %s", candidate.path, descriptor.name.value, error.message
                    )
                    REPOSITORY_CALLS.labels(operation="list_children", status=error.kind.value).inc()
                    state.record_error(candidate.path, descriptor.name, error)
                    continue
                REPOSITORY_CALLS.labels(operation="list_children", status="ok").inc()
                state.record_success(candidate.path)
                self._score_nodes(outcome, match_pass, variants, descriptor.name, state)

    def _score_nodes(
        self,
        nodes: list[RepositoryNode],
        match_pass: MatchPass,
        variants: list[TermVariant],
        strategy: StrategyName,
        state: _RunState,
    ) -> None:
        threshold = match_pass.threshold(state.query)
        selected = match_pass.select_variants(variants)
        for node in nodes:
            score, variant = match_pass.score(node, selected)
            if variant is None or score < threshold:
                continue
            state.accept(
                MatchCandidate(
                    node_path=node.path,
                    title=node.title,
                    last_modified=node.last_modified,
                    score=score,
                    matched_variant=variant,
                    strategy=strategy,
                )
            )


def _as_repository_error(exc: Exception, path: str) -> RepositoryError:
    """Map a captured listing failure onto a RepositoryError; unexpected errors become ``UNKNOWN``."""
    if isinstance(exc, RepositoryError):
        return exc
    if isinstance(exc, asyncio.TimeoutError):
        return RepositoryError(RepositoryErrorKind.TIMEOUT, path, "Repository call timed out")
    logger.error("Unexpected error listing %s", path, exc_info=exc)
    return RepositoryError(RepositoryErrorKind.UNKNOWN, path, f"{type(exc).__name__}: {exc}")
