"""Result validation with one relaxed retry.

Every returned result is re-scored against the original term, independent of
the strategy that found it, and weak survivors of lenient passes are dropped.
When nothing survives, the search is retried once with a lower threshold and
one more level of depth. The retry budget is threaded through the call so
the retry can never recurse further.
"""

from __future__ import annotations

import logging

from content_discovery.domain.errors import SearchExhaustedError
from content_discovery.domain.search import MatchCandidate, SearchQuery, SearchReport, compute_confidence
from content_discovery.search.fuzzy import partial_similarity
from content_discovery.service_layer.orchestrator import SearchOrchestrator


logger = logging.getLogger(__name__)

DROP_FACTOR = 0.5
RETRY_FLOOR = 0.3
RETRY_STEP = 0.1
RETRY_BUDGET = 1


class ResultValidator:
    """Sanity-checks orchestrator output and retries once when nothing survives."""

    def __init__(
        self,
        orchestrator: SearchOrchestrator,
        *,
        drop_factor: float = DROP_FACTOR,
        retry_floor: float = RETRY_FLOOR,
        retry_step: float = RETRY_STEP,
    ) -> None:
        self.orchestrator = orchestrator
        self.drop_factor = drop_factor
        self.retry_floor = retry_floor
        self.retry_step = retry_step

    def validate(self, results: list[MatchCandidate], query: SearchQuery) -> list[MatchCandidate]:
        """Drop results whose title and name both re-score below ``fuzzy_threshold * drop_factor``.

        Ranking order of the survivors is preserved.
        """
        original = query.term.strip().lower()
        cutoff = query.fuzzy_threshold * self.drop_factor
        survivors = []
        for result in results:
            rescore = max(partial_similarity(result.title, original), partial_similarity(result.name, original))
            if rescore < cutoff:
                logger.debug("Dropping %s: re-score %.3f below %.3f", result.node_path, rescore, cutoff)
                continue
            survivors.append(result)
        return survivors

    async def validate_with_retry(
        self,
        results: list[MatchCandidate],
        report: SearchReport,
        query: SearchQuery,
        retry_budget: int = RETRY_BUDGET,
    ) -> tuple[list[MatchCandidate], SearchReport]:
        """Validate ``results``; on an empty outcome, retry the search while budget remains.

        Returns:
            Surviving results and the (possibly merged) report. When the retry
            also yields nothing, the report is flagged ``validation_exhausted``. A retry
            whose listings all fail keeps the first report, flagged the same way.
        """
        survivors = self.validate(results, query)
        if survivors:
            return survivors, report.model_copy(update={"confidence": compute_confidence(survivors, query.limit)})

        if retry_budget <= 0 or query.fuzzy_threshold <= self.retry_floor:
            return [], report.model_copy(update={"confidence": 0.0, "validation_exhausted": True})

        relaxed = query.relaxed(self.retry_step, self.retry_floor)
        logger.info(
            "No results survived validation for '%s'; retrying with threshold=%.2f depth=%d",
            query.term,
            relaxed.fuzzy_threshold,
            relaxed.search_depth,
        )
        try:
            retry_results, retry_report = await self.orchestrator.run(relaxed)
        except SearchExhaustedError as exc:
            logger.warning("Relaxed retry for '%s' failed: %s", query.term, exc)
            return [], report.model_copy(
                update={
                    "confidence": 0.0,
                    "retried": True,
                    "validation_exhausted": True,
                    "total_attempts": report.total_attempts + len(exc.errors),
                    "errors": list(report.errors) + list(exc.errors),
                }
            )
        survivors, retry_report = await self.validate_with_retry(
            retry_results, retry_report, relaxed, retry_budget=retry_budget - 1
        )
        return survivors, report.merge(retry_report, confidence=retry_report.confidence)
