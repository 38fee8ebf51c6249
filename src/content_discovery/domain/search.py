"""Domain models for content search.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- Domain logic lives in domain layer
- No infrastructure dependencies

A search run produces ranked ``MatchCandidate`` values plus a ``SearchReport``
describing which strategies ran and which repository paths were explored.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from content_discovery.domain.errors import InvalidQueryError, RepositoryErrorKind


class PathSource(str, Enum):
    """How a path candidate was derived from the base path."""

    AS_GIVEN = "as_given"
    LANGUAGE_MASTER = "language_master"
    COUNTRY_LOCALE = "country_locale"
    DIRECT_LOCALE = "direct_locale"


class VariantKind(str, Enum):
    """Lexical transform that produced a term variant."""

    ORIGINAL = "original"
    CAMEL_CASE = "camel_case"
    KEBAB_CASE = "kebab_case"
    SNAKE_CASE = "snake_case"
    SPACE_SEPARATED = "space_separated"
    STEMMED = "stemmed"


class StrategyName(str, Enum):
    """Named search passes, in the order the orchestrator attempts them."""

    EXACT = "exact"
    ENHANCED = "enhanced"
    FUZZY = "fuzzy"
    CROSS_SECTION = "cross_section"


class Coverage(str, Enum):
    """How much of the site structure a run actually searched."""

    MINIMAL = "minimal"
    PARTIAL = "partial"
    COMPREHENSIVE = "comprehensive"

    @property
    def rank(self) -> int:
        return _COVERAGE_RANK[self]


_COVERAGE_RANK = {Coverage.MINIMAL: 0, Coverage.PARTIAL: 1, Coverage.COMPREHENSIVE: 2}


class SearchQuery(BaseModel):
    """Value object describing one search request.

    ``term`` and ``base_path`` are required; everything else has defaults.
    """

    model_config = ConfigDict(frozen=True)

    term: str
    base_path: str
    limit: int = Field(default=5, ge=1)
    fuzzy_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    search_depth: int = Field(default=2, ge=1)
    include_inactive: bool = False

    @field_validator("term")
    @classmethod
    def _require_term(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("search term must not be empty")
        return value

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            raise ValueError("base path must be absolute (start with '/')")
        return value.rstrip("/") or "/"

    def relaxed(self, threshold_step: float, threshold_floor: float) -> SearchQuery:
        """Return a copy with a lowered threshold and one more level of depth."""
        lowered = max(self.fuzzy_threshold - threshold_step, threshold_floor)
        return self.model_copy(
            update={
                "fuzzy_threshold": round(lowered, 6),
                "search_depth": self.search_depth + 1,
            }
        )


def build_query(**values: Any) -> SearchQuery:
    """Construct a ``SearchQuery``, converting validation failures to ``InvalidQueryError``."""
    try:
        return SearchQuery(**values)
    except ValidationError as exc:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]} for err in exc.errors()
        ]
        summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
        raise InvalidQueryError(f"Invalid search query: {summary}", details) from exc


class PathCandidate(BaseModel):
    """A repository path worth listing, tagged with how it was generated."""

    model_config = ConfigDict(frozen=True)

    path: str
    source: PathSource


class TermVariant(BaseModel):
    """One lexical rendering of the search term."""

    model_config = ConfigDict(frozen=True)

    text: str
    kind: VariantKind

    @property
    def normalized(self) -> str:
        return " ".join(self.text.lower().split())


class MatchCandidate(BaseModel):
    """A repository node scored against the query."""

    model_config = ConfigDict(frozen=True)

    node_path: str
    title: str
    last_modified: datetime | None = None
    score: float = Field(ge=0.0, le=1.0)
    matched_variant: TermVariant
    strategy: StrategyName

    @property
    def depth(self) -> int:
        return len([segment for segment in self.node_path.split("/") if segment])

    @property
    def name(self) -> str:
        return self.node_path.rstrip("/").rsplit("/", 1)[-1]


class PathError(BaseModel):
    """A recovered repository failure recorded in the report."""

    model_config = ConfigDict(frozen=True)

    path: str
    strategy: StrategyName | None = None
    kind: RepositoryErrorKind
    message: str = ""


class SearchReport(BaseModel):
    """Provenance of a search run: what was tried and how well it matched."""

    model_config = ConfigDict(frozen=True)

    strategies_used: list[StrategyName] = Field(default_factory=list)
    paths_explored: list[str] = Field(default_factory=list)
    total_attempts: int = 0
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    coverage: Coverage = Coverage.MINIMAL
    errors: list[PathError] = Field(default_factory=list)
    retried: bool = False
    validation_exhausted: bool = False

    def merge(self, other: SearchReport, *, confidence: float) -> SearchReport:
        """Combine this report with a follow-up run (used by the validator retry)."""
        return SearchReport(
            strategies_used=_unique(list(self.strategies_used) + list(other.strategies_used)),
            paths_explored=_unique(list(self.paths_explored) + list(other.paths_explored)),
            total_attempts=self.total_attempts + other.total_attempts,
            confidence=confidence,
            coverage=max(self.coverage, other.coverage, key=lambda c: c.rank),
            errors=list(self.errors) + list(other.errors),
            retried=True,
            validation_exhausted=other.validation_exhausted,
        )


class SearchOutcome(BaseModel):
    """Final ranked results together with their report."""

    model_config = ConfigDict(frozen=True)

    results: list[MatchCandidate]
    report: SearchReport


def rank_matches(matches: Iterable[MatchCandidate]) -> list[MatchCandidate]:
    """Sort by score descending, then shallower path, then path lexically."""
    return sorted(matches, key=lambda m: (-m.score, m.depth, m.node_path))


def compute_confidence(ranked: Sequence[MatchCandidate], limit: int) -> float:
    """Average score of the top ``min(limit, len(ranked))`` matches, 0 when empty."""
    top = ranked[: min(limit, len(ranked))]
    if not top:
        return 0.0
    return min(1.0, sum(m.score for m in top) / len(top))


def _unique(values: list[Any]) -> list[Any]:
    seen: set[Any] = set()
    ordered = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
