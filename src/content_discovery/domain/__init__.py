"""Domain layer - search value objects and errors with no infrastructure dependencies."""

from content_discovery.domain.errors import (
    ContentDiscoveryError,
    InvalidQueryError,
    RepositoryError,
    RepositoryErrorKind,
    SearchExhaustedError,
)
from content_discovery.domain.search import (
    Coverage,
    MatchCandidate,
    PathCandidate,
    PathError,
    PathSource,
    SearchOutcome,
    SearchQuery,
    SearchReport,
    StrategyName,
    TermVariant,
    VariantKind,
    build_query,
    compute_confidence,
    rank_matches,
)


__all__ = [
    "ContentDiscoveryError",
    "Coverage",
    "InvalidQueryError",
    "MatchCandidate",
    "PathCandidate",
    "PathError",
    "PathSource",
    "RepositoryError",
    "RepositoryErrorKind",
    "SearchExhaustedError",
    "SearchOutcome",
    "SearchQuery",
    "SearchReport",
    "StrategyName",
    "TermVariant",
    "VariantKind",
    "build_query",
    "compute_confidence",
    "rank_matches",
]
