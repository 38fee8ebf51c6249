"""Search engine building blocks: variants, fuzzy scoring, locale paths, strategies."""

from content_discovery.search.fuzzy import (
    levenshtein_distance,
    normalize,
    partial_similarity,
    score_against_variants,
    similarity,
)
from content_discovery.search.locales import LocaleConfig, PathCandidateGenerator
from content_discovery.search.strategies import DEFAULT_STRATEGIES, StrategyDescriptor, coverage_for
from content_discovery.search.variants import generate_variants


__all__ = [
    "DEFAULT_STRATEGIES",
    "LocaleConfig",
    "PathCandidateGenerator",
    "StrategyDescriptor",
    "coverage_for",
    "generate_variants",
    "levenshtein_distance",
    "normalize",
    "partial_similarity",
    "score_against_variants",
    "similarity",
]
