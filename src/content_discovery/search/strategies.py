"""Search strategy table.

Each strategy is a descriptor rather than a branch in the orchestration loop:
which path candidates it lists, when it applies, and the comparison passes
it runs. The orchestrator walks ``DEFAULT_STRATEGIES`` in order, so adding or
reordering strategies never touches the loop itself.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from content_discovery.adapters.repository import RepositoryNode
from content_discovery.domain.search import (
    Coverage,
    PathSource,
    SearchQuery,
    StrategyName,
    TermVariant,
    VariantKind,
)
from content_discovery.search.fuzzy import best_variant


EXACT_THRESHOLD = 0.98
FUZZY_MARGIN = 0.15
FUZZY_FLOOR = 0.3


class ComparisonMode(str, Enum):
    """How node labels are compared with the term."""

    ORIGINAL = "original"  # original variant only, edit distance
    VARIANTS = "variants"  # every variant, edit distance
    PARTIAL = "partial"  # every variant, edit distance + containment + reordering


@dataclass(frozen=True)
class StrategyContext:
    """What a strategy's applicability predicate may inspect."""

    query: SearchQuery
    accepted_count: int


def exact_threshold(query: SearchQuery) -> float:
    """Near-identity threshold, independent of the query."""
    return EXACT_THRESHOLD


def enhanced_threshold(query: SearchQuery) -> float:
    """The query's own ``fuzzy_threshold``."""
    return query.fuzzy_threshold


def fuzzy_threshold(query: SearchQuery) -> float:
    """Relaxed threshold, floored at ``FUZZY_FLOOR`` but never above the enhanced one."""
    relaxed = max(query.fuzzy_threshold - FUZZY_MARGIN, FUZZY_FLOOR)
    return min(query.fuzzy_threshold, relaxed)


@dataclass(frozen=True)
class MatchPass:
    """One comparison pass: a mode plus the acceptance threshold it uses."""

    mode: ComparisonMode
    threshold: Callable[[SearchQuery], float]

    def select_variants(self, variants: Sequence[TermVariant]) -> list[TermVariant]:
        if self.mode is ComparisonMode.ORIGINAL:
            return [v for v in variants if v.kind is VariantKind.ORIGINAL]
        return list(variants)

    def score(self, node: RepositoryNode, variants: Sequence[TermVariant]) -> tuple[float, TermVariant | None]:
        """Best score of the node's title and name against the selected variants."""
        labels = [node.title] if node.title == node.name else [node.title, node.name]
        score, variant = best_variant(labels, variants, partial=self.mode is ComparisonMode.PARTIAL)
        return min(1.0, max(0.0, score)), variant


def _always(context: StrategyContext) -> bool:
    return True


def _below_limit(context: StrategyContext) -> bool:
    return context.accepted_count < context.query.limit


@dataclass(frozen=True)
class StrategyDescriptor:
    """A named search strategy and the passes it runs over its candidate sources."""

    name: StrategyName
    passes: tuple[MatchPass, ...]
    sources: frozenset[PathSource]
    applies: Callable[[StrategyContext], bool] = _always


EXACT_PASS = MatchPass(ComparisonMode.ORIGINAL, exact_threshold)
ENHANCED_PASS = MatchPass(ComparisonMode.VARIANTS, enhanced_threshold)
FUZZY_PASS = MatchPass(ComparisonMode.PARTIAL, fuzzy_threshold)

_AS_GIVEN = frozenset({PathSource.AS_GIVEN})
_LOCALE_SOURCES = frozenset({PathSource.LANGUAGE_MASTER, PathSource.COUNTRY_LOCALE, PathSource.DIRECT_LOCALE})

DEFAULT_STRATEGIES: tuple[StrategyDescriptor, ...] = (
    StrategyDescriptor(StrategyName.EXACT, (EXACT_PASS,), _AS_GIVEN),
    StrategyDescriptor(StrategyName.ENHANCED, (ENHANCED_PASS,), _AS_GIVEN),
    StrategyDescriptor(StrategyName.FUZZY, (FUZZY_PASS,), _AS_GIVEN),
    StrategyDescriptor(
        StrategyName.CROSS_SECTION,
        (EXACT_PASS, ENHANCED_PASS, FUZZY_PASS),
        _LOCALE_SOURCES,
        applies=_below_limit,
    ),
)


def coverage_for(strategies_used: Iterable[StrategyName]) -> Coverage:
    """Coverage implied by the strategies that actually ran."""
    used = set(strategies_used)
    if StrategyName.CROSS_SECTION in used:
        return Coverage.COMPREHENSIVE
    if used & {StrategyName.ENHANCED, StrategyName.FUZZY}:
        return Coverage.PARTIAL
    return Coverage.MINIMAL
