"""Unit tests for the search strategy table."""

import pytest

from content_discovery.adapters import RepositoryNode
from content_discovery.domain.search import Coverage, PathSource, SearchQuery, StrategyName, VariantKind
from content_discovery.search.strategies import (
    DEFAULT_STRATEGIES,
    ENHANCED_PASS,
    EXACT_PASS,
    FUZZY_PASS,
    StrategyContext,
    coverage_for,
    enhanced_threshold,
    exact_threshold,
    fuzzy_threshold,
)
from content_discovery.search.variants import generate_variants


def query(threshold: float = 0.75, limit: int = 5) -> SearchQuery:
    return SearchQuery(term="product-page", base_path="/content/mysite", fuzzy_threshold=threshold, limit=limit)


@pytest.mark.unit
class TestThresholds:
    @pytest.mark.parametrize("threshold", [0.0, 0.2, 0.3, 0.4, 0.45, 0.5, 0.75, 0.9, 1.0])
    def test_fuzzy_never_above_enhanced(self, threshold):
        q = query(threshold)
        assert fuzzy_threshold(q) <= enhanced_threshold(q)

    def test_fuzzy_relaxes_by_margin(self):
        assert fuzzy_threshold(query(0.75)) == pytest.approx(0.6)

    def test_fuzzy_floor(self):
        assert fuzzy_threshold(query(0.4)) == pytest.approx(0.3)

    def test_exact_is_fixed(self):
        assert exact_threshold(query(0.1)) == 0.98


@pytest.mark.unit
class TestStrategyTable:
    def test_order(self):
        assert [d.name for d in DEFAULT_STRATEGIES] == [
            StrategyName.EXACT,
            StrategyName.ENHANCED,
            StrategyName.FUZZY,
            StrategyName.CROSS_SECTION,
        ]

    def test_sources(self):
        by_name = {d.name: d for d in DEFAULT_STRATEGIES}
        assert by_name[StrategyName.EXACT].sources == {PathSource.AS_GIVEN}
        assert PathSource.AS_GIVEN not in by_name[StrategyName.CROSS_SECTION].sources
        assert by_name[StrategyName.CROSS_SECTION].passes == (EXACT_PASS, ENHANCED_PASS, FUZZY_PASS)

    def test_cross_section_applies_only_below_limit(self):
        cross = DEFAULT_STRATEGIES[-1]
        assert cross.applies(StrategyContext(query=query(limit=2), accepted_count=1))
        assert not cross.applies(StrategyContext(query=query(limit=2), accepted_count=2))


@pytest.mark.unit
class TestMatchPass:
    node = RepositoryNode(path="/content/mysite/products-page", title="Products Page")

    def test_exact_pass_uses_original_only(self):
        variants = generate_variants("product-page")
        selected = EXACT_PASS.select_variants(variants)
        assert [v.kind for v in selected] == [VariantKind.ORIGINAL]

    def test_enhanced_pass_finds_variant(self):
        variants = generate_variants("product-page")
        score, variant = ENHANCED_PASS.score(self.node, ENHANCED_PASS.select_variants(variants))
        assert score == pytest.approx(12 / 13)
        assert variant.kind is VariantKind.SPACE_SEPARATED

    def test_score_checks_node_name(self):
        node = RepositoryNode(path="/content/mysite/contact-us", title="Reach Out")
        score, variant = EXACT_PASS.score(node, generate_variants("contact-us"))
        assert score == 1.0
        assert variant.kind is VariantKind.ORIGINAL

    def test_fuzzy_pass_rewards_containment(self):
        node = RepositoryNode(path="/content/mysite/faq", title="Customer Service")
        _, variant = FUZZY_PASS.score(node, generate_variants("service"))
        plain, _ = ENHANCED_PASS.score(node, generate_variants("service"))
        partial, _ = FUZZY_PASS.score(node, generate_variants("service"))
        assert variant is not None
        assert partial > plain


@pytest.mark.unit
class TestCoverage:
    def test_exact_only_is_minimal(self):
        assert coverage_for([StrategyName.EXACT]) is Coverage.MINIMAL

    def test_nothing_run_is_minimal(self):
        assert coverage_for([]) is Coverage.MINIMAL

    def test_variant_strategies_are_partial(self):
        assert coverage_for([StrategyName.EXACT, StrategyName.ENHANCED]) is Coverage.PARTIAL
        assert coverage_for([StrategyName.EXACT, StrategyName.ENHANCED, StrategyName.FUZZY]) is Coverage.PARTIAL

    def test_cross_section_is_comprehensive(self):
        assert coverage_for(list(StrategyName)) is Coverage.COMPREHENSIVE
