"""
Tests for the Filter Engine.

Tests:
- Each filter field on its own
- AND combination, idempotence and commutativity
- Worked crowding example against max_crowding
"""

from terrain.screener.filtering import apply_filters, filter_catalog, passes_filters
from terrain.screener.models import FilterSpec, Phase


def names(items):
    return [item.name for item in items]


class TestApplyFilters:
    """Tests for apply_filters()."""

    def test_empty_spec_returns_everything_in_order(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications, small_catalog.partners)
        result = apply_filters(scored, FilterSpec())
        assert names(result) == names(scored)
        assert result is not scored

    def test_none_spec(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        assert names(apply_filters(scored, None)) == names(scored)

    def test_therapy_area_case_insensitive(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        result = apply_filters(scored, FilterSpec(therapy_areas=["immunology"]))
        assert names(result) == ["Alpha Syndrome", "Beta Disease"]

    def test_phases_match_any_competitor(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        result = apply_filters(scored, FilterSpec(phases=[Phase.PHASE_1]))
        assert names(result) == ["Delta Condition"]

        result = apply_filters(scored, FilterSpec(phases=["Phase 1", "Preclinical"]))
        assert names(result) == ["Alpha Syndrome", "Delta Condition"]

    def test_min_prevalence_uses_global(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        result = apply_filters(scored, FilterSpec(min_prevalence=1_000_000))
        assert names(result) == ["Alpha Syndrome", "Beta Disease"]

    def test_worked_example_max_crowding(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        excluded = apply_filters(scored, FilterSpec(max_crowding=2.0))
        included = apply_filters(scored, FilterSpec(max_crowding=2.5))
        assert "Alpha Syndrome" not in names(excluded)
        assert "Alpha Syndrome" in names(included)

    def test_min_opportunity_score(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        threshold = sorted(s.opportunity_score for s in scored)[2]
        result = apply_filters(scored, FilterSpec(min_opportunity_score=threshold))
        assert all(s.opportunity_score >= threshold for s in result)
        assert len(result) >= 2

    def test_no_matches_is_empty(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        assert apply_filters(scored, FilterSpec(therapy_areas=["Ophthalmology"])) == []


class TestFilterAlgebra:
    """Idempotence and commutativity of filters."""

    def test_idempotent(self, scorer, large_catalog):
        scored = scorer.score_all(large_catalog.indications)
        spec = FilterSpec(therapy_areas=["Oncology", "Neurology"], max_crowding=3.0)
        once = apply_filters(scored, spec)
        twice = apply_filters(once, spec)
        assert names(once) == names(twice)

    def test_commutative_across_fields(self, scorer, large_catalog):
        scored = scorer.score_all(large_catalog.indications)
        a = FilterSpec(therapy_areas=["Immunology", "Rare Disease"])
        b = FilterSpec(min_opportunity_score=40)
        ab = apply_filters(apply_filters(scored, a), b)
        ba = apply_filters(apply_filters(scored, b), a)
        combined = apply_filters(scored, FilterSpec(therapy_areas=["Immunology", "Rare Disease"], min_opportunity_score=40))
        assert names(ab) == names(ba) == names(combined)

    def test_passes_filters_matches_apply(self, scorer, large_catalog):
        scored = scorer.score_all(large_catalog.indications)
        spec = FilterSpec(phases=["Approved"], min_prevalence=50_000)
        assert names(apply_filters(scored, spec)) == names(s for s in scored if passes_filters(s, spec))


class TestFilterCatalog:
    """Tests for filter_catalog()."""

    def test_returns_raw_indications(self, scorer, small_catalog):
        result = filter_catalog(small_catalog.indications, FilterSpec(therapy_areas=["Oncology"]), scorer)
        assert [ind.name for ind in result] == ["Gamma Disorder"]
