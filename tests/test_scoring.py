"""
Tests for the Composite Opportunity Scorer.

Tests:
- Each sub-score's bounds and monotonicity
- Partner matching
- score() totals and bounds
- Global epidemiology extrapolation
"""

import pytest

from terrain.screener.config import ScoringWeights
from terrain.screener.epidemiology import extrapolate_from_us, resolve_global_epidemiology
from terrain.screener.models import COMPONENT_MAXIMA, Partner, Phase
from terrain.screener.scoring import OpportunityScorer

from conftest import make_competitor, make_indication


class TestMarketAttractiveness:
    """Tests for score_market_attractiveness()."""

    def test_reference_values_score_max(self, scorer):
        assert scorer.score_market_attractiveness(50_000_000, 0.15) == 30.0

    def test_above_reference_capped(self, scorer):
        assert scorer.score_market_attractiveness(500_000_000, 0.40) == 30.0

    def test_minimum(self, scorer):
        assert scorer.score_market_attractiveness(1, 0.0) == 0.0
        assert scorer.score_market_attractiveness(0, 0.0) == 0.0

    def test_negative_cagr_contributes_nothing(self, scorer):
        assert scorer.score_market_attractiveness(1_000_000, -0.05) == scorer.score_market_attractiveness(1_000_000, 0.0)

    def test_one_million_patients(self, scorer):
        # 20 * log10(1e6) / log10(5e7) + 10 * 0.075 / 0.15
        assert scorer.score_market_attractiveness(1_000_000, 0.075) == pytest.approx(20.6)

    def test_monotonic_in_prevalence(self, scorer):
        values = [scorer.score_market_attractiveness(p, 0.05) for p in (10, 1_000, 100_000, 10_000_000)]
        assert values == sorted(values)


class TestCompetitiveOpenness:
    """Tests for score_competitive_openness()."""

    def test_bounds(self, scorer):
        assert scorer.score_competitive_openness(0.0) == 25.0
        assert scorer.score_competitive_openness(10.0) == 0.0

    def test_midpoint(self, scorer):
        assert scorer.score_competitive_openness(4.0) == pytest.approx(15.0)

    def test_non_increasing_in_crowding(self, scorer):
        values = [scorer.score_competitive_openness(c / 2) for c in range(21)]
        assert values == sorted(values, reverse=True)


class TestUnmetNeed:
    """Tests for score_unmet_need()."""

    def test_bounds(self, scorer):
        assert scorer.score_unmet_need(0.0, 0.0) == 20.0
        assert scorer.score_unmet_need(1.0, 1.0) == 0.0

    def test_half_treated(self, scorer):
        assert scorer.score_unmet_need(0.5, 0.5) == pytest.approx(10.0)

    def test_custom_weights(self):
        scorer = OpportunityScorer(ScoringWeights(treatment_gap_weight=1.0, diagnosis_gap_weight=0.0))
        assert scorer.score_unmet_need(0.0, 1.0) == 20.0


class TestDevelopmentFeasibility:
    """Tests for score_development_feasibility()."""

    def test_no_competitors_uses_loa_only(self, scorer):
        # Rare disease average LoA (0.16 + 0.28 + 0.66) / 3 against 0.4
        assert scorer.score_development_feasibility([], "Rare Disease") == pytest.approx(5.5)

    def test_non_decreasing_in_late_stage_fraction(self, scorer):
        values = []
        for n_late in range(5):
            competitors = (
                [make_competitor(Phase.PHASE_3, company=f"L{i}") for i in range(n_late)]
                + [make_competitor(Phase.PHASE_1, company=f"E{i}") for i in range(4 - n_late)]
            )
            values.append(scorer.score_development_feasibility(competitors, "Oncology"))
        assert values == sorted(values)

    def test_within_bounds(self, scorer):
        competitors = [make_competitor(Phase.APPROVED, company=f"C{i}") for i in range(5)]
        for area in ("Oncology", "Rare Disease", "Psychiatry", "Unknown Area"):
            assert 0.0 <= scorer.score_development_feasibility(competitors, area) <= 15.0


class TestPartnerLandscape:
    """Tests for partner matching and score_partner_landscape()."""

    def test_score_bounds(self, scorer):
        assert scorer.score_partner_landscape(0) == 0.0
        assert scorer.score_partner_landscape(10) == 5.0
        assert scorer.score_partner_landscape(25) == 10.0

    def test_only_active_partners_counted(self):
        partners = [
            Partner(company="A", therapeutic_areas=["immunology"], bd_activity="very_active"),
            Partner(company="B", therapeutic_areas=["immunology"], bd_activity="active"),
            Partner(company="C", therapeutic_areas=["immunology"], bd_activity="moderate"),
            Partner(company="D", therapeutic_areas=["oncology"], bd_activity="active"),
        ]
        assert OpportunityScorer.count_active_partners("Immunology", partners) == 2

    def test_multi_word_area(self):
        partners = [Partner(company="A", therapeutic_areas=["rare_disease"], bd_activity="active")]
        assert OpportunityScorer.count_active_partners("Rare Disease", partners) == 1


class TestScore:
    """Tests for OpportunityScorer.score()."""

    def test_total_is_sum_of_components(self, scorer, small_catalog):
        for indication in small_catalog.indications:
            scored = scorer.score(indication, small_catalog.partners)
            assert scored.opportunity_score == pytest.approx(round(scored.breakdown.total, 1))
            assert 0.0 <= scored.opportunity_score <= 100.0

    def test_components_within_maxima(self, scorer, large_catalog):
        for scored in scorer.score_all(large_catalog.indications):
            for name, maximum in COMPONENT_MAXIMA.items():
                assert 0.0 <= getattr(scored.breakdown, name) <= maximum

    def test_crowding_attached(self, scorer, small_catalog):
        scored = scorer.score(small_catalog.indications[0], small_catalog.partners)
        assert scored.crowding.crowding_score == 2.1
        assert scored.breakdown.competitive_openness == pytest.approx(19.75, abs=0.06)

    def test_active_partner_count(self, scorer, small_catalog):
        scored = scorer.score(small_catalog.indications[2], small_catalog.partners)
        # Oncology: AbbVie (very_active) and Merck (active)
        assert scored.active_partner_count == 2
        assert scored.breakdown.partner_landscape == 1.0

    def test_deterministic(self, scorer, small_catalog):
        first = scorer.score_all(small_catalog.indications, small_catalog.partners)
        second = scorer.score_all(small_catalog.indications, small_catalog.partners)
        assert [s.opportunity_score for s in first] == [s.opportunity_score for s in second]

    def test_less_crowded_scores_higher_all_else_equal(self, scorer):
        open_ind = make_indication("Open", competitors=[make_competitor(Phase.PHASE_1)])
        crowded = make_indication(
            "Crowded",
            competitors=[make_competitor(Phase.PHASE_1)] + [
                make_competitor(Phase.APPROVED, company=f"C{i}") for i in range(8)
            ],
        )
        assert (
            scorer.score(open_ind).breakdown.competitive_openness
            > scorer.score(crowded).breakdown.competitive_openness
        )

    def test_inconsistent_weights_rejected(self):
        with pytest.raises(ValueError):
            OpportunityScorer(ScoringWeights(precedent_weight=0.9, loa_weight=0.9))


class TestEpidemiology:
    """Tests for global epidemiology resolution."""

    def test_extrapolation_scales_by_population(self):
        # 336M US -> 8200M across the key territories
        assert extrapolate_from_us(336) == 8200

    def test_supplied_global_figures_preferred(self):
        ind = make_indication("X", global_prevalence=42, global_incidence=7, us_incidence=1)
        epi = resolve_global_epidemiology(ind)
        assert epi.prevalence == 42
        assert epi.incidence == 7

    def test_missing_global_figures_extrapolated(self):
        ind = make_indication("X", us_prevalence=3360, global_prevalence=None, us_incidence=336)
        epi = resolve_global_epidemiology(ind)
        assert epi.prevalence == 82000
        assert epi.incidence == 8200

    def test_incidence_none_when_unknown(self):
        epi = resolve_global_epidemiology(make_indication("X"))
        assert epi.incidence is None
