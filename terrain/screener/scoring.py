"""
Composite Opportunity Scorer

Combines five clamped sub-scores into a 0-100 opportunity score:
- Market Attractiveness (0-30): log-scaled prevalence + CAGR
- Competitive Openness (0-25): inverse of crowding
- Unmet Need (0-20): treatment and diagnosis gaps
- Development Feasibility (0-15): clinical precedent + therapy-area LoA
- Partner Landscape (0-10): active BD partners in the therapy area

The total is the exact sum of the components, so no separate clamp is
needed. The breakdown is returned with the total.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .aggregation import late_stage_fraction
from .config import DEFAULT_WEIGHTS, ScoringWeights
from .crowding import assess_crowding
from .epidemiology import resolve_global_epidemiology
from .models import (
    COMPONENT_MAXIMA,
    Competitor,
    CrowdingAssessment,
    Indication,
    Partner,
    ScoreBreakdown,
)
from .reference import average_loa, normalize_therapy_area

logger = logging.getLogger(__name__)


def _clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class ScoredIndication:
    """An indication with everything computed for it in one request."""
    indication: Indication
    global_prevalence: int
    global_incidence: Optional[int]
    crowding: CrowdingAssessment
    breakdown: ScoreBreakdown
    opportunity_score: float
    active_partner_count: int

    @property
    def name(self) -> str:
        return self.indication.name

    @property
    def therapy_area(self) -> str:
        return self.indication.therapy_area

    @property
    def competitors(self) -> List[Competitor]:
        return self.indication.competitors

    @property
    def competitor_count(self) -> int:
        return len(self.indication.competitors)


class OpportunityScorer:
    """
    Scores indications on the five opportunity dimensions.

    Every sub-score is a clamped, monotonic function of its inputs and can
    be called on its own.
    """

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS, precision: int = 1):
        """
        Initialize the scorer.

        Args:
            weights: Scoring coefficients
            precision: Decimal places for component scores
        """
        if not weights.validate():
            raise ValueError("Scoring weights are inconsistent (check group sums and references)")
        self._weights = weights
        self._precision = precision

    @property
    def weights(self) -> ScoringWeights:
        return self._weights

    def _component(self, value: float, name: str) -> float:
        return _clamp(round(value, self._precision), 0.0, COMPONENT_MAXIMA[name])

    def score_market_attractiveness(self, global_prevalence: int, cagr_5yr: float) -> float:
        """
        Market Attractiveness (0-30).

        Log10 prevalence against a ~50M-patient reference, plus CAGR against a
        15% reference. Negative CAGR contributes nothing.
        """
        w = self._weights
        log_prev = math.log10(max(global_prevalence, 1))
        prev_term = min(log_prev / math.log10(w.max_prevalence_reference), 1.0) * w.prevalence_points
        cagr_term = _clamp(cagr_5yr / w.max_cagr_reference, 0.0, 1.0) * w.cagr_points
        return self._component(prev_term + cagr_term, "market_attractiveness")

    def score_competitive_openness(self, crowding_score: float) -> float:
        """Competitive Openness (0-25): 25 at crowding 0, 0 at crowding 10."""
        return self._component(25 * (1 - crowding_score / 10), "competitive_openness")

    def score_unmet_need(self, treatment_rate: float, diagnosis_rate: float) -> float:
        """Unmet Need (0-20): low treatment + low diagnosis = high unmet need."""
        w = self._weights
        treated = treatment_rate * w.treatment_gap_weight + diagnosis_rate * w.diagnosis_gap_weight
        return self._component(20 * (1 - treated), "unmet_need")

    def score_development_feasibility(self, competitors: Sequence[Competitor], therapy_area: str) -> float:
        """
        Development Feasibility (0-15).

        Blends the fraction of competitors at or past Phase 2 (clinical
        precedent) with the therapy area's average Phase 1-3 likelihood of
        approval, normalized to a 40% ceiling.
        """
        w = self._weights
        precedent = late_stage_fraction(competitors)
        loa_term = min(average_loa(therapy_area) / w.max_avg_loa_reference, 1.0)
        raw = 15 * (w.precedent_weight * precedent + w.loa_weight * loa_term)
        return self._component(raw, "development_feasibility")

    @staticmethod
    def count_active_partners(therapy_area: str, partners: Iterable[Partner]) -> int:
        """Active/very active partners whose therapeutic areas cover ``therapy_area``."""
        area = normalize_therapy_area(therapy_area)
        return sum(
            1 for p in partners
            if p.is_active and any(area in normalize_therapy_area(ta) for ta in p.therapeutic_areas)
        )

    def score_partner_landscape(self, active_partner_count: int) -> float:
        """Partner Landscape (0-10): 20+ active partners = max score."""
        ratio = min(active_partner_count / self._weights.max_active_partners, 1.0)
        return self._component(10 * ratio, "partner_landscape")

    def score(
        self,
        indication: Indication,
        partners: Sequence[Partner] = (),
        crowding: Optional[CrowdingAssessment] = None,
    ) -> ScoredIndication:
        """
        Score a single indication.

        Args:
            indication: Indication to score
            partners: Partner records for the partner landscape
            crowding: Precomputed crowding assessment (computed if not provided)

        Returns:
            ScoredIndication with breakdown and total
        """
        if crowding is None:
            crowding = assess_crowding(indication.competitors, weights=self._weights, precision=self._precision)

        epi = resolve_global_epidemiology(indication)
        active_partners = self.count_active_partners(indication.therapy_area, partners)

        breakdown = ScoreBreakdown(
            market_attractiveness=self.score_market_attractiveness(epi.prevalence, indication.cagr_5yr),
            competitive_openness=self.score_competitive_openness(crowding.crowding_score),
            unmet_need=self.score_unmet_need(indication.treatment_rate, indication.diagnosis_rate),
            development_feasibility=self.score_development_feasibility(
                indication.competitors, indication.therapy_area
            ),
            partner_landscape=self.score_partner_landscape(active_partners),
        )

        return ScoredIndication(
            indication=indication,
            global_prevalence=epi.prevalence,
            global_incidence=epi.incidence,
            crowding=crowding,
            breakdown=breakdown,
            opportunity_score=round(breakdown.total, self._precision),
            active_partner_count=active_partners,
        )

    def score_all(self, indications: Iterable[Indication], partners: Sequence[Partner] = ()) -> List[ScoredIndication]:
        """Score every indication, preserving input order."""
        scored = [self.score(indication, partners) for indication in indications]
        logger.debug(f"Scored {len(scored)} indications")
        return scored
