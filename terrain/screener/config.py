"""
Screener configuration.

Every coefficient the pipeline uses lives here and is passed into
ScreenerService at construction. The coefficients are tunable; none of the
downstream invariants depend on their exact values.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .models import Phase
from terrain.utils.config import Settings


@dataclass
class ScoringWeights:
    """
    Coefficients for crowding and the five opportunity sub-scores.

    Default split of the 0-100 opportunity score:
    - Market Attractiveness: 30
    - Competitive Openness: 25
    - Unmet Need: 20
    - Development Feasibility: 15
    - Partner Landscape: 10
    """
    # Crowding: per-phase weight and the weighted count that maps to 10
    crowding_phase_weights: Dict[Phase, float] = field(default_factory=lambda: {
        Phase.APPROVED: 1.0,
        Phase.PHASE_3: 0.85,
        Phase.PHASE_2_3: 0.7,
        Phase.PHASE_2: 0.55,
        Phase.PHASE_1_2: 0.4,
        Phase.PHASE_1: 0.3,
        Phase.PRECLINICAL: 0.15,
    })
    crowding_saturation: float = 12.0

    # Market attractiveness (points must sum to 30)
    prevalence_points: float = 20.0
    cagr_points: float = 10.0
    max_prevalence_reference: float = 50_000_000  # ~50M patients = full prevalence points
    max_cagr_reference: float = 0.15  # 15% CAGR = full CAGR points

    # Unmet need (must sum to 1.0)
    treatment_gap_weight: float = 0.5
    diagnosis_gap_weight: float = 0.5

    # Development feasibility (must sum to 1.0)
    precedent_weight: float = 0.6
    loa_weight: float = 0.4
    max_avg_loa_reference: float = 0.4

    # Partner landscape
    max_active_partners: int = 20

    def validate(self) -> bool:
        """Validate that weight groups sum to their targets."""
        unmet_sum = self.treatment_gap_weight + self.diagnosis_gap_weight
        feasibility_sum = self.precedent_weight + self.loa_weight
        market_sum = self.prevalence_points + self.cagr_points

        return all([
            abs(unmet_sum - 1.0) < 0.001,
            abs(feasibility_sum - 1.0) < 0.001,
            abs(market_sum - 30.0) < 0.001,
            self.crowding_saturation > 0,
            self.max_prevalence_reference > 1,
            self.max_cagr_reference > 0,
            self.max_avg_loa_reference > 0,
            self.max_active_partners > 0,
            set(self.crowding_phase_weights) == set(Phase),
        ])


# Default weights instance
DEFAULT_WEIGHTS = ScoringWeights()


@dataclass
class ScreenerConfig:
    """Explicit configuration for one ScreenerService."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    default_page_size: int = 50
    max_page_size: int = 250
    top_competitor_count: int = 5
    max_white_space_hints: int = 6
    company_concentration_top_n: int = 10
    score_precision: int = 1

    def __post_init__(self):
        if not self.weights.validate():
            raise ValueError("Scoring weights are inconsistent (check group sums and references)")
        if not 3 <= self.top_competitor_count <= 5:
            raise ValueError("top_competitor_count must be between 3 and 5")
        if self.default_page_size <= 0 or self.max_page_size < self.default_page_size:
            raise ValueError("Page sizes must satisfy 0 < default_page_size <= max_page_size")

    @classmethod
    def from_settings(cls, settings: Settings, weights: Optional[ScoringWeights] = None) -> "ScreenerConfig":
        """Build a config from application settings."""
        return cls(
            weights=weights or ScoringWeights(),
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
            top_competitor_count=settings.top_competitor_count,
            max_white_space_hints=settings.max_white_space_hints,
        )
