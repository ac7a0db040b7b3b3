"""
Crowding / Concentration Calculator

Crowding score (0-10):
    Phase-weighted competitor count, scaled so that a weighted count equal
    to ``crowding_saturation`` (default 12) maps to 10, then clipped.
    Approved and late-stage assets weigh more than early-stage ones.

Concentration index (HHI):
    Sum of squared percentage market shares (0-10000). Undefined when no
    market share is known; reported as None, never as zero.

Bands are ordered ``(lower_bound, label)`` tables. Labels and UI colors are
looked up from these tables only.
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from .config import DEFAULT_WEIGHTS, ScoringWeights
from .models import (
    Competitor,
    ConcentrationResult,
    CrowdingAssessment,
    Phase,
)
from .reference import PHASE_SHARE_WEIGHT


class Band(NamedTuple):
    """A band starting at ``lower_bound`` (inclusive unless stated)."""
    lower_bound: float
    label: str
    inclusive: bool = True


CROWDING_BANDS: Tuple[Band, ...] = (
    Band(0, "Wide Open"),
    Band(3, "Emerging"),
    Band(5, "Competitive"),
    Band(8, "Saturated"),
)

CROWDING_COLORS = {
    "Wide Open": "green",
    "Emerging": "green",
    "Competitive": "amber",
    "Saturated": "red",
}

CONCENTRATION_BANDS: Tuple[Band, ...] = (
    Band(0, "Fragmented"),
    Band(1500, "Moderately Concentrated"),
    Band(2500, "Highly Concentrated", inclusive=False),
)


def band_label(value: float, bands: Sequence[Band]) -> str:
    """Return the label of the highest band that ``value`` reaches."""
    for band in reversed(bands):
        if value > band.lower_bound or (band.inclusive and value == band.lower_bound):
            return band.label
    return bands[0].label


def crowding_label(score: float) -> str:
    return band_label(score, CROWDING_BANDS)


def crowding_color(label: str) -> str:
    """UI color for a crowding label (red / amber / green)."""
    return CROWDING_COLORS[label]


def concentration_label(index: float) -> str:
    return band_label(index, CONCENTRATION_BANDS)


def crowding_score(
    competitors: Iterable[Competitor],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    precision: int = 1,
) -> float:
    """
    Compute the 0-10 crowding score for a competitor set.

    Args:
        competitors: Competitors in the indication
        weights: Phase weights and saturation point
        precision: Decimal places to round to

    Returns:
        Score in [0, 10]; 0 for an empty set
    """
    phase_weights = weights.crowding_phase_weights
    weighted = sum(phase_weights.get(c.phase, phase_weights[Phase.PRECLINICAL]) for c in competitors)
    raw = weighted / weights.crowding_saturation * 10
    return round(min(max(raw, 0.0), 10.0), precision)


def concentration_index(shares: Iterable[Optional[float]]) -> Optional[float]:
    """
    Herfindahl-Hirschman index from percentage shares.

    Missing shares are skipped. Returns None when no share is available.
    """
    available = [s for s in shares if s is not None]
    if not available:
        return None
    return round(sum(s * s for s in available), 1)


def estimate_market_shares(competitors: Sequence[Competitor]) -> List[float]:
    """
    Estimate percentage market shares from phase, evidence and differentiation.

    Each asset scores ``phase_weight * evidence * differentiation / 10`` with
    a +20 bonus for approved assets with evidence >= 7. Scores are normalized
    to 100. Missing evidence/differentiation default to 5.

    Returns an empty list when every asset scores zero, so the index stays
    undefined. Only used when a caller explicitly asks for estimated
    concentration.
    """
    scores = []
    for c in competitors:
        evidence = c.evidence_score if c.evidence_score is not None else 5
        differentiation = c.differentiation_score if c.differentiation_score is not None else 5
        score = PHASE_SHARE_WEIGHT.get(c.phase, 1) * evidence * (differentiation / 10)
        if c.phase == Phase.APPROVED and evidence >= 7:
            score += 20
        scores.append(score)

    total = sum(scores)
    if total <= 0:
        return []
    return [round(s / total * 100, 1) for s in scores]


def assess_concentration(competitors: Sequence[Competitor], estimate: bool = False) -> ConcentrationResult:
    """
    Concentration for a competitor set.

    Uses supplied ``market_share_pct`` values. With ``estimate=True`` and no
    supplied shares, falls back to estimate_market_shares() and flags the
    result as estimated.
    """
    index = concentration_index(c.market_share_pct for c in competitors)
    estimated = False

    if index is None and estimate and competitors:
        index = concentration_index(estimate_market_shares(competitors))
        estimated = True

    if index is None:
        return ConcentrationResult()

    return ConcentrationResult(
        concentration_index=index,
        concentration_label=concentration_label(index),
        computable=True,
        estimated=estimated,
    )


def assess_crowding(
    competitors: Sequence[Competitor],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    precision: int = 1,
) -> CrowdingAssessment:
    """Crowding score, label, color and (supplied-share) concentration."""
    score = crowding_score(competitors, weights=weights, precision=precision)
    label = crowding_label(score)
    concentration = assess_concentration(competitors)

    return CrowdingAssessment(
        crowding_score=score,
        crowding_label=label,
        crowding_color=crowding_color(label),
        concentration_index=concentration.concentration_index,
        concentration_label=concentration.concentration_label,
        concentration_computable=concentration.computable,
    )
