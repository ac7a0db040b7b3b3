"""
Filter Engine

Applies a FilterSpec to scored indications. Populated fields combine with
AND; list fields match any member. The input is never modified and the
result keeps input order, so filtering is idempotent and independent
fields commute.
"""

from typing import Iterable, List, Optional, Sequence

from .models import FilterSpec, Indication, Partner
from .scoring import OpportunityScorer, ScoredIndication


def passes_filters(item: ScoredIndication, spec: FilterSpec) -> bool:
    """Return True if ``item`` satisfies every populated filter field."""
    if spec.therapy_areas:
        areas = {a.strip().casefold() for a in spec.therapy_areas}
        if item.therapy_area.strip().casefold() not in areas:
            return False

    if spec.phases:
        wanted = set(spec.phases)
        if not any(c.phase in wanted for c in item.competitors):
            return False

    if spec.min_prevalence is not None and item.global_prevalence < spec.min_prevalence:
        return False

    if spec.max_crowding is not None and item.crowding.crowding_score > spec.max_crowding:
        return False

    if spec.min_opportunity_score is not None and item.opportunity_score < spec.min_opportunity_score:
        return False

    return True


def apply_filters(items: Iterable[ScoredIndication], spec: Optional[FilterSpec] = None) -> List[ScoredIndication]:
    """
    Filter scored indications.

    Args:
        items: Scored indications
        spec: Filters; None or an empty spec keeps everything

    Returns:
        New list of the items that pass, in input order
    """
    if spec is None or spec.is_empty():
        return list(items)
    return [item for item in items if passes_filters(item, spec)]


def filter_catalog(
    indications: Iterable[Indication],
    spec: FilterSpec,
    scorer: OpportunityScorer,
    partners: Sequence[Partner] = (),
) -> List[Indication]:
    """Filter raw indications, scoring them as needed."""
    scored = scorer.score_all(indications, partners)
    return [item.indication for item in apply_filters(scored, spec)]
