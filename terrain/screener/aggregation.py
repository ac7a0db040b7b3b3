"""
Aggregation Library

Pure functions that summarize a competitor list:
- Phase mix (counts for all seven phases)
- Company concentration (top companies by asset count)
- Mechanism distribution (counts per normalized mechanism)

Both the scorer and chart-facing callers use these functions, so displayed
and scored figures always come from the same counts.
"""

from collections import Counter
from typing import Dict, Iterable, List, Sequence, Set

from .models import (
    CompanyCount,
    Competitor,
    Indication,
    LandscapeStats,
    MechanismCount,
    Phase,
    PHASE_ORDER,
)


def normalize_mechanism(mechanism: str) -> str:
    """Trim, casefold and collapse internal whitespace."""
    return " ".join(mechanism.split()).casefold()


def phase_distribution(competitors: Iterable[Competitor]) -> Dict[Phase, int]:
    """
    Count competitors per phase.

    Returns:
        Dict with every phase in development order; counts sum to the
        number of competitors
    """
    counts = Counter(c.phase for c in competitors)
    return {phase: counts.get(phase, 0) for phase in PHASE_ORDER}


def company_concentration(competitors: Sequence[Competitor], top_n: int = 10) -> List[CompanyCount]:
    """
    Top companies by number of assets.

    Sorted by count descending, ties broken by company name ascending.
    Blank company names are skipped.
    """
    counts: Counter = Counter()
    for c in competitors:
        company = c.company.strip()
        if company:
            counts[company] += 1

    total = len(competitors)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        CompanyCount(
            company=company,
            count=count,
            share_pct=round(count / total * 100, 1) if total else 0.0,
        )
        for company, count in ranked[:top_n]
    ]


def mechanism_distribution(competitors: Iterable[Competitor]) -> List[MechanismCount]:
    """
    Counts per distinct mechanism (case-insensitive, whitespace-trimmed).

    Sorted by count descending, ties broken by mechanism ascending.
    """
    counts: Counter = Counter()
    for c in competitors:
        key = normalize_mechanism(c.mechanism)
        if key:
            counts[key] += 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [MechanismCount(mechanism=m, count=n) for m, n in ranked]


def late_stage_fraction(competitors: Sequence[Competitor], threshold: Phase = Phase.PHASE_2) -> float:
    """Fraction of competitors at or past ``threshold`` (0.0 for an empty set)."""
    if not competitors:
        return 0.0
    at_or_past = sum(1 for c in competitors if c.phase.rank >= threshold.rank)
    return at_or_past / len(competitors)


def therapy_area_mechanisms(indications: Iterable[Indication]) -> Dict[str, Set[str]]:
    """Normalized mechanisms seen across each therapy area."""
    by_area: Dict[str, Set[str]] = {}
    for indication in indications:
        mechs = by_area.setdefault(indication.therapy_area, set())
        for c in indication.competitors:
            key = normalize_mechanism(c.mechanism)
            if key:
                mechs.add(key)
    return by_area


def landscape_stats(competitors: Sequence[Competitor], top_n: int = 10) -> LandscapeStats:
    """Chart-facing bundle of the three aggregations."""
    return LandscapeStats(
        phase_distribution=phase_distribution(competitors),
        company_concentration=company_concentration(competitors, top_n=top_n),
        mechanism_distribution=mechanism_distribution(competitors),
    )
