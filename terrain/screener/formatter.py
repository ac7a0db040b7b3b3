"""
Result Formatter

Read-only projection of a ScoredIndication into an OpportunityRow. No
scoring happens here; the phase mix comes from the Aggregation Library.
"""

from typing import AbstractSet, List, Sequence, Set

from .aggregation import normalize_mechanism, phase_distribution
from .models import (
    Competitor,
    OpportunityRow,
    Phase,
    PHASE_ORDER,
    TopCompetitor,
)
from .scoring import ScoredIndication

LOW_RATE_THRESHOLD = 0.5

STANDARD_LINES = ("1L", "2L", "2L+", "maintenance", "adjuvant", "neoadjuvant")
COMBINATION_KEYWORDS = ("combo", "combination", "+", "plus")

# Landscape-gap hints stop at this many; market-gap hints may fill up to the cap
LANDSCAPE_HINT_LIMIT = 5
LINE_HINT_STOP = 3


def top_competitors(competitors: Sequence[Competitor], n: int = 5) -> List[TopCompetitor]:
    """
    Top ``n`` competitors by differentiation score (descending).

    Missing scores rank last; ties are broken by company then asset name.
    """
    ranked = sorted(
        competitors,
        key=lambda c: (
            -(c.differentiation_score if c.differentiation_score is not None else -1),
            c.company,
            c.asset_name,
        ),
    )
    return [
        TopCompetitor(
            company=c.company,
            asset_name=c.asset_name,
            phase=c.phase,
            mechanism=c.mechanism,
            differentiation_score=c.differentiation_score,
        )
        for c in ranked[:n]
    ]


def top_companies(competitors: Sequence[Competitor], n: int = 3) -> List[str]:
    """Top ``n`` unique sponsors, most advanced phase first (catalog order within a phase)."""
    ranked = sorted(competitors, key=lambda c: -c.phase.rank)
    companies: List[str] = []
    for c in ranked:
        if c.company not in companies:
            companies.append(c.company)
        if len(companies) >= n:
            break
    return companies


def lines_of_therapy(competitors: Sequence[Competitor]) -> Set[str]:
    """Lower-cased lines of therapy covered by at least one competitor."""
    return {c.line_of_therapy.strip().lower() for c in competitors if c.line_of_therapy}


def is_combination(competitor: Competitor) -> bool:
    """True if the mechanism or regimen notes describe a combination."""
    text = f"{competitor.mechanism} {competitor.indication_specifics}".lower()
    return any(keyword in text for keyword in COMBINATION_KEYWORDS)


def empty_phases(competitors: Sequence[Competitor]) -> List[Phase]:
    """Phases with no competitor, in development order."""
    dist = phase_distribution(competitors)
    return [phase for phase in PHASE_ORDER if dist[phase] == 0]


def missing_mechanisms(competitors: Sequence[Competitor], area_mechanisms: AbstractSet[str]) -> List[str]:
    """Mechanisms active elsewhere in the therapy area but absent here."""
    own = {normalize_mechanism(c.mechanism) for c in competitors}
    return sorted(area_mechanisms - own)


class ResultFormatter:
    """Builds OpportunityRows for the screener table."""

    def __init__(
        self,
        top_competitor_count: int = 5,
        max_white_space_hints: int = 6,
        top_company_count: int = 3,
    ):
        self.top_competitor_count = top_competitor_count
        self.max_white_space_hints = max_white_space_hints
        self.top_company_count = top_company_count

    def white_space_hints(
        self,
        scored: ScoredIndication,
        phases: Sequence[Phase],
        mechanisms: Sequence[str],
    ) -> List[str]:
        """
        Short notes on gaps in the competitive landscape.

        A greenfield indication gets the single greenfield note. Otherwise
        landscape gaps come first (mechanism diversity, empty phases, absent
        area mechanisms, lines of therapy, biomarkers, combinations) and stop
        at LANDSCAPE_HINT_LIMIT; market gaps (diagnosis, treatment, orphan)
        fill the rest up to ``max_white_space_hints``.
        """
        competitors = scored.competitors
        indication = scored.indication

        if not competitors:
            return ["No active competitors - greenfield opportunity"]

        cap = self.max_white_space_hints
        hints: List[str] = []

        distinct_mechs = {normalize_mechanism(c.mechanism) for c in competitors} - {""}
        if len(distinct_mechs) <= 2 and len(competitors) >= 4:
            hints.append(
                f"Low mechanism diversity ({len(distinct_mechs)} classes for {len(competitors)} assets) "
                f"- novel MoA differentiation opportunity"
            )

        if phases:
            hints.append(f"No competitors in {', '.join(p.value for p in phases)}")

        if mechanisms:
            shown = ", ".join(mechanisms[:3])
            more = f" (+{len(mechanisms) - 3} more)" if len(mechanisms) > 3 else ""
            hints.append(
                f"Mechanisms active elsewhere in {indication.therapy_area} but absent here: {shown}{more}"
            )

        covered = lines_of_therapy(competitors)
        for line in STANDARD_LINES:
            if line.lower() not in covered and len(hints) < LANDSCAPE_HINT_LIMIT:
                hints.append(f"No assets targeting {line} - potential line-of-therapy gap")
            if len(hints) >= LINE_HINT_STOP:
                break

        if not any(c.has_biomarker_selection for c in competitors) and len(hints) < LANDSCAPE_HINT_LIMIT:
            hints.append("No biomarker-selected assets - precision medicine angle open")

        if (
            len(competitors) >= 3
            and not any(is_combination(c) for c in competitors)
            and len(hints) < LANDSCAPE_HINT_LIMIT
        ):
            hints.append("No combination regimens in pipeline - rational combination design opportunity")

        if indication.diagnosis_rate < LOW_RATE_THRESHOLD and len(hints) < cap:
            hints.append(
                f"Low diagnosis rate ({round(indication.diagnosis_rate * 100)}%) "
                f"- market expansion via diagnostic companion"
            )
        if indication.treatment_rate < LOW_RATE_THRESHOLD and len(hints) < cap:
            hints.append(
                f"Low treatment rate ({round(indication.treatment_rate * 100)}%) "
                f"- significant untreated patient pool"
            )

        if len(competitors) >= 2 and not any(c.orphan_drug for c in competitors) and len(hints) < cap:
            hints.append("No orphan-designated assets - potential for orphan drug incentives")

        return hints[:cap]

    def format(self, scored: ScoredIndication, area_mechanisms: AbstractSet[str] = frozenset()) -> OpportunityRow:
        """
        Project a scored indication into a screener row.

        Args:
            scored: Output of OpportunityScorer.score()
            area_mechanisms: Normalized mechanisms seen across the therapy area

        Returns:
            OpportunityRow
        """
        indication = scored.indication
        competitors = scored.competitors
        crowding = scored.crowding

        phases = empty_phases(competitors)
        mechanisms = missing_mechanisms(competitors, area_mechanisms)

        return OpportunityRow(
            indication=indication.name,
            therapy_area=indication.therapy_area,
            opportunity_score=scored.opportunity_score,
            score_breakdown=scored.breakdown,
            global_prevalence=scored.global_prevalence,
            global_incidence=scored.global_incidence,
            us_prevalence=indication.us_prevalence,
            us_incidence=indication.us_incidence,
            cagr_5yr=indication.cagr_5yr,
            diagnosis_rate=indication.diagnosis_rate,
            treatment_rate=indication.treatment_rate,
            crowding_score=crowding.crowding_score,
            crowding_label=crowding.crowding_label,
            crowding_color=crowding.crowding_color,
            concentration_index=crowding.concentration_index,
            concentration_label=crowding.concentration_label,
            concentration_computable=crowding.concentration_computable,
            competitor_count=scored.competitor_count,
            phase_distribution=phase_distribution(competitors),
            top_competitors=top_competitors(competitors, self.top_competitor_count),
            top_companies=top_companies(competitors, self.top_company_count),
            white_space_hints=self.white_space_hints(scored, phases, mechanisms),
            white_space_phases=phases,
            white_space_mechanisms=mechanisms,
            active_partner_count=scored.active_partner_count,
        )
