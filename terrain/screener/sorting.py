"""
Sort / Paginate Stage

Deterministic total order over scored indications: the requested field
and direction first, then indication name ascending (then therapy area)
for ties regardless of direction. Paging through the same sorted sequence
never repeats or skips a row.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterable, List, Sequence, TypeVar

from .exceptions import ScreenerValidationError
from .models import SortField, SortOrder
from .scoring import ScoredIndication

T = TypeVar("T")


def _optional(value):
    # None sorts below any number
    return (value is not None, value if value is not None else 0)


_SORT_KEYS: Dict[SortField, Callable[[ScoredIndication], object]] = {
    SortField.OPPORTUNITY_SCORE: lambda s: s.opportunity_score,
    SortField.GLOBAL_PREVALENCE: lambda s: s.global_prevalence,
    SortField.CROWDING_SCORE: lambda s: s.crowding.crowding_score,
    SortField.COMPETITOR_COUNT: lambda s: s.competitor_count,
    SortField.CAGR_5YR: lambda s: s.indication.cagr_5yr,
    SortField.TREATMENT_RATE: lambda s: s.indication.treatment_rate,
    SortField.INDICATION: lambda s: s.name.casefold(),
    SortField.THERAPY_AREA: lambda s: s.therapy_area.casefold(),
    SortField.GLOBAL_INCIDENCE: lambda s: _optional(s.global_incidence),
    SortField.US_PREVALENCE: lambda s: s.indication.us_prevalence,
    SortField.US_INCIDENCE: lambda s: _optional(s.indication.us_incidence),
    SortField.DIAGNOSIS_RATE: lambda s: s.indication.diagnosis_rate,
    SortField.ACTIVE_PARTNER_COUNT: lambda s: s.active_partner_count,
    SortField.UNMET_NEED: lambda s: s.breakdown.unmet_need,
}


def sort_scored(
    items: Iterable[ScoredIndication],
    sort_by: SortField = SortField.OPPORTUNITY_SCORE,
    sort_order: SortOrder = SortOrder.DESC,
) -> List[ScoredIndication]:
    """
    Sort scored indications.

    Two passes of a stable sort: first by the tie-break (name, therapy area)
    ascending, then by the primary key. ``reverse=True`` keeps equal keys in
    their existing order, so ties stay name-ascending in both directions.
    """
    try:
        key = _SORT_KEYS[SortField(sort_by)]
    except (KeyError, ValueError):
        raise ScreenerValidationError("sort_by", f"Unsupported sort field: {sort_by}")
    try:
        descending = SortOrder(sort_order) == SortOrder.DESC
    except ValueError:
        raise ScreenerValidationError("sort_order", f"Unsupported sort order: {sort_order}")

    by_name = sorted(items, key=lambda s: (s.name, s.therapy_area))
    return sorted(by_name, key=key, reverse=descending)


@dataclass(frozen=True)
class Page(Generic[T]):
    """Half-open window ``[offset, offset + limit)`` of a sequence."""
    items: List[T]
    total_count: int
    offset: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total_count


def paginate(items: Sequence[T], offset: int = 0, limit: int = 50) -> Page[T]:
    """
    Window a sorted sequence.

    An offset at or past the end returns an empty page.

    Raises:
        ScreenerValidationError: offset < 0 or limit <= 0
    """
    if offset < 0:
        raise ScreenerValidationError("offset", "must be >= 0")
    if limit <= 0:
        raise ScreenerValidationError("limit", "must be > 0")

    return Page(
        items=list(items[offset:offset + limit]),
        total_count=len(items),
        offset=offset,
        limit=limit,
    )
