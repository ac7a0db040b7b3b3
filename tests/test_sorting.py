"""
Tests for the Sort / Paginate Stage.

Tests:
- Sorting by each direction with name tie-breaks
- Unknown sort fields and orders
- Paging completeness and edge cases
"""

import pytest

from terrain.screener.exceptions import ScreenerValidationError
from terrain.screener.models import SortField, SortOrder
from terrain.screener.sorting import paginate, sort_scored

from conftest import make_indication


def names(items):
    return [item.name for item in items]


class TestSortScored:
    """Tests for sort_scored()."""

    def test_ties_broken_by_name_in_both_directions(self, scorer):
        scored = scorer.score_all([make_indication(n) for n in ("Charlie", "Alpha", "Bravo")])
        assert len({s.opportunity_score for s in scored}) == 1
        assert names(sort_scored(scored, SortField.OPPORTUNITY_SCORE, SortOrder.DESC)) == ["Alpha", "Bravo", "Charlie"]
        assert names(sort_scored(scored, SortField.OPPORTUNITY_SCORE, SortOrder.ASC)) == ["Alpha", "Bravo", "Charlie"]

    def test_descending_by_prevalence(self, scorer):
        scored = scorer.score_all([
            make_indication("Small", global_prevalence=10),
            make_indication("Large", global_prevalence=10_000),
            make_indication("Medium", global_prevalence=1_000),
        ])
        assert names(sort_scored(scored, SortField.GLOBAL_PREVALENCE, SortOrder.DESC)) == ["Large", "Medium", "Small"]
        assert names(sort_scored(scored, SortField.GLOBAL_PREVALENCE, SortOrder.ASC)) == ["Small", "Medium", "Large"]

    def test_sort_by_indication_name(self, scorer):
        scored = scorer.score_all([make_indication(n) for n in ("beta", "Alpha", "gamma")])
        assert names(sort_scored(scored, SortField.INDICATION, SortOrder.ASC)) == ["Alpha", "beta", "gamma"]
        assert names(sort_scored(scored, SortField.INDICATION, SortOrder.DESC)) == ["gamma", "beta", "Alpha"]

    def test_missing_incidence_sorts_lowest(self, scorer):
        scored = scorer.score_all([
            make_indication("Unknown"),
            make_indication("Known", global_incidence=500),
        ])
        assert names(sort_scored(scored, SortField.GLOBAL_INCIDENCE, SortOrder.DESC)) == ["Known", "Unknown"]
        assert names(sort_scored(scored, SortField.GLOBAL_INCIDENCE, SortOrder.ASC)) == ["Unknown", "Known"]

    def test_string_values_accepted(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        result = sort_scored(scored, "crowding_score", "asc")
        crowding = [s.crowding.crowding_score for s in result]
        assert crowding == sorted(crowding)

    def test_every_field_sorts(self, scorer, large_catalog):
        scored = scorer.score_all(large_catalog.indications)
        for field in SortField:
            for order in SortOrder:
                assert len(sort_scored(scored, field, order)) == len(scored)

    def test_unknown_field_rejected(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        with pytest.raises(ScreenerValidationError) as exc_info:
            sort_scored(scored, "popularity", SortOrder.DESC)
        assert exc_info.value.field == "sort_by"

    def test_unknown_order_rejected(self, scorer, small_catalog):
        scored = scorer.score_all(small_catalog.indications)
        with pytest.raises(ScreenerValidationError) as exc_info:
            sort_scored(scored, SortField.OPPORTUNITY_SCORE, "sideways")
        assert exc_info.value.field == "sort_order"


class TestPaginate:
    """Tests for paginate()."""

    def test_pages_cover_sequence_without_repeats(self):
        items = list(range(23))
        collected = []
        offset = 0
        while True:
            page = paginate(items, offset=offset, limit=5)
            if not page.items:
                break
            collected.extend(page.items)
            offset += 5
        assert collected == items

    def test_total_count_is_full_length(self):
        page = paginate(list(range(10)), offset=2, limit=3)
        assert page.items == [2, 3, 4]
        assert page.total_count == 10
        assert page.has_more

    def test_last_page(self):
        page = paginate(list(range(10)), offset=8, limit=5)
        assert page.items == [8, 9]
        assert not page.has_more

    def test_offset_past_end_is_empty(self):
        page = paginate(list(range(10)), offset=10, limit=5)
        assert page.items == []
        assert page.total_count == 10

        page = paginate(list(range(10)), offset=500, limit=5)
        assert page.items == []

    def test_negative_offset_rejected(self):
        with pytest.raises(ScreenerValidationError) as exc_info:
            paginate([1, 2, 3], offset=-1, limit=5)
        assert exc_info.value.field == "offset"

    def test_non_positive_limit_rejected(self):
        with pytest.raises(ScreenerValidationError) as exc_info:
            paginate([1, 2, 3], offset=0, limit=0)
        assert exc_info.value.field == "limit"
