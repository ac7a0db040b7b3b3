"""Opportunity Screener Service.

Runs the screening pipeline against a catalog snapshot:
catalog -> score -> filter -> sort -> paginate -> format.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from .aggregation import landscape_stats, therapy_area_mechanisms
from .config import ScreenerConfig
from .crowding import assess_concentration, assess_crowding
from .exceptions import IndicationNotFoundError, ScreenerValidationError
from .filtering import apply_filters
from .formatter import ResultFormatter
from .models import (
    Catalog,
    Competitor,
    FilterSpec,
    Indication,
    IndicationDetail,
    LandscapeStats,
    OpportunityRow,
    ScoreBucket,
    ScreenerRequest,
    ScreenerResponse,
    ScreenerSummary,
)
from .protocols import CatalogProvider
from .scoring import OpportunityScorer, ScoredIndication
from .sorting import paginate, sort_scored
from terrain.utils.logging import Stopwatch

logger = logging.getLogger(__name__)

SCORE_BUCKETS = [(0, 20), (20, 40), (40, 60), (60, 80), (80, 100)]


def validation_error_from_pydantic(exc: ValidationError) -> ScreenerValidationError:
    """Convert the first pydantic error into a ScreenerValidationError naming the field."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "request"
    return ScreenerValidationError(field, first.get("msg", "invalid value"))


class ScreenerService:
    """Scores, filters, sorts and pages indications from a catalog."""

    def __init__(self, catalog_provider: CatalogProvider, config: Optional[ScreenerConfig] = None):
        """
        Initialize the service.

        Args:
            catalog_provider: Source of the read-only catalog snapshot
            config: Screener configuration (defaults if not provided)
        """
        self.catalog_provider = catalog_provider
        self.config = config or ScreenerConfig()
        self.scorer = OpportunityScorer(self.config.weights, precision=self.config.score_precision)
        self.formatter = ResultFormatter(
            top_competitor_count=self.config.top_competitor_count,
            max_white_space_hints=self.config.max_white_space_hints,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_request(self, request: Union[ScreenerRequest, Mapping[str, Any], None]) -> ScreenerRequest:
        """
        Validate a screener request and resolve the page size.

        Raises:
            ScreenerValidationError: Naming the first invalid field
        """
        if request is None:
            request = ScreenerRequest()
        elif not isinstance(request, ScreenerRequest):
            try:
                request = ScreenerRequest.model_validate(dict(request))
            except ValidationError as e:
                error = validation_error_from_pydantic(e)
                logger.warning(f"Rejected screener request: {error}")
                raise error from e

        if request.limit is None:
            request = request.model_copy(update={"limit": self.config.default_page_size})
        elif request.limit > self.config.max_page_size:
            logger.warning(f"Rejected screener request: limit {request.limit} > {self.config.max_page_size}")
            raise ScreenerValidationError("limit", f"must be <= {self.config.max_page_size}")

        return request

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _score_catalog(self, catalog: Catalog) -> List[ScoredIndication]:
        return self.scorer.score_all(catalog.indications, catalog.partners)

    def _format(self, catalog: Catalog, items: Sequence[ScoredIndication]) -> List[OpportunityRow]:
        area_mechs = therapy_area_mechanisms(catalog.indications)
        return [
            self.formatter.format(item, area_mechs.get(item.therapy_area, frozenset()))
            for item in items
        ]

    def screen(self, request: Union[ScreenerRequest, Mapping[str, Any], None] = None) -> ScreenerResponse:
        """
        Run the full screener pipeline.

        Args:
            request: ScreenerRequest or its dict form

        Returns:
            ScreenerResponse with one page of rows and the filtered total

        Raises:
            ScreenerValidationError: If the request is malformed
        """
        with Stopwatch() as timer:
            request = self.validate_request(request)
            filters = request.filters or FilterSpec()

            logger.info(
                f"Screening catalog: filters={filters.model_dump(exclude_none=True)}, "
                f"sort={request.sort_by.value} {request.sort_order.value}, "
                f"offset={request.offset}, limit={request.limit}"
            )

            catalog = self.catalog_provider.get_catalog()
            scored = self._score_catalog(catalog)
            filtered = apply_filters(scored, filters)
            ordered = sort_scored(filtered, request.sort_by, request.sort_order)
            page = paginate(ordered, offset=request.offset, limit=request.limit)
            rows = self._format(catalog, page.items)

        logger.info(f"Screener returned {len(rows)} of {page.total_count} indications in {timer.elapsed_ms}ms")

        return ScreenerResponse(
            opportunities=rows,
            total_count=page.total_count,
            has_more=page.has_more,
            filters_applied=filters,
            generated_at=datetime.now(timezone.utc),
            catalog_version=catalog.version,
        )

    # ------------------------------------------------------------------
    # Chart-facing and lookup helpers
    # ------------------------------------------------------------------

    def landscape(self, competitors: Sequence[Competitor], estimate_shares: bool = False) -> LandscapeStats:
        """
        Aggregations for chart rendering, straight from a competitor list.

        Args:
            competitors: Raw competitor records
            estimate_shares: Estimate market shares when none are supplied

        Returns:
            LandscapeStats with phase/company/mechanism distributions,
            crowding and concentration
        """
        stats = landscape_stats(competitors, top_n=self.config.company_concentration_top_n)
        return LandscapeStats(
            phase_distribution=stats.phase_distribution,
            company_concentration=stats.company_concentration,
            mechanism_distribution=stats.mechanism_distribution,
            crowding=assess_crowding(
                competitors, weights=self.config.weights, precision=self.config.score_precision
            ),
            concentration=assess_concentration(competitors, estimate=estimate_shares),
        )

    def _find_indication(self, catalog: Catalog, name: str) -> Indication:
        wanted = name.strip().casefold()
        for indication in catalog.indications:
            if indication.name.strip().casefold() == wanted:
                return indication
        raise IndicationNotFoundError(name)

    def score_indication(self, name: str) -> OpportunityRow:
        """
        Score a single indication by name (case-insensitive).

        Raises:
            IndicationNotFoundError: If the name is not in the catalog
        """
        catalog = self.catalog_provider.get_catalog()
        indication = self._find_indication(catalog, name)
        scored = self.scorer.score(indication, catalog.partners)
        return self._format(catalog, [scored])[0]

    def indication_detail(self, name: str, estimate_shares: bool = False) -> IndicationDetail:
        """Scored row plus landscape aggregations for one indication."""
        row = self.score_indication(name)
        indication = self._find_indication(self.catalog_provider.get_catalog(), name)
        return IndicationDetail(
            row=row,
            landscape=self.landscape(indication.competitors, estimate_shares=estimate_shares),
        )

    def therapy_areas(self) -> List[str]:
        """Distinct therapy areas in the catalog, sorted."""
        catalog = self.catalog_provider.get_catalog()
        return sorted({ind.therapy_area for ind in catalog.indications})

    def summary(self) -> ScreenerSummary:
        """Catalog-wide statistics for dashboard widgets."""
        catalog = self.catalog_provider.get_catalog()
        scored = self._score_catalog(catalog)

        area_counts: Dict[str, int] = dict(sorted(Counter(s.therapy_area for s in scored).items()))
        buckets = Counter()
        for s in scored:
            for lo, hi in SCORE_BUCKETS:
                if s.opportunity_score < hi or hi == SCORE_BUCKETS[-1][1]:
                    buckets[f"{lo}-{hi}"] += 1
                    break

        avg = sum(s.opportunity_score for s in scored) / max(len(scored), 1)

        return ScreenerSummary(
            total_indications=len(scored),
            therapy_area_counts=area_counts,
            avg_opportunity_score=round(avg, 1),
            score_distribution=[
                ScoreBucket(bucket=f"{lo}-{hi}", count=buckets.get(f"{lo}-{hi}", 0))
                for lo, hi in SCORE_BUCKETS
            ],
        )
