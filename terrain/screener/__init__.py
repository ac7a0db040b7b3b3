"""
Opportunity Screener Module

Scores disease indications as development opportunities and describes how
crowded their competitive landscapes are.

Components:
- models: Catalog records, request/response models
- aggregation: Phase / company / mechanism counts over competitor lists
- crowding: Crowding score, bands and HHI concentration
- scoring: Composite 0-100 opportunity score
- filtering, sorting: Request filters, ordering and paging
- formatter: Screener table rows and white-space hints
- service: Pipeline entry point
"""

from terrain.screener.config import DEFAULT_WEIGHTS, ScoringWeights, ScreenerConfig
from terrain.screener.exceptions import (
    CatalogLoadError,
    IndicationNotFoundError,
    ScreenerError,
    ScreenerValidationError,
    UsageLimitReachedError,
)
from terrain.screener.models import (
    Catalog,
    Competitor,
    FilterSpec,
    Indication,
    LandscapeStats,
    OpportunityRow,
    Partner,
    Phase,
    ScreenerRequest,
    ScreenerResponse,
    SortField,
    SortOrder,
)
from terrain.screener.service import ScreenerService
from terrain.screener.factory import create_screener_service

__all__ = [
    "ScreenerService",
    "create_screener_service",
    "ScreenerConfig",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "ScreenerError",
    "ScreenerValidationError",
    "IndicationNotFoundError",
    "CatalogLoadError",
    "UsageLimitReachedError",
    "Catalog",
    "Competitor",
    "FilterSpec",
    "Indication",
    "LandscapeStats",
    "OpportunityRow",
    "Partner",
    "Phase",
    "ScreenerRequest",
    "ScreenerResponse",
    "SortField",
    "SortOrder",
]
