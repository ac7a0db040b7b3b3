"""
Factory Functions for the Opportunity Screener

Provides factory functions to create a fully-wired ScreenerService.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from terrain.screener.config import ScoringWeights, ScreenerConfig
from terrain.screener.protocols import CatalogProvider
from terrain.screener.service import ScreenerService
from terrain.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_screener_service(
    catalog_path: Optional[Union[str, Path]] = None,
    catalog_provider: Optional[CatalogProvider] = None,
    scoring_weights: Optional[ScoringWeights] = None,
    settings: Optional[Settings] = None,
) -> ScreenerService:
    """
    Create a ScreenerService with its catalog and configuration.

    Args:
        catalog_path: JSON catalog file (defaults to TERRAIN_CATALOG_PATH)
        catalog_provider: Use this provider instead of loading a file
        scoring_weights: Optional custom scoring weights
        settings: Settings to read defaults from (defaults to get_settings())

    Returns:
        Configured ScreenerService
    """
    settings = settings or get_settings()
    config = ScreenerConfig.from_settings(settings, weights=scoring_weights)

    if catalog_provider is None:
        # Imported here: terrain.catalog depends on terrain.screener.models
        from terrain.catalog.repository import JsonCatalogRepository

        if catalog_path is None and not settings.has_catalog:
            logger.warning(f"Catalog file not found at {settings.catalog_path}; screener requests will fail")

        path = Path(catalog_path) if catalog_path else Path(settings.catalog_path)
        catalog_provider = JsonCatalogRepository(path)
        logger.info(f"Created JsonCatalogRepository for {path}")

    return ScreenerService(catalog_provider, config)
