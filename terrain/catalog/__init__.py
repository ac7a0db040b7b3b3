"""
Catalog Module

Read-only reference data (indications, competitors, partners) for the screener.
"""

from terrain.catalog.repository import InMemoryCatalogProvider, JsonCatalogRepository

__all__ = [
    "JsonCatalogRepository",
    "InMemoryCatalogProvider",
]
