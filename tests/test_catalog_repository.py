"""
Tests for the JSON catalog repository.
"""

import json
from pathlib import Path

import pytest

from terrain.catalog.repository import InMemoryCatalogProvider, JsonCatalogRepository
from terrain.screener.exceptions import CatalogLoadError
from terrain.screener.models import Catalog, Phase

SAMPLE_CATALOG = Path(__file__).parent.parent / "data" / "sample_catalog.json"


def write_catalog(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestJsonCatalogRepository:
    """Tests for JsonCatalogRepository."""

    def test_loads_and_caches(self, tmp_path):
        path = write_catalog(tmp_path / "catalog.json", {
            "version": "v7",
            "indications": [{
                "name": "Test Disease",
                "therapy_area": "Oncology",
                "us_prevalence": 1000,
                "diagnosis_rate": 0.5,
                "treatment_rate": 0.5,
                "competitors": [{"company": "Acme", "asset_name": "A-1", "phase": "phase 3"}],
            }],
        })
        repo = JsonCatalogRepository(path)
        catalog = repo.get_catalog()
        assert catalog.version == "v7"
        assert catalog.indications[0].competitors[0].phase == Phase.PHASE_3
        assert repo.get_catalog() is catalog

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            JsonCatalogRepository(tmp_path / "missing.json").get_catalog()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError):
            JsonCatalogRepository(path).get_catalog()

    def test_invalid_records(self, tmp_path):
        path = write_catalog(tmp_path / "bad.json", {
            "indications": [{
                "name": "Bad",
                "therapy_area": "Oncology",
                "us_prevalence": 10,
                "diagnosis_rate": 2.0,
                "treatment_rate": 0.5,
            }],
        })
        with pytest.raises(CatalogLoadError):
            JsonCatalogRepository(path).get_catalog()

    def test_sample_catalog(self):
        catalog = JsonCatalogRepository(SAMPLE_CATALOG).get_catalog()
        assert catalog.version == "2026.10-sample"
        assert len(catalog.indications) == 11
        assert len({ind.name for ind in catalog.indications}) == 11
        assert catalog.partners


class TestInMemoryCatalogProvider:
    """Tests for InMemoryCatalogProvider."""

    def test_returns_catalog(self):
        catalog = Catalog(version="mem")
        assert InMemoryCatalogProvider(catalog).get_catalog() is catalog
