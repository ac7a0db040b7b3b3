"""
Repository for the screener catalog.

Loads a JSON snapshot once and serves the same frozen Catalog on every call.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from terrain.screener.exceptions import CatalogLoadError
from terrain.screener.models import Catalog

logger = logging.getLogger(__name__)


class JsonCatalogRepository:
    """Catalog provider backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize repository.

        Args:
            path: Path to the catalog JSON file
        """
        self.path = Path(path)
        self._catalog: Optional[Catalog] = None
        self._lock = threading.Lock()

    def load(self) -> Catalog:
        """
        Read and validate the catalog file.

        Raises:
            CatalogLoadError: If the file is missing, not JSON, or fails validation
        """
        if not self.path.is_file():
            raise CatalogLoadError(f"Catalog file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogLoadError(f"Catalog file is not valid JSON: {self.path}: {e}") from e

        try:
            catalog = Catalog.model_validate(data)
        except ValidationError as e:
            raise CatalogLoadError(f"Catalog file failed validation: {self.path}: {e}") from e

        logger.info(
            f"Loaded catalog {catalog.version} from {self.path}: "
            f"{len(catalog.indications)} indications, {len(catalog.partners)} partners"
        )
        return catalog

    def get_catalog(self) -> Catalog:
        """Return the cached snapshot, loading it on first use."""
        if self._catalog is None:
            with self._lock:
                if self._catalog is None:
                    self._catalog = self.load()
        return self._catalog


class InMemoryCatalogProvider:
    """Catalog provider around an already-built Catalog (tests, embedding)."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def get_catalog(self) -> Catalog:
        return self.catalog
