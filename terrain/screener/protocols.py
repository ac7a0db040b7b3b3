"""
Screener Protocols

Interfaces for the collaborators the screener depends on but does not own.
"""

from typing import Optional, Protocol

from .models import Catalog


class CatalogProvider(Protocol):
    """Source of the read-only catalog snapshot."""

    def get_catalog(self) -> Catalog:
        """
        Return the current catalog snapshot.

        The same snapshot must not change while a request is being served.
        """
        ...


class UsageGate(Protocol):
    """Authorization / plan usage layer in front of the screener."""

    def check(self, user_id: Optional[str], feature: str) -> None:
        """
        Verify the user may run ``feature``.

        Raises:
            UsageLimitReachedError: If the plan's limit is exhausted
        """
        ...

    def record(self, user_id: Optional[str], feature: str) -> None:
        """Record one successful use of ``feature``."""
        ...
