"""
Screener exceptions.

Validation problems, unknown indications and catalog failures are raised
from inside the screener; usage limits come from the layer in front of it
and are only passed through.
"""

from typing import Optional


class ScreenerError(Exception):
    """Base class for screener errors."""
    pass


class ScreenerValidationError(ScreenerError):
    """Raised when a request field is malformed. Never coerced."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class IndicationNotFoundError(ScreenerError):
    """Raised when an indication name is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Indication not found: {name}")


class CatalogLoadError(ScreenerError):
    """Raised when the catalog snapshot cannot be read or validated."""
    pass


class UsageLimitReachedError(ScreenerError):
    """Raised by a usage gate when a plan's monthly limit is exhausted."""

    def __init__(self, feature: str, limit: Optional[int] = None, plan: Optional[str] = None):
        self.feature = feature
        self.limit = limit
        self.plan = plan
        detail = f"Monthly limit reached for {feature}"
        if limit is not None and plan:
            detail += f" ({limit} analyses on {plan} plan)"
        super().__init__(detail)
