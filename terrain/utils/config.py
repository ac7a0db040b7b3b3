"""
Configuration management for the TERRAIN screener.
"""
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find the project root (where .env file lives)
# Go up from terrain/utils/config.py to find the root
_THIS_FILE = Path(__file__).resolve()
_PROJECT_ROOT = _THIS_FILE.parent.parent.parent  # terrain/utils -> terrain -> project root
_ENV_FILE = _PROJECT_ROOT / ".env"
_DEFAULT_CATALOG = _PROJECT_ROOT / "data" / "sample_catalog.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Catalog snapshot (read-only JSON)
    catalog_path: str = str(_DEFAULT_CATALOG)

    # Paging
    default_page_size: int = Field(default=50, gt=0)
    max_page_size: int = Field(default=250, gt=0)

    # Result shaping
    top_competitor_count: int = Field(default=5, ge=3, le=5)
    max_white_space_hints: int = Field(default=6, ge=1)

    # API
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="TERRAIN_",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def has_catalog(self) -> bool:
        """Check if the configured catalog file exists"""
        return Path(self.catalog_path).is_file()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings instance loaded from environment
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """
    Force reload settings from environment.

    Returns:
        New Settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
