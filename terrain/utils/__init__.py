"""Shared configuration and logging helpers."""

from .config import Settings, get_settings, reload_settings
from .logging import Stopwatch, setup_logging, setup_logging_from_settings

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "setup_logging",
    "setup_logging_from_settings",
    "Stopwatch",
]
