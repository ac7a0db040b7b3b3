"""
Logging setup for the opportunity screener.
"""
import logging
import sys
import time
from typing import Iterable, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers kept at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "multipart")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """
    Configure the root logger for the screener and its API.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        quiet_loggers: Logger names capped at WARNING
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_settings(settings=None) -> None:
    """Configure logging from TERRAIN_LOG_LEVEL / TERRAIN_LOG_FILE."""
    if settings is None:
        from terrain.utils.config import get_settings
        settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)


class Stopwatch:
    """Wall-clock timer for request logging."""

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        self._end: Optional[float] = None
        return self

    def __exit__(self, *exc_info) -> None:
        self._end = time.perf_counter()

    @property
    def elapsed_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000)
