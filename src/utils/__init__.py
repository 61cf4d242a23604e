"""Utility modules for pinaFinder.

- **errors** -- Exception hierarchy rooted at PinaFinderError; each class
  carries the HTTP status the API layer maps it to.
- **concurrency** -- Semaphore-bounded gather and fan-out helpers used to
  fetch verification stats for every bar in a search result.
- **geo** -- Great-circle distance between two coordinates.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    PinaFinderError,
    ProviderUnavailableError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import fan_out, throttled_gather

# -- Geometry ----------------------------------------------------------------
from src.utils.geo import haversine_m

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "PinaFinderError",
    "ProviderUnavailableError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "ValidationError",
    "configure_logging",
    "fan_out",
    "get_logger",
    "haversine_m",
    "throttled_gather",
]
