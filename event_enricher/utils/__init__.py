"""Utility modules for event_enricher.

- **errors** -- Domain exception hierarchy rooted at EventEnricherError;
  resolvers raise specific subclasses so callers can tell missing input,
  authority failures and store failures apart.
- **concurrency** -- semaphore-bounded gathering for batches and the
  background sweeper that reclaims expired TTL cache entries.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from event_enricher.utils.errors import (
    AmbiguousResultError,
    ConfigurationError,
    EventEnricherError,
    ExternalServiceError,
    PersistentStoreError,
    ValidationError,
)

# -- Async concurrency helpers ---------------------------------------------
from event_enricher.utils.concurrency import PeriodicSweeper, throttled_gather

# -- Structured logging setup ----------------------------------------------
from event_enricher.utils.logging import configure_logging, get_logger

__all__ = [
    "AmbiguousResultError",
    "ConfigurationError",
    "EventEnricherError",
    "ExternalServiceError",
    "PeriodicSweeper",
    "PersistentStoreError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
