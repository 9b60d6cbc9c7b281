"""Custom exception hierarchy for event_enricher.

All application exceptions inherit from :class:`EventEnricherError`, which
carries an optional ``provider_name`` so error handlers can identify which
external system (e.g. "nominatim", "spotify", "sqlite") caused the failure.

The hierarchy is organised by where the failure originates:

    EventEnricherError  (base -- catch-all for any enrichment error)
    +-- ValidationError          (missing required input, raised before I/O)
    +-- ExternalServiceError     (authority unreachable / bad status / bad payload)
    |   +-- AmbiguousResultError (authority candidates disagree on the country)
    +-- PersistentStoreError     (document store read failure or timeout)
    +-- ConfigurationError       (startup / missing credentials)

Store *misses* are not errors at all; they are reported through
:class:`event_enricher.interfaces.document_store.FindResult`.
"""


class EventEnricherError(Exception):
    """Base exception for all event_enricher errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying the external system that triggered the
    error.  ``__str__`` prefixes the provider name in brackets, e.g.
    ``[nominatim] returned status 503``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ValidationError(EventEnricherError):
    """Raised when a required input (venue location, city) is missing."""

    def __init__(
        self,
        message: str = "Required input is missing",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Authority-facing errors
# ---------------------------------------------------------------------------

class ExternalServiceError(EventEnricherError):
    """Raised when an external authority fails or returns nothing usable.

    Geocoding resolvers write this error into the negative cache so that
    the same failing query is not repeated until the entry expires.
    """

    def __init__(
        self,
        message: str = "External service request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AmbiguousResultError(ExternalServiceError):
    """Raised when candidates from an authority cannot be narrowed to one country."""

    def __init__(
        self,
        message: str = "Ambiguous result from external service",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------

class PersistentStoreError(EventEnricherError):
    """Raised when the document store cannot be read or times out."""

    def __init__(
        self,
        message: str = "Persistent store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(EventEnricherError):
    """Raised when configuration is invalid or credentials are missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
