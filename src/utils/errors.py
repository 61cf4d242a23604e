"""Custom exception hierarchy for pinaFinder.

All application exceptions inherit from :class:`PinaFinderError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend (e.g. "sqlite_verification", "google_places") caused the failure.

The hierarchy is organized by where the failure originates:

    PinaFinderError  (base -- catch-all for any pinaFinder error)
    +-- ValidationError          (malformed input, rejected before storage)
    +-- UnauthorizedError        (no authenticated principal)
    +-- StoreUnavailableError    (persistence layer unreachable)
    +-- ProviderUnavailableError (places provider down / unreachable)
    +-- ConfigurationError       (startup / missing config)

Each class also carries a ``status_code`` used by the API middleware when
the exception escapes a route handler.
"""


class PinaFinderError(Exception):
    """Base exception for all pinaFinder errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which backend triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite_verification] database is locked``.
    """

    status_code: int = 500

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


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------

class ValidationError(PinaFinderError):
    """Raised when input is malformed (empty place id, non-boolean vote, ...)."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UnauthorizedError(PinaFinderError):
    """Raised when a protected operation is attempted without a valid principal."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Backend errors
# ---------------------------------------------------------------------------

class StoreUnavailableError(PinaFinderError):
    """Raised when the persistent store cannot be reached or queried.

    Services catch this at the point of contact and degrade to neutral
    defaults for reads; writes surface it as a ``None`` sentinel.
    """

    status_code = 503

    def __init__(
        self,
        message: str = "Persistent store is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(PinaFinderError):
    """Raised when the external places provider is unreachable or refuses a request."""

    status_code = 503

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PinaFinderError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
