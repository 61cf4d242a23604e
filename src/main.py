"""pinaFinder FastAPI application entry point.

Wires together the stores, the places provider, services, and routes via
dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml`` and configures structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config, policy_from_config
from src.config.settings import Settings
from src.providers.places.google_places_provider import GooglePlacesProvider
from src.providers.review.sqlite_review_provider import SQLiteReviewProvider
from src.providers.verification.sqlite_verification_provider import (
    SQLiteVerificationProvider,
)
from src.services.bar_search_service import BarSearchService
from src.services.review_service import ReviewService
from src.services.verification_service import VerificationService
from src.utils.errors import ConfigurationError, StoreUnavailableError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)

_APP_VERSION = str((config.get("app") or {}).get("version", "0.1.0"))


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=30.0)
    policy = policy_from_config(app_config, app_settings)

    # -- Stores (SQLite) --
    verification_store = SQLiteVerificationProvider(db_path=app_settings.verification_db_path)
    review_store = SQLiteReviewProvider(db_path=app_settings.review_db_path)

    verification_service = VerificationService(verification_store)
    review_service = ReviewService(review_store)

    # -- Places search (only when an API key is configured) --
    bar_search_service = None
    if app_settings.places_enabled():
        places = GooglePlacesProvider(
            http_client=http_client,
            api_key=app_settings.google_places_api_key,
        )
        bar_search_service = BarSearchService(
            places=places,
            verification=verification_service,
            policy=policy,
            query=app_settings.places_query,
            stats_concurrency=app_settings.stats_fanout_concurrency,
        )

    places_section = app_config.get("places") or {}

    return {
        "http_client": http_client,
        "verification_store": verification_store,
        "review_store": review_store,
        "verification_service": verification_service,
        "review_service": review_service,
        "bar_search_service": bar_search_service,
        "verification_policy": policy,
        "default_radius_m": int(
            places_section.get("default_radius_m", app_settings.places_default_radius_m)
        ),
        "session_secret": app_settings.session_secret,
        "session_ttl_hours": app_settings.session_ttl_hours,
        "version": _APP_VERSION,
    }


def _check_auth_config(app_settings: Settings) -> None:
    """Refuse to run production with the X-User-Id development login."""
    if app_settings.app_env == "production" and not app_settings.session_secret:
        raise ConfigurationError("SESSION_SECRET must be set when APP_ENV=production")


async def _initialize_store(store: Any) -> bool:
    """Create the store's tables.  ``False`` if the database is unreachable."""
    try:
        await store.initialize()
    except StoreUnavailableError as exc:
        _logger.warning(
            "store_initialize_failed",
            provider=store.get_provider_name(),
            error=str(exc),
        )
        return False
    return True


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    _check_auth_config(settings)
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    # Startup continues with a broken store; the services degrade per call.
    application.state.provider_registry = {
        "verification_store": await _initialize_store(components["verification_store"]),
        "review_store": await _initialize_store(components["review_store"]),
        "places": components["bar_search_service"] is not None,
    }

    policy = components["verification_policy"]
    _logger.info(
        "app_startup",
        version=_APP_VERSION,
        environment=settings.app_env,
        min_samples=policy.min_samples,
        min_ratio=policy.min_ratio,
        places_enabled=settings.places_enabled(),
        dev_auth=not settings.session_secret,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="pinaFinder API",
        version=_APP_VERSION,
        description=(
            "Find bars that serve piña coladas.  Places search results are "
            "overlaid with community votes, and bars with enough positive "
            "votes earn a verified badge."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.cors_origins)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
