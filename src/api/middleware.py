"""HTTP middleware for the pinaFinder API.

Three layers wrap every route: CORS for the map front end, one structlog
``http_request`` line per request, and translation of ``PinaFinderError``
into an ``ErrorResponse`` body whose status comes from the exception class.

# ─── LAYERING ─────────────────────────────────────────────────────────
#
#   create_app() registers ErrorHandlingMiddleware before
#   RequestLoggingMiddleware, and CORS last.  Starlette wraps in reverse,
#   so a vote submission travels:
#
#     browser → CORS → RequestLogging → ErrorHandling → /api/v1/verifications
#
#   A ValidationError raised by the route (say a bad place_id) is already
#   a 400 JSON body by the time RequestLogging records the status.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import PinaFinderError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Allow the front end to call the API from another origin.

    CORS_ORIGINS defaults to ``["*"]``; deployments list the site that
    serves the map.  ``None`` or an empty list also means any origin.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``PinaFinderError`` subclasses and return structured JSON errors.

    The status code comes from the exception class (400 validation, 401
    unauthorized, 503 store/provider unavailable, 500 otherwise).  Stack
    traces stay in the server log; the client only sees the error type
    and message.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except PinaFinderError as exc:
            log = _logger.warning if exc.status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=exc.status_code,
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=body.model_dump(),
            )
