"""pinaFinder API layer — routes, schemas, auth, and middleware."""

from src.api.auth import CurrentUserDep, create_session_token, require_user
from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    SubmitVerificationRequest,
    VerificationResponse,
    VerificationStatsResponse,
)

__all__ = [
    "CurrentUserDep",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "create_session_token",
    "require_user",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "SubmitVerificationRequest",
    "VerificationResponse",
    "VerificationStatsResponse",
]
