"""Principal resolution for protected routes.

# ─── HOW SESSION TOKENS WORK ─────────────────────────────────────────
#
# Sign-in itself happens upstream (the OAuth provider).  It hands the
# browser an HMAC-signed token that we only verify:
#
#   token format:  {user_id}:{unix_timestamp}:{hmac_hex_digest}
#   hmac:          HMAC-SHA256(secret, "{user_id}:{unix_timestamp}")
#
# The token is read from the ``pina_session`` cookie, or from an
# ``Authorization: Bearer <token>`` header for non-browser clients.
#
# Dev mode: when SESSION_SECRET is empty the ``X-User-Id`` header is
# trusted as-is so local development needs no sign-in flow.  Startup
# fails with APP_ENV=production and no secret (see src.main).
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import Annotated

from fastapi import Depends, Request

from src.utils.errors import UnauthorizedError

COOKIE_NAME = "pina_session"
DEV_USER_HEADER = "x-user-id"


def _sign(secret: str, payload: str) -> str:
    return hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def create_session_token(user_id: int, secret: str, issued_at: int | None = None) -> str:
    """Create a signed session token for ``user_id``."""
    timestamp = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{timestamp}"
    return f"{payload}:{_sign(secret, payload)}"


def validate_session_token(token: str, secret: str, ttl_hours: int = 168) -> int | None:
    """Return the user id carried by a valid, unexpired token, else ``None``."""
    if not token or not secret:
        return None

    parts = token.split(":")
    if len(parts) != 3:
        return None
    user_id_str, timestamp_str, provided = parts

    try:
        user_id = int(user_id_str)
        timestamp = int(timestamp_str)
    except ValueError:
        return None
    if user_id < 1:
        return None

    if time.time() - timestamp > ttl_hours * 3600:
        return None

    expected = _sign(secret, f"{user_id_str}:{timestamp_str}")
    if not hmac.compare_digest(provided, expected):
        return None
    return user_id


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return ""


def resolve_user_id(request: Request) -> int | None:
    """Work out who is calling, or ``None`` for anonymous requests."""
    state = request.app.state
    secret: str = getattr(state, "session_secret", "")
    ttl_hours: int = getattr(state, "session_ttl_hours", 168)

    if not secret:
        raw = request.headers.get(DEV_USER_HEADER, "")
        try:
            user_id = int(raw)
        except ValueError:
            return None
        return user_id if user_id >= 1 else None

    token = request.cookies.get(COOKIE_NAME, "") or _bearer_token(request)
    return validate_session_token(token, secret, ttl_hours)


def require_user(request: Request) -> int:
    """FastAPI dependency: the caller's user id, or UnauthorizedError."""
    user_id = resolve_user_id(request)
    if user_id is None:
        raise UnauthorizedError("Please log in to continue")
    return user_id


CurrentUserDep = Annotated[int, Depends(require_user)]
