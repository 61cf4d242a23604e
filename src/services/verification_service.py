"""Crowd verification — vote upsert, per-venue tallies, and user-vote lookup.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: IVerificationProvider.
#
#   submit_vote    validate -> one atomic upsert -> VoteRecord
#   get_stats      grouped count on every call (no cache) -> VerificationStats
#   get_user_vote  exact (venue, user) lookup -> VoteRecord | None
#
# Degrade policy when the store is missing or raises StoreUnavailableError:
#   reads  -> logged, neutral default (zero stats with available=False, None)
#   writes -> logged, ``None`` sentinel so the caller can tell the user
# Validation errors are raised before any store access and never degraded.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import structlog

from src.interfaces.verification_provider import IVerificationProvider
from src.models.verification import VerificationStats, VoteRecord
from src.utils.errors import StoreUnavailableError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

_MAX_VENUE_ID_LENGTH = 255


def normalize_venue_id(venue_id: object) -> str:
    """Strip and check a provider place id.  Raises ValidationError."""
    if not isinstance(venue_id, str):
        raise ValidationError("place_id must be a string")
    cleaned = venue_id.strip()
    if not cleaned:
        raise ValidationError("place_id must not be empty")
    if len(cleaned) > _MAX_VENUE_ID_LENGTH:
        raise ValidationError(f"place_id exceeds {_MAX_VENUE_ID_LENGTH} characters")
    return cleaned


def validate_user_id(user_id: object) -> int:
    """Check a voter id is a positive int.  Raises ValidationError."""
    # bool is an int subclass; True must not pass as user 1.
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id < 1:
        raise ValidationError("user_id must be a positive integer")
    return user_id


class VerificationService:
    """Front door for every vote read and write.

    ``store`` may be ``None`` when no database is configured; every
    operation then degrades exactly as if the store were unreachable.
    """

    def __init__(self, store: IVerificationProvider | None) -> None:
        self._store = store

    @property
    def store_configured(self) -> bool:
        return self._store is not None

    async def submit_vote(self, venue_id: str, user_id: int, value: bool) -> VoteRecord | None:
        """Record the user's vote, overwriting any earlier vote on the same venue.

        Returns the stored row, or ``None`` if the store could not be written.
        Raises :class:`ValidationError` for malformed input.
        """
        venue_id = normalize_venue_id(venue_id)
        user_id = validate_user_id(user_id)
        if not isinstance(value, bool):
            raise ValidationError("has_pina_colada must be a boolean")

        if self._store is None:
            logger.warning("verification_store_missing", operation="submit_vote", place_id=venue_id)
            return None

        try:
            vote = await self._store.upsert_vote(venue_id, user_id, value)
        except StoreUnavailableError as exc:
            logger.warning(
                "vote_not_recorded",
                place_id=venue_id,
                user_id=user_id,
                error=str(exc),
            )
            return None

        logger.info("vote_submitted", place_id=venue_id, user_id=user_id, value=value)
        return vote

    async def get_stats(self, venue_id: str) -> VerificationStats:
        """Tally the venue's votes.  A venue nobody voted on yields zeros."""
        venue_id = normalize_venue_id(venue_id)

        if self._store is None:
            logger.warning("verification_store_missing", operation="get_stats", place_id=venue_id)
            return VerificationStats.unavailable()

        try:
            return await self._store.count_votes(venue_id)
        except StoreUnavailableError as exc:
            logger.warning("verification_stats_unavailable", place_id=venue_id, error=str(exc))
            return VerificationStats.unavailable()

    async def get_user_vote(self, venue_id: str, user_id: int) -> VoteRecord | None:
        """Return the user's current vote, or ``None`` if they have not voted.

        ``None`` is also returned when the store cannot be read; it is never
        replaced by a default ``False`` answer.
        """
        venue_id = normalize_venue_id(venue_id)
        user_id = validate_user_id(user_id)

        if self._store is None:
            logger.warning("verification_store_missing", operation="get_user_vote", place_id=venue_id)
            return None

        try:
            return await self._store.get_vote(venue_id, user_id)
        except StoreUnavailableError as exc:
            logger.warning(
                "user_vote_unavailable",
                place_id=venue_id,
                user_id=user_id,
                error=str(exc),
            )
            return None
