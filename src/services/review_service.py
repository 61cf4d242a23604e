"""Reviews — star ratings with comments, plus the per-venue average.

Same degrade policy as :mod:`src.services.verification_service`: storage
failures are logged and turned into ``None`` for writes and ``None`` / ``[]``
for reads.
"""

from __future__ import annotations

import structlog

from src.interfaces.review_provider import IReviewProvider
from src.models.review import RatingSummary, Review
from src.services.verification_service import normalize_venue_id, validate_user_id
from src.utils.errors import StoreUnavailableError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

_MAX_COMMENT_LENGTH = 1000


class ReviewService:
    """Validates review input and shields callers from storage failures."""

    def __init__(self, store: IReviewProvider | None) -> None:
        self._store = store

    async def add_review(
        self,
        venue_id: str,
        user_id: int,
        rating: int,
        comment: str,
        photo_url: str | None = None,
    ) -> Review | None:
        """Store a review.  ``None`` means it could not be saved."""
        venue_id = normalize_venue_id(venue_id)
        user_id = validate_user_id(user_id)
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("rating must be an integer from 1 to 5")
        comment = (comment or "").strip()
        if not comment:
            raise ValidationError("comment must not be empty")
        if len(comment) > _MAX_COMMENT_LENGTH:
            raise ValidationError(f"comment exceeds {_MAX_COMMENT_LENGTH} characters")

        if self._store is None:
            logger.warning("review_store_missing", operation="add_review")
            return None
        try:
            return await self._store.add_review(venue_id, user_id, rating, comment, photo_url)
        except StoreUnavailableError as exc:
            logger.warning("review_not_recorded", place_id=venue_id, error=str(exc))
            return None

    async def list_reviews(self, venue_id: str) -> list[Review]:
        venue_id = normalize_venue_id(venue_id)
        if self._store is None:
            logger.warning("review_store_missing", operation="list_reviews")
            return []
        try:
            return await self._store.list_reviews(venue_id)
        except StoreUnavailableError as exc:
            logger.warning("reviews_unavailable", place_id=venue_id, error=str(exc))
            return []

    async def delete_review(self, review_id: int, user_id: int) -> bool | None:
        """Delete the caller's own review.

        ``False`` if there is no such review by this user; ``None`` if the
        store could not be written.
        """
        user_id = validate_user_id(user_id)
        if self._store is None:
            logger.warning("review_store_missing", operation="delete_review")
            return None
        try:
            return await self._store.delete_review(review_id, user_id)
        except StoreUnavailableError as exc:
            logger.warning("review_not_deleted", review_id=review_id, error=str(exc))
            return None

    async def get_rating_summary(self, venue_id: str) -> RatingSummary | None:
        venue_id = normalize_venue_id(venue_id)
        if self._store is None:
            return None
        try:
            return await self._store.get_rating_summary(venue_id)
        except StoreUnavailableError as exc:
            logger.warning("rating_summary_unavailable", place_id=venue_id, error=str(exc))
            return None
