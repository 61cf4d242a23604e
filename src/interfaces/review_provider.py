"""Abstract base class for review stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.review import RatingSummary, Review


class IReviewProvider(ABC):
    """Contract for persisting star-rated reviews and averaging them."""

    @abstractmethod
    async def add_review(
        self,
        venue_id: str,
        user_id: int,
        rating: int,
        comment: str,
        photo_url: str | None = None,
    ) -> Review:
        """Store a new review and return the persisted row."""

    @abstractmethod
    async def list_reviews(self, venue_id: str) -> list[Review]:
        """Return every review for the venue, newest first."""

    @abstractmethod
    async def delete_review(self, review_id: int, user_id: int) -> bool:
        """Delete the review if it belongs to ``user_id``.

        Returns ``True`` when a row was removed.
        """

    @abstractmethod
    async def get_rating_summary(self, venue_id: str) -> RatingSummary | None:
        """Average rating across the venue's reviews, or ``None`` if there are none."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
