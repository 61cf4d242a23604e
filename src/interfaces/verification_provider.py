"""Abstract base class for crowd-verification vote stores.

Defines the contract for persisting one vote per (venue, user) pair and
computing per-venue tallies from the stored rows.  Implementations may use
SQLite (local), PostgreSQL, or any other relational backend as long as the
pair is protected by a uniqueness constraint so concurrent re-votes from
the same user cannot produce duplicate rows.

Implementations raise :class:`~src.utils.errors.StoreUnavailableError` when
the backend cannot be reached; they never swallow storage errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.verification import VerificationStats, VoteRecord


class IVerificationProvider(ABC):
    """Contract for vote persistence and aggregation.

    All operations are async to support network-backed stores.
    """

    @abstractmethod
    async def upsert_vote(self, venue_id: str, user_id: int, value: bool) -> VoteRecord:
        """Insert the user's vote, or overwrite their previous one in place.

        Parameters
        ----------
        venue_id:
            Provider-issued place identifier.
        user_id:
            Authenticated voter.
        value:
            ``True`` when the user confirms the venue serves piña coladas.

        Returns
        -------
        VoteRecord
            The stored row.  On a re-vote the ``id`` of the original row is
            kept and ``value``/``recorded_at`` are refreshed.
        """

    @abstractmethod
    async def get_vote(self, venue_id: str, user_id: int) -> VoteRecord | None:
        """Return the user's vote for the venue, or ``None`` if they have not voted."""

    @abstractmethod
    async def count_votes(self, venue_id: str) -> VerificationStats:
        """Group the venue's votes by value and return the tally.

        A venue with no votes yields all-zero counts, not an error.
        """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
