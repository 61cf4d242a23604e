"""pinaFinder domain models — re-exports all public model classes.

    - verification.py — votes, per-venue tallies, and the verified policy
    - venue.py        — bar search results, filters, and search envelopes
    - review.py       — star-rated reviews and their average
"""

from __future__ import annotations

from src.models.review import RatingSummary, Review
from src.models.venue import BarFilters, BarResult, BarSearchResult
from src.models.verification import VerificationPolicy, VerificationStats, VoteRecord

__all__ = [
    "BarFilters",
    "BarResult",
    "BarSearchResult",
    "RatingSummary",
    "Review",
    "VerificationPolicy",
    "VerificationStats",
    "VoteRecord",
]
