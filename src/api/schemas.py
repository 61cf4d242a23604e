"""Pydantic request/response schemas for the pinaFinder API.

# ─── HOW SCHEMAS WORK ──────────────────────────────────────────────────
#
# These models define the shape of every HTTP request and response body.
# FastAPI uses them to validate incoming JSON (422 on mismatch), to
# serialize responses via ``response_model=...``, and to generate the
# OpenAPI docs at /docs.
#
# Convention: request schemas end with "Request", response schemas end
# with "Response".  The stats response keeps the field names
# ``verified`` / ``unverified`` / ``total`` that existing clients read.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, StrictBool

from src.models.review import RatingSummary, Review
from src.models.venue import BarResult
from src.models.verification import VerificationPolicy, VerificationStats, VoteRecord
from src.services.verification_filter import classify, verification_percentage


# ---------------------------------------------------------------------------
# Verifications
# ---------------------------------------------------------------------------


class SubmitVerificationRequest(BaseModel):
    """A user's answer to "does this bar serve piña coladas?"."""

    place_id: str = Field(..., min_length=1, max_length=255)
    has_pina_colada: StrictBool


class VerificationResponse(BaseModel):
    """A stored vote."""

    id: int
    place_id: str
    user_id: int
    has_pina_colada: bool
    recorded_at: datetime

    @classmethod
    def from_vote(cls, vote: VoteRecord) -> VerificationResponse:
        return cls(
            id=vote.id,
            place_id=vote.venue_id,
            user_id=vote.user_id,
            has_pina_colada=vote.value,
            recorded_at=vote.recorded_at,
        )


class VerificationStatsResponse(BaseModel):
    """Community tally for one bar plus the verdict under the active policy."""

    place_id: str
    verified: int = 0
    unverified: int = 0
    total: int = 0
    available: bool = True
    ratio: float | None = None
    percentage: int | None = None
    is_verified: bool = False

    @classmethod
    def from_stats(
        cls,
        place_id: str,
        stats: VerificationStats,
        policy: VerificationPolicy,
    ) -> VerificationStatsResponse:
        return cls(
            place_id=place_id,
            verified=stats.positive_count,
            unverified=stats.negative_count,
            total=stats.total_count,
            available=stats.available,
            ratio=stats.positive_ratio,
            percentage=verification_percentage(stats),
            is_verified=classify(stats, policy),
        )


# ---------------------------------------------------------------------------
# Bar search
# ---------------------------------------------------------------------------


class BarResponse(BaseModel):
    """One bar in a search result."""

    place_id: str
    name: str
    address: str
    latitude: float
    longitude: float
    rating: float | None = None
    price_level: int | None = None
    photo_reference: str | None = None
    open_now: bool | None = None
    distance_m: float | None = None
    verification_stats: dict[str, int] | None = None
    verified: bool = False

    @classmethod
    def from_bar(cls, bar: BarResult) -> BarResponse:
        stats = bar.verification_stats
        return cls(
            place_id=bar.place_id,
            name=bar.name,
            address=bar.address,
            latitude=bar.latitude,
            longitude=bar.longitude,
            rating=bar.rating,
            price_level=bar.price_level,
            photo_reference=bar.photo_reference,
            open_now=bar.open_now,
            distance_m=bar.distance_m,
            verification_stats=(
                {
                    "verified": stats.positive_count,
                    "unverified": stats.negative_count,
                    "total": stats.total_count,
                }
                if stats is not None
                else None
            ),
            verified=bar.verified,
        )


class BarSearchResponse(BaseModel):
    """Filtered bars plus how many the places provider returned in total."""

    bars: list[BarResponse] = Field(default_factory=list)
    total_found: int = 0
    shown: int = 0
    min_samples: int
    min_ratio: float


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class SubmitReviewRequest(BaseModel):
    """A 1–5 star review with a comment."""

    place_id: str = Field(..., min_length=1, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=1000)
    photo_url: str | None = Field(default=None, max_length=1024)


class ReviewResponse(BaseModel):
    """A stored review."""

    id: int
    user_id: int
    place_id: str
    rating: int
    comment: str
    photo_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_review(cls, review: Review) -> ReviewResponse:
        return cls(
            id=review.id,
            user_id=review.user_id,
            place_id=review.venue_id,
            rating=review.rating,
            comment=review.comment,
            photo_url=review.photo_url,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ReviewListResponse(BaseModel):
    """All reviews for a bar, newest first."""

    place_id: str
    reviews: list[ReviewResponse] = Field(default_factory=list)
    total: int = 0


class RatingSummaryResponse(BaseModel):
    """Average review rating for a bar."""

    place_id: str
    average: float
    count: int

    @classmethod
    def from_summary(cls, place_id: str, summary: RatingSummary) -> RatingSummaryResponse:
        return cls(place_id=place_id, average=round(summary.average, 2), count=summary.count)


class DeleteReviewResponse(BaseModel):
    success: bool


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
