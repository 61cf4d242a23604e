"""FastAPI API routes for pinaFinder.

Provides REST endpoints for piña colada verification votes, bar search
with the verification overlay, reviews, and health checks.  Service
dependencies are resolved from ``app.state`` via FastAPI's ``Depends``
using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/verifications                 POST    Submit / change my vote
# /api/v1/verifications/{pid}/stats     GET     Vote tally + verified badge
# /api/v1/verifications/{pid}/me        GET     My current vote (or null)
# /api/v1/bars/search                   GET     Places search + overlay
# /api/v1/reviews                       POST    Add a review
# /api/v1/reviews/{pid}                 GET     List reviews for a bar
# /api/v1/reviews/{pid}/summary         GET     Average rating (or null)
# /api/v1/reviews/item/{rid}            DELETE  Delete my review
# /api/v1/health                        GET     Health check + store status
#
# DEPENDENCY INJECTION PATTERN:
# Each route function declares its dependencies as type-annotated params.
# FastAPI resolves these via Depends() which calls helper functions that
# read from app.state (populated at startup in main.py's _build_all).
#
# ERRORS:
# Services raise ValidationError for bad input; ErrorHandlingMiddleware
# turns it into a 400.  A ``None`` result from a write means the store
# was unreachable and is reported as 503.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.auth import CurrentUserDep
from src.api.schemas import (
    BarResponse,
    BarSearchResponse,
    DeleteReviewResponse,
    ErrorResponse,
    HealthResponse,
    RatingSummaryResponse,
    ReviewListResponse,
    ReviewResponse,
    SubmitReviewRequest,
    SubmitVerificationRequest,
    VerificationResponse,
    VerificationStatsResponse,
)
from src.models.venue import BarFilters
from src.models.verification import VerificationPolicy
from src.services.bar_search_service import BarSearchService
from src.services.review_service import ReviewService
from src.services.verification_filter import DEFAULT_POLICY
from src.services.verification_service import VerificationService
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# All routes in this file are prefixed with /api/v1.
# Example: @router.post("/verifications") → POST /api/v1/verifications
router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------


def _get_verification_service(request: Request) -> VerificationService:
    """Return the verification service, or one with no store attached."""
    service = getattr(request.app.state, "verification_service", None)
    return service if service is not None else VerificationService(None)


def _get_review_service(request: Request) -> ReviewService:
    """Return the review service, or one with no store attached."""
    service = getattr(request.app.state, "review_service", None)
    return service if service is not None else ReviewService(None)


def _get_bar_search_service(request: Request) -> BarSearchService | None:
    """Return the bar search service, or ``None`` when places is disabled."""
    return getattr(request.app.state, "bar_search_service", None)


def _get_policy(request: Request) -> VerificationPolicy:
    """Return the active verified-badge policy."""
    policy = getattr(request.app.state, "verification_policy", None)
    return policy if policy is not None else DEFAULT_POLICY


VerificationDep = Annotated[VerificationService, Depends(_get_verification_service)]
ReviewDep = Annotated[ReviewService, Depends(_get_review_service)]
BarSearchDep = Annotated[BarSearchService | None, Depends(_get_bar_search_service)]
PolicyDep = Annotated[VerificationPolicy, Depends(_get_policy)]


# ---------------------------------------------------------------------------
# Verification endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/verifications",
    response_model=VerificationResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Submit or change a piña colada vote",
)
async def submit_verification(
    body: SubmitVerificationRequest,
    user_id: CurrentUserDep,
    verification: VerificationDep,
) -> VerificationResponse:
    """Record whether the caller found piña coladas at this bar.

    Voting again on the same bar replaces the earlier vote.
    """
    vote = await verification.submit_vote(body.place_id, user_id, body.has_pina_colada)
    if vote is None:
        raise HTTPException(
            status_code=503,
            detail="Your vote could not be saved. Please try again shortly.",
        )
    return VerificationResponse.from_vote(vote)


@router.get(
    "/verifications/{place_id}/stats",
    response_model=VerificationStatsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Get the vote tally and verified badge for a bar",
)
async def get_verification_stats(
    place_id: str,
    verification: VerificationDep,
    policy: PolicyDep,
) -> VerificationStatsResponse:
    """Return yes/no counts.  ``available`` is false when the store is down."""
    stats = await verification.get_stats(place_id)
    return VerificationStatsResponse.from_stats(place_id, stats, policy)


@router.get(
    "/verifications/{place_id}/me",
    response_model=VerificationResponse | None,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Get the caller's vote for a bar",
)
async def get_my_verification(
    place_id: str,
    user_id: CurrentUserDep,
    verification: VerificationDep,
) -> VerificationResponse | None:
    vote = await verification.get_user_vote(place_id, user_id)
    return VerificationResponse.from_vote(vote) if vote is not None else None


# ---------------------------------------------------------------------------
# Bar search
# ---------------------------------------------------------------------------


@router.get(
    "/bars/search",
    response_model=BarSearchResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Search nearby bars with the verification overlay",
)
async def search_bars(
    request: Request,
    search: BarSearchDep,
    latitude: Annotated[float, Query(ge=-90.0, le=90.0)],
    longitude: Annotated[float, Query(ge=-180.0, le=180.0)],
    max_distance_m: Annotated[int | None, Query(ge=100, le=50000)] = None,
    min_rating: Annotated[float, Query(ge=0.0, le=5.0)] = 0.0,
    max_price_level: Annotated[int, Query(ge=0, le=4)] = 4,
    verified_only: bool = False,
    open_now: bool = False,
) -> BarSearchResponse:
    """Find bars near a coordinate, badge the verified ones, apply filters."""
    if search is None:
        raise HTTPException(status_code=503, detail="Bar search is not configured")

    if max_distance_m is None:
        max_distance_m = getattr(request.app.state, "default_radius_m", 5000)

    filters = BarFilters(
        max_distance_m=max_distance_m,
        min_rating=min_rating,
        max_price_level=max_price_level,
        verified_only=verified_only,
        open_now=open_now,
    )
    result = await search.search(latitude, longitude, filters)
    return BarSearchResponse(
        bars=[BarResponse.from_bar(bar) for bar in result.bars],
        total_found=result.total_found,
        shown=len(result.bars),
        min_samples=search.policy.min_samples,
        min_ratio=search.policy.min_ratio,
    )


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@router.post(
    "/reviews",
    response_model=ReviewResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Add a review for a bar",
)
async def submit_review(
    body: SubmitReviewRequest,
    user_id: CurrentUserDep,
    reviews: ReviewDep,
) -> ReviewResponse:
    review = await reviews.add_review(
        body.place_id,
        user_id,
        body.rating,
        body.comment,
        body.photo_url,
    )
    if review is None:
        raise HTTPException(status_code=503, detail="Review service not available")
    return ReviewResponse.from_review(review)


@router.get(
    "/reviews/{place_id}",
    response_model=ReviewListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List reviews for a bar",
)
async def list_reviews(place_id: str, reviews: ReviewDep) -> ReviewListResponse:
    items = await reviews.list_reviews(place_id)
    return ReviewListResponse(
        place_id=place_id,
        reviews=[ReviewResponse.from_review(r) for r in items],
        total=len(items),
    )


@router.get(
    "/reviews/{place_id}/summary",
    response_model=RatingSummaryResponse | None,
    responses={400: {"model": ErrorResponse}},
    summary="Get the average review rating for a bar",
)
async def get_review_summary(place_id: str, reviews: ReviewDep) -> RatingSummaryResponse | None:
    """Return the average rating, or ``null`` when the bar has no reviews."""
    summary = await reviews.get_rating_summary(place_id)
    if summary is None:
        return None
    return RatingSummaryResponse.from_summary(place_id, summary)


@router.delete(
    "/reviews/item/{review_id}",
    response_model=DeleteReviewResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Delete one of the caller's reviews",
)
async def delete_review(
    review_id: int,
    user_id: CurrentUserDep,
    reviews: ReviewDep,
) -> DeleteReviewResponse:
    deleted = await reviews.delete_review(review_id, user_id)
    if deleted is None:
        raise HTTPException(status_code=503, detail="Review service not available")
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Review not found: {review_id}")
    _logger.info("review_deleted", review_id=review_id, user_id=user_id)
    return DeleteReviewResponse(success=True)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and store/provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    # Votes are the core feature; everything else only degrades.
    if not providers.get("verification_store", False):
        status = "unhealthy"
    elif all(providers.values()):
        status = "healthy"
    else:
        status = "degraded"

    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=providers,
    )
