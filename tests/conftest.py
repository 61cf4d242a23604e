"""Shared pytest fixtures for the pinaFinder test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from src.interfaces.places_provider import PlaceResult
from src.models.verification import VerificationPolicy, VerificationStats, VoteRecord
from src.providers.review.sqlite_review_provider import SQLiteReviewProvider
from src.providers.verification.sqlite_verification_provider import (
    SQLiteVerificationProvider,
)

# Union Square, San Francisco
USER_LAT = 37.7880
USER_LNG = -122.4075


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal configuration dict as produced by load_config()."""
    return {
        "app": {"name": "pinaFinder", "version": "0.1.0"},
        "verification": {"min_samples": 3, "min_ratio": 0.6},
        "places": {"default_radius_m": 5000},
    }


@pytest.fixture
def default_policy() -> VerificationPolicy:
    return VerificationPolicy(min_samples=3, min_ratio=0.6)


@pytest.fixture
async def verification_store(tmp_path: Path) -> SQLiteVerificationProvider:
    """A SQLiteVerificationProvider on a fresh temp-file database."""
    store = SQLiteVerificationProvider(db_path=tmp_path / "verifications.db")
    await store.initialize()
    return store


@pytest.fixture
async def review_store(tmp_path: Path) -> SQLiteReviewProvider:
    """A SQLiteReviewProvider on a fresh temp-file database."""
    store = SQLiteReviewProvider(db_path=tmp_path / "reviews.db")
    await store.initialize()
    return store


def make_vote(
    venue_id: str = "place-A",
    user_id: int = 1,
    value: bool = True,
    vote_id: int = 1,
) -> VoteRecord:
    return VoteRecord(
        id=vote_id,
        venue_id=venue_id,
        user_id=user_id,
        value=value,
        recorded_at=datetime(2026, 3, 1, 21, 30, tzinfo=timezone.utc),
    )


def make_stats(positive: int, negative: int) -> VerificationStats:
    return VerificationStats(positive_count=positive, negative_count=negative)


def make_place(
    place_id: str = "ChIJ-tiki",
    name: str = "Tiki Lounge",
    latitude: float = USER_LAT + 0.005,
    longitude: float = USER_LNG,
    **kwargs: Any,
) -> PlaceResult:
    return PlaceResult(
        place_id=place_id,
        name=name,
        address=kwargs.pop("address", "1 Tiki Way"),
        latitude=latitude,
        longitude=longitude,
        **kwargs,
    )
