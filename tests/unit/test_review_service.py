"""Unit tests for SQLiteReviewProvider and ReviewService."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.interfaces.review_provider import IReviewProvider
from src.providers.review.sqlite_review_provider import SQLiteReviewProvider
from src.services.review_service import ReviewService
from src.utils.errors import StoreUnavailableError, ValidationError


# ─── Provider ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_add_review_returns_stored_row(review_store: SQLiteReviewProvider) -> None:
    review = await review_store.add_review("place-A", 1, 5, "Best colada in town", None)
    assert review.id >= 1
    assert review.venue_id == "place-A"
    assert review.rating == 5
    assert review.comment == "Best colada in town"
    assert review.photo_url is None


@pytest.mark.asyncio
async def test_list_reviews_newest_first(review_store: SQLiteReviewProvider) -> None:
    first = await review_store.add_review("place-A", 1, 4, "Good", None)
    second = await review_store.add_review("place-A", 2, 2, "Too sweet", "https://img/1.jpg")
    await review_store.add_review("place-B", 1, 3, "Elsewhere", None)

    reviews = await review_store.list_reviews("place-A")
    assert [r.id for r in reviews] == [second.id, first.id]
    assert reviews[0].photo_url == "https://img/1.jpg"


@pytest.mark.asyncio
async def test_rating_summary(review_store: SQLiteReviewProvider) -> None:
    await review_store.add_review("place-A", 1, 5, "Great", None)
    await review_store.add_review("place-A", 2, 3, "Fine", None)

    summary = await review_store.get_rating_summary("place-A")
    assert summary is not None
    assert summary.average == pytest.approx(4.0)
    assert summary.count == 2


@pytest.mark.asyncio
async def test_rating_summary_none_without_reviews(review_store: SQLiteReviewProvider) -> None:
    assert await review_store.get_rating_summary("place-A") is None


@pytest.mark.asyncio
async def test_delete_only_own_review(review_store: SQLiteReviewProvider) -> None:
    review = await review_store.add_review("place-A", 1, 5, "Mine", None)

    assert await review_store.delete_review(review.id, user_id=2) is False
    assert await review_store.delete_review(review.id, user_id=1) is True
    assert await review_store.list_reviews("place-A") == []


@pytest.mark.asyncio
async def test_uninitialized_store_raises(tmp_path: Path) -> None:
    store = SQLiteReviewProvider(db_path=tmp_path / "empty.db")
    with pytest.raises(StoreUnavailableError):
        await store.list_reviews("place-A")


# ─── Service ──────────────────────────────────────────────────────


class TestReviewService:
    @pytest.fixture
    def service(self, review_store: SQLiteReviewProvider) -> ReviewService:
        return ReviewService(review_store)

    @pytest.mark.asyncio
    async def test_comment_is_stripped(self, service: ReviewService) -> None:
        review = await service.add_review("place-A", 1, 4, "  Fresh pineapple  ")
        assert review is not None
        assert review.comment == "Fresh pineapple"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, True, 4.5])
    async def test_bad_rating_rejected(self, service: ReviewService, rating: object) -> None:
        with pytest.raises(ValidationError):
            await service.add_review("place-A", 1, rating, "ok")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("comment", ["", "   ", "x" * 1001])
    async def test_bad_comment_rejected(self, service: ReviewService, comment: str) -> None:
        with pytest.raises(ValidationError):
            await service.add_review("place-A", 1, 3, comment)

    @pytest.mark.asyncio
    async def test_failures_degrade(self) -> None:
        store = AsyncMock(spec=IReviewProvider)
        error = StoreUnavailableError("disk I/O error", provider_name="sqlite_review")
        store.add_review.side_effect = error
        store.list_reviews.side_effect = error
        store.delete_review.side_effect = error
        store.get_rating_summary.side_effect = error
        service = ReviewService(store)

        assert await service.add_review("place-A", 1, 5, "Great") is None
        assert await service.list_reviews("place-A") == []
        assert await service.delete_review(1, 1) is None
        assert await service.get_rating_summary("place-A") is None

    @pytest.mark.asyncio
    async def test_delete_distinguishes_missing_review_from_store_failure(
        self, service: ReviewService, tmp_path: Path
    ) -> None:
        assert await service.delete_review(999, 1) is False

        broken = ReviewService(SQLiteReviewProvider(db_path=tmp_path / "never-initialized.db"))
        assert await broken.delete_review(999, 1) is None

    @pytest.mark.asyncio
    async def test_missing_store_degrades(self) -> None:
        service = ReviewService(None)
        assert await service.add_review("place-A", 1, 5, "Great") is None
        assert await service.list_reviews("place-A") == []
        assert await service.delete_review(1, 1) is None
        assert await service.get_rating_summary("place-A") is None
