"""Unit tests for VerificationService.

Validation happens before the store is touched; store failures degrade
to neutral results instead of propagating.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.interfaces.verification_provider import IVerificationProvider
from src.models.verification import VerificationStats
from src.providers.verification.sqlite_verification_provider import (
    SQLiteVerificationProvider,
)
from src.services.verification_filter import classify
from src.services.verification_service import (
    VerificationService,
    normalize_venue_id,
    validate_user_id,
)
from src.utils.errors import StoreUnavailableError, ValidationError
from tests.conftest import make_stats, make_vote


def _failing_store() -> AsyncMock:
    store = AsyncMock(spec=IVerificationProvider)
    error = StoreUnavailableError("database is locked", provider_name="sqlite_verification")
    store.upsert_vote.side_effect = error
    store.get_vote.side_effect = error
    store.count_votes.side_effect = error
    return store


# ======================================================================
# Input validation
# ======================================================================


class TestNormalizeVenueId:
    def test_strips_whitespace(self) -> None:
        assert normalize_venue_id("  ChIJ123 ") == "ChIJ123"

    @pytest.mark.parametrize("bad", ["", "   ", None, 42])
    def test_rejects_empty_or_non_string(self, bad: object) -> None:
        with pytest.raises(ValidationError):
            normalize_venue_id(bad)

    def test_rejects_overlong_id(self) -> None:
        with pytest.raises(ValidationError):
            normalize_venue_id("x" * 256)


class TestValidateUserId:
    def test_accepts_positive(self) -> None:
        assert validate_user_id(7) == 7

    @pytest.mark.parametrize("bad", [0, -1, True, "7", None])
    def test_rejects_non_positive_or_non_int(self, bad: object) -> None:
        with pytest.raises(ValidationError):
            validate_user_id(bad)


# ======================================================================
# Against a real store
# ======================================================================


class TestWithSQLiteStore:
    @pytest.fixture
    def service(self, verification_store: SQLiteVerificationProvider) -> VerificationService:
        return VerificationService(verification_store)

    @pytest.mark.asyncio
    async def test_three_voters_verify_place(
        self, service: VerificationService, default_policy
    ) -> None:
        await service.submit_vote("place-A", 1, True)
        await service.submit_vote("place-A", 2, True)
        await service.submit_vote("place-A", 3, False)

        stats = await service.get_stats("place-A")
        assert (stats.positive_count, stats.negative_count, stats.total_count) == (2, 1, 3)
        assert classify(stats, default_policy) is True

    @pytest.mark.asyncio
    async def test_changed_vote(self, service: VerificationService) -> None:
        await service.submit_vote("place-B", 1, True)
        await service.submit_vote("place-B", 1, False)

        vote = await service.get_user_vote("place-B", 1)
        assert vote is not None and vote.value is False
        stats = await service.get_stats("place-B")
        assert (stats.positive_count, stats.negative_count, stats.total_count) == (0, 1, 1)

    @pytest.mark.asyncio
    async def test_two_positive_votes_not_enough(
        self, service: VerificationService, default_policy
    ) -> None:
        await service.submit_vote("place-C", 1, True)
        await service.submit_vote("place-C", 2, True)

        stats = await service.get_stats("place-C")
        assert stats.positive_ratio == 1.0
        assert classify(stats, default_policy) is False

    @pytest.mark.asyncio
    async def test_venue_id_is_normalized_before_storage(self, service: VerificationService) -> None:
        await service.submit_vote("  place-A  ", 1, True)
        stats = await service.get_stats("place-A")
        assert stats.positive_count == 1

    @pytest.mark.asyncio
    async def test_no_vote_is_none_not_false(self, service: VerificationService) -> None:
        assert await service.get_user_vote("place-A", 1) is None


# ======================================================================
# Validation never reaches the store
# ======================================================================


class TestValidation:
    @pytest.mark.asyncio
    async def test_non_bool_value_rejected(self) -> None:
        store = AsyncMock(spec=IVerificationProvider)
        service = VerificationService(store)
        with pytest.raises(ValidationError):
            await service.submit_vote("place-A", 1, 1)  # type: ignore[arg-type]
        store.upsert_vote.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_venue_rejected_on_read(self) -> None:
        store = AsyncMock(spec=IVerificationProvider)
        service = VerificationService(store)
        with pytest.raises(ValidationError):
            await service.get_stats("")
        store.count_votes.assert_not_called()

    @pytest.mark.asyncio
    async def test_bad_user_rejected_on_lookup(self) -> None:
        service = VerificationService(AsyncMock(spec=IVerificationProvider))
        with pytest.raises(ValidationError):
            await service.get_user_vote("place-A", 0)


# ======================================================================
# Degradation
# ======================================================================


class TestDegradation:
    @pytest.mark.asyncio
    async def test_submit_returns_none_when_store_fails(self) -> None:
        service = VerificationService(_failing_store())
        assert await service.submit_vote("place-A", 1, True) is None

    @pytest.mark.asyncio
    async def test_stats_fall_back_to_unavailable_zeros(self) -> None:
        service = VerificationService(_failing_store())
        stats = await service.get_stats("place-A")
        assert stats.total_count == 0
        assert stats.available is False

    @pytest.mark.asyncio
    async def test_user_vote_none_when_store_fails(self) -> None:
        service = VerificationService(_failing_store())
        assert await service.get_user_vote("place-A", 1) is None

    @pytest.mark.asyncio
    async def test_missing_store_degrades(self) -> None:
        service = VerificationService(None)
        assert service.store_configured is False
        assert await service.submit_vote("place-A", 1, True) is None
        assert (await service.get_stats("place-A")).available is False
        assert await service.get_user_vote("place-A", 1) is None

    @pytest.mark.asyncio
    async def test_successful_calls_pass_through(self) -> None:
        store = AsyncMock(spec=IVerificationProvider)
        store.upsert_vote.return_value = make_vote()
        store.count_votes.return_value = make_stats(4, 1)
        service = VerificationService(store)

        vote = await service.submit_vote("place-A", 1, True)
        stats = await service.get_stats("place-A")

        assert vote == make_vote()
        assert stats == VerificationStats(positive_count=4, negative_count=1)
        store.upsert_vote.assert_awaited_once_with("place-A", 1, True)
