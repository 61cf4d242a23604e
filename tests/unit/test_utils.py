"""Unit tests for src.utils — errors, geo distance, bounded fan-out."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from src.utils.concurrency import fan_out, throttled_gather
from src.utils.errors import (
    ConfigurationError,
    PinaFinderError,
    ProviderUnavailableError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from src.utils.geo import haversine_m


# ======================================================================
# Errors
# ======================================================================


class TestErrors:
    def test_str_prefixes_provider(self) -> None:
        err = StoreUnavailableError("database is locked", provider_name="sqlite_verification")
        assert str(err) == "[sqlite_verification] database is locked"
        assert err.message == "database is locked"

    def test_str_without_provider(self) -> None:
        assert str(ValidationError("bad place id")) == "bad place id"

    @pytest.mark.parametrize(
        "cls,status",
        [
            (ValidationError, 400),
            (UnauthorizedError, 401),
            (StoreUnavailableError, 503),
            (ProviderUnavailableError, 503),
            (ConfigurationError, 500),
        ],
    )
    def test_status_codes(self, cls: type[PinaFinderError], status: int) -> None:
        err = cls()
        assert isinstance(err, PinaFinderError)
        assert err.status_code == status
        assert err.message


# ======================================================================
# Geo
# ======================================================================


class TestHaversine:
    def test_same_point_is_zero(self) -> None:
        assert haversine_m(37.788, -122.4075, 37.788, -122.4075) == 0.0

    def test_one_degree_latitude(self) -> None:
        assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195, rel=1e-3)

    def test_symmetric(self) -> None:
        a = haversine_m(37.78, -122.41, 40.71, -74.0)
        b = haversine_m(40.71, -74.0, 37.78, -122.41)
        assert a == pytest.approx(b)
        assert a == pytest.approx(4_130_000, rel=0.01)


# ======================================================================
# Concurrency
# ======================================================================


class TestThrottledGather:
    @pytest.mark.asyncio
    async def test_preserves_order(self) -> None:
        async def _echo(value: int) -> int:
            await asyncio.sleep(0.001 * (5 - value))
            return value

        assert await throttled_gather([_echo(i) for i in range(5)]) == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_limits_concurrency(self) -> None:
        running = 0
        peak = 0

        async def _work() -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.005)
            running -= 1

        await throttled_gather([_work() for _ in range(10)], semaphore=asyncio.Semaphore(3))
        assert peak <= 3


class TestFanOut:
    @pytest.mark.asyncio
    async def test_failures_become_none_and_are_logged(self) -> None:
        logger = MagicMock()

        async def _lookup(item: str) -> str:
            if item == "bad":
                raise RuntimeError("boom")
            return item.upper()

        results = await fan_out(_lookup, ["a", "bad", "c"], concurrency=2, logger=logger, error_msg="lookup_failed")

        assert results == ["A", None, "C"]
        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "lookup_failed"

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        async def _never(item: int) -> int:
            raise AssertionError("should not be called")

        assert await fan_out(_never, []) == []
