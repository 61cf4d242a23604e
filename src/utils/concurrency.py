"""Bounded fan-out helpers used when one request needs many store lookups.

Two patterns are exposed:

1. **throttled_gather** -- ``asyncio.gather`` with every awaitable wrapped
   in a semaphore acquire/release.
2. **fan_out** -- dispatch ``fn(item)`` for every item, keep results
   aligned with the input order, log failures and put ``None`` in their
   slot so one bad lookup never sinks the whole batch.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

import structlog

from src.utils.logging import get_logger

_T = TypeVar("_T")
_I = TypeVar("_I")

_DEFAULT_CONCURRENCY = 8

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore for concurrency control.  A fresh one sized
        ``_DEFAULT_CONCURRENCY`` is used when omitted.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(_DEFAULT_CONCURRENCY)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


async def fan_out(
    fn: Callable[[_I], Awaitable[_T]],
    items: Sequence[_I],
    concurrency: int = _DEFAULT_CONCURRENCY,
    logger: structlog.BoundLogger | None = None,
    error_msg: str = "fan_out_item_failed",
) -> list[_T | None]:
    """Call ``fn`` once per item with bounded concurrency.

    Returns a list aligned with ``items``.  Items whose call raised are
    logged and mapped to ``None``.
    """
    if logger is None:
        logger = _logger

    semaphore = asyncio.Semaphore(max(1, concurrency))
    raw_results = await throttled_gather(
        [fn(item) for item in items],
        semaphore=semaphore,
        return_exceptions=True,
    )

    results: list[_T | None] = []
    for item, result in zip(items, raw_results):
        if isinstance(result, BaseException):
            logger.warning(error_msg, item=str(item), error=str(result))
            results.append(None)
        else:
            results.append(result)
    return results
