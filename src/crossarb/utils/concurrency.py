"""
Bounded fan-out helpers for venue requests.

A single code path serves both sequential (limit 1) and concurrent
(limit N) fetching.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar


T = TypeVar("T")


def create_limiter(max_concurrency: int) -> asyncio.Semaphore:
    """
    Create a limiter allowing max_concurrency requests in flight.

    Args:
        max_concurrency: Maximum in-flight requests (1 = sequential).

    Raises:
        ValueError: If max_concurrency is below 1.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    return asyncio.Semaphore(max_concurrency)


async def run_bounded(
    limiter: asyncio.Semaphore,
    timeout_s: float,
    request: Callable[[], Awaitable[T]],
) -> T:
    """
    Run one request under the limiter with its own timeout.

    The timeout starts once the request holds a limiter slot, so time
    spent queueing does not count against it.

    Args:
        limiter: Shared limiter for the stage.
        timeout_s: Timeout for this request in seconds.
        request: Zero-argument callable returning the awaitable.

    Returns:
        The request result.

    Raises:
        TimeoutError: If the request exceeds timeout_s.
    """
    async with limiter:
        return await asyncio.wait_for(request(), timeout=timeout_s)
