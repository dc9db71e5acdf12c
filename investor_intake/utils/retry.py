"""
Bounded retry for outbound HTTP calls.
Only transport-level failures are retried; HTTP error responses are returned
to the caller untouched.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    call: Callable[[], Awaitable[T]],
    max_retries: int = 0,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    retry_on: Tuple[Type[BaseException], ...] = (httpx.TransportError,)
) -> T:
    """
    Await ``call`` with exponential backoff on transient errors.

    Usage:
        response = await retry_async(
            lambda: client.post(url, json=payload),
            max_retries=2
        )

    Args:
        call: Zero-argument coroutine factory
        max_retries: Extra attempts after the first (0 disables retrying)
        base_delay: Delay before the first retry in seconds
        max_delay: Upper bound on any single delay
        retry_on: Exception types considered transient

    Returns:
        The call result
    """
    attempt = 0
    while True:
        try:
            return await call()
        except retry_on as e:
            if attempt >= max_retries:
                raise
            delay = min(base_delay * (2 ** attempt), max_delay)
            attempt += 1
            logger.warning(
                f"Transient error: {e!r}, retry {attempt}/{max_retries}. "
                f"Waiting {delay}s..."
            )
            await asyncio.sleep(delay)
