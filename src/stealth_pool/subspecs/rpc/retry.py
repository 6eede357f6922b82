"""
Bounded exponential backoff for transient failures.

Only the exception types named by the caller are retried. Anything else
propagates on the first occurrence, so a deterministic failure never burns
through the retry budget.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from stealth_pool.types import RetryExhausted

from ..metrics import rpc_retries_total
from .config import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...],
    name: str = "operation",
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """
    Run `operation`, retrying on `retry_on` errors with exponential backoff.

    Args:
        operation: Zero-argument coroutine factory. Called once per attempt.
        policy: Attempt budget and delay schedule.
        retry_on: Exception types considered transient.
        name: Label used in logs and in the final error.
        sleep: Awaitable used to wait between attempts.

    Returns:
        The result of the first successful attempt.

    Raises:
        RetryExhausted: If every attempt failed with a transient error.
    """
    last_error: BaseException | None = None

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except retry_on as exc:
            last_error = exc
            if attempt + 1 == policy.max_attempts:
                break

            delay = policy.delay(attempt)
            rpc_retries_total.inc()
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.2fs",
                name,
                attempt + 1,
                policy.max_attempts,
                exc,
                delay,
            )
            await sleep(delay)

    assert last_error is not None
    logger.error("%s gave up after %d attempts", name, policy.max_attempts)
    raise RetryExhausted(name, policy.max_attempts, last_error) from last_error
