"""Per-call timeout and exponential-backoff retry for outbound requests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 2
DEFAULT_BASE_DELAY = 0.5
DEFAULT_TIMEOUT = 10.0

# Failures that count as "transport failure" and are retried.
RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (httpx.HTTPError, TimeoutError)


def compute_delay(attempt: int, base_delay: float) -> float:
    """Backoff before retry number ``attempt + 1`` (``attempt`` is 0-based)."""
    return base_delay * (2**attempt)


async def with_resilience(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int = DEFAULT_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
    context: str = "",
) -> T:
    """Run *operation* with a timeout per attempt and bounded retries.

    *operation* is a zero-argument factory returning a fresh awaitable for
    every attempt.  Up to ``retries + 1`` attempts are made; between
    attempts the wrapper sleeps ``base_delay * 2**attempt`` seconds.
    A timed-out attempt is treated like any other transport failure.

    Raises:
        The last ``httpx.HTTPError`` / ``TimeoutError`` once all attempts
        are exhausted.  Other exceptions propagate immediately.
    """
    for attempt in range(retries + 1):
        try:
            return await asyncio.wait_for(operation(), timeout=timeout)
        except RETRYABLE_ERRORS as exc:
            if attempt == retries:
                log.warning(
                    "http_retry_exhausted",
                    context=context,
                    attempts=attempt + 1,
                    error=repr(exc),
                )
                raise

            delay = compute_delay(attempt, base_delay)
            log.info(
                "http_retry",
                context=context,
                attempt=attempt + 1,
                delay=round(delay, 2),
                error=repr(exc),
            )
            await asyncio.sleep(delay)

    # Unreachable, but satisfies type checker
    raise AssertionError("retry loop exited without result")  # pragma: no cover
