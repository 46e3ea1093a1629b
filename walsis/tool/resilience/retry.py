"""Retry with exponential backoff for outbound HTTP calls.

Only transport-level failures are retried: connection errors, timeouts and
httpx transport errors. HTTP status errors and everything else propagate
on the first attempt.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import httpx

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)

RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TransportError,
)


class RetryExhaustedError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, attempts: int, last_error: Exception) -> None:
        super().__init__(f"Retry exhausted after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule: base_delay * multiplier**attempt, capped at max_delay."""

    max_retries: int = 2
    base_delay: float = 0.2
    multiplier: float = 3.0
    max_delay: float = 2.0

    def delay_for_attempt(self, attempt: int) -> float:
        return min(self.base_delay * (self.multiplier**attempt), self.max_delay)


async def retry_with_backoff(  # noqa: UP047
    fn: Callable[[], Awaitable[T]],
    *,
    operation: str = "outbound call",
    policy: RetryPolicy | None = None,
    retriable_exceptions: tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> T:
    """Await ``fn()`` and retry it on retriable exceptions.

    ``operation`` names the backend call (e.g. "huggingface text-to-image")
    in retry and exhaustion logs.

    Raises:
        RetryExhaustedError: Every attempt failed with a retriable error.
    """
    p = policy or RetryPolicy()
    last_error: Exception | None = None

    for attempt in range(1 + p.max_retries):
        try:
            return await fn()
        except retriable_exceptions as exc:
            last_error = exc
            if attempt < p.max_retries:
                delay = p.delay_for_attempt(attempt)
                logger.info(
                    "%s failed on attempt %d (%s), retrying in %.2fs",
                    operation,
                    attempt + 1,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)

    assert last_error is not None
    logger.warning("%s gave up after %d attempts: %s", operation, 1 + p.max_retries, last_error)
    raise RetryExhaustedError(attempts=1 + p.max_retries, last_error=last_error)
