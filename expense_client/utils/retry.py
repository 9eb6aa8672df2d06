"""Retry utilities for idempotent asynchronous operations using Tenacity."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    DATA_LOAD_MAX_ATTEMPTS,
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_MAX_BACKOFF_SECONDS,
)
from ..errors.internal import NetworkError

T = TypeVar("T")


async def retry_async(  # type: ignore[valid-type]
    operation: Callable[[], Awaitable[T]],
    *,
    context: str,
    max_attempts: int = DATA_LOAD_MAX_ATTEMPTS,
    wait_multiplier: float = RETRY_BACKOFF_MULTIPLIER,
) -> T:
    """Retry an idempotent operation on transport failures only.

    Backend answers (auth rejection, HTTP 4xx/5xx, bad bodies) are never
    retried; only ``NetworkError`` triggers another attempt.

    Args:
        operation: Async callable performing one attempt.
        context: Descriptive label for log lines.
        max_attempts: Maximum number of attempts.
        wait_multiplier: Exponential backoff multiplier in seconds.

    Returns:
        The result of the first successful attempt.

    Raises:
        NetworkError: If every attempt failed at the transport level.
    """

    def before_sleep(retry_state) -> None:
        logging.info(
            f"🔁 Retrying {context} (attempt {retry_state.attempt_number + 1}/{max_attempts})"
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=wait_multiplier, max=RETRY_MAX_BACKOFF_SECONDS),
        retry=retry_if_exception_type(NetworkError),
        before_sleep=before_sleep,
        reraise=True,
    )
    return await retrying(operation)
