"""
Retry with exponential backoff for outbound HTTP calls.
"""
import asyncio
import random
import logging
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


def should_retry_error(error: Exception) -> bool:
    """
    Retries on timeouts, network errors and 5xx responses.
    4xx responses and application errors are returned to the caller at once.
    """
    if isinstance(error, httpx.TimeoutException):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        return 500 <= error.response.status_code < 600

    if isinstance(error, httpx.NetworkError):
        return True

    return False


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> T:
    """
    Await func() until it succeeds, a non-retryable error occurs, or
    max_attempts is reached. The last exception is re-raised.
    """
    last_exception = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await func()
        except Exception as e:
            last_exception = e

            if not should_retry_error(e):
                logger.debug(f"Error {e} is not retryable, stopping")
                raise

            if attempt >= max_attempts:
                logger.warning(f"Max attempts ({max_attempts}) reached, giving up")
                break

            delay = min(initial_delay * (exponential_base ** (attempt - 1)), max_delay)
            if jitter:
                delay += delay * 0.1 * random.random()

            logger.info(
                f"Attempt {attempt}/{max_attempts} failed: {e}. "
                f"Retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)

    raise last_exception
