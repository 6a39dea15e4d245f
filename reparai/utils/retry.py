"""
Retry utilities for handling rate limits and transient errors.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

_TRANSIENT_PATTERNS: tuple[str, ...] = (
    "rate limit",
    "rate_limit",
    "too many requests",
    "overloaded",
    "connection reset",
    "connection timeout",
    "service unavailable",
)


def is_transient_error(exception: BaseException) -> bool:
    """Check if an LLM call failure is worth retrying.

    Timeouts and rate-limit / overload responses are transient; schema or
    authentication failures are not.
    """
    if isinstance(exception, (TimeoutError, asyncio.TimeoutError)):
        return True
    error_str = str(exception).lower()
    return any(pattern in error_str for pattern in _TRANSIENT_PATTERNS)


async def run_with_retry(
    func: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    initial_delay: float = 2.0,
    backoff_factor: float = 2.0,
) -> Any:
    """
    Execute an async function with retry logic for rate limit and transient errors.

    Args:
        func: Async function to execute (no parameters)
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds before first retry
        backoff_factor: Multiplier for delay between retries

    Returns:
        Result from the function

    Raises:
        Exception: If max retries exceeded or non-retryable error occurs
    """
    attempts = max(1, max_retries)

    for attempt in range(attempts):
        try:
            return await func()
        except Exception as e:
            if not is_transient_error(e) or attempt >= attempts - 1:
                raise

            # Honour "retry in N seconds" hints from the provider
            wait_time_match = re.search(r"(\d+)\s{0,10}seconds?", str(e), re.IGNORECASE)
            if wait_time_match:
                wait_time = float(wait_time_match.group(1))
            else:
                wait_time = initial_delay * (backoff_factor**attempt)

            logger.warning(
                "Transient LLM error (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                e,
                attempt + 1,
                attempts,
                wait_time,
            )
            await asyncio.sleep(wait_time)

    raise RuntimeError("Max retries exceeded")
