"""Retry helper with exponential backoff."""

import logging
import time
from typing import Callable, TypeVar

from ..config import RetryPolicy
from ..exceptions import FeedCatalogError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "request",
) -> T:
    """Call fn, retrying retryable feedcatalog errors with backoff.

    Non-retryable errors propagate on the first attempt. After the final
    attempt the last error propagates unchanged.
    """
    if policy.max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(policy.max_attempts):
        try:
            return fn()
        except FeedCatalogError as e:
            if not e.retryable or attempt >= policy.max_attempts - 1:
                raise
            delay = policy.delay_for(attempt)
            logger.debug(
                f"{description} failed (attempt {attempt + 1}/{policy.max_attempts}), "
                f"retrying in {delay}s: {e}"
            )
            sleep(delay)
    raise AssertionError("retry loop exited without a result")
