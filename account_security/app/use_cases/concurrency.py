"""
Optimistic concurrency helper for use cases that rewrite user security columns.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from account_security.app.errors import ConcurrentUpdateError

T = TypeVar("T")


async def retry_on_concurrent_update(
    operation: Callable[[], Awaitable[T]],
    retries: int,
    logger: logging.Logger,
) -> T:
    """
    Run operation, re-running it when its compare-and-set write loses a race.

    Each run must open its own transaction. After `retries` extra runs the
    ConcurrentUpdateError propagates.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except ConcurrentUpdateError as exc:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning(
                "Concurrent update on user %s, retrying (%d/%d)",
                exc.user_id,
                attempt,
                retries,
            )
