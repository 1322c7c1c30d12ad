"""Caller-side retry policy for optimistic-concurrency conflicts.

Repositories and the task service never retry a ConflictRetryError. Callers
that want to retry pass the whole operation (load, modify, write) so every
attempt starts from a fresh read.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from taskcluster.models import ConflictRetryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_on_conflict(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    backoff: float = 0.05,
) -> T:
    """Run *operation*, re-running it when it raises ConflictRetryError.

    Args:
        operation: Zero-argument coroutine factory performing read-modify-write
        attempts: Total number of attempts (at least 1)
        backoff: Base delay in seconds, doubled after each conflict

    Returns:
        Whatever the first successful attempt returns

    Raises:
        ConflictRetryError: If every attempt lost its race
        ValueError: If attempts is less than 1
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except ConflictRetryError as e:
            if attempt == attempts:
                raise
            logger.info("conflict on attempt %d/%d: %s", attempt, attempts, e)
            await asyncio.sleep(backoff * 2 ** (attempt - 1))

    raise RuntimeError("unreachable")  # pragma: no cover
