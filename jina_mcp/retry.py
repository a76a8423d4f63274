"""Retry policy and a generic async retry combinator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .errors import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a provider call and how long to wait in between."""
    max_attempts: int = 2
    delay: float = 0.5
    retry_on: tuple[type[BaseException], ...] = (ProviderError,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")


async def call_with_retry(
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    label: str = "request",
) -> T:
    """
    Await *call()* until it succeeds or *policy* is exhausted.

    Only exceptions listed in policy.retry_on are retried; anything else
    propagates on the first occurrence. The last retryable error is
    re-raised once all attempts are used.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await call()
        except policy.retry_on as exc:
            logger.warning(
                "Attempt %d/%d failed for %s: %s",
                attempt, policy.max_attempts, label, exc,
            )
            if attempt == policy.max_attempts:
                raise
            if policy.delay:
                await asyncio.sleep(policy.delay)
    raise AssertionError("unreachable")  # loop always returns or raises
