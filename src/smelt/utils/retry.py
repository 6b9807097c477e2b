"""
Retry policy for LLM provider calls.

Provides resilient API call handling with:
- Exponential backoff with additive jitter, capped at a ceiling
- Retry-After precedence for rate-limited responses
- Retry on transient errors only (429, 5xx, transport failures)
- Logging of retry attempts and sleep durations
"""

import asyncio
import logging
import math
import random
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    after_log,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from smelt.models.llm import GatewayConfig
from smelt.utils.errors import LLMConnectionError, LLMRateLimitError, LLMServerError
from smelt.utils.logging import get_logger

logger = get_logger(__name__)

RETRYABLE_ERRORS = (LLMRateLimitError, LLMServerError, LLMConnectionError)

SleepFn = Callable[[float], Awaitable[None]]
RandomFn = Callable[[], float]


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """
    Parse a Retry-After header value.

    Args:
        value: Raw header value, either delta-seconds or an HTTP-date
        now: Reference time for HTTP-date values (defaults to current UTC time)

    Returns:
        Seconds to wait, or None when the header is absent or unparseable
    """
    if not value:
        return None

    value = value.strip()
    try:
        return float(max(0, int(value)))
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if retry_at is None:
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    return float(max(0, math.ceil((retry_at - now).total_seconds())))


def compute_backoff(
    attempt: int,
    initial_delay: float,
    max_delay: float,
    jitter_ratio: float,
    rng: RandomFn = random.random,
    retry_after: float | None = None,
) -> float:
    """
    Compute the delay before the next attempt.

    Args:
        attempt: Zero-based index of the attempt that just failed
        initial_delay: Base delay in seconds
        max_delay: Ceiling for any delay
        jitter_ratio: Maximum fraction of the exponential delay added as jitter
        rng: Source of uniform floats in [0, 1)
        retry_after: Provider supplied delay, wins over the computed value

    Returns:
        Delay in seconds
    """
    if retry_after:
        return min(retry_after, max_delay)

    exponential = initial_delay * (2**attempt)
    jitter = rng() * jitter_ratio * exponential
    return min(exponential + jitter, max_delay)


class wait_backoff_or_retry_after(wait_base):
    """
    Tenacity wait strategy that honors the provider's Retry-After hint.

    Falls back to exponential backoff with jitter when no hint was given.
    """

    def __init__(self, config: GatewayConfig, rng: RandomFn = random.random) -> None:
        self.config = config
        self.rng = rng

    def __call__(self, retry_state: RetryCallState) -> float:
        retry_after = None
        if retry_state.outcome is not None and retry_state.outcome.failed:
            exc = retry_state.outcome.exception()
            if isinstance(exc, LLMRateLimitError):
                retry_after = exc.retry_after

        return compute_backoff(
            attempt=retry_state.attempt_number - 1,
            initial_delay=self.config.initial_retry_delay,
            max_delay=self.config.max_retry_delay,
            jitter_ratio=self.config.jitter_ratio,
            rng=self.rng,
            retry_after=retry_after,
        )


def create_provider_retrying(
    config: GatewayConfig,
    sleep: SleepFn = asyncio.sleep,
    rng: RandomFn = random.random,
) -> AsyncRetrying:
    """
    Create the retry controller for a single provider call.

    Timeouts, terminal 4xx responses and configuration errors are never retried.
    The last classified error is re-raised once attempts are exhausted.

    Args:
        config: Gateway configuration holding the retry policy
        sleep: Awaitable sleep used between attempts
        rng: Random source for jitter

    Returns:
        AsyncRetrying instance; call it with the coroutine function to run
    """
    return AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_backoff_or_retry_after(config, rng),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.DEBUG),
        reraise=True,
    )
