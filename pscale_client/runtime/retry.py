"""
Retry policies and the retry loop.

A ``RetryPolicy`` pairs a predicate deciding whether a failure is worth
another attempt with a schedule computing how long to wait before it. The
built-in ``ExponentialBackoff`` schedule grows delays from a base value, can
cap them, enforce a minimum wait for throttling errors, honour a server's
Retry-After, bound the number of retries and add jitter.

Policies are immutable values passed per call; each call to ``retry_call``
starts from attempt 0 with no remembered failure.
"""

from __future__ import annotations

import asyncio
import functools
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, Field

from .categories import is_throttling_error, is_transient

T = TypeVar("T")


@dataclass(frozen=True)
class RetryState:
    """What a schedule sees when computing the next delay.

    Attributes:
        attempt: Number of retries already performed (0 before the first).
        last_error: The failure that triggered this retry.
    """

    attempt: int
    last_error: BaseException | None = None


Schedule = Callable[[RetryState], Optional[float]]


class ExponentialBackoff(BaseModel):
    """Exponential backoff schedule with jitter.

    The delay before retry N (0-indexed) is ``base_delay * factor ** N``,
    plus up to 25% jitter. Throttling errors wait at least
    ``throttling_floor``; an error's ``retry_after`` is honoured as a minimum
    when ``respect_retry_after`` is set. The result never exceeds
    ``max_delay``. Returns None once ``max_retries`` retries have been made.

    Attributes:
        base_delay: Delay in seconds before the first retry.
        factor: Multiplier applied per attempt.
        max_delay: Optional ceiling in seconds.
        throttling_floor: Optional minimum delay for throttling errors.
        max_retries: Optional retry budget (None means unbounded).
        jitter: Whether to add random jitter to delays.
        respect_retry_after: Whether to wait at least an error's retry_after.
    """

    base_delay: float = 0.1
    factor: float = 2.0
    max_delay: float | None = None
    throttling_floor: float | None = None
    max_retries: int | None = None
    jitter: bool = True
    respect_retry_after: bool = True

    model_config = {"frozen": True}

    def calculate_delay(self, attempt: int, error: BaseException | None = None) -> float:
        """Calculate the delay before retry ``attempt`` (0-indexed)."""
        delay = self.base_delay * (self.factor**attempt)

        if self.jitter:
            # Add up to 25% jitter
            delay += delay * 0.25 * random.random()

        if self.throttling_floor is not None and is_throttling_error(error):
            delay = max(delay, self.throttling_floor)

        retry_after = getattr(error, "retry_after", None)
        if self.respect_retry_after and isinstance(retry_after, (int, float)):
            delay = max(delay, float(retry_after))

        # The ceiling bounds every adjustment, Retry-After included
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)

        return delay

    def __call__(self, state: RetryState) -> float | None:
        if self.max_retries is not None and state.attempt >= self.max_retries:
            return None
        return self.calculate_delay(state.attempt, state.last_error)


def never(error: BaseException) -> bool:
    """Predicate rejecting every failure."""
    return False


class RetryPolicy(BaseModel):
    """Decides whether and when to retry a failed call.

    Attributes:
        should_retry: Predicate over the failure.
        schedule: Maps the retry state to a delay in seconds, or None to stop.
    """

    should_retry: Callable[[BaseException], bool] = is_transient
    schedule: Schedule = Field(default_factory=ExponentialBackoff)

    model_config = {"frozen": True}


# Transient errors, 0.1s doubling, >= 0.5s when throttled, 5 retries
DEFAULT_RETRY_POLICY = RetryPolicy(
    should_retry=is_transient,
    schedule=ExponentialBackoff(
        base_delay=0.1,
        factor=2.0,
        throttling_floor=0.5,
        max_retries=5,
    ),
)

# Throttling errors only, indefinitely, 1s doubling capped at 5s
THROTTLING_RETRY_POLICY = RetryPolicy(
    should_retry=is_throttling_error,
    schedule=ExponentialBackoff(base_delay=1.0, factor=2.0, max_delay=5.0),
)

# Any transient error, indefinitely, 1s doubling capped at 5s
TRANSIENT_RETRY_POLICY = RetryPolicy(
    should_retry=is_transient,
    schedule=ExponentialBackoff(base_delay=1.0, factor=2.0, max_delay=5.0),
)

NO_RETRY_POLICY = RetryPolicy(should_retry=never)


async def retry_call(
    action: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    on_retry: Callable[[int, BaseException, float], None] | None = None,
) -> T:
    """Run ``action`` until it succeeds or the policy gives up.

    Failures the policy rejects, and the last failure once the schedule
    stops, propagate unchanged. Cancellation is never retried.

    Args:
        action: Zero-argument coroutine function performing one attempt.
        policy: Retry policy. Defaults to DEFAULT_RETRY_POLICY.
        on_retry: Optional callback called before each retry with
                  (attempt, exception, delay).

    Returns:
        The result of the first successful attempt.
    """
    retry_policy = policy or DEFAULT_RETRY_POLICY
    name = getattr(action, "__name__", "call")
    attempt = 0

    while True:
        try:
            return await action()
        except Exception as e:
            if not retry_policy.should_retry(e):
                raise

            delay = retry_policy.schedule(RetryState(attempt=attempt, last_error=e))
            if delay is None:
                logger.warning(f"Retries exhausted after {attempt + 1} attempts for {name}: {e}")
                raise

            logger.info(f"Retry {attempt + 1} for {name} in {delay:.2f}s: {e}")
            if on_retry:
                on_retry(attempt, e, delay)

            await asyncio.sleep(delay)
            attempt += 1


def with_retry(
    policy: RetryPolicy | None = None,
    on_retry: Callable[[int, BaseException, float], None] | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for retrying async functions.

    Example:
        @with_retry(THROTTLING_RETRY_POLICY)
        async def fetch_branch(name: str) -> Branch:
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            @functools.wraps(func)
            async def attempt() -> T:
                return await func(*args, **kwargs)

            return await retry_call(attempt, policy, on_retry)

        return wrapper

    return decorator
