"""Declarative retry policy for rate-limited external calls."""

from dataclasses import dataclass
import time
from typing import Callable, Optional, TypeVar

from spopify.config import RETRY_BASE_DELAY_SECONDS, RETRY_MAX_ATTEMPTS, RETRY_MAX_DELAY_SECONDS
from spopify.core import RateLimited, log_warning

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    - max_attempts        : total number of calls, first one included
    - base_delay          : fixed wait between attempts, in seconds
    - max_delay           : upper bound on any single wait, server hint included
    - respect_server_hint : wait for the server's Retry-After when it sent one
    """

    max_attempts: int = RETRY_MAX_ATTEMPTS
    base_delay: float = RETRY_BASE_DELAY_SECONDS
    max_delay: float = RETRY_MAX_DELAY_SECONDS
    respect_server_hint: bool = True

    def delay_for(self, error: RateLimited) -> float:
        delay = self.base_delay
        if self.respect_server_hint and error.retry_after is not None:
            delay = error.retry_after
        return max(0.0, min(delay, self.max_delay))


DEFAULT_RETRY_POLICY = RetryPolicy()


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    sleep: Callable[[float], None] = time.sleep,
    label: Optional[str] = None,
    deadline: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """
    Call `fn`, retrying on RateLimited according to `policy`.

    Only RateLimited is retried; any other exception propagates at once.
    When the last attempt is rate limited too, or the next wait would end
    after `deadline` (a `clock()` timestamp), that RateLimited is re-raised.
    """
    attempts = max(1, policy.max_attempts)
    name = label or getattr(fn, "__name__", "call")

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except RateLimited as e:
            if attempt == attempts:
                log_warning(f"{name}: still rate limited after {attempts} attempts.")
                raise
            delay = policy.delay_for(e)
            if deadline is not None and clock() + delay > deadline:
                log_warning(f"{name}: rate limited, no time left to wait {delay:.1f}s.")
                raise
            log_warning(
                f"{name}: rate limited (attempt {attempt}/{attempts}), "
                f"retrying in {delay:.1f}s."
            )
            sleep(delay)

    raise AssertionError("unreachable")
