"""Batched, throttled and retrying calls to external metadata sources.

Items are split into fixed-size batches. Inside a batch the calls run
concurrently on a thread pool; successive batches are separated by a fixed
delay. Every call goes through call_with_retry, and whatever still fails is
replaced by a default result for that item only: one failing item never
blocks the others and the fetcher itself never raises for external errors.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
import time
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from spopify.core import RateLimited, log_debug, log_progress, log_warning

from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, call_with_retry

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


def chunked(items: Sequence[K], size: int) -> List[List[K]]:
    """Split `items` into consecutive lists of at most `size` elements."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class RateLimitedBatchFetcher:
    def __init__(
        self,
        batch_size: int,
        inter_batch_delay: float = 0.0,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        *,
        name: str = "batch",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size
        self.inter_batch_delay = inter_batch_delay
        self.retry_policy = retry_policy
        self.name = name
        self._sleep = sleep
        self._clock = clock

    def _expired(self, deadline: Optional[float]) -> bool:
        return deadline is not None and self._clock() >= deadline

    def _call(
        self,
        key: Hashable,
        fn: Callable[[], R],
        default: Callable[[], R],
        deadline: Optional[float] = None,
    ) -> R:
        try:
            return call_with_retry(
                fn,
                self.retry_policy,
                sleep=self._sleep,
                label=f"{self.name}[{key}]",
                deadline=deadline,
                clock=self._clock,
            )
        except RateLimited:
            log_warning(f"{self.name}: giving up on {key!r} (rate limited).")
        except Exception as e:
            log_warning(f"{self.name}: lookup failed for {key!r}: {e}")
        return default()

    def fetch(
        self,
        items: Iterable[K],
        per_item_fn: Callable[[K], R],
        default: Callable[[], R] = list,
        deadline: Optional[float] = None,
    ) -> Dict[K, R]:
        """
        Call `per_item_fn` once per distinct item.

        Returns a mapping item -> result in input order. Items whose call
        failed or would have to wait past `deadline` (a clock() timestamp)
        map to `default()`, as do items of batches not started before it.
        """
        keys = list(dict.fromkeys(items))
        batches = chunked(keys, self.batch_size) if keys else []
        results: Dict[K, R] = {}

        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for index, batch in enumerate(batches):
                if index > 0 and self.inter_batch_delay > 0:
                    self._sleep(self.inter_batch_delay)

                if self._expired(deadline):
                    log_warning(
                        f"{self.name}: time budget exhausted, "
                        f"skipping {len(batches) - index} remaining batch(es)."
                    )
                    break

                futures = {
                    executor.submit(
                        self._call, key, (lambda k=key: per_item_fn(k)), default, deadline
                    ): key
                    for key in batch
                }
                for future in as_completed(futures):
                    results[futures[future]] = future.result()

                log_progress(index + 1, len(batches), prefix=f"  {self.name} batches")

        return {key: results[key] if key in results else default() for key in keys}

    def fetch_grouped(
        self,
        items: Iterable[K],
        group_fn: Callable[[List[K]], Mapping[K, R]],
        default: Callable[[], R] = list,
        deadline: Optional[float] = None,
    ) -> Dict[K, R]:
        """
        Issue one call per batch; `group_fn(batch)` answers for every key
        of the batch at once.

        Keys missing from a batch answer, or belonging to a failed or
        skipped batch, map to `default()`.
        """
        keys = list(dict.fromkeys(items))
        batches = chunked(keys, self.batch_size) if keys else []
        results: Dict[K, R] = {}

        for index, batch in enumerate(batches):
            if index > 0 and self.inter_batch_delay > 0:
                self._sleep(self.inter_batch_delay)

            if self._expired(deadline):
                log_warning(
                    f"{self.name}: time budget exhausted, "
                    f"skipping {len(batches) - index} remaining batch(es)."
                )
                break

            answer = self._call(
                f"batch {index + 1}", (lambda b=batch: group_fn(b)), dict, deadline
            )
            for key in batch:
                if key in answer:
                    results[key] = answer[key]
            log_debug(f"{self.name}: batch {index + 1}/{len(batches)} -> {len(answer)} answers")

        return {key: results[key] if key in results else default() for key in keys}
