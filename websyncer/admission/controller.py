"""
Admission control for the image-generation endpoints.

Per request:

    fingerprint + tier -> read both counters (concurrently)
        -> short-term check -> daily check -> ALLOW + detached increments

The limiter is best-effort. Counter increments are read-then-write and
are dispatched without waiting for them, so concurrent requests from
one fingerprint can read the same count and all be admitted. Overshoot
is bounded by the bucket width because every counter expires.

A store read failure is treated as a count of zero (fail-open): this is
a cost guard, and a store outage should not take generation down with it.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from websyncer.admission.allowlist import AllowList
from websyncer.admission.buckets import (
    daily_bucket,
    seconds_until_short_term_reset,
    seconds_until_utc_midnight,
    short_term_bucket,
    utc_now,
)
from websyncer.admission.identity import ClientIdentity
from websyncer.config.settings import LimitTier, RateLimitSettings
from websyncer.storage.counter_store import CounterStore, CounterStoreError

logger = logging.getLogger(__name__)

LIMIT_SHORT_TERM = "short_term"
LIMIT_DAILY = "daily"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Allowed:
    """Admission granted. Remaining counts already account for this request."""

    short_term_remaining: int
    daily_remaining: int
    tier: LimitTier
    whitelisted: bool = False

    allowed = True


@dataclass(frozen=True)
class Denied:
    """Admission refused; nothing was incremented."""

    limit_type: str
    retry_after_seconds: int
    message: str

    allowed = False


AdmissionResult = Union[Allowed, Denied]


@dataclass(frozen=True)
class UsageSnapshot:
    """Current counter values for a caller, for the status endpoint."""

    short_term_used: int
    daily_used: int
    tier: LimitTier
    whitelisted: bool
    address: str


# ---------------------------------------------------------------------------
# Detached counter updates
# ---------------------------------------------------------------------------


class CounterUpdate(str, Enum):
    """Outcome of one detached counter update."""

    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass(frozen=True)
class CounterWrite:
    key: str
    value: int
    ttl_seconds: int


class CounterUpdater:
    """
    Fire-and-forget writer for counter increments.

    dispatch() returns immediately with a Future that resolves to a
    CounterUpdate. Failures are logged and resolved as FAILED; they are
    never retried and never raised to the request that caused them.
    """

    def __init__(self, store: CounterStore, executor: Executor) -> None:
        self._store = store
        self._executor = executor
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def dispatch(self, writes: Sequence[CounterWrite]) -> "Future[CounterUpdate]":
        if not writes:
            return _resolved(CounterUpdate.SKIPPED)
        try:
            future = self._executor.submit(self._apply, tuple(writes))
        except RuntimeError:
            # Executor already shut down
            logger.warning("Counter update skipped for %s: executor is closed", writes[0].key)
            return _resolved(CounterUpdate.SKIPPED)

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for outstanding updates. Returns True if none are left running."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _apply(self, writes: tuple[CounterWrite, ...]) -> CounterUpdate:
        # Each write stands alone: one rejected key must not cost the others
        outcome = CounterUpdate.APPLIED
        for write in writes:
            try:
                self._store.put(write.key, write.value, write.ttl_seconds)
            except Exception:
                logger.exception("Failed to update rate limit counter %s", write.key)
                outcome = CounterUpdate.FAILED
        return outcome

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)


def _resolved(outcome: CounterUpdate) -> "Future[CounterUpdate]":
    future: Future = Future()
    future.set_result(outcome)
    return future


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


def counter_keys(fingerprint: str, now: datetime, window_minutes: int = 10) -> tuple[str, str]:
    """Return the (short-term, daily) store keys for a fingerprint at ``now``."""
    return (
        f"rl:short:{fingerprint}:{short_term_bucket(now, window_minutes)}",
        f"rl:daily:{fingerprint}:{daily_bucket(now)}",
    )


class AdmissionController:
    """
    Decides ALLOW/DENY for generation requests and advances counters.

    Short-term denial always wins over daily denial when both apply.
    """

    def __init__(
        self,
        store: CounterStore,
        allowlist: AllowList,
        settings: Optional[RateLimitSettings] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], datetime] = utc_now,
        write_executor: Optional[Executor] = None,
    ) -> None:
        self._settings = settings or RateLimitSettings()
        self._store = store
        self._allowlist = allowlist
        self._clock = clock

        # Reads and detached writes use separate pools so queued writes
        # never delay a later request's reads.
        self._owned: list[ThreadPoolExecutor] = []
        self._executor = executor or self._own_pool("admission-read")
        self._write_executor = write_executor or self._own_pool("admission-write")
        self.updater = CounterUpdater(store, self._write_executor)

    def admit(self, identity: ClientIdentity) -> AdmissionResult:
        """Run the admission check for one request."""
        now = self._clock()
        fingerprint = identity.fingerprint
        tier = self._allowlist.limits_for(identity.address)
        short_limit, daily_limit = tier.short_term, tier.daily

        short_key, daily_key = counter_keys(fingerprint, now, short_limit.window_minutes)
        short_count, daily_count = self._read_counts(short_key, daily_key)

        if short_count >= short_limit.max_requests:
            retry_after = max(
                seconds_until_short_term_reset(now, short_limit.window_minutes),
                self._settings.min_retry_after,
            )
            logger.info(
                "Short-term limit hit for %s (%d/%d, tier=%s)",
                fingerprint, short_count, short_limit.max_requests, tier.name,
            )
            return Denied(
                limit_type=LIMIT_SHORT_TERM,
                retry_after_seconds=retry_after,
                message=(
                    f"Too many requests. You can generate up to {short_limit.max_requests} "
                    f"images per {short_limit.window_minutes} minutes. Please wait a few minutes."
                ),
            )

        if daily_count >= daily_limit.max_requests:
            logger.info(
                "Daily limit hit for %s (%d/%d, tier=%s)",
                fingerprint, daily_count, daily_limit.max_requests, tier.name,
            )
            return Denied(
                limit_type=LIMIT_DAILY,
                retry_after_seconds=seconds_until_utc_midnight(now),
                message=(
                    f"Daily limit reached. You can generate up to {daily_limit.max_requests} "
                    "images per day. Try again tomorrow!"
                ),
            )

        self.updater.dispatch([
            CounterWrite(short_key, short_count + 1, short_limit.ttl_seconds),
            CounterWrite(daily_key, daily_count + 1, daily_limit.ttl_seconds),
        ])

        return Allowed(
            short_term_remaining=short_limit.max_requests - short_count - 1,
            daily_remaining=daily_limit.max_requests - daily_count - 1,
            tier=tier,
            whitelisted=self._allowlist.is_whitelisted(identity.address),
        )

    def status(self, identity: ClientIdentity) -> UsageSnapshot:
        """Report current usage without consuming quota."""
        tier = self._allowlist.limits_for(identity.address)
        short_key, daily_key = counter_keys(
            identity.fingerprint, self._clock(), tier.short_term.window_minutes
        )
        short_count, daily_count = self._read_counts(short_key, daily_key)
        return UsageSnapshot(
            short_term_used=short_count,
            daily_used=daily_count,
            tier=tier,
            whitelisted=self._allowlist.is_whitelisted(identity.address),
            address=identity.address,
        )

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """Let pending counter updates finish, then release the executors we own."""
        if not self.updater.flush(timeout):
            logger.warning("Shutting down with %d counter updates still pending",
                           self.updater.pending_count)
        for pool in self._owned:
            pool.shutdown(wait=False)
        self._owned.clear()

    def _own_pool(self, name: str) -> ThreadPoolExecutor:
        pool = ThreadPoolExecutor(
            max_workers=self._settings.executor_workers,
            thread_name_prefix=name,
        )
        self._owned.append(pool)
        return pool

    def _read_counts(self, short_key: str, daily_key: str) -> tuple[int, int]:
        short_future = self._executor.submit(self._read, short_key)
        daily_future = self._executor.submit(self._read, daily_key)
        return short_future.result(), daily_future.result()

    def _read(self, key: str) -> int:
        try:
            value = self._store.get(key)
        except CounterStoreError:
            logger.warning("Counter read failed for %s; admitting as zero", key, exc_info=True)
            return 0
        return value or 0
