"""
Rate Limiter - Fixed-Window Admission Control

In-memory rate limiter for document generation.

Algorithm (fixed window, per key "<purpose>:<user_id>"):
    first request        → count=1, window ends now+60s, admitted
    request in window    → count += 1 (denials count too)
                           admitted while count <= 20, denied after
    request after window → hard reset to count=1, admitted

The store is an explicit mapping owned by one limiter instance. Each
process enforces its own quota; nothing is persisted across restarts.

Concurrency:
    Read-check-increment-write for a key runs under that key's lock, so two
    concurrent requests can never both be admitted past the boundary.
    Keys map onto a fixed pool of striped locks.

Usage:
    limiter = RateLimiter()
    limiter.start_sweeper()
    result = limiter.admit("doctor-42")
    if not result.allowed:
        ...
    limiter.close()

Author: Shubham Singh
Date: December 2025
"""

import threading
import time
from typing import Callable, List, MutableMapping, Optional

from loguru import logger

from clinical_documentation.core.constants import (
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    DOCUMENT_GENERATION_PURPOSE,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from clinical_documentation.core.exceptions import RateLimitedError
from clinical_documentation.core.models import AdmissionResult, RateLimitEntry


def rate_limit_key(user_id: str, purpose: str = DOCUMENT_GENERATION_PURPOSE) -> str:
    """Store key for one user and purpose, e.g. 'docgen:doctor-42'."""
    return f"{purpose}:{user_id}"


# =============================================================================
# STAGE 1: RATE LIMITER CLASS
# =============================================================================


class RateLimiter:
    """
    Per-user fixed-window admission control.

    What it does:
        Admits at most max_requests calls per key per window and reports how
        many admissions remain.

    Lifecycle:
        Construct at process start, optionally start_sweeper(), and close()
        at shutdown. Also usable as a context manager.

    Example:
        >>> limiter = RateLimiter(clock=lambda: 0.0)
        >>> limiter.admit("u1")
        AdmissionResult(allowed=True, remaining=19, retry_after=None)
    """

    def __init__(
        self,
        store: Optional[MutableMapping[str, RateLimitEntry]] = None,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
        lock_stripes: int = 64,
    ):
        """
        Initialize the limiter.

        Args:
            store: Mapping key → RateLimitEntry. A new dict when omitted.
            window_seconds: Window length
            max_requests: Admissions allowed per key per window
            clock: Monotonic time source (injectable for tests)
            lock_stripes: Size of the striped per-key lock pool
        """
        self._store = store if store is not None else {}
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self._clock = clock
        self._locks = [threading.Lock() for _ in range(max(1, lock_stripes))]

        self._sweeper: Optional[threading.Thread] = None
        self._stop = threading.Event()

    # =========================================================================
    # STAGE 2: ADMISSION
    # =========================================================================

    def admit(self, user_id: str, purpose: str = DOCUMENT_GENERATION_PURPOSE) -> AdmissionResult:
        """
        Record one request for a user and decide whether it is admitted.

        Args:
            user_id: Caller identity
            purpose: Key prefix; distinct purposes have independent quotas

        Returns:
            AdmissionResult with allowed flag and remaining admissions
        """
        key = rate_limit_key(user_id, purpose)

        with self._lock_for(key):
            now = self._clock()
            entry = self._store.get(key)

            if entry is None:
                self._store[key] = RateLimitEntry(
                    key=key, count=1, window_reset_at=now + self._window_seconds
                )
                return AdmissionResult(allowed=True, remaining=self._max_requests - 1)

            if entry.is_expired(now):
                # Hard reset, regardless of how far past the limit the old window went
                entry.count = 1
                entry.window_reset_at = now + self._window_seconds
                self._store[key] = entry
                return AdmissionResult(allowed=True, remaining=self._max_requests - 1)

            entry.count += 1
            if entry.count > self._max_requests:
                return AdmissionResult(
                    allowed=False, remaining=0, retry_after=max(0.0, entry.window_reset_at - now)
                )
            return AdmissionResult(allowed=True, remaining=self._max_requests - entry.count)

    def check_or_raise(
        self, user_id: str, purpose: str = DOCUMENT_GENERATION_PURPOSE
    ) -> AdmissionResult:
        """
        Admit or raise.

        Raises:
            RateLimitedError: If the user's quota for this window is used up
        """
        result = self.admit(user_id, purpose)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded | Key: {rate_limit_key(user_id, purpose)}")
            raise RateLimitedError(user_id=user_id, retry_after=result.retry_after)
        return result

    # =========================================================================
    # STAGE 3: MEMORY HYGIENE
    # =========================================================================

    def sweep_expired(self) -> int:
        """
        Remove entries whose window has ended.

        Returns:
            Number of entries removed
        """
        removed = 0
        for key in list(self._store.keys()):
            with self._lock_for(key):
                entry = self._store.get(key)
                if entry is not None and entry.is_expired(self._clock()):
                    del self._store[key]
                    removed += 1

        if removed:
            logger.debug(f"Swept expired rate limit entries | Removed: {removed}")
        return removed

    def start_sweeper(self, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS) -> None:
        """Run sweep_expired() every interval on a daemon thread."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return

        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            args=(interval_seconds,),
            name="rate-limit-sweeper",
            daemon=True,
        )
        self._sweeper.start()
        logger.debug(f"Rate limit sweeper started | Interval: {interval_seconds}s")

    def _sweep_loop(self, interval_seconds: float) -> None:
        while not self._stop.wait(interval_seconds):
            self.sweep_expired()

    def close(self) -> None:
        """Stop the sweeper and drop all entries."""
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5)
            self._sweeper = None
        self._store.clear()

    def __enter__(self) -> "RateLimiter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # STAGE 4: HELPERS AND PROPERTIES
    # =========================================================================

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def entry(self, user_id: str, purpose: str = DOCUMENT_GENERATION_PURPOSE) -> Optional[RateLimitEntry]:
        """Current entry for a user, if any (read-only inspection)."""
        return self._store.get(rate_limit_key(user_id, purpose))

    @property
    def tracked_keys(self) -> List[str]:
        return list(self._store.keys())

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()
