"""Per-origin fixed window rate limiting."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from voice_relay.domain.entities import RateRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 10_000


class RateLimitExceededError(Exception):
    """Raised by the gateway when an origin used up its quota."""

    def __init__(self, origin_key: str) -> None:
        super().__init__("Rate limit exceeded")
        self.origin_key = origin_key


class RateLimiter:
    """Count requests per origin inside fixed, time-based windows."""

    def __init__(
        self,
        *,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._records: dict[str, RateRecord] = {}
        self._lock = threading.Lock()

    def allow(self, origin_key: str) -> bool:
        """Record a request from ``origin_key`` and return whether it may proceed."""

        now = self._clock()
        with self._lock:
            record = self._records.get(origin_key)
            if record is None or record.is_expired(now):
                if record is None and len(self._records) >= self._max_entries:
                    if not self._purge_expired_locked(now):
                        self._evict_oldest_locked()
                self._records[origin_key] = RateRecord(
                    count=1, window_reset_at=now + self._window_seconds
                )
                return True

            if record.count >= self._max_requests:
                logger.info("Rate limit reached for %s", origin_key)
                return False

            record.count += 1
            return True

    def purge_expired(self) -> int:
        """Drop records whose window has elapsed and return how many were removed."""

        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [key for key, record in self._records.items() if record.is_expired(now)]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug("Purged %s expired rate limit records", len(expired))
        return len(expired)

    def _evict_oldest_locked(self) -> None:
        oldest = min(self._records, key=lambda key: self._records[key].window_reset_at)
        del self._records[oldest]
        logger.debug("Rate limit table full; evicted %s", oldest)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["RateLimitExceededError", "RateLimiter"]
