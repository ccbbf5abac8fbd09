"""Reusable in-memory rate limiter."""

import logging
import math
import time
from collections.abc import Callable

from digiclick_client.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Per-endpoint fixed-window counter backed by an in-memory dict.

    All calls for an endpoint inside the same ``floor(now / window)`` bucket
    share one counter. A caller can burst up to twice the limit across a
    window boundary. This is a client-side courtesy limit, not a security
    control, and it is not shared across processes.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._counts: dict[tuple[str, int], int] = {}

    def _window(self, now: float) -> int:
        return math.floor(now / self.window_seconds)

    def _purge(self, current_window: int) -> None:
        stale = [key for key in self._counts if key[1] < current_window - 1]
        for key in stale:
            del self._counts[key]

    def check(self, endpoint: str) -> None:
        """Count a request for the endpoint or raise RateLimitExceeded.

        Rejected calls are not counted.
        """
        now = self._clock()
        window = self._window(now)
        self._purge(window)

        key = (endpoint, window)
        count = self._counts.get(key, 0)
        if count >= self.max_requests:
            retry_after = (window + 1) * self.window_seconds - now
            logger.warning(
                "Rate limit hit for %s (%d requests / %.0fs)",
                endpoint,
                self.max_requests,
                self.window_seconds,
            )
            raise RateLimitExceeded(endpoint, retry_after=max(0.0, retry_after))

        self._counts[key] = count + 1

    def is_allowed(self, endpoint: str) -> bool:
        """Boolean form of check(); records the request if allowed."""
        try:
            self.check(endpoint)
        except RateLimitExceeded:
            return False
        return True

    def remaining(self, endpoint: str) -> int:
        window = self._window(self._clock())
        return max(0, self.max_requests - self._counts.get((endpoint, window), 0))

    def reset(self, endpoint: str) -> None:
        """Clear rate limit state for an endpoint."""
        for key in [k for k in self._counts if k[0] == endpoint]:
            del self._counts[key]

    def clear(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)
