"""Rate limiting for place submissions."""

import logging
import time
from collections import deque
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Rate limits
DEFAULT_LIMIT = 5
DEFAULT_WINDOW_SECONDS = 60 * 60
CLEANUP_THRESHOLD = 1000


class RateLimiter:
    """Fixed quota of submissions per identity over a rolling window.

    Each identity owns a time-ordered deque of the timestamps of its
    accepted requests. Timestamps older than the window are dropped before
    every check.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1:
            msg = "limit must be at least 1"
            raise ValueError(msg)
        if window_seconds <= 0:
            msg = "window_seconds must be positive"
            raise ValueError(msg)

        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, deque[float]] = {}

    def _prune(self, timestamps: deque[float], now: float) -> None:
        while timestamps and now - timestamps[0] >= self.window_seconds:
            timestamps.popleft()

    def check(self, identity: str) -> bool:
        """Record a request for identity if it is within quota.

        Args:
            identity: Submitter identity (e.g. client IP)

        Returns:
            True if the request is allowed, False if the limit is exceeded
        """
        now = self._clock()
        timestamps = self._requests.setdefault(identity, deque())
        self._prune(timestamps, now)

        if len(timestamps) >= self.limit:
            logger.warning(
                f"Rate limit exceeded for {identity} "
                f"({len(timestamps)}/{self.limit} in {self.window_seconds:.0f}s)"
            )
            return False

        timestamps.append(now)

        if len(self._requests) > CLEANUP_THRESHOLD:
            self.cleanup()

        return True

    def remaining(self, identity: str) -> int:
        """Number of requests identity may still make in the current window."""
        timestamps = self._requests.get(identity)
        if not timestamps:
            return self.limit
        self._prune(timestamps, self._clock())
        return self.limit - len(timestamps)

    def cleanup(self) -> int:
        """Forget identities with no requests left in the window.

        Returns:
            Number of identities removed
        """
        now = self._clock()
        idle = []
        for identity, timestamps in self._requests.items():
            self._prune(timestamps, now)
            if not timestamps:
                idle.append(identity)

        for identity in idle:
            del self._requests[identity]

        if idle:
            logger.info(f"Cleaned up {len(idle)} idle rate limit entries")
        return len(idle)

    def tracked_identities(self) -> int:
        return len(self._requests)
