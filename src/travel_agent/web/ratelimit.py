"""In-memory sliding-window rate limiting for the HTTP API."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable

from travel_agent.log import get_logger, mask_user_id

logger = get_logger(__name__)


class RateLimitExceeded(Exception):
    """A client went over its request budget for the current window."""


class SlidingWindowLimiter:
    """Allows at most ``limit`` hits per key within any ``window`` seconds.

    State lives in process memory, so each app instance keeps its own counts.
    """

    def __init__(
        self,
        name: str,
        limit: int,
        window: float,
        message: str,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.limit = limit
        self.window = window
        self.message = message
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    def check(self, key: str) -> bool:
        """Record a hit for ``key`` and return whether it is within the limit.

        Rejected hits are not recorded.
        """
        now = self._clock()
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - self.window:
            hits.popleft()

        if len(hits) >= self.limit:
            logger.warning("rate_limit_exceeded", limiter=self.name, client=mask_user_id(key), limit=self.limit)
            return False
        hits.append(now)
        return True

    def hit(self, key: str) -> None:
        if not self.check(key):
            raise RateLimitExceeded(self.message)
