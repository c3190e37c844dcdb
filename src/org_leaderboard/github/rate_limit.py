"""Primary rate-limit tracking from GitHub response headers."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

log = logging.getLogger(__name__)


class RateLimitMonitor:
    """Pause requests when the remaining quota drops to ``threshold``."""

    def __init__(self, threshold: int = 10, max_wait: float = 900.0) -> None:
        self.threshold = threshold
        self.max_wait = max_wait
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            try:
                self._remaining = int(remaining)
            except ValueError:
                pass
        if reset is not None:
            try:
                self._reset_at = float(reset)
            except ValueError:
                pass

    async def wait_if_needed(self) -> None:
        if self._remaining is None or self._reset_at is None:
            return
        if self._remaining > self.threshold:
            return
        wait = min(max(0.0, self._reset_at - time.time()) + 1, self.max_wait)
        log.warning(
            "Rate limit nearly exhausted (%d remaining), waiting %.0fs", self._remaining, wait
        )
        await asyncio.sleep(wait)
        # Quota is unknown until the next response arrives.
        self._remaining = None
