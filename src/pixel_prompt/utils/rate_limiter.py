"""
Sliding-window rate limiter for outbound image generation requests.

The generation API allows a fixed number of requests per minute. Each caller
reserves the earliest slot that keeps the window within budget and then
sleeps until that slot, so queued callers wait concurrently instead of one
after another.
"""

import asyncio
import time
from collections import deque
from collections.abc import Callable


class RateLimiter:
    """
    Async rate limiter handing out reserved start times.

    At most `max_requests` reservations fall within any `per_seconds` window.
    Reservations may lie in the future while callers are still waiting.

    Example:
        >>> limiter = RateLimiter(max_requests=10, per_seconds=60)
        >>> async def generate():
        ...     await limiter.acquire()
        ...     # call the generation API
    """

    def __init__(
        self,
        max_requests: int,
        per_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.per_seconds = per_seconds
        self._clock = clock
        self._slots: deque[float] = deque()
        self._lock = asyncio.Lock()

    def reserve(self) -> float:
        """
        Claim the next free slot.

        Returns:
            Seconds the caller has to wait before its slot starts
        """
        now = self._clock()
        while self._slots and self._slots[0] <= now - self.per_seconds:
            self._slots.popleft()

        start = now
        if len(self._slots) >= self.max_requests:
            # the slot max_requests places back must have left the window
            start = max(now, self._slots[-self.max_requests] + self.per_seconds)
        self._slots.append(start)
        return start - now

    async def acquire(self) -> None:
        """Wait until a request slot is free, then claim it."""
        async with self._lock:
            delay = self.reserve()
        if delay > 0:
            await asyncio.sleep(delay)

    def remaining(self) -> int:
        """Number of requests that can start right now without waiting."""
        now = self._clock()
        in_window = sum(1 for slot in self._slots if now - self.per_seconds < slot)
        return max(0, self.max_requests - in_window)

    def reset(self) -> None:
        """Forget all reservations."""
        self._slots.clear()
