"""Client-side rate gate for the advisor.

Two rules, checked before any network call:
- a minimum interval between accepted requests
- a cap on requests counted since the window last reset; the counter resets
  once a full minute has passed since the last accepted request
"""
import time
from typing import Callable, Optional

from cfo_helper.errors import RateLimitError


WINDOW_SECONDS = 60.0


class RateGate:
    """Per-session request limiter. State lives on the instance only."""

    def __init__(
        self,
        min_interval: float = 2.0,
        max_per_minute: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval = min_interval
        self.max_per_minute = max_per_minute
        self._clock = clock
        self.request_count = 0
        self.last_request_time: Optional[float] = None

    def check(self) -> None:
        """
        Admit one request or raise RateLimitError.

        Passing the gate stamps the request time and increments the counter.
        """
        now = self._clock()

        if self.last_request_time is not None:
            elapsed = now - self.last_request_time

            if elapsed < self.min_interval:
                raise RateLimitError("Please wait a moment before sending another message.")

            if elapsed > WINDOW_SECONDS:
                self.request_count = 0

        if self.request_count >= self.max_per_minute:
            raise RateLimitError("Too many requests. Please wait a minute before trying again.")

        self.request_count += 1
        self.last_request_time = now

    def reset(self) -> None:
        self.request_count = 0
        self.last_request_time = None
