"""Rate limiting and pacing utilities for Gemini requests."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class RequestRateLimiter:
    """Enforce a minimum interval between requests made through one client."""

    def __init__(
        self,
        max_requests_per_minute: int = 30,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_requests_per_minute <= 0:
            raise ValueError("max_requests_per_minute must be positive")
        self.interval = 60.0 / max_requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_tick: float | None = None

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Block until the next request may start, then yield."""

        with self._lock:
            if self._last_tick is not None:
                wait_for = self.interval - (self._clock() - self._last_tick)
                if wait_for > 0:
                    logger.debug("Rate limiter waiting %.2fs", wait_for)
                    self._sleep(wait_for)
            self._last_tick = self._clock()
        yield


@dataclass
class PacingPolicy:
    """Fixed-interval delays between sequential curation steps.

    The delays exist to stay under upstream rate limits. Tests use
    :meth:`disabled` so nothing sleeps.
    """

    between_fields_seconds: float = 3.0
    between_articles_seconds: float = 5.0
    between_scrapes_seconds: float = 2.0
    overload_backoff_seconds: float = 10.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def pause(self, seconds: float, reason: str) -> None:
        if seconds <= 0:
            return
        logger.info("Waiting %.1fs (%s)", seconds, reason)
        self.sleep(seconds)

    def between_fields(self) -> None:
        self.pause(self.between_fields_seconds, "between summary fields")

    def between_articles(self) -> None:
        self.pause(self.between_articles_seconds, "between articles")

    def between_scrapes(self) -> None:
        self.pause(self.between_scrapes_seconds, "between scrapes")

    def after_overload(self) -> None:
        self.pause(self.overload_backoff_seconds, "model overloaded")

    @classmethod
    def disabled(cls) -> "PacingPolicy":
        return cls(
            between_fields_seconds=0.0,
            between_articles_seconds=0.0,
            between_scrapes_seconds=0.0,
            overload_backoff_seconds=0.0,
        )
