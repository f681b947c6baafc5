"""Transient-failure policy for calls to external text-generation services.

Errors are split into two classes by :func:`classify_error`:

- TRANSIENT: HTTP-like status 429/500/503, timeouts, dropped connections,
  or messages hinting at rate limits, quota or temporary unavailability.
- PERMANENT: everything else. These propagate on the first attempt.

:func:`with_retry` retries transient failures with exponential backoff
(``base_delay * 2 ** attempt``) using tenacity.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_STATUS_CODES = frozenset({429, 500, 503})

RETRYABLE_HINTS = (
    "rate limit",
    "quota",
    "temporarily unavailable",
    "try again",
    "timeout",
    "network error",
)


class ErrorClass(str, Enum):
    """Retry classification for a failed call."""

    TRANSIENT = "transient"
    PERMANENT = "permanent"


def _status_code(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return int(value)
    return None


def classify_error(error: BaseException) -> ErrorClass:
    """Map an exception to TRANSIENT or PERMANENT without side effects."""

    if isinstance(error, (TimeoutError, ConnectionError)):
        return ErrorClass.TRANSIENT

    if _status_code(error) in TRANSIENT_STATUS_CODES:
        return ErrorClass.TRANSIENT

    message = str(error).lower()
    if any(hint in message for hint in RETRYABLE_HINTS):
        return ErrorClass.TRANSIENT
    return ErrorClass.PERMANENT


def is_transient(error: BaseException) -> bool:
    return classify_error(error) is ErrorClass.TRANSIENT


def with_retry(
    call: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 1.0,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Invoke ``call`` and retry it on transient failures.

    Args:
        call: Zero-argument callable performing the external request.
        max_retries: Retries allowed after the first attempt.
        base_delay: Delay in seconds before the first retry; doubles each retry.
        sleep: Sleep function, replaceable for tests.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        Exception: The permanent error, or the last transient error once
            retries are exhausted.

    Example:
        text = with_retry(lambda: generator.generate(prompt, max_tokens=200))
    """

    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    retrying = Retrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=base_delay, exp_base=2, min=0),
        retry=retry_if_exception(is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    return retrying(call)


@dataclass
class RetryPolicy:
    """Retry settings bound to a sleep function, injected into components."""

    max_retries: int = 3
    base_delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def call(self, func: Callable[[], T]) -> T:
        return with_retry(
            func,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self.sleep,
        )

    @classmethod
    def immediate(cls, max_retries: int = 3) -> "RetryPolicy":
        """Policy that retries without sleeping."""

        return cls(max_retries=max_retries, base_delay=0.0, sleep=lambda _seconds: None)
