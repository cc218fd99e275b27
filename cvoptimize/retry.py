"""Bounded exponential-backoff retry.

The loop is an explicit state machine (ATTEMPTING -> BACKOFF -> ATTEMPTING
... -> SUCCEEDED | FAILED) so the retry decision and the delay schedule can
be tested without sleeping.
"""
from __future__ import annotations

import enum
import time
from typing import Callable, TypeVar

from cvoptimize.log import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class RetryState(enum.Enum):
    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def should_retry(
    error: BaseException,
    attempt_index: int,
    max_attempts: int,
    is_retryable: Callable[[BaseException], bool],
) -> bool:
    """True when *error* is transient and another attempt is still allowed.

    *attempt_index* is zero-based: the first call is attempt 0.
    """
    return attempt_index < max_attempts - 1 and is_retryable(error)


def backoff_delay(base_delay: float, attempt_index: int) -> float:
    return base_delay * (2 ** attempt_index)


def call_with_retry(
    fn: Callable[[], T],
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    is_retryable: Callable[[BaseException], bool],
    sleep: Callable[[float], None] = time.sleep,
    label: str = "",
) -> T:
    """Call *fn* up to *max_attempts* times, waiting between transient failures.

    Non-retryable errors and the error from the final attempt propagate
    unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    label = label or getattr(fn, "__qualname__", repr(fn))
    state = RetryState.ATTEMPTING
    attempt = 0
    while True:
        if state is RetryState.ATTEMPTING:
            try:
                result = fn()
            except Exception as exc:
                if not should_retry(exc, attempt, max_attempts, is_retryable):
                    state = RetryState.FAILED
                    if is_retryable(exc):
                        log.error("%s failed after %d attempts: %s", label, attempt + 1, exc)
                    raise
                state = RetryState.BACKOFF
                delay = backoff_delay(base_delay, attempt)
                log.warning(
                    "%s attempt %d/%d failed (%s), retrying in %.1fs",
                    label,
                    attempt + 1,
                    max_attempts,
                    exc,
                    delay,
                )
            else:
                state = RetryState.SUCCEEDED
                return result
        elif state is RetryState.BACKOFF:
            sleep(delay)
            attempt += 1
            state = RetryState.ATTEMPTING
