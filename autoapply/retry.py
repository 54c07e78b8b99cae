"""Backoff-and-retry for flaky page actions that shutdown can cut short."""
from __future__ import annotations

import functools
import random
import threading
import time
from typing import Any, Callable, Tuple, Type

from autoapply.log import get_logger

log = get_logger(__name__)


def backoff_delay(attempt: int, base_delay: float, factor: float, max_delay: float, jitter: bool) -> float:
    delay = min(base_delay * factor ** (attempt - 1), max_delay)
    return delay * (0.5 + random.random()) if jitter else delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """Retry the wrapped call on ``retryable`` errors.

    Callers may pass ``stop=<threading.Event>``: the wait between attempts
    then ends as soon as the event is set, and the last error is re-raised
    without another attempt.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, stop: threading.Event | None = None, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        log.error("%s gave up after %d attempts: %s", fn.__qualname__, attempt, exc)
                        raise
                    delay = backoff_delay(attempt, base_delay, backoff_factor, max_delay, jitter)
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__, attempt, max_attempts, exc, delay,
                    )
                    if stop is None:
                        time.sleep(delay)
                    elif stop.wait(delay):
                        log.info("%s: shutdown requested, not retrying", fn.__qualname__)
                        raise
                    attempt += 1

        return wrapper

    return decorator
