# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

import time
import functools
from typing import Callable


class RetryError(RuntimeError):
    pass


def retry(
    *,
    retries: int,
    delay: float,
    retry_on: tuple[type[Exception], ...] = (Exception,),
    on_retry: Callable[[int, Exception], None] | None = None,
):
    """
    Retry decorator for idempotent operations.

    retries: total number of attempts
    delay: seconds between attempts
    retry_on: exception types to retry; anything else propagates at once
    on_retry: callback(attempt, exception), called before each retry; not
              called for the final failed attempt

    When every attempt fails the last exception is re-raised unchanged.
    """
    if retries < 1:
        raise ValueError("retries must be >= 1")

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            for attempt in range(1, retries + 1):
                try:
                    return fn(*args, **kwargs)
                except retry_on as exc:
                    if attempt == retries:
                        raise
                    if on_retry:
                        on_retry(attempt, exc)
                    time.sleep(delay)
        return wrapper
    return decorator


def wait_for(
    predicate: Callable[[], bool],
    *,
    attempts: int,
    delay: float,
) -> None:
    """
    Poll *predicate* until it returns True, sleeping *delay* seconds between
    polls. Raises RetryError after *attempts* false results.
    """
    for attempt in range(1, attempts + 1):
        if predicate():
            return
        if attempt < attempts:
            time.sleep(delay)
    raise RetryError(f"condition not met after {attempts} attempts")
