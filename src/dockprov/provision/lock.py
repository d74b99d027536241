# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/lock.py

from __future__ import annotations

import logging
from typing import Callable, Optional

from dockprov.drivers.interface import RemoteExecutor
from dockprov.errors import LockContentionError
from dockprov.utils.retry import retry

log = logging.getLogger("dockprov")

# Ceiling and pause between attempts while another process holds the
# package-manager lock: three minutes in total.
LOCK_RETRY_ATTEMPTS = 60
LOCK_RETRY_DELAY = 3.0


def run_with_lock_retry(
    executor: RemoteExecutor,
    command: str,
    *,
    attempts: int = LOCK_RETRY_ATTEMPTS,
    delay: float = LOCK_RETRY_DELAY,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
) -> str:
    """
    Run a package-manager command, waiting out lock contention.

    Only LockContentionError is retried; it is re-raised once *attempts*
    calls have all hit the lock. Any other failure propagates on the first
    attempt.
    """

    def _log_retry(attempt: int, exc: Exception) -> None:
        log.warning(f"package manager locked (attempt {attempt}/{attempts}): {command.strip()}")
        if on_retry:
            on_retry(attempt, exc)

    @retry(
        retries=attempts,
        delay=delay,
        retry_on=(LockContentionError,),
        on_retry=_log_retry,
    )
    def _run() -> str:
        return executor.execute(command)

    return _run()
