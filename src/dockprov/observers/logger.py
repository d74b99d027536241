# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
import logging
from .events import BaseEvent, LockRetry, ProvisionFailed, StageStarted


class LoggerObserver:
    """Writes provisioning events to the run logger."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        etype = event.__class__.__name__
        fields = ", ".join(
            f"{k}={v}" for k, v in event.dict().items() if k not in ("ts", "run_id")
        )

        if isinstance(event, ProvisionFailed):
            self.logger.error(f"[EVENT] {etype}: {fields}")
        elif isinstance(event, (LockRetry, StageStarted)):
            self.logger.debug(f"[EVENT] {etype}: {fields}")
        else:
            self.logger.info(f"[EVENT] {etype}: {fields}")
