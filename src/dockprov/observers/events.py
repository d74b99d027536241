# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single provisioning run
    machine: str      # machine name being provisioned

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def new_ctx(machine: str, run_id: str | None = None) -> Dict[str, Any]:
    return {
        "ts": now(),
        "run_id": run_id or str(uuid.uuid4()),
        "machine": machine,
    }


# ---------------------------------------------------------------------
# Provisioning lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class StageStarted(BaseEvent):
    stage: str

@dataclass(frozen=True)
class StageCompleted(BaseEvent):
    stage: str

@dataclass(frozen=True)
class ProvisionSucceeded(BaseEvent):
    provisioner: str

@dataclass(frozen=True)
class ProvisionFailed(BaseEvent):
    stage: str
    error: str


# ---------------------------------------------------------------------
# Package manager
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class LockRetry(BaseEvent):
    command: str
    attempt: int
