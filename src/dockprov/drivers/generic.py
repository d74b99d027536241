# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass

from .interface import RemoteExecutor
from .models import Host


@dataclass
class GenericDriver:
    """
    Driver for a machine that already exists and is reachable over SSH.
    """
    machine_name: str
    host: Host
    runner: RemoteExecutor
    driver_name: str = "generic"

    def get_ip(self) -> str:
        return self.host.address
