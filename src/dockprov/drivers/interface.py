# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/drivers/interface.py

from __future__ import annotations
from typing import Protocol


class RemoteExecutor(Protocol):
    """
    Runs shell commands on the target host and places files on it.
    Raises TransportError when the command or upload could not be delivered,
    RemoteCommandError (LockContentionError for package-manager locks)
    when a command exits non-zero.
    """

    def execute(self, cmd: str) -> str: ...

    def put_text(self, content: str, remote_path: str, *, mode: int = 0o644) -> None: ...


class Driver(Protocol):
    """
    Read-only view of the machine being provisioned plus SSH access to it.
    """

    @property
    def driver_name(self) -> str: ...

    @property
    def machine_name(self) -> str: ...

    @property
    def runner(self) -> RemoteExecutor: ...

    def get_ip(self) -> str: ...
