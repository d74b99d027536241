# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/systemd.py

from __future__ import annotations

import logging
import posixpath
import shlex
from dataclasses import dataclass

from dockprov.drivers.interface import RemoteExecutor
from .os_release import OsRelease
from .serviceaction import ServiceAction

log = logging.getLogger("dockprov")

DAEMON_OPTIONS_FILE = "/etc/systemd/system/docker.service.d/10-machine.conf"
DOCKER_OPTIONS_DIR = "/etc/docker"


@dataclass
class SystemdHelper:
    """
    Behaviour shared by provisioners for systemd-based distributions.
    Composed into each provisioner rather than inherited.
    """
    executor: RemoteExecutor
    os_release_id: str
    daemon_options_file: str = DAEMON_OPTIONS_FILE
    docker_options_dir: str = DOCKER_OPTIONS_DIR

    def compatible_with_host(self, os_release: OsRelease) -> bool:
        return os_release.id == self.os_release_id

    def service(self, name: str, action: ServiceAction) -> None:
        # unit files may have changed on disk since the last reload
        if action in (ServiceAction.START, ServiceAction.RESTART):
            self.executor.execute("sudo systemctl daemon-reload")

        log.debug(f"service: action={action} name={name}")
        self.executor.execute(f"sudo systemctl -f {action} {name}")

    def make_daemon_options_dir(self) -> None:
        options_dir = posixpath.dirname(self.daemon_options_file)
        self.executor.execute(f"sudo mkdir -p {shlex.quote(options_dir)}")

    def write_file(self, content: str, remote_path: str, *, mode: int = 0o644) -> None:
        """
        Write *content* byte-for-byte to *remote_path* as root.
        """
        self.executor.put_text(content, remote_path, mode=mode)
