# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/auth.py

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Protocol

from dockprov.drivers.interface import Driver, RemoteExecutor
from dockprov.errors import CertificateError, DaemonUnavailableError, RemoteCommandError
from dockprov.utils.retry import RetryError, wait_for
from .models import AuthOptions

log = logging.getLogger("dockprov")

DAEMON_WAIT_ATTEMPTS = 10
DAEMON_WAIT_DELAY = 3.0

_LISTENING_CMD = "if ! type netstat 1>/dev/null; then ss -tln; else netstat -tln; fi"


def remote_auth_options(auth: AuthOptions, docker_dir: str) -> AuthOptions:
    """
    Point the remote paths at the host's docker options dir. Returns a new
    AuthOptions; the local paths are carried over as they are.
    """
    return replace(
        auth,
        ca_cert_remote_path=posixpath.join(docker_dir, "ca.pem"),
        server_cert_remote_path=posixpath.join(docker_dir, "server.pem"),
        server_key_remote_path=posixpath.join(docker_dir, "server-key.pem"),
    )


@dataclass(frozen=True)
class CertMaterial:
    ca_cert: str
    server_cert: str
    server_key: str


class CertificateProvider(Protocol):
    def server_material(self, auth: AuthOptions, driver: Driver) -> CertMaterial: ...


class FileCertificateProvider:
    """
    Serves TLS material generated ahead of time and stored as local PEM files.
    """

    def server_material(self, auth: AuthOptions, driver: Driver) -> CertMaterial:
        return CertMaterial(
            ca_cert=self._read("ca_cert_path", auth.ca_cert_path),
            server_cert=self._read("server_cert_path", auth.server_cert_path),
            server_key=self._read("server_key_path", auth.server_key_path),
        )

    @staticmethod
    def _read(field: str, path: Optional[str]) -> str:
        if not path:
            raise CertificateError(f"auth option {field} is not set")
        p = Path(path).expanduser()
        try:
            return p.read_text()
        except OSError as e:
            raise CertificateError(f"cannot read {field} {p}: {e}") from e


def daemon_listening(netstat_output: str, port: int) -> bool:
    pattern = re.compile(rf":{port}\s+.*:.*")
    return any(pattern.search(line) for line in netstat_output.splitlines())


def wait_for_docker(
    executor: RemoteExecutor,
    port: int,
    *,
    attempts: int = DAEMON_WAIT_ATTEMPTS,
    delay: float = DAEMON_WAIT_DELAY,
) -> None:
    """
    Poll the host until something listens on the Docker API port.
    """

    def _up() -> bool:
        try:
            out = executor.execute(_LISTENING_CMD)
        except RemoteCommandError as e:
            log.debug(f"listening-port check failed: {e}")
            return False
        return daemon_listening(out, port)

    try:
        wait_for(_up, attempts=attempts, delay=delay)
    except RetryError as e:
        raise DaemonUnavailableError(
            f"docker daemon is not listening on port {port}: {e}"
        ) from e
