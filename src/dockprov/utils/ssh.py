# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import socket

import paramiko

from dockprov.drivers.models import Host
from dockprov.errors import TransportError
from dockprov.utils.ssh_runner import SSHRunner


def _load_pkey(path: str) -> paramiko.PKey | None:
    for key_cls in (
        paramiko.RSAKey,
        paramiko.Ed25519Key,
        paramiko.ECDSAKey,
    ):
        try:
            return key_cls.from_private_key_file(path)
        except paramiko.SSHException:
            continue
    return None


def open_ssh(
    host: Host,
    *,
    connect_timeout: float = 20.0,
    command_timeout: float | None = None,
) -> SSHRunner:
    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    pkey = _load_pkey(str(host.pkey_path)) if host.pkey_path else None

    try:
        client.connect(
            hostname=host.address,
            port=host.port,
            username=host.username,
            password=host.password if not pkey else None,
            pkey=pkey,
            timeout=connect_timeout,
            allow_agent=True,
            look_for_keys=True,
        )
    except (paramiko.SSHException, socket.error) as e:
        client.close()
        raise TransportError(f"ssh connect to {host.username}@{host.address}:{host.port} failed: {e}") from e

    return SSHRunner(client, timeout=command_timeout)
