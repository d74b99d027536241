# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/utils/ssh_runner.py

from __future__ import annotations

import itertools
import logging
import os
import shlex
import socket
from typing import Optional

import paramiko

from dockprov.errors import TransportError, classify_failure

log = logging.getLogger("dockprov")

_counter = itertools.count()


class SSHRunner:
    """
    Remote executor over a single paramiko session.

    Commands are issued one at a time; the session is never shared between
    in-flight commands.
    """

    def __init__(self, client: paramiko.SSHClient, *, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout

    def run(self, cmd: str) -> tuple[int, str, str]:
        log.debug(f"[ssh] $ {cmd}")
        try:
            stdin, stdout, stderr = self.client.exec_command(cmd, timeout=self.timeout)
            out = stdout.read().decode("utf-8", errors="replace")
            err = stderr.read().decode("utf-8", errors="replace")
            rc = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, socket.timeout, OSError) as e:
            raise TransportError(f"could not run {cmd!r}: {e}") from e

        log.debug(f"[ssh][exit {rc}]")
        if out.strip():
            log.debug(f"[ssh][stdout]\n{out.rstrip()}")
        if err.strip():
            log.debug(f"[ssh][stderr]\n{err.rstrip()}")
        return rc, out, err

    def execute(self, cmd: str) -> str:
        """
        Run *cmd* and return its stdout. Non-zero exits raise
        RemoteCommandError (LockContentionError for package-manager locks).
        """
        rc, out, err = self.run(cmd)
        if rc != 0:
            raise classify_failure(cmd, rc, out, err)
        return out

    def put_text(self, content: str, remote_path: str, *, mode: int = 0o644) -> None:
        """
        Install *content* at *remote_path* as root with *mode*.

        The content goes over SFTP to a private temp file and is moved into
        place with ``sudo install``; it never appears on a command line or
        in the log.
        """
        tmp = f"/tmp/.dockprov.tmp.{os.getpid()}.{next(_counter)}"
        log.debug(f"[sftp] put {remote_path} ({len(content)} chars, mode {mode:o})")
        try:
            sftp = self.client.open_sftp()
            try:
                with sftp.open(tmp, "w") as f:
                    f.chmod(0o600)
                    f.write(content)
            finally:
                sftp.close()
        except (paramiko.SSHException, socket.timeout, OSError) as e:
            raise TransportError(f"could not upload {remote_path}: {e}") from e

        q_tmp = shlex.quote(tmp)
        self.execute(
            f"sudo install -m {mode:o} -o root -g root {q_tmp} {shlex.quote(remote_path)}; "
            f"rc=$?; rm -f {q_tmp}; exit $rc"
        )

    def close(self) -> None:
        self.client.close()
