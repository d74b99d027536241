# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/swarm.py

from __future__ import annotations

import logging
import shlex
from typing import List, Protocol
from urllib.parse import urlparse

from dockprov.drivers.interface import Driver
from dockprov.errors import SwarmConfigurationError
from .models import AuthOptions, SwarmOptions

log = logging.getLogger("dockprov")


class SwarmConfigurator(Protocol):
    def configure(
        self,
        driver: Driver,
        swarm: SwarmOptions,
        auth: AuthOptions,
        docker_port: int,
    ) -> None: ...


class DockerRunSwarmConfigurator:
    """
    Starts the standalone swarm manager and/or agent as containers on the
    provisioned host.
    """

    MASTER_CONTAINER = "swarm-agent-master"
    AGENT_CONTAINER = "swarm-agent"

    def configure(
        self,
        driver: Driver,
        swarm: SwarmOptions,
        auth: AuthOptions,
        docker_port: int,
    ) -> None:
        if not swarm.is_swarm:
            log.debug("swarm not requested, skipping")
            return
        if not swarm.discovery:
            raise SwarmConfigurationError("swarm requested but no discovery URL given")

        ip = driver.get_ip()

        if swarm.master:
            log.info(f"starting swarm manager on {driver.machine_name}")
            driver.runner.execute(self.master_command(swarm, auth, ip))

        if swarm.agent:
            log.info(f"starting swarm agent on {driver.machine_name}")
            driver.runner.execute(self.agent_command(swarm, ip, docker_port))

    @staticmethod
    def _master_port(swarm: SwarmOptions) -> int:
        port = urlparse(swarm.host).port
        if port is None:
            raise SwarmConfigurationError(f"swarm host {swarm.host!r} has no port")
        return port

    def master_command(self, swarm: SwarmOptions, auth: AuthOptions, ip: str) -> str:
        port = self._master_port(swarm)
        argv: List[str] = [
            "sudo", "docker", "run", "-d", "--restart=always",
            "--name", self.MASTER_CONTAINER,
            "-p", f"{port}:{port}",
            "-v", "/etc/docker:/etc/docker",
            swarm.image,
            "manage",
            "--tlsverify",
            f"--tlscacert={auth.ca_cert_remote_path}",
            f"--tlscert={auth.server_cert_remote_path}",
            f"--tlskey={auth.server_key_remote_path}",
            "-H", f"tcp://0.0.0.0:{port}",
            "--strategy", swarm.strategy,
            "--advertise", f"{ip}:{port}",
        ]
        argv += [f"--{flag}" for flag in swarm.arbitrary_flags]
        argv.append(swarm.discovery)
        return " ".join(shlex.quote(a) for a in argv)

    def agent_command(self, swarm: SwarmOptions, ip: str, docker_port: int) -> str:
        argv = [
            "sudo", "docker", "run", "-d", "--restart=always",
            "--name", self.AGENT_CONTAINER,
            swarm.image,
            "join",
            "--advertise", f"{ip}:{docker_port}",
            swarm.discovery,
        ]
        return " ".join(shlex.quote(a) for a in argv)
