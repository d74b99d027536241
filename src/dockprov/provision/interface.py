# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/interface.py

from __future__ import annotations

from typing import Protocol

from dockprov.drivers.interface import Driver
from .models import (
    DEFAULT_DOCKER_PORT,
    AuthOptions,
    DockerOptions,
    EngineOptions,
    ProvisionState,
    SwarmOptions,
)
from .os_release import OsRelease
from .pkgaction import PackageAction


class Provisioner(Protocol):
    """
    Contract for installing and configuring Docker on one OS family.
    One instance per provisioning run; instances are never shared between runs.
    """

    driver: Driver

    def compatible_with_host(self, os_release: OsRelease) -> bool: ...

    def set_hostname(self, hostname: str) -> None: ...

    def package(self, name: str, action: PackageAction) -> None: ...

    def generate_docker_options(self, state: ProvisionState) -> DockerOptions: ...

    def provision(
        self,
        swarm_options: SwarmOptions,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
        docker_port: int = DEFAULT_DOCKER_PORT,
    ) -> ProvisionState:
        """
        Run the full sequence. Returns the final state (stage Done) or raises
        the first step's error unchanged.
        """
        ...
