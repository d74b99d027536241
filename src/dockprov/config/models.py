# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/config/models.py

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from dockprov.drivers.models import Host
from dockprov.provision.models import (
    DEFAULT_DOCKER_PORT,
    AuthOptions,
    EngineOptions,
    SwarmOptions,
)


class HostSpec(BaseModel):
    address: str
    username: str = "root"
    port: int = 22
    password: Optional[str] = None
    pkey_path: Optional[Path] = None

    def to_host(self) -> Host:
        return Host(
            address=self.address,
            username=self.username,
            port=self.port,
            password=self.password,
            pkey_path=self.pkey_path.expanduser() if self.pkey_path else None,
        )


class AuthSpec(BaseModel):
    # local, pre-generated PEM files
    ca_cert_path: Optional[str] = None
    server_cert_path: Optional[str] = None
    server_key_path: Optional[str] = None

    def to_options(self) -> AuthOptions:
        return AuthOptions(
            ca_cert_path=self.ca_cert_path,
            server_cert_path=self.server_cert_path,
            server_key_path=self.server_key_path,
        )


class EngineSpec(BaseModel):
    arbitrary_flags: List[str] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    insecure_registry: List[str] = Field(default_factory=list)
    registry_mirror: List[str] = Field(default_factory=list)
    env: List[str] = Field(default_factory=list)

    def to_options(self) -> EngineOptions:
        return EngineOptions(
            arbitrary_flags=tuple(self.arbitrary_flags),
            labels=tuple(self.labels),
            insecure_registry=tuple(self.insecure_registry),
            registry_mirror=tuple(self.registry_mirror),
            env=tuple(self.env),
        )


class SwarmSpec(BaseModel):
    is_swarm: bool = False
    master: bool = False
    agent: bool = False
    discovery: str = ""
    host: str = "tcp://0.0.0.0:3376"
    image: str = "swarm:latest"
    strategy: str = "spread"
    arbitrary_flags: List[str] = Field(default_factory=list)

    def to_options(self) -> SwarmOptions:
        return SwarmOptions(
            is_swarm=self.is_swarm,
            master=self.master,
            agent=self.agent,
            discovery=self.discovery,
            host=self.host,
            image=self.image,
            strategy=self.strategy,
            arbitrary_flags=tuple(self.arbitrary_flags),
        )


class LockRetrySpec(BaseModel):
    """How long to wait out a held package-manager lock."""
    attempts: int = Field(default=60, ge=1)
    delay_seconds: float = Field(default=3.0, ge=0)


class ProvisionConfig(BaseModel):
    machine_name: str
    host: HostSpec
    docker_port: int = Field(default=DEFAULT_DOCKER_PORT, gt=0, lt=65536)
    auth: AuthSpec = AuthSpec()
    engine: EngineSpec = EngineSpec()
    swarm: SwarmSpec = SwarmSpec()
    lock_retry: LockRetrySpec = LockRetrySpec()
