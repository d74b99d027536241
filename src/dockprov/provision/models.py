# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

DEFAULT_DOCKER_PORT = 2376


@dataclass(frozen=True)
class AuthOptions:
    """
    TLS material locations. The *_path fields are local files, the
    *_remote_path fields are where the engine finds them on the host.
    """
    ca_cert_path: Optional[str] = None
    server_cert_path: Optional[str] = None
    server_key_path: Optional[str] = None
    ca_cert_remote_path: Optional[str] = None
    server_cert_remote_path: Optional[str] = None
    server_key_remote_path: Optional[str] = None


@dataclass(frozen=True)
class EngineOptions:
    """
    Flags, labels, registries and environment applied to the Docker engine.
    Order of every sequence is preserved in the rendered config.
    """
    arbitrary_flags: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    insecure_registry: Tuple[str, ...] = ()
    registry_mirror: Tuple[str, ...] = ()
    env: Tuple[str, ...] = ()

    def with_label(self, label: str) -> "EngineOptions":
        return replace(self, labels=self.labels + (label,))


@dataclass(frozen=True)
class SwarmOptions:
    is_swarm: bool = False
    master: bool = False
    agent: bool = False
    discovery: str = ""
    host: str = "tcp://0.0.0.0:3376"
    image: str = "swarm:latest"
    strategy: str = "spread"
    arbitrary_flags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EngineConfigContext:
    docker_port: int
    auth_options: AuthOptions
    engine_options: EngineOptions


@dataclass(frozen=True)
class DockerOptions:
    engine_options: str        # rendered file content
    engine_options_path: str   # where it goes on the host


class ProvisionStage(str, Enum):
    INIT = "Init"
    HOSTNAME_SET = "HostnameSet"
    PACKAGE_DIR_READY = "PackageDirReady"
    BASE_PACKAGE_INSTALLED = "BasePackageInstalled"
    AUTH_PREPARED = "AuthPrepared"
    AUTH_CONFIGURED = "AuthConfigured"
    SWARM_CONFIGURED = "SwarmConfigured"
    SERVICE_ENABLED = "ServiceEnabled"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProvisionState:
    """
    Snapshot handed from one provisioning step to the next. Steps never
    mutate it; they return a new one via advance().
    """
    stage: ProvisionStage
    auth_options: AuthOptions
    engine_options: EngineOptions
    swarm_options: SwarmOptions
    docker_port: int = DEFAULT_DOCKER_PORT
    history: Tuple[ProvisionStage, ...] = field(default=())

    def advance(self, stage: ProvisionStage, **changes) -> "ProvisionState":
        return replace(self, stage=stage, history=self.history + (stage,), **changes)

    @classmethod
    def initial(
        cls,
        *,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
        swarm_options: SwarmOptions,
        docker_port: int = DEFAULT_DOCKER_PORT,
    ) -> "ProvisionState":
        return cls(
            stage=ProvisionStage.INIT,
            auth_options=auth_options,
            engine_options=engine_options,
            swarm_options=swarm_options,
            docker_port=docker_port,
            history=(ProvisionStage.INIT,),
        )
