# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/clearlinux.py

from __future__ import annotations

import logging
import shlex
from typing import TYPE_CHECKING, List, Optional

from dockprov.drivers.interface import Driver
from dockprov.errors import VersionParseError
from dockprov.observers.dispatcher import EventBus
from dockprov.observers.events import LockRetry, new_ctx
from .auth import (
    DAEMON_WAIT_ATTEMPTS,
    DAEMON_WAIT_DELAY,
    CertificateProvider,
    FileCertificateProvider,
    remote_auth_options,
    wait_for_docker,
)
from .engine_config import EngineConfigRenderer
from .lock import LOCK_RETRY_ATTEMPTS, LOCK_RETRY_DELAY, run_with_lock_retry
from .models import (
    DEFAULT_DOCKER_PORT,
    AuthOptions,
    DockerOptions,
    EngineConfigContext,
    EngineOptions,
    ProvisionStage,
    ProvisionState,
    SwarmOptions,
)
from .os_release import OsRelease
from .pkgaction import PackageAction, PackageManager
from .sequence import Step, run_sequence
from .serviceaction import ServiceAction
from .swarm import DockerRunSwarmConfigurator, SwarmConfigurator
from .systemd import SystemdHelper

if TYPE_CHECKING:
    from .registry import ProvisionerRegistry

log = logging.getLogger("dockprov")

OS_RELEASE_ID = "clear-linux-os"
BASE_BUNDLE = "containers-basic"

SWUPD = PackageManager(
    binary="swupd",
    verbs={
        PackageAction.INSTALL: "bundle-add",
        PackageAction.UPGRADE: "bundle-add",
        PackageAction.PURGE: "bundle-remove",
    },
    aliases={"docker": BASE_BUNDLE},
)


def docker_client_version(driver: Driver) -> str:
    """
    Version of the docker CLI on the host, read from ``docker --version``
    so it answers before the daemon has been started.
    """
    out = driver.runner.execute("docker --version")
    # Docker version 1.13.1, build 092cba3
    words = out.split()
    if len(words) < 3 or words[:2] != ["Docker", "version"]:
        raise VersionParseError(f"unexpected 'docker --version' output: {out.strip()!r}")
    return words[2].rstrip(",")


class ClearLinuxProvisioner:
    """
    Provisions Docker on Clear Linux: swupd bundles, systemd drop-in for
    dockerd, TLS on the Docker API port.
    """

    def __init__(
        self,
        driver: Driver,
        *,
        package_manager: PackageManager = SWUPD,
        renderer: Optional[EngineConfigRenderer] = None,
        certificates: Optional[CertificateProvider] = None,
        swarm: Optional[SwarmConfigurator] = None,
        bus: Optional[EventBus] = None,
        run_id: Optional[str] = None,
        lock_retry_attempts: int = LOCK_RETRY_ATTEMPTS,
        lock_retry_delay: float = LOCK_RETRY_DELAY,
        daemon_wait_attempts: int = DAEMON_WAIT_ATTEMPTS,
        daemon_wait_delay: float = DAEMON_WAIT_DELAY,
    ):
        self.driver = driver
        self.systemd = SystemdHelper(driver.runner, OS_RELEASE_ID)
        self.package_manager = package_manager
        self.renderer = renderer or EngineConfigRenderer()
        self.certificates = certificates or FileCertificateProvider()
        self.swarm = swarm or DockerRunSwarmConfigurator()
        self.bus = bus or EventBus()
        self.ctx = new_ctx(machine=driver.machine_name, run_id=run_id)
        self.lock_retry_attempts = lock_retry_attempts
        self.lock_retry_delay = lock_retry_delay
        self.daemon_wait_attempts = daemon_wait_attempts
        self.daemon_wait_delay = daemon_wait_delay

    def __str__(self) -> str:
        return "ClearLinux"

    @property
    def daemon_options_file(self) -> str:
        return self.systemd.daemon_options_file

    def compatible_with_host(self, os_release: OsRelease) -> bool:
        return self.systemd.compatible_with_host(os_release)

    # ------------------ capabilities ------------------

    def set_hostname(self, hostname: str) -> None:
        log.debug(f"SetHostname: {hostname}")
        self.driver.runner.execute(f"sudo hostnamectl set-hostname {shlex.quote(hostname)}")

    def package(self, name: str, action: PackageAction) -> None:
        command = self.package_manager.command(action, name)
        log.debug(f"package: action={action} name={self.package_manager.resolve_name(name)}")

        def _emit(attempt: int, exc: Exception) -> None:
            self.bus.emit(LockRetry(**new_ctx(self.ctx["machine"], self.ctx["run_id"]),
                                    command=command.strip(), attempt=attempt))

        run_with_lock_retry(
            self.driver.runner,
            command,
            attempts=self.lock_retry_attempts,
            delay=self.lock_retry_delay,
            on_retry=_emit,
        )

    def generate_docker_options(self, state: ProvisionState) -> DockerOptions:
        # provider label goes last, after the operator's own labels
        engine = state.engine_options.with_label(f"provider={self.driver.driver_name}")
        context = EngineConfigContext(
            docker_port=state.docker_port,
            auth_options=state.auth_options,
            engine_options=engine,
        )
        return self.renderer.render(
            context,
            docker_version=docker_client_version(self.driver),
            options_path=self.daemon_options_file,
        )

    # ------------------ sequence steps ------------------

    def _set_hostname(self, state: ProvisionState) -> ProvisionState:
        self.set_hostname(self.driver.machine_name)
        return state.advance(ProvisionStage.HOSTNAME_SET)

    def _make_options_dir(self, state: ProvisionState) -> ProvisionState:
        self.systemd.make_daemon_options_dir()
        return state.advance(ProvisionStage.PACKAGE_DIR_READY)

    def _install_base_package(self, state: ProvisionState) -> ProvisionState:
        log.debug(f"installing base package: name={BASE_BUNDLE}")
        self.package(BASE_BUNDLE, PackageAction.INSTALL)
        return state.advance(ProvisionStage.BASE_PACKAGE_INSTALLED)

    def _prepare_auth(self, state: ProvisionState) -> ProvisionState:
        log.debug("Preparing certificates")
        auth = remote_auth_options(state.auth_options, self.systemd.docker_options_dir)
        return state.advance(ProvisionStage.AUTH_PREPARED, auth_options=auth)

    def _configure_auth(self, state: ProvisionState) -> ProvisionState:
        log.debug("Setting up certificates")
        auth = state.auth_options
        material = self.certificates.server_material(auth, self.driver)

        self.driver.runner.execute(
            f"sudo mkdir -p {shlex.quote(self.systemd.docker_options_dir)}"
        )
        self.systemd.write_file(material.ca_cert, auth.ca_cert_remote_path)
        self.systemd.write_file(material.server_cert, auth.server_cert_remote_path)
        self.systemd.write_file(material.server_key, auth.server_key_remote_path, mode=0o600)

        options = self.generate_docker_options(state)
        self.systemd.write_file(options.engine_options, options.engine_options_path)

        self.systemd.service("docker", ServiceAction.RESTART)
        wait_for_docker(
            self.driver.runner,
            state.docker_port,
            attempts=self.daemon_wait_attempts,
            delay=self.daemon_wait_delay,
        )
        return state.advance(ProvisionStage.AUTH_CONFIGURED)

    def _configure_swarm(self, state: ProvisionState) -> ProvisionState:
        log.debug("Configuring swarm")
        self.swarm.configure(self.driver, state.swarm_options, state.auth_options, state.docker_port)
        return state.advance(ProvisionStage.SWARM_CONFIGURED)

    def _enable_service(self, state: ProvisionState) -> ProvisionState:
        log.debug("Enabling docker in systemd")
        self.systemd.service("docker", ServiceAction.ENABLE)
        return state.advance(ProvisionStage.SERVICE_ENABLED)

    def steps(self) -> List[Step]:
        return [
            Step(ProvisionStage.HOSTNAME_SET, self._set_hostname),
            Step(ProvisionStage.PACKAGE_DIR_READY, self._make_options_dir),
            Step(ProvisionStage.BASE_PACKAGE_INSTALLED, self._install_base_package),
            Step(ProvisionStage.AUTH_PREPARED, self._prepare_auth),
            Step(ProvisionStage.AUTH_CONFIGURED, self._configure_auth),
            Step(ProvisionStage.SWARM_CONFIGURED, self._configure_swarm),
            Step(ProvisionStage.SERVICE_ENABLED, self._enable_service),
        ]

    def provision(
        self,
        swarm_options: SwarmOptions,
        auth_options: AuthOptions,
        engine_options: EngineOptions,
        docker_port: int = DEFAULT_DOCKER_PORT,
    ) -> ProvisionState:
        state = ProvisionState.initial(
            auth_options=auth_options,
            engine_options=engine_options,
            swarm_options=swarm_options,
            docker_port=docker_port,
        )
        return run_sequence(
            state,
            self.steps(),
            provisioner=str(self),
            bus=self.bus,
            ctx=self.ctx,
        )


def register(registry: "ProvisionerRegistry") -> None:
    registry.register(OS_RELEASE_ID, ClearLinuxProvisioner)
