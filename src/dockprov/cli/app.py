# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from dockprov.config.loader import load_config
from dockprov.config.models import ProvisionConfig
from dockprov.drivers.generic import GenericDriver
from dockprov.errors import DockprovError
from dockprov.logging.log import init_logging
from dockprov.observers.dispatcher import EventBus
from dockprov.observers.logger import LoggerObserver
from dockprov.provision.builtin import default_registry
from dockprov.provision.engine_config import EngineConfigRenderer
from dockprov.provision.models import EngineConfigContext
from dockprov.provision.registry import detect_provisioner
from dockprov.provision.auth import remote_auth_options
from dockprov.provision.systemd import DAEMON_OPTIONS_FILE, DOCKER_OPTIONS_DIR
from dockprov.utils.ssh import open_ssh


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Provision a Docker engine on a remote host over SSH")


def _load(config: Path) -> ProvisionConfig:
    try:
        return load_config(config)
    except ValidationError as e:
        typer.secho(f"Invalid config {config}:\n{e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except DockprovError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def provision(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Machine config YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every remote command"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
):
    """
    Detect the host OS and install, configure and enable Docker on it.
    """
    cfg = _load(config)
    logger, run_id, log_path = init_logging(machine=cfg.machine_name, base_dir=log_dir, verbose=verbose)
    bus = EventBus([LoggerObserver(logger)])
    registry = default_registry()

    try:
        runner = open_ssh(cfg.host.to_host())
    except DockprovError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        driver = GenericDriver(
            machine_name=cfg.machine_name,
            host=cfg.host.to_host(),
            runner=runner,
        )
        provisioner = detect_provisioner(
            registry,
            driver,
            bus=bus,
            run_id=run_id,
            lock_retry_attempts=cfg.lock_retry.attempts,
            lock_retry_delay=cfg.lock_retry.delay_seconds,
        )
        provisioner.provision(
            cfg.swarm.to_options(),
            cfg.auth.to_options(),
            cfg.engine.to_options(),
            docker_port=cfg.docker_port,
        )
    except DockprovError as e:
        logger.error(f"provisioning {cfg.machine_name} failed: {e}")
        for note in getattr(e, "__notes__", []):
            logger.error(note)
        typer.secho(f"Provisioning failed, see {log_path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        runner.close()

    typer.secho(f"{cfg.machine_name} is ready (docker on port {cfg.docker_port})", fg=typer.colors.GREEN)


@app.command()
def render(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Machine config YAML"),
    docker_version: str = typer.Option(..., "--docker-version", help="Docker version on the host"),
    driver_name: str = typer.Option("generic", "--driver-name", help="Value of the provider= label"),
):
    """
    Print the engine config that provisioning would write, without connecting.
    """
    cfg = _load(config)
    engine = cfg.engine.to_options().with_label(f"provider={driver_name}")
    context = EngineConfigContext(
        docker_port=cfg.docker_port,
        auth_options=remote_auth_options(cfg.auth.to_options(), DOCKER_OPTIONS_DIR),
        engine_options=engine,
    )
    try:
        options = EngineConfigRenderer().render(
            context,
            docker_version=docker_version,
            options_path=DAEMON_OPTIONS_FILE,
        )
    except DockprovError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"# {options.engine_options_path}", err=True)
    typer.echo(options.engine_options, nl=False)


@app.command()
def provisioners():
    """
    List the OS identifiers a provisioner is registered for.
    """
    for name in default_registry().names():
        typer.echo(name)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
