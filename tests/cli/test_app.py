from pathlib import Path
import logging
import textwrap

import pytest
from typer.testing import CliRunner

from conftest import FakeRunner
from dockprov.cli import app as app_mod
from dockprov.errors import RemoteCommandError, TransportError

cli = CliRunner()


class ClosingRunner(FakeRunner):
    closed = False

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("dockprov")
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def machine_config(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.delenv("DOCKPROV_SECRETS_FILE", raising=False)
    for name in ("ca.pem", "server.pem", "server-key.pem"):
        (tmp_path / name).write_text(f"{name}\n")
    cfg = tmp_path / "machine.yaml"
    cfg.write_text(textwrap.dedent(f"""
        machine_name: node-1
        host:
          address: 10.0.0.11
        auth:
          ca_cert_path: {tmp_path / 'ca.pem'}
          server_cert_path: {tmp_path / 'server.pem'}
          server_key_path: {tmp_path / 'server-key.pem'}
        engine:
          labels: [env=prod]
        lock_retry:
          attempts: 2
          delay_seconds: 0
    """))
    return cfg


def test_provisioners_lists_clear_linux():
    result = cli.invoke(app_mod.app, ["provisioners"])
    assert result.exit_code == 0
    assert result.output.split() == ["clear-linux-os"]


def test_render_prints_engine_config(machine_config):
    result = cli.invoke(app_mod.app, ["render", str(machine_config), "--docker-version", "1.11.0"])
    assert result.exit_code == 0, result.output
    assert "ExecStart=/usr/bin/dockerd daemon --host" in result.output
    assert "--tlscacert /etc/docker/ca.pem" in result.output
    assert "--label env=prod --label provider=generic" in result.output


def test_render_rejects_bad_version(machine_config):
    result = cli.invoke(app_mod.app, ["render", str(machine_config), "--docker-version", "latest"])
    assert result.exit_code == 1


def test_invalid_config_exits_1(tmp_path: Path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("machine_name: node-1\n")
    result = cli.invoke(app_mod.app, ["render", str(cfg), "--docker-version", "1.13.0"])
    assert result.exit_code == 1


def test_provision_runs_against_host(machine_config, tmp_path, monkeypatch):
    runner = ClosingRunner()
    monkeypatch.setattr(app_mod, "open_ssh", lambda host: runner)

    result = cli.invoke(app_mod.app, ["provision", str(machine_config), "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 0, result.output
    assert "node-1 is ready" in result.output
    assert runner.commands[0] == "cat /etc/os-release"
    assert runner.commands[-1] == "sudo systemctl -f enable docker"
    assert runner.closed
    assert list((tmp_path / "logs").glob("dockprov-node-1-*.log"))


def test_provision_failure_exits_1_and_closes_session(machine_config, tmp_path, monkeypatch):
    runner = ClosingRunner(
        fail=lambda cmd: RemoteCommandError(cmd, 1, "", "no such bundle") if cmd.startswith("swupd") else None
    )
    monkeypatch.setattr(app_mod, "open_ssh", lambda host: runner)

    result = cli.invoke(app_mod.app, ["provision", str(machine_config), "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert runner.closed
    assert not any("systemctl" in c for c in runner.commands)


def test_provision_unreachable_host_exits_1(machine_config, tmp_path, monkeypatch):
    def refuse(host):
        raise TransportError("connection refused")

    monkeypatch.setattr(app_mod, "open_ssh", refuse)
    result = cli.invoke(app_mod.app, ["provision", str(machine_config), "--log-dir", str(tmp_path / "logs")])
    assert result.exit_code == 1
