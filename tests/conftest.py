from __future__ import annotations

from typing import Callable, Dict, List, Optional

import pytest

from dockprov.drivers.generic import GenericDriver
from dockprov.drivers.models import Host
from dockprov.errors import RemoteCommandError
from dockprov.provision.auth import CertMaterial

CLEAR_LINUX_OS_RELEASE = """\
NAME="Clear Linux OS"
VERSION=1
ID=clear-linux-os
ID_LIKE=clear-linux-os
VERSION_ID=41520
PRETTY_NAME="Clear Linux OS"
"""

NETSTAT_LISTENING = (
    "Active Internet connections (only servers)\n"
    "Proto Recv-Q Send-Q Local Address           Foreign Address         State\n"
    "tcp6       0      0 :::2376                 :::*                    LISTEN\n"
)

DOCKER_DOWN = (
    "Cannot connect to the Docker daemon at unix:///var/run/docker.sock. "
    "Is the docker daemon running?"
)

class FakeRunner:
    """
    Remote executor double. Records every command; answers from *responses*
    (first substring match wins) and lets *fail* raise for chosen commands.

    Like a freshly installed host, the docker daemon is down until a
    ``systemctl start|restart docker`` has been issued: commands that talk
    to it fail the way the docker CLI does. Uploads land in ``files``.
    """

    DEFAULT_RESPONSES = {
        "cat /etc/os-release": CLEAR_LINUX_OS_RELEASE,
        "docker --version": "Docker version 1.13.1, build 092cba3\n",
        "netstat -tln": NETSTAT_LISTENING,
    }
    DAEMON_COMMANDS = ("docker version", "docker info", "docker run")

    def __init__(
        self,
        responses: Optional[Dict[str, str]] = None,
        fail: Optional[Callable[[str], Optional[Exception]]] = None,
        daemon_running: bool = False,
    ):
        self.commands: List[str] = []
        self.files: Dict[str, str] = {}
        self.modes: Dict[str, int] = {}
        self.responses = {**self.DEFAULT_RESPONSES, **(responses or {})}
        self.fail = fail
        self.daemon_running = daemon_running

    def execute(self, cmd: str) -> str:
        self.commands.append(cmd)
        if self.fail:
            exc = self.fail(cmd)
            if exc is not None:
                raise exc
        if cmd in ("sudo systemctl -f restart docker", "sudo systemctl -f start docker"):
            self.daemon_running = True
        if not self.daemon_running and any(c in cmd for c in self.DAEMON_COMMANDS):
            raise RemoteCommandError(cmd, 1, "", DOCKER_DOWN)
        for key, out in self.responses.items():
            if key in cmd:
                return out
        return ""

    def put_text(self, content: str, remote_path: str, *, mode: int = 0o644) -> None:
        self.files[remote_path] = content
        self.modes[remote_path] = mode


class StaticCertificates:
    def __init__(self):
        self.calls = []

    def server_material(self, auth, driver):
        self.calls.append((auth, driver.machine_name))
        return CertMaterial(ca_cert="CA-PEM\n", server_cert="CERT-PEM\n", server_key="KEY-PEM\n")


class Capture:
    def __init__(self):
        self.events = []

    def notify(self, ev):
        self.events.append(ev)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def driver(runner: FakeRunner) -> GenericDriver:
    return GenericDriver(
        machine_name="node-1",
        host=Host(address="10.0.0.11", username="root"),
        runner=runner,
    )


@pytest.fixture
def certificates() -> StaticCertificates:
    return StaticCertificates()


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("dockprov.utils.retry.time.sleep", lambda s: None)
