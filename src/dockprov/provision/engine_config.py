# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/engine_config.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from dockprov.errors import RenderError, TemplateError
from dockprov.provision.models import DockerOptions, EngineConfigContext
from dockprov.utils.versioncmp import greater_than_or_equal_to

log = logging.getLogger("dockprov")

TEMPLATES_DIR = Path(__file__).parent / "templates"

# dockerd stopped accepting the "daemon" subcommand in 1.12.0.
DAEMON_SUBCOMMAND_REMOVED_IN = "1.12.0"

_REQUIRED_AUTH_FIELDS = (
    "ca_cert_remote_path",
    "server_cert_remote_path",
    "server_key_remote_path",
)

_GO_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def go_quote(value: object) -> str:
    """
    Double-quote *value* with backslash escapes, byte-compatible with the
    quoting older releases wrote into the Environment= line.
    """
    out = []
    for ch in str(value):
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(out) + '"'


def daemon_arg(docker_version: str) -> str:
    if greater_than_or_equal_to(docker_version, DAEMON_SUBCOMMAND_REMOVED_IN):
        return ""
    return "daemon"


class EngineConfigRenderer:
    """
    Renders the systemd drop-in that starts dockerd with TLS and the
    operator's engine options.
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        template_name: str = "clearlinux-engine.conf.j2",
    ):
        self.template_name = template_name
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.env.filters["goquote"] = go_quote

    def _template(self):
        try:
            return self.env.get_template(self.template_name)
        except TemplateNotFound as e:
            raise TemplateError(f"missing engine config template: {self.template_name}") from e
        except TemplateSyntaxError as e:
            raise TemplateError(
                f"engine config template {self.template_name} does not parse (line {e.lineno}): {e.message}"
            ) from e

    @staticmethod
    def _validate(context: EngineConfigContext) -> None:
        port = context.docker_port
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise RenderError(f"invalid docker port: {port!r}")

        missing = [f for f in _REQUIRED_AUTH_FIELDS if not getattr(context.auth_options, f)]
        if missing:
            raise RenderError(f"auth options incomplete, missing: {', '.join(missing)}")

    def render(
        self,
        context: EngineConfigContext,
        *,
        docker_version: str,
        options_path: str,
    ) -> DockerOptions:
        template = self._template()
        self._validate(context)

        try:
            text = template.render(
                daemon_arg=daemon_arg(docker_version),
                docker_port=context.docker_port,
                auth=context.auth_options,
                engine=context.engine_options,
            )
        except UndefinedError as e:
            raise RenderError(f"engine config context incomplete: {e.message}") from e

        log.debug(f"engine config for docker {docker_version}:\n{text}")

        return DockerOptions(
            engine_options=text,
            engine_options_path=options_path,
        )
