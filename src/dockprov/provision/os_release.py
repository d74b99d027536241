# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/os_release.py

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from typing import Dict, Tuple

from dockprov.drivers.interface import RemoteExecutor

log = logging.getLogger("dockprov")

OS_RELEASE_PATH = "/etc/os-release"


@dataclass(frozen=True)
class OsRelease:
    id: str = ""
    id_like: Tuple[str, ...] = ()
    name: str = ""
    version_id: str = ""
    pretty_name: str = ""

    def candidates(self) -> Tuple[str, ...]:
        """Identifiers to try, most specific first."""
        return tuple(i for i in (self.id, *self.id_like) if i)


def parse_os_release(text: str) -> OsRelease:
    fields: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            log.debug(f"skipping malformed os-release line: {raw!r}")
            continue
        fields[key.strip()] = " ".join(parts)

    return OsRelease(
        id=fields.get("ID", ""),
        id_like=tuple(fields.get("ID_LIKE", "").split()),
        name=fields.get("NAME", ""),
        version_id=fields.get("VERSION_ID", ""),
        pretty_name=fields.get("PRETTY_NAME", ""),
    )


def get_os_release(executor: RemoteExecutor) -> OsRelease:
    out = executor.execute(f"cat {OS_RELEASE_PATH}")
    info = parse_os_release(out)
    log.debug(f"os-release: id={info.id} id_like={','.join(info.id_like)} version={info.version_id}")
    return info
